import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.extensions import db
from .errors import Conflict, StorageError

logger = logging.getLogger(__name__)


def commit(message):
    """Commit the session, rolling back and raising a service error on failure."""
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.exception(message)
        raise Conflict()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception(message)
        raise StorageError()
