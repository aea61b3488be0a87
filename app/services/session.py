"""Session resolution and implicit token refresh.

The session token is a JWT stored in an httpOnly cookie. Every request
resolves it once in a ``before_request`` hook. A token within
``SESSION_REFRESH_WINDOW`` of its expiry is reissued right away and written
by ``refresh_session_cookie`` on whatever response the request ends with,
redirects included, so pages rendered on that response already carry the new
CSRF value.
"""

import logging
from datetime import datetime, timezone

from flask import current_app, g, request
from flask_jwt_extended import (
    create_access_token,
    get_csrf_token,
    get_jwt,
    get_jwt_identity,
    set_access_cookies,
    unset_jwt_cookies,
    verify_jwt_in_request,
)
from flask_jwt_extended.exceptions import CSRFError, JWTExtendedException
from jwt.exceptions import PyJWTError
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.models import Account

logger = logging.getLogger(__name__)


def resolve_session():
    """Return the caller's account id, or ``None`` when there is no valid session."""
    g.account_id = None
    g.clear_session = False
    g.refreshed_token = None

    try:
        verify_jwt_in_request(optional=True)
    except (JWTExtendedException, PyJWTError) as exc:
        # A CSRF failure does not invalidate the token itself
        g.clear_session = not isinstance(exc, CSRFError)
        logger.info("Rejected session token: %s", exc.__class__.__name__)
        return None

    identity = get_jwt_identity()
    if identity is None:
        return None

    try:
        account = db.session.get(Account, identity)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Account lookup failed while resolving the session")
        return None

    if account is None:
        g.clear_session = True
        return None

    g.account_id = account.id
    if needs_refresh(get_jwt()["exp"]):
        g.refreshed_token = create_access_token(identity=account.id)
        logger.debug("Session token refreshed for %s", account.id)
    return account.id


def needs_refresh(expires_at, now=None):
    window = current_app.config["SESSION_REFRESH_WINDOW"]
    now = now or datetime.now(timezone.utc)
    return datetime.timestamp(now + window) > expires_at


def current_account_id():
    return g.get("account_id")


def start_session(response, account):
    set_access_cookies(response, create_access_token(identity=account.id))
    return response


def end_session(response):
    g.account_id = None
    g.refreshed_token = None
    unset_jwt_cookies(response)
    return response


def csrf_value():
    """CSRF token forms rendered on this request must submit."""
    if not current_app.config["JWT_COOKIE_CSRF_PROTECT"]:
        return ""
    token = g.get("refreshed_token")
    if token:
        return get_csrf_token(token)
    return request.cookies.get(current_app.config["JWT_ACCESS_CSRF_COOKIE_NAME"], "")


def refresh_session_cookie(response):
    if g.get("clear_session"):
        unset_jwt_cookies(response)
        return response

    token = g.get("refreshed_token")
    if token and g.get("account_id") is not None:
        set_access_cookies(response, token)
    return response
