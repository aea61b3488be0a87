import logging

from app.extensions import db
from app.models import Profile, Recommendation
from app.constants import UserRole
from .errors import InvalidInput, NotFound, PermissionDenied
from .permissions import can_edit_authored, can_read_authored, scope_authored
from .storage import commit

logger = logging.getLogger(__name__)


def create_recommendation(data, coach):
    athlete = Profile.query.filter_by(id=data["athlete_id"], role=UserRole.athlete.value).first()
    if athlete is None:
        raise NotFound("Athlete not found")
    if not athlete.active:
        raise InvalidInput("Cannot create a recommendation for an inactive athlete")

    recommendation = Recommendation(coach_id=coach.id, read_status=False, **data)
    db.session.add(recommendation)
    commit("Recommendation creation failed")
    logger.info("Recommendation %s created by %s for %s", recommendation.id, coach.id, athlete.id)
    return recommendation


def _get(recommendation_id):
    recommendation = db.session.get(Recommendation, recommendation_id)
    if recommendation is None:
        raise NotFound("Recommendation not found")
    return recommendation


def get_recommendation(recommendation_id, requester):
    recommendation = _get(recommendation_id)
    if not can_read_authored(recommendation, requester):
        raise PermissionDenied()
    return recommendation


def update_recommendation(recommendation_id, data, requester):
    recommendation = _get(recommendation_id)
    if not can_edit_authored(recommendation, requester):
        raise PermissionDenied()

    for key, value in data.items():
        setattr(recommendation, key, value)
    commit("Recommendation update failed")
    return recommendation


def delete_recommendation(recommendation_id, requester):
    recommendation = _get(recommendation_id)
    if not can_edit_authored(recommendation, requester):
        raise PermissionDenied()

    db.session.delete(recommendation)
    commit("Recommendation deletion failed")
    logger.info("Recommendation %s deleted by %s", recommendation_id, requester.id)


def mark_as_read(recommendation_id, requester):
    """Only the athlete a recommendation is addressed to may mark it read."""
    recommendation = _get(recommendation_id)
    if requester is None or not requester.is_athlete or recommendation.athlete_id != requester.id:
        raise PermissionDenied()

    if not recommendation.read_status:
        recommendation.mark_as_read()
        commit("Recommendation read status update failed")
    return recommendation


def list_recommendations(requester, athlete_id=None, read_status=None, limit=None):
    if requester.is_athlete and athlete_id and athlete_id != requester.id:
        raise PermissionDenied()

    query = scope_authored(Recommendation.query, Recommendation, requester)
    if athlete_id:
        query = query.filter(Recommendation.athlete_id == athlete_id)
    if read_status is not None:
        query = query.filter(Recommendation.read_status == read_status)

    query = query.order_by(Recommendation.created_at.desc())
    if limit:
        query = query.limit(limit)
    return query.all()
