"""Edit/read rights over coach-authored content (notes and recommendations)."""

from app.extensions import db
from app.models import Profile
from app.constants import CoachLevel

SUPERVISOR_LEVELS = (CoachLevel.super_admin.value, CoachLevel.principal.value)


def supervisor_ids():
    rows = db.session.query(Profile.id).filter(Profile.coach_level.in_(SUPERVISOR_LEVELS)).all()
    return [row.id for row in rows]


def can_edit_authored(item, requester) -> bool:
    """super_admin/principal edit everything, junior edits own and supervisors' items,
    a coach without a tier edits own items only."""
    if requester is None or not requester.is_coach:
        return False
    if requester.coach_level in SUPERVISOR_LEVELS:
        return True
    if item.coach_id == requester.id:
        return True
    if requester.coach_level == CoachLevel.junior.value:
        return item.coach_id in supervisor_ids()
    return False


def can_read_authored(item, requester) -> bool:
    if requester is None:
        return False
    if requester.is_athlete:
        return item.athlete_id == requester.id
    return can_edit_authored(item, requester)


def scope_authored(query, model, requester):
    """Restrict a query on ``model`` to the rows ``requester`` may read."""
    if requester.is_athlete:
        return query.filter(model.athlete_id == requester.id)
    if requester.coach_level in SUPERVISOR_LEVELS:
        return query
    if requester.coach_level == CoachLevel.junior.value:
        return query.filter(model.coach_id.in_(supervisor_ids() + [requester.id]))
    return query.filter(model.coach_id == requester.id)
