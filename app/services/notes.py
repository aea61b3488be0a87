import logging

from app.extensions import db
from app.models import Note, Profile
from app.constants import UserRole
from .errors import InvalidInput, NotFound, PermissionDenied
from .permissions import can_edit_authored, can_read_authored, scope_authored
from .storage import commit

logger = logging.getLogger(__name__)


def _active_athlete(athlete_id):
    athlete = Profile.query.filter_by(id=athlete_id, role=UserRole.athlete.value).first()
    if athlete is None:
        raise NotFound("Athlete not found")
    if not athlete.active:
        raise InvalidInput("Cannot create a note for an inactive athlete")
    return athlete


def create_note(data, coach):
    _active_athlete(data["athlete_id"])
    note = Note(coach_id=coach.id, **data)
    db.session.add(note)
    commit("Note creation failed")
    logger.info("Note %s created by %s for %s", note.id, coach.id, note.athlete_id)
    return note


def get_note(note_id, requester):
    note = db.session.get(Note, note_id)
    if note is None:
        raise NotFound("Note not found")
    if not can_read_authored(note, requester):
        raise PermissionDenied()
    return note


def update_note(note_id, data, requester):
    note = db.session.get(Note, note_id)
    if note is None:
        raise NotFound("Note not found")
    if not can_edit_authored(note, requester):
        raise PermissionDenied()

    for key, value in data.items():
        setattr(note, key, value)
    commit("Note update failed")
    return note


def delete_note(note_id, requester):
    note = db.session.get(Note, note_id)
    if note is None:
        raise NotFound("Note not found")
    if not can_edit_authored(note, requester):
        raise PermissionDenied()

    db.session.delete(note)
    commit("Note deletion failed")
    logger.info("Note %s deleted by %s", note_id, requester.id)


def list_notes(requester, athlete_id=None, category=None, context=None, limit=None):
    if requester.is_athlete and athlete_id and athlete_id != requester.id:
        raise PermissionDenied()

    query = scope_authored(Note.query, Note, requester)
    if athlete_id:
        query = query.filter(Note.athlete_id == athlete_id)
    if category:
        query = query.filter(Note.category == category)
    if context:
        query = query.filter(Note.context == context)

    query = query.order_by(Note.date.desc(), Note.created_at.desc())
    if limit:
        query = query.limit(limit)
    return query.all()
