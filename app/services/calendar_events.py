"""Club calendar: events, their participants and who may see or change them."""

import logging
from datetime import datetime, timedelta

from app.extensions import db
from app.models import CalendarEvent, EventParticipant, Profile
from app.constants import CoachLevel, EVENT_COLORS, EVENT_TYPES
from .errors import Conflict, InvalidInput, NotFound, PermissionDenied
from .storage import commit

logger = logging.getLogger(__name__)


# ================================
# Rights
# ================================

def can_edit_event(event, requester) -> bool:
    """Organizer and super_admin always; a principal unless the event is private."""
    if requester is None or not requester.is_coach:
        return False
    if event.organizer_id == requester.id:
        return True
    if requester.coach_level == CoachLevel.super_admin.value:
        return True
    return requester.coach_level == CoachLevel.principal.value and event.visibility != "private"


def can_read_event(event, requester) -> bool:
    if requester is None:
        return False
    if event.organizer_id == requester.id or requester.id in event.participant_ids():
        return True
    if can_edit_event(event, requester):
        return True
    if event.visibility == "public":
        return True
    if event.visibility == "coaches_only":
        return requester.is_coach
    return False


def _get(event_id):
    event = db.session.get(CalendarEvent, event_id)
    if event is None:
        raise NotFound("Event not found")
    return event


def _check_range(start, end):
    if end <= start:
        raise InvalidInput("Invalid input", errors={"end_datetime": ["The end must come after the start"]})


# ================================
# Events
# ================================

def create_event(data, organizer):
    if organizer is None or not organizer.is_active_coach:
        raise PermissionDenied()

    data = dict(data)
    if not data.get("color"):
        data["color"] = EVENT_COLORS.get(data["event_type"], EVENT_COLORS["other"])

    event = CalendarEvent(organizer_id=organizer.id, **data)
    db.session.add(event)
    commit("Event creation failed")
    logger.info("Event %s created by %s", event.id, organizer.id)
    return event


def get_event(event_id, requester):
    event = _get(event_id)
    if not can_read_event(event, requester):
        raise PermissionDenied()
    return event


def update_event(event_id, data, requester):
    event = _get(event_id)
    if not can_edit_event(event, requester):
        raise PermissionDenied()

    _check_range(
        data.get("start_datetime", event.start_datetime),
        data.get("end_datetime", event.end_datetime),
    )
    for key, value in data.items():
        setattr(event, key, value)
    event.updated_at = datetime.utcnow()
    commit("Event update failed")
    return event


def delete_event(event_id, requester):
    event = _get(event_id)
    if not can_edit_event(event, requester):
        raise PermissionDenied()

    db.session.delete(event)
    commit("Event deletion failed")
    logger.info("Event %s deleted by %s", event_id, requester.id)


def list_events(requester, start=None, end=None, event_type=None, organizer_id=None, status="active"):
    """Events starting inside [start, end] that ``requester`` may read, by start time."""
    query = CalendarEvent.query
    if status:
        query = query.filter(CalendarEvent.status == status)
    if start:
        query = query.filter(CalendarEvent.start_datetime >= start)
    if end:
        query = query.filter(CalendarEvent.start_datetime <= end)
    if event_type:
        query = query.filter(CalendarEvent.event_type == event_type)
    if organizer_id:
        query = query.filter(CalendarEvent.organizer_id == organizer_id)

    events = query.order_by(CalendarEvent.start_datetime).all()
    return [event for event in events if can_read_event(event, requester)]


def events_for_export(requester, start=None, end=None, event_type=None):
    """Athletes export their own schedule, coaches everything they can read."""
    events = list_events(requester, start=start, end=end, event_type=event_type)
    if requester.is_athlete:
        events = [
            e for e in events
            if e.organizer_id == requester.id or requester.id in e.participant_ids()
        ]
    return events


def calendar_stats(requester):
    if requester is None or not requester.is_coach:
        raise PermissionDenied()

    now = datetime.utcnow()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    next_month = (month_start + timedelta(days=32)).replace(day=1)
    next_week = now + timedelta(days=7)

    events = CalendarEvent.query.filter(CalendarEvent.status == "active").all()
    by_type = {event_type: 0 for event_type in EVENT_TYPES}
    for event in events:
        by_type[event.event_type] = by_type.get(event.event_type, 0) + 1

    return {
        "total": len(events),
        "byType": by_type,
        "thisMonth": len([e for e in events if month_start <= e.start_datetime < next_month]),
        "nextWeek": len([e for e in events if now <= e.start_datetime <= next_week]),
    }


# ================================
# Participants
# ================================

def _get_participant(event, participant_id):
    row = db.session.get(EventParticipant, (event.id, participant_id))
    if row is None:
        raise NotFound("Participant not found")
    return row


def add_participant(event_id, data, requester):
    event = _get(event_id)
    if event.organizer_id != requester.id:
        raise PermissionDenied()

    if db.session.get(Profile, data["participant_id"]) is None:
        raise NotFound("Profile not found")
    if data["participant_id"] in event.participant_ids():
        raise Conflict("This participant is already added")
    if event.max_participants and len(event.participants) >= event.max_participants:
        raise InvalidInput("This event is full")

    row = EventParticipant(event_id=event.id, **data)
    db.session.add(row)
    commit("Participant creation failed")
    logger.info("Participant %s added to event %s", row.participant_id, event.id)
    return row


def update_participant(event_id, participant_id, data, requester):
    """The participant answers for themself; the organizer also keeps notes."""
    event = _get(event_id)
    is_organizer = event.organizer_id == requester.id
    if not is_organizer and participant_id != requester.id:
        raise PermissionDenied()
    if "coach_notes" in data and not is_organizer:
        raise PermissionDenied("Only the organizer can write participant notes")

    row = _get_participant(event, participant_id)
    if "status" in data and data["status"] != row.status:
        row.status = data["status"]
        row.responded_at = datetime.utcnow()
    if "coach_notes" in data:
        row.coach_notes = data["coach_notes"]
    commit("Participant update failed")
    return row


def remove_participant(event_id, participant_id, requester):
    event = _get(event_id)
    if event.organizer_id != requester.id:
        raise PermissionDenied()

    row = _get_participant(event, participant_id)
    db.session.delete(row)
    commit("Participant removal failed")
    logger.info("Participant %s removed from event %s", participant_id, event_id)
