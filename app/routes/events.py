from datetime import datetime, timezone

from flask import Blueprint, Response, jsonify, render_template, request

from app.constants import DEFAULT_EXPORT_RANGE, EVENT_TYPES, EXPORT_RANGES, PARTICIPANT_STATUSES
from app.schemas import (
    CalendarEventSchema, EventCreateSchema, EventParticipantSchema, EventUpdateSchema,
    ExportEventSchema, ParticipantCreateSchema, ParticipantUpdateSchema,
)
from app.services import calendar_events as event_service
from app.services import calendar_export
from app.services.errors import InvalidInput
from app.services.profiles import get_visible_athletes
from app.utils.decorators import active_coach_required, done, profile_required, request_data

events_bp = Blueprint("events", __name__)

event_schema = CalendarEventSchema()
events_schema = CalendarEventSchema(many=True)
event_create_schema = EventCreateSchema()
event_update_schema = EventUpdateSchema()
participant_schema = EventParticipantSchema()
participant_create_schema = ParticipantCreateSchema()
participant_update_schema = ParticipantUpdateSchema()
export_event_schema = ExportEventSchema()

EXPORT_FORMATS = ("ical", "json")


def _datetime_arg(name):
    value = request.args.get(name)
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidInput(f"Invalid {name} date")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _filters():
    return {
        "start": _datetime_arg("start"),
        "end": _datetime_arg("end"),
        "event_type": request.args.get("type") or None,
        "organizer_id": request.args.get("organizer_id") or None,
    }


# ================================
# Pages
# ================================

@events_bp.route("/calendar/events/<event_id>", methods=["GET"])
@profile_required
def event_page(event_id, current_user):
    event = event_service.get_event(event_id, current_user)
    is_organizer = event.organizer_id == current_user.id
    return render_template(
        "event_detail.html",
        user=current_user,
        event=event,
        can_edit=event_service.can_edit_event(event, current_user),
        is_organizer=is_organizer,
        athletes=get_visible_athletes(current_user) if is_organizer else [],
        participant_statuses=PARTICIPANT_STATUSES,
        links=calendar_export.calendar_links(event),
    )


# ================================
# Events API
# ================================

@events_bp.route("/api/calendar/events", methods=["GET"])
@profile_required
def list_events(current_user):
    events = event_service.list_events(current_user, **_filters())
    return jsonify(events_schema.dump(events)), 200


@events_bp.route("/api/calendar/events", methods=["POST"])
@active_coach_required
def create_event(current_user):
    data = event_create_schema.load(request_data())
    event = event_service.create_event(data, current_user)
    return done("events.event_page", event_schema.dump(event), 201, event_id=event.id)


@events_bp.route("/api/calendar/events/stats", methods=["GET"])
@profile_required
def event_stats(current_user):
    return jsonify(event_service.calendar_stats(current_user)), 200


@events_bp.route("/api/calendar/events/<event_id>", methods=["GET"])
@profile_required
def get_event(event_id, current_user):
    return jsonify(event_schema.dump(event_service.get_event(event_id, current_user))), 200


@events_bp.route("/api/calendar/events/<event_id>", methods=["PUT", "PATCH", "POST"])
@active_coach_required
def update_event(event_id, current_user):
    data = event_update_schema.load(request_data(), partial=True)
    event = event_service.update_event(event_id, data, current_user)
    return done("events.event_page", event_schema.dump(event), event_id=event.id)


@events_bp.route("/api/calendar/events/<event_id>", methods=["DELETE"])
@events_bp.route("/api/calendar/events/<event_id>/delete", methods=["POST"])
@active_coach_required
def delete_event(event_id, current_user):
    event_service.delete_event(event_id, current_user)
    return done("calendar.calendar_page", {"msg": "Event deleted"})


# ================================
# Participants API
# ================================

@events_bp.route("/api/calendar/events/<event_id>/participants", methods=["POST"])
@active_coach_required
def add_participant(event_id, current_user):
    data = participant_create_schema.load(request_data())
    row = event_service.add_participant(event_id, data, current_user)
    return done("events.event_page", participant_schema.dump(row), 201, event_id=event_id)


@events_bp.route("/api/calendar/events/<event_id>/participants/<participant_id>", methods=["PUT", "PATCH", "POST"])
@profile_required
def update_participant(event_id, participant_id, current_user):
    data = participant_update_schema.load(request_data(), partial=True)
    row = event_service.update_participant(event_id, participant_id, data, current_user)
    return done("events.event_page", participant_schema.dump(row), event_id=event_id)


@events_bp.route("/api/calendar/events/<event_id>/participants/<participant_id>", methods=["DELETE"])
@events_bp.route("/api/calendar/events/<event_id>/participants/<participant_id>/delete", methods=["POST"])
@active_coach_required
def remove_participant(event_id, participant_id, current_user):
    event_service.remove_participant(event_id, participant_id, current_user)
    return done("events.event_page", {"msg": "Participant removed"}, event_id=event_id)


# ================================
# Export
# ================================

@events_bp.route("/api/calendar/export", methods=["GET"])
@profile_required
def export_calendar(current_user):
    export_format = request.args.get("format", "ical")
    if export_format not in EXPORT_FORMATS:
        return jsonify({"msg": "Unsupported format, use ical or json"}), 400

    range_name = request.args.get("range", DEFAULT_EXPORT_RANGE)
    if range_name not in EXPORT_RANGES:
        range_name = DEFAULT_EXPORT_RANGE
    start, end = calendar_export.export_window(range_name)
    event_type = request.args.get("type")
    if event_type not in EVENT_TYPES:
        event_type = None

    events = event_service.events_for_export(current_user, start=start, end=end, event_type=event_type)
    if not events:
        return jsonify({"msg": "No events to export for this period", "events": []}), 200

    if export_format == "json":
        return jsonify({"events": events_schema.dump(events), "count": len(events)}), 200

    return Response(
        calendar_export.build_calendar(events, name=f"Coaching Club - {current_user.name}"),
        content_type="text/calendar; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="coaching-club-{range_name}.ics"'},
    )


@events_bp.route("/api/calendar/export", methods=["POST"])
@profile_required
def export_event_links(current_user):
    data = export_event_schema.load(request_data())
    event = event_service.get_event(data["event_id"], current_user)
    return jsonify({
        "event": event_schema.dump(event),
        "calendarLinks": calendar_export.calendar_links(event),
    }), 200

