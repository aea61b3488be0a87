from datetime import timezone

from marshmallow import ValidationError, fields, post_load, validate, validates_schema

from app.extensions import ma
from app.models import CalendarEvent, EventParticipant
from app.constants import EVENT_TYPES, EVENT_STATUSES, EVENT_VISIBILITIES, PARTICIPANT_STATUSES, TITLE_MAX_LENGTH
from . import InputSchema

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


def _naive_utc(value):
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class EventParticipantSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = EventParticipant
        include_fk = True

    participant_name = fields.Function(lambda p: p.participant.name if p.participant else None)
    participant_email = fields.Function(lambda p: p.participant.email if p.participant else None)


class CalendarEventSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = CalendarEvent
        include_fk = True

    organizer_name = fields.Function(lambda event: event.organizer.name if event.organizer else None)
    participants = fields.Nested(EventParticipantSchema, many=True)


class EventCreateSchema(InputSchema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=TITLE_MAX_LENGTH))
    description = fields.String(allow_none=True)
    event_type = fields.String(required=True, validate=validate.OneOf(EVENT_TYPES))
    start_datetime = fields.DateTime(required=True)
    end_datetime = fields.DateTime(required=True)
    all_day = fields.Boolean(load_default=False)
    location = fields.String(allow_none=True, validate=validate.Length(max=255))
    max_participants = fields.Integer(allow_none=True, validate=validate.Range(min=1))
    visibility = fields.String(load_default="public", validate=validate.OneOf(EVENT_VISIBILITIES))
    color = fields.String(allow_none=True, validate=validate.Regexp(COLOR_PATTERN, error="Color must look like #1a2b3c"))

    @validates_schema
    def check_range(self, data, **kwargs):
        start, end = data.get("start_datetime"), data.get("end_datetime")
        if start and end and _naive_utc(end) <= _naive_utc(start):
            raise ValidationError("The end must come after the start", "end_datetime")

    @post_load
    def to_naive_utc(self, data, **kwargs):
        for key in ("start_datetime", "end_datetime"):
            if key in data:
                data[key] = _naive_utc(data[key])
        return data


class EventUpdateSchema(EventCreateSchema):
    """Load with ``partial=True``; status can also change once the event exists."""

    status = fields.String(validate=validate.OneOf(EVENT_STATUSES))


class ParticipantCreateSchema(InputSchema):
    participant_id = fields.String(required=True)
    status = fields.String(load_default="invited", validate=validate.OneOf(PARTICIPANT_STATUSES))


class ParticipantUpdateSchema(InputSchema):
    status = fields.String(validate=validate.OneOf(PARTICIPANT_STATUSES))
    coach_notes = fields.String(allow_none=True)


class ExportEventSchema(InputSchema):
    event_id = fields.String(required=True, data_key="eventId")
