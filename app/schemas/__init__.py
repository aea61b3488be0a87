from marshmallow import EXCLUDE, pre_load

from app.extensions import ma


class InputSchema(ma.Schema):
    """Base for request payloads: trims strings, blank form fields become None."""

    class Meta:
        unknown = EXCLUDE

    @pre_load
    def strip_strings(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        cleaned = {}
        for key, value in data.items():
            if isinstance(value, str):
                value = value.strip()
                if value == "":
                    value = None
            cleaned[key] = value
        return cleaned


from .profile import ProfileSchema, ProfileUpdateSchema, SetupProfileSchema, PromoteCoachSchema  # noqa: E402
from .note import NoteSchema, NoteCreateSchema, NoteUpdateSchema  # noqa: E402
from .recommendation import RecommendationSchema, RecommendationCreateSchema, RecommendationUpdateSchema  # noqa: E402
from .push import PushSubscribeSchema, PushUnsubscribeSchema, SendNotificationSchema  # noqa: E402
from .calendar_event import (  # noqa: E402
    CalendarEventSchema, EventParticipantSchema, EventCreateSchema, EventUpdateSchema,
    ParticipantCreateSchema, ParticipantUpdateSchema, ExportEventSchema,
)

__all__ = [
    "InputSchema",
    "ProfileSchema", "ProfileUpdateSchema", "SetupProfileSchema", "PromoteCoachSchema",
    "NoteSchema", "NoteCreateSchema", "NoteUpdateSchema",
    "RecommendationSchema", "RecommendationCreateSchema", "RecommendationUpdateSchema",
    "PushSubscribeSchema", "PushUnsubscribeSchema", "SendNotificationSchema",
    "CalendarEventSchema", "EventParticipantSchema", "EventCreateSchema", "EventUpdateSchema",
    "ParticipantCreateSchema", "ParticipantUpdateSchema", "ExportEventSchema",
]
