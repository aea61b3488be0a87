from .account import Account
from .profile import Profile

from .note import Note
from .recommendation import Recommendation

from .push_subscription import PushSubscription
from .notification_log import NotificationLog
from .calendar_tokens import CalendarTokens
from .calendar_event import CalendarEvent, EventParticipant
from .calendar_sync import GoogleCalendarSync

__all__ = [
    "Account", "Profile",
    "Note", "Recommendation",
    "PushSubscription", "NotificationLog", "CalendarTokens",
    "CalendarEvent", "EventParticipant", "GoogleCalendarSync",
]
