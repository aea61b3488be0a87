from enum import Enum


class UserRole(str, Enum):
    coach = "coach"
    athlete = "athlete"


class CoachLevel(str, Enum):
    super_admin = "super_admin"
    principal = "principal"
    junior = "junior"


NOTE_CATEGORIES = ("technique", "mental", "physique", "tactique")
NOTE_CONTEXTS = ("entrainement", "competition")
RECOMMENDATION_PRIORITIES = ("basse", "moyenne", "haute")

ATHLETE_CATEGORIES = ("Minimes", "Cadets", "Juniors", "Seniors", "Vétérans")
GRADES = (
    "Débutant",
    "Ceinture blanche",
    "Ceinture jaune",
    "Ceinture orange",
    "Ceinture verte",
    "Ceinture bleue",
    "Ceinture marron",
    "Ceinture noire 1er dan",
    "Ceinture noire 2ème dan",
    "Ceinture noire 3ème dan",
)

# Data limits
TITLE_MAX_LENGTH = 255
CONTENT_MIN_LENGTH = 10
CONTENT_MAX_LENGTH = 2000
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
WEIGHT_MIN, WEIGHT_MAX = 1, 200
HEIGHT_MIN, HEIGHT_MAX = 1, 250
RECENT_NOTES_LIMIT = 5
RECENT_RECOMMENDATIONS_LIMIT = 3

# Calendar
EVENT_TYPES = ("training", "competition", "individual_session", "meeting", "other")
EVENT_STATUSES = ("active", "cancelled", "completed")
EVENT_VISIBILITIES = ("public", "private", "coaches_only")
PARTICIPANT_STATUSES = ("invited", "accepted", "declined", "maybe", "attended", "absent")
EVENT_SOURCES = ("manual", "google_calendar", "bidirectional")
EVENT_COLORS = {
    "training": "#3b82f6",
    "competition": "#ef4444",
    "individual_session": "#10b981",
    "meeting": "#f59e0b",
    "other": "#6b7280",
}
# Months covered by each export range, the current one included
EXPORT_RANGES = {"1month": 1, "3months": 3, "6months": 6, "1year": 12, "all": None}
DEFAULT_EXPORT_RANGE = "3months"
