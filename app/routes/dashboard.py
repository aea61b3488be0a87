from flask import Blueprint, render_template

from app.constants import RECENT_NOTES_LIMIT, RECENT_RECOMMENDATIONS_LIMIT
from app.services.notes import list_notes
from app.services.profiles import get_visible_athletes
from app.services.recommendations import list_recommendations
from app.utils.decorators import profile_required

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/dashboard")
@profile_required
def dashboard(current_user):
    recent_notes = list_notes(current_user, limit=RECENT_NOTES_LIMIT)
    recent_recommendations = list_recommendations(current_user, limit=RECENT_RECOMMENDATIONS_LIMIT)

    if current_user.is_coach:
        athletes = get_visible_athletes(current_user)
        return render_template(
            "coach/dashboard.html",
            user=current_user,
            athletes=athletes,
            pending=[a for a in athletes if not a.active],
            recent_notes=recent_notes,
            recent_recommendations=recent_recommendations,
        )

    unread = [r for r in recent_recommendations if not r.read_status]
    return render_template(
        "athlete/dashboard.html",
        user=current_user,
        recent_notes=recent_notes,
        recent_recommendations=recent_recommendations,
        unread_count=len(unread),
    )
