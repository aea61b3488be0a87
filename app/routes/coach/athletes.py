from flask import current_app, jsonify, render_template, request

from app.constants import ATHLETE_CATEGORIES, GRADES
from app.schemas import ProfileSchema, ProfileUpdateSchema
from app.services import profiles as profile_service
from app.services.notes import list_notes
from app.services.recommendations import list_recommendations
from app.services.session import current_account_id
from app.utils.decorators import active_coach_required, done, profile_required, request_data

from . import coach_bp

profile_schema = ProfileSchema()
profiles_schema = ProfileSchema(many=True)
profile_update_schema = ProfileUpdateSchema()


# ================================
# Pages
# ================================

@coach_bp.route("/athletes", methods=["GET"])
@profile_required
def athletes(current_user):
    visible = profile_service.get_visible_athletes(current_user)
    category = request.args.get("category")
    if category:
        visible = [a for a in visible if a.category == category]

    return render_template(
        "coach/athletes.html",
        user=current_user,
        pending=[a for a in visible if not a.active],
        athletes=[a for a in visible if a.active],
        categories=ATHLETE_CATEGORIES,
    )


@coach_bp.route("/athletes/<athlete_id>", methods=["GET"])
@profile_required
def athlete_detail(athlete_id, current_user):
    athlete = profile_service.get_readable_profile(athlete_id, current_user)
    return render_template(
        "coach/athlete_detail.html",
        user=current_user,
        athlete=athlete,
        notes=list_notes(current_user, athlete_id=athlete.id),
        recommendations=list_recommendations(current_user, athlete_id=athlete.id),
    )


@coach_bp.route("/athletes/<athlete_id>/edit", methods=["GET"])
@active_coach_required
def edit_athlete(athlete_id, current_user):
    athlete = profile_service.get_readable_profile(athlete_id, current_user)
    return render_template(
        "coach/edit_athlete.html",
        user=current_user,
        athlete=athlete,
        categories=ATHLETE_CATEGORIES,
        grades=GRADES,
    )


# ================================
# Validation / rejection
# ================================

def _athlete_id_from_request():
    return (request_data().get("athleteId") or "").strip()


@coach_bp.route("/api/athletes/validate", methods=["POST"])
@coach_bp.route("/api/athletes/approve", methods=["POST"])
@active_coach_required
def validate_athlete(current_user):
    athlete_id = _athlete_id_from_request()
    if not athlete_id:
        return jsonify({"msg": "athleteId is required"}), 400

    athlete = profile_service.approve_athlete(athlete_id, current_user)
    return done("coach.athletes", {"msg": "Athlete validated", "athlete": profile_schema.dump(athlete)})


@coach_bp.route("/api/athletes/reject", methods=["POST"])
@active_coach_required
def reject_athlete(current_user):
    athlete_id = _athlete_id_from_request()
    if not athlete_id:
        return jsonify({"msg": "athleteId is required"}), 400

    profile_service.reject_athlete(athlete_id, current_user)
    return done("coach.athletes", {"msg": "Athlete rejected"})


# ================================
# Athlete administration API
# ================================

@coach_bp.route("/api/profiles", methods=["GET"])
@profile_required
def visible_profiles(current_user):
    profiles = profile_service.get_visible_profiles(current_account_id())
    return jsonify(profiles_schema.dump(profiles)), 200


@coach_bp.route("/api/profiles/stats", methods=["GET"])
@active_coach_required
def stats(current_user):
    return jsonify(profile_service.profile_stats(current_user)), 200


@coach_bp.route("/api/athletes/<athlete_id>", methods=["PUT", "POST"])
@active_coach_required
def update_athlete(athlete_id, current_user):
    data = profile_update_schema.load(request_data())
    athlete = profile_service.update_athlete(athlete_id, data, current_user)
    current_app.logger.info("Athlete %s updated by %s", athlete_id, current_user.id)
    return done("coach.athlete_detail", profile_schema.dump(athlete), athlete_id=athlete_id)


@coach_bp.route("/api/athletes/<athlete_id>/toggle-status", methods=["POST"])
@active_coach_required
def toggle_status(athlete_id, current_user):
    athlete = profile_service.toggle_athlete_status(athlete_id, current_user)
    return done("coach.athletes", {"msg": "Status updated", "active": athlete.active})
