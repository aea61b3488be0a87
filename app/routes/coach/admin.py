from flask import jsonify, render_template

from app.constants import CoachLevel, UserRole
from app.models import Profile
from app.schemas import ProfileSchema, PromoteCoachSchema
from app.services.profiles import get_visible_profiles, promote_to_coach
from app.utils.decorators import active_coach_required, done, request_data

from . import coach_bp

promote_coach_schema = PromoteCoachSchema()
profile_schema = ProfileSchema()

ADMIN_LEVELS = (CoachLevel.super_admin.value, CoachLevel.principal.value)


@coach_bp.route("/admin/coaches", methods=["GET"])
@active_coach_required
def manage_coaches(current_user):
    if current_user.coach_level not in ADMIN_LEVELS:
        return jsonify({"msg": "Insufficient permissions"}), 403

    visible = get_visible_profiles(current_user.id)
    return render_template(
        "admin/coaches.html",
        user=current_user,
        coaches=[p for p in visible if p.role == UserRole.coach.value],
        candidates=(
            Profile.query
            .filter_by(role=UserRole.athlete.value, active=True)
            .order_by(Profile.name)
            .all()
        ),
        can_create_principal=current_user.coach_level == CoachLevel.super_admin.value,
    )


@coach_bp.route("/api/admin/promote-coach", methods=["POST"])
@active_coach_required
def promote_coach(current_user):
    data = promote_coach_schema.load(request_data())
    coach = promote_to_coach(data["athlete_id"], data["level"], current_user)
    return done("coach.manage_coaches", {"msg": "Coach created", "coach": profile_schema.dump(coach)})
