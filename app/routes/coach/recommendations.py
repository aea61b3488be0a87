from flask import jsonify, render_template, request

from app.constants import RECOMMENDATION_PRIORITIES
from app.models import Profile
from app.schemas import RecommendationCreateSchema, RecommendationSchema, RecommendationUpdateSchema
from app.services import recommendations as recommendation_service
from app.utils.decorators import active_coach_required, done, profile_required, request_data

from . import coach_bp

recommendation_schema = RecommendationSchema()
recommendations_schema = RecommendationSchema(many=True)
recommendation_create_schema = RecommendationCreateSchema()
recommendation_update_schema = RecommendationUpdateSchema()


def _read_status_arg():
    value = request.args.get("read_status")
    if value is None or value == "":
        return None
    return value.lower() in ("1", "true", "yes")


@coach_bp.route("/recommendations", methods=["GET"])
@active_coach_required
def recommendations_page(current_user):
    athlete_id = request.args.get("athlete_id") or None
    return render_template(
        "coach/recommendations.html",
        user=current_user,
        recommendations=recommendation_service.list_recommendations(
            current_user, athlete_id=athlete_id, read_status=_read_status_arg()
        ),
        athletes=Profile.query.filter_by(role="athlete", active=True).order_by(Profile.name).all(),
        selected_athlete=athlete_id,
    )


@coach_bp.route("/recommendations/new", methods=["GET"])
@active_coach_required
def new_recommendation(current_user):
    return render_template(
        "coach/recommendation_form.html",
        user=current_user,
        recommendation=None,
        athletes=Profile.query.filter_by(role="athlete", active=True).order_by(Profile.name).all(),
        selected_athlete=request.args.get("athlete_id"),
        priorities=RECOMMENDATION_PRIORITIES,
    )


@coach_bp.route("/recommendations/<recommendation_id>/edit", methods=["GET"])
@active_coach_required
def edit_recommendation(recommendation_id, current_user):
    recommendation = recommendation_service.get_recommendation(recommendation_id, current_user)
    return render_template(
        "coach/recommendation_form.html",
        user=current_user,
        recommendation=recommendation,
        athletes=[recommendation.athlete],
        selected_athlete=recommendation.athlete_id,
        priorities=RECOMMENDATION_PRIORITIES,
    )


# ================================
# API
# ================================

@coach_bp.route("/api/recommendations", methods=["GET"])
@profile_required
def list_recommendations(current_user):
    recommendations = recommendation_service.list_recommendations(
        current_user,
        athlete_id=request.args.get("athlete_id") or None,
        read_status=_read_status_arg(),
        limit=request.args.get("limit", type=int),
    )
    return jsonify(recommendations_schema.dump(recommendations)), 200


@coach_bp.route("/api/recommendations", methods=["POST"])
@active_coach_required
def create_recommendation(current_user):
    data = recommendation_create_schema.load(request_data())
    recommendation = recommendation_service.create_recommendation(data, current_user)
    return done("coach.recommendations_page", recommendation_schema.dump(recommendation), 201)


@coach_bp.route("/api/recommendations/<recommendation_id>", methods=["GET"])
@profile_required
def get_recommendation(recommendation_id, current_user):
    recommendation = recommendation_service.get_recommendation(recommendation_id, current_user)
    return jsonify(recommendation_schema.dump(recommendation)), 200


@coach_bp.route("/api/recommendations/<recommendation_id>", methods=["PUT", "PATCH", "POST"])
@active_coach_required
def update_recommendation(recommendation_id, current_user):
    data = recommendation_update_schema.load(request_data(), partial=True)
    recommendation = recommendation_service.update_recommendation(recommendation_id, data, current_user)
    return done("coach.recommendations_page", recommendation_schema.dump(recommendation))


@coach_bp.route("/api/recommendations/<recommendation_id>", methods=["DELETE"])
@coach_bp.route("/api/recommendations/<recommendation_id>/delete", methods=["POST"])
@active_coach_required
def delete_recommendation(recommendation_id, current_user):
    recommendation_service.delete_recommendation(recommendation_id, current_user)
    return done("coach.recommendations_page", {"msg": "Recommendation deleted"})
