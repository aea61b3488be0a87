from flask import render_template

from app.schemas import RecommendationSchema
from app.services.recommendations import list_recommendations, mark_as_read
from app.utils.decorators import done, profile_required

from . import athlete_bp

recommendation_schema = RecommendationSchema()


@athlete_bp.route("/my-recommendations", methods=["GET"])
@profile_required
def my_recommendations(current_user):
    # Coaches only see what they may read; athletes only what is addressed to them
    recommendations = list_recommendations(current_user)
    return render_template(
        "athlete/my_recommendations.html",
        user=current_user,
        unread=[r for r in recommendations if not r.read_status],
        read=[r for r in recommendations if r.read_status],
    )


@athlete_bp.route("/api/recommendations/<recommendation_id>/read", methods=["POST"])
@profile_required
def read_recommendation(recommendation_id, current_user):
    recommendation = mark_as_read(recommendation_id, current_user)
    return done("athlete.my_recommendations", recommendation_schema.dump(recommendation))
