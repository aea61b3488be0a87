from marshmallow import fields, validate

from app.extensions import ma
from app.models import Recommendation
from app.constants import RECOMMENDATION_PRIORITIES, TITLE_MAX_LENGTH, CONTENT_MIN_LENGTH, CONTENT_MAX_LENGTH
from . import InputSchema


class RecommendationSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Recommendation
        include_fk = True

    coach_name = fields.Function(lambda rec: rec.coach.name if rec.coach else None)
    athlete_name = fields.Function(lambda rec: rec.athlete.name if rec.athlete else None)


class RecommendationCreateSchema(InputSchema):
    athlete_id = fields.String(required=True)
    title = fields.String(required=True, validate=validate.Length(min=1, max=TITLE_MAX_LENGTH))
    description = fields.String(
        required=True,
        validate=validate.Length(min=CONTENT_MIN_LENGTH, max=CONTENT_MAX_LENGTH),
    )
    priority = fields.String(required=True, validate=validate.OneOf(RECOMMENDATION_PRIORITIES))


class RecommendationUpdateSchema(RecommendationCreateSchema):
    class Meta(RecommendationCreateSchema.Meta):
        exclude = ("athlete_id",)
