from marshmallow import fields, validate

from app.extensions import ma
from app.models import Profile
from app.constants import (
    ATHLETE_CATEGORIES, GRADES, NAME_MIN_LENGTH, NAME_MAX_LENGTH, EMAIL_MAX_LENGTH,
    WEIGHT_MIN, WEIGHT_MAX, HEIGHT_MIN, HEIGHT_MAX,
)
from . import InputSchema


class ProfileSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Profile
        include_fk = True


class SetupProfileSchema(InputSchema):
    name = fields.String(required=True, validate=validate.Length(min=NAME_MIN_LENGTH, max=NAME_MAX_LENGTH))
    category = fields.String(allow_none=True, load_default=None, validate=validate.OneOf(ATHLETE_CATEGORIES))
    grade = fields.String(allow_none=True, load_default=None, validate=validate.OneOf(GRADES))
    weight = fields.Float(allow_none=True, load_default=None, validate=validate.Range(min=WEIGHT_MIN, max=WEIGHT_MAX))
    height = fields.Float(allow_none=True, load_default=None, validate=validate.Range(min=HEIGHT_MIN, max=HEIGHT_MAX))


class ProfileUpdateSchema(SetupProfileSchema):
    email = fields.Email(required=True, validate=validate.Length(max=EMAIL_MAX_LENGTH))
    active = fields.Boolean(required=True)


class PromoteCoachSchema(InputSchema):
    athlete_id = fields.String(required=True, data_key="athleteId")
    level = fields.String(required=True, validate=validate.OneOf(["principal", "junior"]))
