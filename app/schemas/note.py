from marshmallow import fields, validate

from app.extensions import ma
from app.models import Note
from app.constants import NOTE_CATEGORIES, NOTE_CONTEXTS, CONTENT_MIN_LENGTH, CONTENT_MAX_LENGTH
from . import InputSchema


class NoteSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Note
        include_fk = True

    coach_name = fields.Function(lambda note: note.coach.name if note.coach else None)
    athlete_name = fields.Function(lambda note: note.athlete.name if note.athlete else None)


class NoteCreateSchema(InputSchema):
    athlete_id = fields.String(required=True)
    category = fields.String(required=True, validate=validate.OneOf(NOTE_CATEGORIES))
    context = fields.String(required=True, validate=validate.OneOf(NOTE_CONTEXTS))
    date = fields.Date(required=True)
    content = fields.String(
        required=True,
        validate=validate.Length(min=CONTENT_MIN_LENGTH, max=CONTENT_MAX_LENGTH),
    )


class NoteUpdateSchema(NoteCreateSchema):
    """Load with ``partial=True``; the athlete of a note cannot change."""

    class Meta(NoteCreateSchema.Meta):
        exclude = ("athlete_id",)
