from flask import jsonify, render_template, request

from app.constants import NOTE_CATEGORIES, NOTE_CONTEXTS
from app.models import Profile
from app.schemas import NoteCreateSchema, NoteSchema, NoteUpdateSchema
from app.services import notes as note_service
from app.utils.decorators import active_coach_required, done, profile_required, request_data

from . import coach_bp

note_schema = NoteSchema()
notes_schema = NoteSchema(many=True)
note_create_schema = NoteCreateSchema()
note_update_schema = NoteUpdateSchema()


def _active_athletes():
    return Profile.query.filter_by(role="athlete", active=True).order_by(Profile.name).all()


def _filters():
    return {
        "athlete_id": request.args.get("athlete_id") or None,
        "category": request.args.get("category") or None,
        "context": request.args.get("context") or None,
    }


# ================================
# Pages
# ================================

@coach_bp.route("/notes", methods=["GET"])
@profile_required
def notes_page(current_user):
    filters = _filters()
    return render_template(
        "coach/notes.html",
        user=current_user,
        notes=note_service.list_notes(current_user, **filters),
        athletes=_active_athletes() if current_user.is_coach else [],
        categories=NOTE_CATEGORIES,
        contexts=NOTE_CONTEXTS,
        filters=filters,
    )


@coach_bp.route("/notes/new", methods=["GET"])
@active_coach_required
def new_note(current_user):
    return render_template(
        "coach/note_form.html",
        user=current_user,
        note=None,
        athletes=_active_athletes(),
        selected_athlete=request.args.get("athlete_id"),
        categories=NOTE_CATEGORIES,
        contexts=NOTE_CONTEXTS,
    )


@coach_bp.route("/notes/<note_id>/edit", methods=["GET"])
@active_coach_required
def edit_note(note_id, current_user):
    note = note_service.get_note(note_id, current_user)
    return render_template(
        "coach/note_form.html",
        user=current_user,
        note=note,
        athletes=[note.athlete],
        selected_athlete=note.athlete_id,
        categories=NOTE_CATEGORIES,
        contexts=NOTE_CONTEXTS,
    )


# ================================
# API
# ================================

@coach_bp.route("/api/notes", methods=["GET"])
@profile_required
def list_notes(current_user):
    limit = request.args.get("limit", type=int)
    notes = note_service.list_notes(current_user, limit=limit, **_filters())
    return jsonify(notes_schema.dump(notes)), 200


@coach_bp.route("/api/notes", methods=["POST"])
@active_coach_required
def create_note(current_user):
    data = note_create_schema.load(request_data())
    note = note_service.create_note(data, current_user)
    return done("coach.notes_page", note_schema.dump(note), 201)


@coach_bp.route("/api/notes/<note_id>", methods=["GET"])
@profile_required
def get_note(note_id, current_user):
    return jsonify(note_schema.dump(note_service.get_note(note_id, current_user))), 200


@coach_bp.route("/api/notes/<note_id>", methods=["PUT", "PATCH", "POST"])
@active_coach_required
def update_note(note_id, current_user):
    data = note_update_schema.load(request_data(), partial=True)
    note = note_service.update_note(note_id, data, current_user)
    return done("coach.notes_page", note_schema.dump(note))


@coach_bp.route("/api/notes/<note_id>", methods=["DELETE"])
@coach_bp.route("/api/notes/<note_id>/delete", methods=["POST"])
@active_coach_required
def delete_note(note_id, current_user):
    note_service.delete_note(note_id, current_user)
    return done("coach.notes_page", {"msg": "Note deleted"})
