from datetime import date

import pytest

from app.extensions import db
from app.models import Note
from conftest import login

NOTE = {
    "category": "technique",
    "context": "entrainement",
    "date": "2026-10-12",
    "content": "Work on the left guard transitions",
}


def add_note(coach, athlete, **overrides):
    values = dict(NOTE, date=date(2026, 10, 12))
    values.update(overrides)
    note = Note(coach_id=coach.id, athlete_id=athlete.id, **values)
    db.session.add(note)
    db.session.commit()
    return note


def test_coach_creates_note(client, principal, athlete):
    login(client, principal.email)
    resp = client.post("/api/notes", json=dict(NOTE, athlete_id=athlete.id))
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["coach_id"] == principal.id
    assert body["athlete_name"] == athlete.name
    assert body["date"] == "2026-10-12"


def test_form_submission_redirects_to_notes(client, principal, athlete):
    login(client, principal.email)
    resp = client.post("/api/notes", data=dict(NOTE, athlete_id=athlete.id))
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/notes")


def test_note_for_inactive_athlete_is_refused(client, principal, make_user):
    pending = make_user("pending@club.test", active=False)
    login(client, principal.email)
    resp = client.post("/api/notes", json=dict(NOTE, athlete_id=pending.id))
    assert resp.status_code == 400


def test_note_for_unknown_athlete(client, principal):
    login(client, principal.email)
    resp = client.post("/api/notes", json=dict(NOTE, athlete_id="nobody"))
    assert resp.status_code == 404


def test_note_validation_errors(client, principal, athlete):
    login(client, principal.email)
    resp = client.post("/api/notes", json=dict(NOTE, athlete_id=athlete.id, content="short", category="luck"))
    assert resp.status_code == 400
    assert set(resp.get_json()["errors"]) == {"content", "category"}


def test_athlete_cannot_create_note(client, athlete):
    login(client, athlete.email)
    resp = client.post("/api/notes", json=dict(NOTE, athlete_id=athlete.id))
    assert resp.status_code == 403


def test_junior_edits_supervisor_notes_but_not_peer_notes(client, principal, junior, make_user, athlete):
    peer = make_user("peer@club.test", role="coach", coach_level="junior", managed_by=principal.id)
    supervisor_note = add_note(principal, athlete)
    peer_note = add_note(peer, athlete)
    supervisor_note_id, peer_note_id = supervisor_note.id, peer_note.id

    login(client, junior.email)
    resp = client.patch(f"/api/notes/{supervisor_note_id}", json={"content": "Updated by the junior coach"})
    assert resp.status_code == 200
    assert resp.get_json()["content"] == "Updated by the junior coach"
    assert resp.get_json()["athlete_id"] == athlete.id

    assert client.patch(f"/api/notes/{peer_note_id}", json={"content": "Should not be allowed"}).status_code == 403
    assert client.delete(f"/api/notes/{peer_note_id}").status_code == 403


def test_untiered_coach_only_edits_own_notes(client, make_user, principal, athlete):
    coach = make_user("coach@club.test", role="coach")
    own = add_note(coach, athlete)
    other = add_note(principal, athlete)
    own_id, other_id = own.id, other.id

    login(client, coach.email)
    assert client.delete(f"/api/notes/{other_id}").status_code == 403
    assert client.delete(f"/api/notes/{own_id}").status_code == 200
    assert db.session.get(Note, own_id) is None


def test_principal_edits_everything(client, principal, junior, athlete):
    note_id = add_note(junior, athlete).id
    login(client, principal.email)
    assert client.delete(f"/api/notes/{note_id}").status_code == 200


def test_athlete_lists_only_own_notes(client, principal, athlete, make_user):
    other = make_user("other@club.test")
    add_note(principal, athlete)
    add_note(principal, other)

    login(client, athlete.email)
    body = client.get("/api/notes").get_json()
    assert [n["athlete_id"] for n in body] == [athlete.id]
    assert client.get(f"/api/notes?athlete_id={other.id}").status_code == 403


def test_junior_listing_is_scoped(client, principal, junior, make_user, athlete):
    peer = make_user("peer@club.test", role="coach", coach_level="junior")
    add_note(principal, athlete)
    add_note(junior, athlete, category="mental")
    add_note(peer, athlete)

    login(client, junior.email)
    body = client.get("/api/notes").get_json()
    assert sorted(n["coach_id"] for n in body) == sorted([principal.id, junior.id])

    body = client.get("/api/notes?category=mental").get_json()
    assert [n["coach_id"] for n in body] == [junior.id]


def test_notes_page_renders(client, principal, athlete):
    add_note(principal, athlete)
    login(client, principal.email)
    resp = client.get("/notes")
    assert resp.status_code == 200
    assert b"left guard" in resp.data


@pytest.mark.parametrize("path", ["/notes/new", "/recommendations/new"])
def test_creation_pages_require_active_coach(client, athlete, path):
    login(client, athlete.email)
    assert client.get(path).status_code == 403
