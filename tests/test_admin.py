from app.extensions import db
from app.models import Profile
from conftest import login


def test_super_admin_promotes_principal(client, super_admin, athlete):
    athlete_id, super_admin_id = athlete.id, super_admin.id
    login(client, super_admin.email)

    resp = client.post("/api/admin/promote-coach", data={"athleteId": athlete_id, "level": "principal"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/admin/coaches")

    coach = db.session.get(Profile, athlete_id)
    assert coach.role == "coach"
    assert coach.coach_level == "principal"
    assert coach.managed_by == super_admin_id
    assert coach.active is True
    assert coach.category is None


def test_principal_promotes_junior_only(client, principal, athlete):
    athlete_id = athlete.id
    login(client, principal.email)

    resp = client.post("/api/admin/promote-coach", json={"athleteId": athlete_id, "level": "principal"})
    assert resp.status_code == 403
    assert db.session.get(Profile, athlete_id).role == "athlete"

    resp = client.post("/api/admin/promote-coach", json={"athleteId": athlete_id, "level": "junior"})
    assert resp.status_code == 200
    assert resp.get_json()["coach"]["managed_by"] == principal.id


def test_junior_cannot_promote(client, junior, athlete):
    login(client, junior.email)
    resp = client.post("/api/admin/promote-coach", json={"athleteId": athlete.id, "level": "junior"})
    assert resp.status_code == 403


def test_promote_validates_level(client, super_admin, athlete):
    login(client, super_admin.email)
    resp = client.post("/api/admin/promote-coach", json={"athleteId": athlete.id, "level": "super_admin"})
    assert resp.status_code == 400
    assert "level" in resp.get_json()["errors"]


def test_coaches_page(client, super_admin, principal, junior, athlete):
    login(client, principal.email)
    resp = client.get("/admin/coaches")
    assert resp.status_code == 200
    assert junior.email.encode() in resp.data

    client.post("/logout", json={})
    login(client, junior.email)
    assert client.get("/admin/coaches").status_code == 403


def test_coaches_page_requires_session(client):
    resp = client.get("/admin/coaches")
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/login")
