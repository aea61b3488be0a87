from app.extensions import db
from app.models import Recommendation
from conftest import login

RECOMMENDATION = {
    "title": "Hydration",
    "description": "Drink at least two litres of water on training days",
    "priority": "haute",
}


def add_recommendation(coach, athlete, **overrides):
    values = dict(RECOMMENDATION)
    values.update(overrides)
    recommendation = Recommendation(coach_id=coach.id, athlete_id=athlete.id, **values)
    db.session.add(recommendation)
    db.session.commit()
    return recommendation


def test_coach_creates_unread_recommendation(client, junior, athlete):
    login(client, junior.email)
    resp = client.post("/api/recommendations", json=dict(RECOMMENDATION, athlete_id=athlete.id))
    assert resp.status_code == 201
    assert resp.get_json()["read_status"] is False


def test_invalid_priority(client, junior, athlete):
    login(client, junior.email)
    resp = client.post("/api/recommendations", json=dict(RECOMMENDATION, athlete_id=athlete.id, priority="urgent"))
    assert resp.status_code == 400
    assert "priority" in resp.get_json()["errors"]


def test_target_athlete_marks_as_read(client, principal, athlete):
    recommendation_id = add_recommendation(principal, athlete).id
    login(client, athlete.email)

    resp = client.post(f"/api/recommendations/{recommendation_id}/read", json={})
    assert resp.status_code == 200
    assert resp.get_json()["read_status"] is True
    assert db.session.get(Recommendation, recommendation_id).read_status is True


def test_only_target_athlete_marks_as_read(client, principal, athlete, make_user):
    other = make_user("other@club.test")
    recommendation_id = add_recommendation(principal, athlete).id

    login(client, other.email)
    assert client.post(f"/api/recommendations/{recommendation_id}/read", json={}).status_code == 403

    client.post("/logout", json={})
    login(client, principal.email)
    assert client.post(f"/api/recommendations/{recommendation_id}/read", json={}).status_code == 403
    assert db.session.get(Recommendation, recommendation_id).read_status is False


def test_athlete_filters_unread(client, principal, athlete):
    add_recommendation(principal, athlete)
    add_recommendation(principal, athlete, title="Sleep", read_status=True)

    login(client, athlete.email)
    body = client.get("/api/recommendations?read_status=false").get_json()
    assert [r["title"] for r in body] == ["Hydration"]


def test_athlete_cannot_read_others_recommendation(client, principal, athlete, make_user):
    other = make_user("other@club.test")
    recommendation_id = add_recommendation(principal, other).id
    login(client, athlete.email)
    assert client.get(f"/api/recommendations/{recommendation_id}").status_code == 403


def test_junior_cannot_update_peer_recommendation(client, principal, junior, make_user, athlete):
    peer = make_user("peer@club.test", role="coach", coach_level="junior")
    recommendation_id = add_recommendation(peer, athlete).id
    login(client, junior.email)
    resp = client.put(f"/api/recommendations/{recommendation_id}", json={"title": "Changed"})
    assert resp.status_code == 403


def test_my_recommendations_page(client, principal, athlete):
    add_recommendation(principal, athlete)
    login(client, athlete.email)
    resp = client.get("/my-recommendations")
    assert resp.status_code == 200
    assert b"Hydration" in resp.data


def test_coach_update_leaves_read_status_alone(client, principal, athlete):
    recommendation_id = add_recommendation(principal, athlete).id
    login(client, principal.email)

    resp = client.put(
        f"/api/recommendations/{recommendation_id}",
        json={"title": "Hydration plan", "read_status": True},
    )
    assert resp.status_code == 200
    assert resp.get_json()["title"] == "Hydration plan"
    assert resp.get_json()["read_status"] is False
    assert db.session.get(Recommendation, recommendation_id).read_status is False
