from datetime import datetime, timedelta

import pytest

from app.extensions import db
from app.models import CalendarEvent, EventParticipant
from conftest import login

START = datetime(2030, 5, 4, 18, 0)


@pytest.fixture
def make_event():
    def _make(organizer, **values):
        fields = {
            "title": "Randori",
            "event_type": "training",
            "start_datetime": START,
            "end_datetime": START + timedelta(minutes=90),
            "visibility": "public",
        }
        fields.update(values)
        event = CalendarEvent(organizer_id=organizer.id, **fields)
        db.session.add(event)
        db.session.commit()
        return event
    return _make


def _titles(resp):
    assert resp.status_code == 200
    return sorted(event["title"] for event in resp.get_json())


# ================================
# Events
# ================================

def test_create_event(client, principal):
    principal_id = principal.id
    login(client, principal.email)
    resp = client.post("/api/calendar/events", json={
        "title": "  Regional cup ",
        "event_type": "competition",
        "start_datetime": "2030-06-01T09:00:00+02:00",
        "end_datetime": "2030-06-01T17:00:00Z",
        "location": "Dojo",
        "read_status": True,
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["title"] == "Regional cup"
    assert body["organizer_id"] == principal_id
    assert body["organizer_name"] == principal.name
    assert body["color"] == "#ef4444"
    assert body["visibility"] == "public"
    assert body["participants"] == []

    event = db.session.get(CalendarEvent, body["id"])
    assert event.start_datetime == datetime(2030, 6, 1, 7, 0)
    assert event.end_datetime == datetime(2030, 6, 1, 17, 0)


def test_create_event_keeps_chosen_color(client, junior):
    login(client, junior.email)
    resp = client.post("/api/calendar/events", json={
        "title": "Kata", "event_type": "training", "color": "#123abc",
        "start_datetime": "2030-06-01T09:00:00", "end_datetime": "2030-06-01T10:00:00",
    })
    assert resp.status_code == 201
    assert resp.get_json()["color"] == "#123abc"


@pytest.mark.parametrize("payload, field", [
    ({"end_datetime": "2030-06-01T08:00:00"}, "end_datetime"),
    ({"end_datetime": "2030-06-01T09:00:00"}, "end_datetime"),
    ({"event_type": "party"}, "event_type"),
    ({"color": "red"}, "color"),
    ({"max_participants": 0}, "max_participants"),
])
def test_create_event_rejects_bad_input(client, principal, payload, field):
    login(client, principal.email)
    data = {
        "title": "Kata", "event_type": "training",
        "start_datetime": "2030-06-01T09:00:00", "end_datetime": "2030-06-01T10:00:00",
    }
    data.update(payload)
    resp = client.post("/api/calendar/events", json=data)
    assert resp.status_code == 400
    assert field in resp.get_json()["errors"]
    assert CalendarEvent.query.count() == 0


def test_only_active_coaches_create_events(client, athlete, make_user):
    pending = make_user("pending@club.test", role="coach", active=False)
    data = {
        "title": "Kata", "event_type": "training",
        "start_datetime": "2030-06-01T09:00:00", "end_datetime": "2030-06-01T10:00:00",
    }
    for email in (athlete.email, pending.email):
        login(client, email)
        assert client.post("/api/calendar/events", json=data).status_code == 403
    assert CalendarEvent.query.count() == 0


def test_create_event_from_form_redirects_to_event(client, principal):
    login(client, principal.email)
    resp = client.post("/api/calendar/events", data={
        "title": "Stage", "event_type": "meeting",
        "start_datetime": "2030-06-01T09:00", "end_datetime": "2030-06-01T10:00",
        "location": "", "max_participants": "", "visibility": "coaches_only",
    })
    assert resp.status_code == 302
    event = CalendarEvent.query.one()
    assert resp.headers["Location"].endswith(f"/calendar/events/{event.id}")
    assert event.location is None
    assert event.all_day is False


def test_listing_follows_visibility(client, principal, junior, athlete, make_user, make_event):
    other = make_user("other@club.test")
    make_event(principal, title="Open mat")
    make_event(principal, title="Staff", visibility="coaches_only")
    hidden = make_event(principal, title="Private lesson", visibility="private")
    db.session.add(EventParticipant(event_id=hidden.id, participant_id=athlete.id))
    db.session.commit()

    login(client, principal.email)
    assert _titles(client.get("/api/calendar/events")) == ["Open mat", "Private lesson", "Staff"]

    login(client, junior.email)
    assert _titles(client.get("/api/calendar/events")) == ["Open mat", "Staff"]

    login(client, athlete.email)
    assert _titles(client.get("/api/calendar/events")) == ["Open mat", "Private lesson"]

    login(client, other.email)
    assert _titles(client.get("/api/calendar/events")) == ["Open mat"]


def test_listing_filters(client, principal, junior, make_event):
    make_event(principal, title="May", start_datetime=START, end_datetime=START + timedelta(hours=1))
    make_event(junior, title="June", event_type="meeting",
               start_datetime=START + timedelta(days=30), end_datetime=START + timedelta(days=30, hours=1))
    make_event(principal, title="Done", status="completed")

    login(client, principal.email)
    assert _titles(client.get("/api/calendar/events")) == ["June", "May"]
    assert _titles(client.get("/api/calendar/events?type=meeting")) == ["June"]
    assert _titles(client.get(f"/api/calendar/events?organizer_id={principal.id}")) == ["May"]
    assert _titles(client.get("/api/calendar/events?start=2030-05-10T00:00:00Z")) == ["June"]
    assert _titles(client.get("/api/calendar/events?end=2030-05-10T00:00:00")) == ["May"]
    assert client.get("/api/calendar/events?start=soon").status_code == 400


def test_read_private_event(client, principal, athlete, make_user, make_event):
    other = make_user("other@club.test")
    event_id = make_event(principal, visibility="private").id

    login(client, other.email)
    assert client.get(f"/api/calendar/events/{event_id}").status_code == 403
    assert client.get(f"/calendar/events/{event_id}").status_code == 403

    db.session.add(EventParticipant(event_id=event_id, participant_id=athlete.id))
    db.session.commit()
    login(client, athlete.email)
    assert client.get(f"/api/calendar/events/{event_id}").status_code == 200
    resp = client.get(f"/calendar/events/{event_id}")
    assert resp.status_code == 200
    assert b"Randori" in resp.data


def test_missing_event(client, principal):
    login(client, principal.email)
    assert client.get("/api/calendar/events/nope").status_code == 404


def test_edit_rights(client, super_admin, principal, junior, make_event):
    public_id = make_event(super_admin).id
    private_id = make_event(super_admin, visibility="private").id
    principals_private_id = make_event(principal, visibility="private").id

    login(client, principal.email)
    assert client.patch(f"/api/calendar/events/{public_id}", json={"title": "Open mat"}).status_code == 200
    assert client.patch(f"/api/calendar/events/{private_id}", json={"title": "Mine"}).status_code == 403

    login(client, junior.email)
    assert client.patch(f"/api/calendar/events/{public_id}", json={"title": "Junior"}).status_code == 403

    login(client, super_admin.email)
    assert client.patch(f"/api/calendar/events/{principals_private_id}", json={"status": "cancelled"}).status_code == 200
    assert client.get(f"/api/calendar/events/{principals_private_id}").status_code == 200

    assert db.session.get(CalendarEvent, public_id).title == "Open mat"
    assert db.session.get(CalendarEvent, private_id).title == "Randori"
    assert db.session.get(CalendarEvent, principals_private_id).status == "cancelled"


def test_update_checks_range_against_stored_dates(client, principal, make_event):
    event_id = make_event(principal).id
    login(client, principal.email)

    resp = client.patch(f"/api/calendar/events/{event_id}", json={"end_datetime": "2030-05-04T17:00:00"})
    assert resp.status_code == 400
    assert "end_datetime" in resp.get_json()["errors"]

    resp = client.patch(f"/api/calendar/events/{event_id}", json={"end_datetime": "2030-05-04T21:00:00"})
    assert resp.status_code == 200
    assert db.session.get(CalendarEvent, event_id).end_datetime == datetime(2030, 5, 4, 21, 0)


def test_delete_event_removes_participants(client, principal, athlete, make_event):
    event_id = make_event(principal).id
    db.session.add(EventParticipant(event_id=event_id, participant_id=athlete.id))
    db.session.commit()
    login(client, principal.email)

    resp = client.delete(f"/api/calendar/events/{event_id}")
    assert resp.status_code == 200
    assert db.session.get(CalendarEvent, event_id) is None
    assert EventParticipant.query.count() == 0
    assert client.delete(f"/api/calendar/events/{event_id}").status_code == 404


def test_delete_event_from_form(client, principal, make_event):
    event_id = make_event(principal).id
    login(client, principal.email)
    resp = client.post(f"/api/calendar/events/{event_id}/delete", data={"confirm": "1"})
    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/calendar")
    assert db.session.get(CalendarEvent, event_id) is None


def test_stats(client, principal, athlete, make_event):
    now = datetime.utcnow()
    make_event(principal, start_datetime=now + timedelta(days=2), end_datetime=now + timedelta(days=2, hours=1))
    make_event(principal, event_type="competition",
               start_datetime=now + timedelta(days=400), end_datetime=now + timedelta(days=400, hours=1))
    make_event(principal, status="cancelled")

    login(client, athlete.email)
    assert client.get("/api/calendar/events/stats").status_code == 403

    login(client, principal.email)
    stats = client.get("/api/calendar/events/stats").get_json()
    assert stats["total"] == 2
    assert stats["byType"]["training"] == 1
    assert stats["byType"]["competition"] == 1
    assert stats["nextWeek"] == 1


# ================================
# Participants
# ================================

def test_participants_lifecycle(client, principal, athlete, make_event):
    event_id, athlete_id = make_event(principal).id, athlete.id
    login(client, principal.email)

    resp = client.post(f"/api/calendar/events/{event_id}/participants", json={"participant_id": athlete_id})
    assert resp.status_code == 201
    assert resp.get_json()["status"] == "invited"
    assert resp.get_json()["participant_name"] == athlete.name

    resp = client.post(f"/api/calendar/events/{event_id}/participants", json={"participant_id": athlete_id})
    assert resp.status_code == 409
    assert resp.get_json()["msg"] == "This participant is already added"

    login(client, athlete.email)
    resp = client.patch(f"/api/calendar/events/{event_id}/participants/{athlete_id}", json={"status": "accepted"})
    assert resp.status_code == 200
    row = db.session.get(EventParticipant, (event_id, athlete_id))
    assert row.status == "accepted"
    assert row.responded_at is not None

    resp = client.patch(f"/api/calendar/events/{event_id}/participants/{athlete_id}", json={"coach_notes": "great"})
    assert resp.status_code == 403

    login(client, principal.email)
    resp = client.patch(f"/api/calendar/events/{event_id}/participants/{athlete_id}", json={"status": "attended", "coach_notes": "Sharp"})
    assert resp.status_code == 200
    assert resp.get_json()["coach_notes"] == "Sharp"

    assert client.delete(f"/api/calendar/events/{event_id}/participants/{athlete_id}").status_code == 200
    assert db.session.get(EventParticipant, (event_id, athlete_id)) is None
    assert client.delete(f"/api/calendar/events/{event_id}/participants/{athlete_id}").status_code == 404


def test_add_participant_checks(client, principal, junior, athlete, make_user, make_event):
    second = make_user("second@club.test")
    event_id = make_event(principal, max_participants=1).id
    url = f"/api/calendar/events/{event_id}/participants"

    login(client, junior.email)
    assert client.post(url, json={"participant_id": athlete.id}).status_code == 403

    login(client, principal.email)
    assert client.post(url, json={"participant_id": "ghost"}).status_code == 404
    assert client.post(url, json={"participant_id": athlete.id}).status_code == 201
    resp = client.post(url, json={"participant_id": second.id})
    assert resp.status_code == 400
    assert resp.get_json()["msg"] == "This event is full"


def test_participant_cannot_answer_for_someone_else(client, principal, athlete, make_user, make_event):
    other = make_user("other@club.test")
    event_id = make_event(principal).id
    db.session.add(EventParticipant(event_id=event_id, participant_id=athlete.id))
    db.session.commit()

    login(client, other.email)
    resp = client.patch(f"/api/calendar/events/{event_id}/participants/{athlete.id}", json={"status": "declined"})
    assert resp.status_code == 403
    assert db.session.get(EventParticipant, (event_id, athlete.id)).status == "invited"


def test_calendar_page_lists_events(client, principal, make_event):
    make_event(principal, title="Open mat")
    login(client, principal.email)
    resp = client.get("/calendar")
    assert resp.status_code == 200
    assert b"Open mat" in resp.data
    assert b"New event" in resp.data
