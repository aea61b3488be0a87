from datetime import datetime, timedelta
from types import SimpleNamespace
from urllib.parse import parse_qs, urlparse

import pytest
import requests
from sqlalchemy.exc import OperationalError

from app.extensions import db
from app.models import CalendarTokens
from app.services import google_calendar
from conftest import login

CALENDAR = "http://localhost/calendar?google_auth="


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body or {}

    def json(self):
        return self._body


class HtmlResponse(FakeResponse):
    def json(self):
        raise requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)


@pytest.fixture
def token_endpoint(monkeypatch):
    calls = []
    responses = []

    def fake_post(url, data=None, timeout=None):
        calls.append({"url": url, "data": data, "timeout": timeout})
        return responses.pop(0) if responses else FakeResponse(200, {
            "access_token": "access-1", "refresh_token": "refresh-1", "expires_in": 3600,
        })

    monkeypatch.setattr(google_calendar.requests, "post", fake_post)
    return SimpleNamespace(calls=calls, responses=responses)


def test_auth_url(client, athlete):
    login(client, athlete.email)
    resp = client.get("/api/calendar/google/auth?action=connect")
    assert resp.status_code == 200

    url = urlparse(resp.get_json()["authUrl"])
    params = parse_qs(url.query)
    assert url.netloc == "accounts.google.com"
    assert params["scope"] == ["https://www.googleapis.com/auth/calendar"]
    assert params["access_type"] == ["offline"]
    assert params["prompt"] == ["consent"]
    assert params["response_type"] == ["code"]
    assert params["redirect_uri"] == ["http://localhost/api/calendar/google/callback"]
    assert google_calendar.read_state(params["state"][0]) == athlete.id


def test_auth_unknown_action(client, athlete):
    login(client, athlete.email)
    assert client.get("/api/calendar/google/auth?action=sync").status_code == 400


def test_auth_without_client_id(app, client, athlete):
    app.config["GOOGLE_CLIENT_ID"] = None
    login(client, athlete.email)
    assert client.get("/api/calendar/google/auth?action=connect").status_code == 500


def test_auth_requires_session(client):
    assert client.get("/api/calendar/google/auth?action=connect").status_code == 401


def test_callback_cancelled(client, athlete):
    login(client, athlete.email)
    resp = client.get("/api/calendar/google/callback?error=access_denied")
    assert resp.headers["Location"] == CALENDAR + "cancelled"


def test_callback_without_code(client, athlete):
    login(client, athlete.email)
    resp = client.get("/api/calendar/google/callback")
    assert resp.headers["Location"] == CALENDAR + "error"


def test_callback_with_foreign_state(client, athlete, principal, token_endpoint):
    state = google_calendar.make_state(principal.id)
    login(client, athlete.email)
    resp = client.get(f"/api/calendar/google/callback?code=abc&state={state}")
    assert resp.headers["Location"] == CALENDAR + "error"
    assert token_endpoint.calls == []


def test_callback_success(client, athlete, token_endpoint):
    athlete_id = athlete.id
    state = google_calendar.make_state(athlete_id)
    login(client, athlete.email)

    resp = client.get(f"/api/calendar/google/callback?code=abc&state={state}")
    assert resp.headers["Location"] == CALENDAR + "success"

    call = token_endpoint.calls[0]
    assert call["url"] == "https://oauth2.googleapis.com/token"
    assert call["data"]["grant_type"] == "authorization_code"
    assert call["data"]["code"] == "abc"
    assert call["timeout"] == 10

    tokens = db.session.get(CalendarTokens, athlete_id)
    assert tokens.access_token == "access-1"
    assert tokens.refresh_token == "refresh-1"
    expected = datetime.utcnow() + timedelta(seconds=3600)
    assert abs((tokens.expires_at - expected).total_seconds()) < 60


def test_second_connection_updates_the_row(client, athlete, token_endpoint):
    athlete_id = athlete.id
    login(client, athlete.email)
    client.get(f"/api/calendar/google/callback?code=abc&state={google_calendar.make_state(athlete_id)}")
    token_endpoint.responses.append(FakeResponse(200, {"access_token": "access-2", "expires_in": 60}))
    client.get(f"/api/calendar/google/callback?code=def&state={google_calendar.make_state(athlete_id)}")

    rows = CalendarTokens.query.all()
    assert len(rows) == 1
    assert rows[0].access_token == "access-2"
    assert rows[0].refresh_token == "refresh-1"


def test_callback_exchange_failure(client, athlete, token_endpoint):
    token_endpoint.responses.append(FakeResponse(400, {"error": "invalid_grant"}))
    state = google_calendar.make_state(athlete.id)
    login(client, athlete.email)
    resp = client.get(f"/api/calendar/google/callback?code=abc&state={state}")
    assert resp.headers["Location"] == CALENDAR + "error"


def test_callback_with_html_token_response(client, athlete, token_endpoint):
    token_endpoint.responses.append(HtmlResponse(200))
    state = google_calendar.make_state(athlete.id)
    login(client, athlete.email)
    resp = client.get(f"/api/calendar/google/callback?code=abc&state={state}")
    assert resp.status_code == 302
    assert resp.headers["Location"] == CALENDAR + "error"


def test_callback_network_failure(client, athlete, monkeypatch):
    def unreachable(*args, **kwargs):
        raise requests.ConnectionError("no route to host")

    monkeypatch.setattr(google_calendar.requests, "post", unreachable)
    state = google_calendar.make_state(athlete.id)
    login(client, athlete.email)
    resp = client.get(f"/api/calendar/google/callback?code=abc&state={state}")
    assert resp.headers["Location"] == CALENDAR + "error"


def test_callback_storage_failure(client, athlete, token_endpoint, monkeypatch):
    state = google_calendar.make_state(athlete.id)
    login(client, athlete.email)

    def broken_commit():
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(db.session, "commit", broken_commit)
    resp = client.get(f"/api/calendar/google/callback?code=abc&state={state}")
    assert resp.headers["Location"] == CALENDAR + "db_error"


def test_events_refresh_expired_token(client, athlete, token_endpoint, monkeypatch):
    athlete_id = athlete.id
    db.session.add(CalendarTokens(
        user_id=athlete_id, access_token="old", refresh_token="refresh-1",
        expires_at=datetime.utcnow() - timedelta(minutes=5),
    ))
    db.session.commit()
    token_endpoint.responses.append(FakeResponse(200, {"access_token": "fresh", "expires_in": 3600}))

    seen = {}

    def fake_request(method, url, headers=None, params=None, timeout=None, **kwargs):
        seen.update(method=method, url=url, headers=headers, params=params)
        return FakeResponse(200, {"items": [{"summary": "Randori"}]})

    monkeypatch.setattr(google_calendar.requests, "request", fake_request)
    login(client, athlete.email)

    resp = client.get("/api/calendar/google/events")
    assert resp.status_code == 200
    assert resp.get_json() == {"events": [{"summary": "Randori"}]}
    assert token_endpoint.calls[0]["data"]["grant_type"] == "refresh_token"
    assert seen["method"] == "GET"
    assert seen["headers"] == {"Authorization": "Bearer fresh"}
    assert seen["params"]["orderBy"] == "startTime"
    assert db.session.get(CalendarTokens, athlete_id).refresh_token == "refresh-1"


def test_events_with_html_response(client, athlete, monkeypatch):
    db.session.add(CalendarTokens(
        user_id=athlete.id, access_token="live", refresh_token="refresh-1",
        expires_at=datetime.utcnow() + timedelta(hours=1),
    ))
    db.session.commit()
    monkeypatch.setattr(google_calendar.requests, "request", lambda *args, **kwargs: HtmlResponse(200))
    login(client, athlete.email)

    resp = client.get("/api/calendar/google/events")
    assert resp.status_code == 502
    assert resp.get_json()["msg"] == "Google Calendar request failed"


def test_events_without_connection(client, athlete):
    login(client, athlete.email)
    assert client.get("/api/calendar/google/events").status_code == 404


def test_disconnect(client, athlete):
    athlete_id = athlete.id
    db.session.add(CalendarTokens(user_id=athlete_id, access_token="a", expires_at=datetime.utcnow()))
    db.session.commit()
    login(client, athlete.email)

    assert client.delete("/api/calendar/google/tokens").status_code == 200
    assert db.session.get(CalendarTokens, athlete_id) is None
    assert client.delete("/api/calendar/google/tokens").status_code == 404


def test_calendar_page_shows_outcome(client, athlete):
    login(client, athlete.email)
    resp = client.get("/calendar?google_auth=success")
    assert resp.status_code == 200
    assert b"Google Calendar connected." in resp.data
