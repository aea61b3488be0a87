"""Google Calendar OAuth 2.0 (authorization-code flow), event import and push-back."""

import logging
from datetime import date, datetime, time, timedelta, timezone
from urllib.parse import urlencode

import requests
from flask import current_app
from itsdangerous import BadSignature, URLSafeTimedSerializer

from app.extensions import db
from app.constants import EVENT_COLORS, TITLE_MAX_LENGTH
from app.models import CalendarEvent, CalendarTokens, GoogleCalendarSync
from .errors import NotFound, ProviderError, ServiceError
from .storage import commit

logger = logging.getLogger(__name__)

AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
EVENTS_URL = "https://www.googleapis.com/calendar/v3/calendars/primary/events"
CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar"
CALLBACK_PATH = "/api/calendar/google/callback"
STATE_SALT = "google-calendar-oauth"
IMPORT_DAYS_BEFORE = 30
IMPORT_DAYS_AFTER = 90
IMPORT_MAX_RESULTS = 100


class CalendarNotConfigured(ServiceError):
    status_code = 500
    default_message = "Google Calendar is not configured"


def redirect_uri():
    return current_app.config["BASE_URL"] + CALLBACK_PATH


def _serializer():
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=STATE_SALT)


def make_state(user_id):
    return _serializer().dumps({"uid": user_id})


def read_state(state):
    """Return the user id a state was issued for, or None when invalid or expired."""
    if not state:
        return None
    try:
        data = _serializer().loads(state, max_age=current_app.config["GOOGLE_OAUTH_STATE_MAX_AGE"])
    except BadSignature:
        return None
    return data.get("uid") if isinstance(data, dict) else None


def generate_auth_url(user_id):
    client_id = current_app.config.get("GOOGLE_CLIENT_ID")
    if not client_id:
        raise CalendarNotConfigured()

    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri(),
        "response_type": "code",
        "scope": CALENDAR_SCOPE,
        "access_type": "offline",
        "prompt": "consent",
        "state": make_state(user_id),
    }
    return f"{AUTH_URL}?{urlencode(params)}"


def _json_body(resp, message):
    try:
        body = resp.json()
    except ValueError:
        logger.error("Google answered with a body that is not JSON")
        raise ProviderError(message)
    if not isinstance(body, dict):
        logger.error("Google answered with an unexpected JSON body")
        raise ProviderError(message)
    return body


def _token_request(data):
    payload = {
        "client_id": current_app.config.get("GOOGLE_CLIENT_ID"),
        "client_secret": current_app.config.get("GOOGLE_CLIENT_SECRET"),
    }
    payload.update(data)
    try:
        resp = requests.post(TOKEN_URL, data=payload, timeout=current_app.config["HTTP_TIMEOUT"])
    except requests.RequestException as exc:
        logger.error("Google token endpoint unreachable: %s", exc.__class__.__name__)
        raise ProviderError("Google token request failed")

    if resp.status_code != 200:
        logger.error("Google token endpoint answered %s", resp.status_code)
        raise ProviderError("Google token request failed")

    body = _json_body(resp, "Google token request failed")
    if not body.get("access_token"):
        logger.error("Google token response without an access token")
        raise ProviderError("Google token request failed")
    return body


def exchange_code_for_tokens(code):
    return _token_request({
        "code": code,
        "grant_type": "authorization_code",
        "redirect_uri": redirect_uri(),
    })


def refresh_access_token(refresh_token):
    return _token_request({
        "refresh_token": refresh_token,
        "grant_type": "refresh_token",
    })


# ================================
# Token storage
# ================================

def save_tokens(user_id, tokens):
    """Upsert keyed on user_id. Google omits refresh_token on refresh, keep the stored one then."""
    expires_at = datetime.utcnow() + timedelta(seconds=int(tokens.get("expires_in", 3600)))

    row = db.session.get(CalendarTokens, user_id)
    if row is None:
        row = CalendarTokens(user_id=user_id)
        db.session.add(row)
    row.access_token = tokens["access_token"]
    if tokens.get("refresh_token"):
        row.refresh_token = tokens["refresh_token"]
    row.expires_at = expires_at
    row.updated_at = datetime.utcnow()

    commit("Google Calendar token save failed")
    return row


def get_tokens(user_id):
    return db.session.get(CalendarTokens, user_id)


def delete_tokens(user_id):
    row = db.session.get(CalendarTokens, user_id)
    if row is None:
        return False
    db.session.delete(row)
    commit("Google Calendar token removal failed")
    logger.info("Google Calendar disconnected for %s", user_id)
    return True


def valid_access_token(user_id):
    row = get_tokens(user_id)
    if row is None:
        raise NotFound("Google Calendar is not connected")

    if row.is_expired():
        if not row.refresh_token:
            raise ProviderError("Google Calendar access expired, reconnect the calendar")
        row = save_tokens(user_id, refresh_access_token(row.refresh_token))
        logger.info("Google Calendar access token refreshed for %s", user_id)
    return row.access_token


# ================================
# Calendar API
# ================================

def _calendar_call(method, user_id, url, ok=(200,), **kwargs):
    access_token = valid_access_token(user_id)
    try:
        resp = requests.request(
            method,
            url,
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=current_app.config["HTTP_TIMEOUT"],
            **kwargs,
        )
    except requests.RequestException as exc:
        logger.error("Google Calendar unreachable: %s", exc.__class__.__name__)
        raise ProviderError("Google Calendar request failed")

    if resp.status_code not in ok:
        logger.error("Google Calendar %s request answered %s", method, resp.status_code)
        raise ProviderError("Google Calendar request failed")
    return resp


def _rfc3339(value):
    return value.replace(microsecond=0).isoformat() + "Z"


def fetch_user_events(user_id, time_min=None, time_max=None, max_results=50):
    params = {
        "timeMin": _rfc3339(time_min or datetime.utcnow()),
        "maxResults": max_results,
        "singleEvents": "true",
        "orderBy": "startTime",
    }
    if time_max:
        params["timeMax"] = _rfc3339(time_max)
    resp = _calendar_call("GET", user_id, EVENTS_URL, params=params)
    return _json_body(resp, "Google Calendar request failed").get("items", [])


def _parse_google_time(value):
    """Naive UTC datetime and all-day flag from a Google ``start``/``end`` object."""
    if value.get("dateTime"):
        parsed = datetime.fromisoformat(value["dateTime"].replace("Z", "+00:00"))
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed, False
    return datetime.combine(date.fromisoformat(value["date"]), time(0)), True


def convert_google_event(item):
    """Column values of a local event mirroring a Google event. Raises ValueError when unusable."""
    if not item.get("id") or "start" not in item or "end" not in item:
        raise ValueError("Event without an id or dates")
    start, all_day = _parse_google_time(item["start"])
    end, _ = _parse_google_time(item["end"])
    if end <= start:
        raise ValueError("Event ends before it starts")

    return {
        "title": (item.get("summary") or "(No title)")[:TITLE_MAX_LENGTH],
        "description": item.get("description"),
        "location": (item.get("location") or "")[:255] or None,
        "start_datetime": start,
        "end_datetime": end,
        "all_day": all_day,
        "status": "cancelled" if item.get("status") == "cancelled" else "active",
        "external_id": item["id"],
        "external_link": item.get("htmlLink"),
    }


def to_google_event(event):
    if event.all_day:
        start = {"date": event.start_datetime.date().isoformat()}
        end_date = event.end_datetime.date()
        if end_date <= event.start_datetime.date() or event.end_datetime.time() != time(0):
            end_date += timedelta(days=1)
        end = {"date": end_date.isoformat()}
    else:
        start = {"dateTime": _rfc3339(event.start_datetime), "timeZone": "UTC"}
        end = {"dateTime": _rfc3339(event.end_datetime), "timeZone": "UTC"}

    body = {"summary": event.title, "start": start, "end": end}
    if event.description:
        body["description"] = event.description
    if event.location:
        body["location"] = event.location
    return body


# ================================
# Sync
# ================================

def import_events(user_id, now=None):
    """Copy the user's Google events (30 days back, 90 ahead) into the club calendar.

    Imported events are private to the user and keyed on the Google event id,
    so running the import again updates them in place.
    """
    now = now or datetime.utcnow()
    items = fetch_user_events(
        user_id,
        time_min=now - timedelta(days=IMPORT_DAYS_BEFORE),
        time_max=now + timedelta(days=IMPORT_DAYS_AFTER),
        max_results=IMPORT_MAX_RESULTS,
    )

    imported, updated, errors = 0, 0, []
    for item in items:
        try:
            values = convert_google_event(item)
        except (KeyError, ValueError) as exc:
            errors.append({"eventId": item.get("id"), "title": item.get("summary"), "error": str(exc)})
            continue

        event = CalendarEvent.query.filter_by(organizer_id=user_id, external_id=values["external_id"]).first()
        if event is None:
            db.session.add(CalendarEvent(
                organizer_id=user_id,
                event_type="other",
                visibility="private",
                source="google_calendar",
                color=EVENT_COLORS["other"],
                **values,
            ))
            imported += 1
        else:
            for key, value in values.items():
                setattr(event, key, value)
            event.updated_at = datetime.utcnow()
            updated += 1

    log = GoogleCalendarSync(
        user_id=user_id,
        imported_count=imported,
        updated_count=updated,
        error_count=len(errors),
        errors=errors or None,
    )
    db.session.add(log)
    commit("Google Calendar import failed")
    logger.info("Google Calendar import for %s: %s new, %s updated, %s errors", user_id, imported, updated, len(errors))
    return log


def sync_history(user_id, limit=10):
    return (
        GoogleCalendarSync.query.filter_by(user_id=user_id)
        .order_by(GoogleCalendarSync.synced_at.desc(), GoogleCalendarSync.id.desc())
        .limit(limit)
        .all()
    )


def _organized_event(event_id, user_id):
    event = db.session.get(CalendarEvent, event_id)
    if event is None or event.organizer_id != user_id:
        raise NotFound("Event not found")
    return event


def push_event_to_google(event, user_id):
    """Create or update the Google copy of a local event and link the two."""
    body = to_google_event(event)
    if event.external_id:
        resp = _calendar_call("PUT", user_id, f"{EVENTS_URL}/{event.external_id}", json=body)
    else:
        resp = _calendar_call("POST", user_id, EVENTS_URL, ok=(200, 201), json=body)

    remote = _json_body(resp, "Google Calendar request failed")
    if event.external_id is None:
        event.external_id = remote.get("id")
        event.source = "bidirectional"
    event.external_link = remote.get("htmlLink", event.external_link)
    commit("Google Calendar link save failed")
    logger.info("Event %s pushed to Google Calendar for %s", event.id, user_id)
    return event


def sync_single(event_id, user_id):
    return push_event_to_google(_organized_event(event_id, user_id), user_id)


def sync_all(user_id, now=None):
    """Push every upcoming active event the user organizes; failures are counted, not raised."""
    now = now or datetime.utcnow()
    events = (
        CalendarEvent.query.filter(
            CalendarEvent.organizer_id == user_id,
            CalendarEvent.status == "active",
            CalendarEvent.start_datetime >= now,
        )
        .order_by(CalendarEvent.start_datetime)
        .all()
    )

    synced, errors = 0, []
    for event in events:
        try:
            push_event_to_google(event, user_id)
        except ServiceError as exc:
            errors.append({"eventId": event.id, "title": event.title, "error": exc.message})
        else:
            synced += 1
    return {"synced": synced, "errors": errors}


def delete_from_google(event_id, user_id):
    """Remove the Google copy of an event; the local event stays, unlinked."""
    event = _organized_event(event_id, user_id)
    if event.external_id:
        # Already gone on Google's side
        _calendar_call("DELETE", user_id, f"{EVENTS_URL}/{event.external_id}", ok=(200, 204, 404, 410))
    event.external_id = None
    event.external_link = None
    event.source = "manual"
    commit("Google Calendar unlink failed")
    return event
