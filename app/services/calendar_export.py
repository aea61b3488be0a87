"""iCalendar export of club events and quick "add to my calendar" links."""

from datetime import datetime, time, timedelta, timezone
from urllib.parse import quote

from icalendar import Calendar, Event, vCalAddress, vText

from app.constants import DEFAULT_EXPORT_RANGE, EXPORT_RANGES

PRODID = "-//Coaching Club//Calendar Export//EN"
UID_DOMAIN = "coaching-club"


def _month_start(year, month):
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1)


def export_window(range_name, now=None):
    """(start, end) of an export range: from the first day of last month up to,
    not including, the first day after the range. ``all`` has no bounds."""
    if range_name not in EXPORT_RANGES:
        range_name = DEFAULT_EXPORT_RANGE
    months = EXPORT_RANGES[range_name]
    if months is None:
        return None, None

    now = now or datetime.utcnow()
    return _month_start(now.year, now.month - 1), _month_start(now.year, now.month + months)


def _utc(value):
    return value.replace(tzinfo=timezone.utc)


def _all_day_end(event):
    end = event.end_datetime
    if end.time() == time(0) and end.date() > event.start_datetime.date():
        return end.date()
    return end.date() + timedelta(days=1)


def _to_ical_event(event, stamp):
    item = Event()
    item.add("uid", f"{event.id}@{UID_DOMAIN}")
    item.add("dtstamp", stamp)
    if event.all_day:
        item.add("dtstart", event.start_datetime.date())
        item.add("dtend", _all_day_end(event))
    else:
        item.add("dtstart", _utc(event.start_datetime))
        item.add("dtend", _utc(event.end_datetime))
    item.add("summary", event.title)
    item.add("categories", [event.event_type.upper()])
    if event.description:
        item.add("description", event.description)
    if event.location:
        item.add("location", event.location)

    organizer = event.organizer
    if organizer is not None:
        address = vCalAddress(f"mailto:{organizer.email}")
        address.params["cn"] = vText(organizer.name)
        item.add("organizer", address)

    item.add("status", "CANCELLED" if event.status == "cancelled" else "CONFIRMED")
    item.add("transp", "OPAQUE")
    return item


def build_calendar(events, name="Coaching Club"):
    """Serialized VCALENDAR (bytes) holding ``events``; times are written in UTC."""
    cal = Calendar()
    cal.add("version", "2.0")
    cal.add("prodid", PRODID)
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")
    cal.add("X-WR-CALNAME", name)
    cal.add("X-WR-TIMEZONE", "UTC")

    stamp = datetime.now(timezone.utc)
    for event in events:
        cal.add_component(_to_ical_event(event, stamp))
    return cal.to_ical()


def calendar_links(event):
    fmt = "%Y%m%dT%H%M%SZ"
    start = event.start_datetime.strftime(fmt)
    end = event.end_datetime.strftime(fmt)
    title = quote(event.title, safe="")
    details = quote(event.description or "", safe="")
    location = quote(event.location or "", safe="")

    return {
        "google": (
            "https://calendar.google.com/calendar/render?action=TEMPLATE"
            f"&text={title}&dates={start}/{end}&details={details}&location={location}"
        ),
        "outlook": (
            "https://outlook.live.com/calendar/0/deeplink/compose"
            f"?subject={title}&startdt={start}&enddt={end}&body={details}&location={location}"
        ),
        "yahoo": (
            "https://calendar.yahoo.com/?v=60&view=d&type=20"
            f"&title={title}&st={start}&et={end}&desc={details}&in_loc={location}"
        ),
    }
