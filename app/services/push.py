"""Web Push delivery: subscriptions, payload shaping and bulk sending."""

import json
import logging
import random
import time
from datetime import datetime

from flask import current_app
from pywebpush import WebPushException, webpush
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.models import NotificationLog, PushSubscription
from .errors import StorageError
from .storage import commit

logger = logging.getLogger(__name__)

DEFAULT_ICON = "/icons/icon-192x192.png"
DEFAULT_BADGE = "/icons/icon-72x72.png"
DEFAULT_URL = "/dashboard"
DEFAULT_VIBRATE = [200, 100, 200]
PUSH_TTL = 24 * 60 * 60
PUSH_URGENCY = "normal"

# Push services answer these for subscriptions that no longer exist
GONE_STATUSES = (404, 410)

# Dialects whose INSERT supports ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


# ================================
# Subscriptions
# ================================

def save_subscription(user_id, endpoint, p256dh, auth):
    """Insert or update the subscription keyed on (user_id, endpoint).

    The conflict is resolved by the store, so concurrent subscribes for the
    same endpoint leave one row holding the last written keys.
    """
    now = datetime.utcnow()
    insert = _UPSERT_INSERTS[db.engine.dialect.name]
    stmt = insert(PushSubscription).values(
        user_id=user_id, endpoint=endpoint, p256dh=p256dh, auth=auth,
        created_at=now, updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=[PushSubscription.user_id, PushSubscription.endpoint],
        set_={"p256dh": stmt.excluded.p256dh, "auth": stmt.excluded.auth, "updated_at": now},
    )
    try:
        db.session.execute(stmt)
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Push subscription upsert failed for %s", user_id)
        raise StorageError()
    commit("Push subscription save failed")
    return PushSubscription.query.filter_by(user_id=user_id, endpoint=endpoint).one()


def remove_subscription(user_id, endpoint):
    deleted = PushSubscription.query.filter_by(user_id=user_id, endpoint=endpoint).delete()
    commit("Push subscription removal failed")
    return deleted


def subscriptions_for(user_ids):
    if not user_ids:
        return []
    return PushSubscription.query.filter(PushSubscription.user_id.in_(user_ids)).all()


# ================================
# Payloads
# ================================

def _now_ms():
    return int(time.time() * 1000)


def build_payload(payload):
    """Fill the defaults the service worker relies on."""
    data = {"url": DEFAULT_URL, "timestamp": _now_ms()}
    data.update(payload.get("data") or {})

    return {
        "title": payload["title"],
        "body": payload["body"],
        "icon": payload.get("icon") or DEFAULT_ICON,
        "badge": payload.get("badge") or DEFAULT_BADGE,
        "image": payload.get("image"),
        "data": data,
        "actions": payload.get("actions") or [],
        "tag": payload.get("tag"),
        "requireInteraction": bool(payload.get("requireInteraction", False)),
        "silent": bool(payload.get("silent", False)),
        "timestamp": payload.get("timestamp") or _now_ms(),
        "vibrate": payload.get("vibrate") or list(DEFAULT_VIBRATE),
    }


def training_reminder(minutes_until, location=None):
    return {
        "title": f"🥋 Training in {minutes_until} min",
        "body": f"Meet at {location}" if location else "Get your gear ready!",
        "tag": "training-reminder",
        "requireInteraction": True,
        "actions": [
            {"action": "view", "title": "View details"},
            {"action": "dismiss", "title": "OK"},
        ],
        "data": {"type": "training", "url": "/calendar"},
    }


def motivation_message(streak):
    messages = [
        f"🔥 {streak} days in a row! You're on fire!",
        f"💪 Amazing! {streak} consecutive days",
        f"🏆 {streak} days straight, you're a champion!",
    ]
    return {
        "title": "Congratulations!",
        "body": random.choice(messages),
        "tag": "motivation",
        "data": {"type": "motivation", "streak": streak, "url": "/dashboard"},
    }


def social_notification(actor_name, action, target):
    return {
        "title": "👥 Club activity",
        "body": f"{actor_name} {action} {target}",
        "tag": "social",
        "data": {"type": "social", "url": "/dashboard"},
    }


def task_reminder(task):
    return {
        "title": "📝 Don't forget!",
        "body": task,
        "tag": "task-reminder",
        "actions": [
            {"action": "complete", "title": "Mark as done"},
            {"action": "snooze", "title": "Remind me in 1h"},
        ],
        "data": {"type": "task", "url": "/notes"},
    }


def emergency_alert(message):
    return {
        "title": "⚠️ URGENT",
        "body": message,
        "tag": "emergency",
        "requireInteraction": True,
        "vibrate": [300, 200, 300, 200, 300],
        "data": {"type": "emergency", "url": "/dashboard"},
    }


PRESETS = {
    "training": lambda: training_reminder(60, "the main dojo"),
    "motivation": lambda: motivation_message(5),
    "social": lambda: social_notification("Coach", "commented on", "your performance"),
    "task": lambda: task_reminder("Log today's session"),
    "emergency": lambda: emergency_alert("Training cancelled - dojo closed"),
}


def preset_payload(notification_type):
    factory = PRESETS.get(notification_type)
    if factory is None:
        raise KeyError(notification_type)
    return factory()


# ================================
# Delivery
# ================================

def push_configured():
    return bool(current_app.config.get("VAPID_PUBLIC_KEY") and current_app.config.get("VAPID_PRIVATE_KEY"))


def send_notification(subscription, payload):
    """Deliver one notification. Returns True on success.

    A subscription the push service reports as gone is deleted.
    """
    message = build_payload(payload)
    headers = {"Urgency": PUSH_URGENCY}
    if message.get("tag"):
        headers["Topic"] = message["tag"]

    try:
        webpush(
            subscription_info=subscription.to_subscription_info(),
            data=json.dumps(message),
            vapid_private_key=current_app.config["VAPID_PRIVATE_KEY"],
            vapid_claims={"sub": current_app.config["VAPID_SUBJECT"]},
            ttl=PUSH_TTL,
            headers=headers,
            timeout=current_app.config["HTTP_TIMEOUT"],
        )
    except WebPushException as exc:
        status = getattr(exc.response, "status_code", None)
        logger.warning("Push delivery failed for subscription %s (status %s)", subscription.id, status)
        if status in GONE_STATUSES:
            db.session.delete(subscription)
            commit("Expired push subscription removal failed")
        return False

    logger.debug("Push notification delivered to subscription %s", subscription.id)
    return True


def send_bulk(subscriptions, payload):
    success = 0
    for subscription in subscriptions:
        if send_notification(subscription, payload):
            success += 1
    return {"success": success, "failed": len(subscriptions) - success}


def log_notification(sender_id, recipient_count, notification_type, payload, result):
    entry = NotificationLog(
        sender_id=sender_id,
        recipient_count=recipient_count,
        notification_type=notification_type,
        payload=payload,
        success_count=result["success"],
        failed_count=result["failed"],
        sent_at=datetime.utcnow(),
    )
    db.session.add(entry)
    commit("Notification log insert failed")
    return entry
