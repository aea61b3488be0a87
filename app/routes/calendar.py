from datetime import datetime, timedelta

from flask import Blueprint, current_app, jsonify, redirect, render_template, request

from app.constants import EVENT_TYPES, EVENT_VISIBILITIES, EXPORT_RANGES
from app.services import calendar_events as event_service
from app.services import google_calendar as calendar_service
from app.services.errors import ServiceError
from app.services.profiles import get_profile
from app.services.session import current_account_id
from app.utils.decorators import login_required, profile_required, request_data

calendar_bp = Blueprint("calendar", __name__)

AUTH_MESSAGES = {
    "success": "Google Calendar connected.",
    "cancelled": "Google Calendar authorization was cancelled.",
    "error": "Google Calendar authorization failed.",
    "db_error": "Google Calendar tokens could not be saved.",
}


def _calendar_redirect(status):
    return redirect(f"{current_app.config['BASE_URL']}/calendar?google_auth={status}")


@calendar_bp.route("/calendar", methods=["GET"])
@login_required
def calendar_page():
    user_id = current_account_id()
    user = get_profile(user_id)
    return render_template(
        "calendar.html",
        user=user,
        events=event_service.list_events(user, start=datetime.utcnow() - timedelta(days=1)) if user else [],
        event_types=EVENT_TYPES,
        visibilities=EVENT_VISIBILITIES,
        export_ranges=EXPORT_RANGES,
        connected=calendar_service.get_tokens(user_id) is not None,
        auth_message=AUTH_MESSAGES.get(request.args.get("google_auth")),
    )


@calendar_bp.route("/api/calendar/google/auth", methods=["GET"])
@login_required
def google_auth():
    if not current_app.config.get("GOOGLE_CLIENT_ID"):
        return jsonify({
            "msg": "Google Calendar is not configured",
            "instructions": "Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET",
        }), 500

    if request.args.get("action") != "connect":
        return jsonify({"msg": "Unknown action, use ?action=connect"}), 400

    auth_url = calendar_service.generate_auth_url(current_account_id())
    return jsonify({"authUrl": auth_url, "msg": "Open this URL to authorize Google Calendar access"}), 200


@calendar_bp.route("/api/calendar/google/callback", methods=["GET"])
@login_required
def google_callback():
    user_id = current_account_id()

    if request.args.get("error"):
        current_app.logger.info("Google Calendar authorization cancelled by %s", user_id)
        return _calendar_redirect("cancelled")

    code = request.args.get("code")
    if not code:
        return _calendar_redirect("error")

    if calendar_service.read_state(request.args.get("state")) != user_id:
        current_app.logger.warning("Google Calendar callback with an invalid state for %s", user_id)
        return _calendar_redirect("error")

    try:
        tokens = calendar_service.exchange_code_for_tokens(code)
    except ServiceError:
        return _calendar_redirect("error")

    try:
        calendar_service.save_tokens(user_id, tokens)
    except ServiceError:
        return _calendar_redirect("db_error")

    current_app.logger.info("Google Calendar connected for %s", user_id)
    return _calendar_redirect("success")


@calendar_bp.route("/api/calendar/google/events", methods=["GET"])
@login_required
def google_events():
    max_results = min(request.args.get("max_results", 50, type=int), 250)
    events = calendar_service.fetch_user_events(current_account_id(), max_results=max_results)
    return jsonify({"events": events}), 200


@calendar_bp.route("/api/calendar/google/tokens", methods=["DELETE"])
@login_required
def google_disconnect():
    removed = calendar_service.delete_tokens(current_account_id())
    if not removed:
        return jsonify({"msg": "Google Calendar is not connected"}), 404
    return jsonify({"msg": "Google Calendar disconnected"}), 200


# ================================
# Sync
# ================================

@calendar_bp.route("/api/calendar/google/sync", methods=["POST"])
@profile_required
def google_import(current_user):
    log = calendar_service.import_events(current_user.id)
    return jsonify({
        "msg": "Google Calendar import finished",
        "imported": log.imported_count,
        "updated": log.updated_count,
        "errors": log.errors or [],
    }), 200


@calendar_bp.route("/api/calendar/google/sync", methods=["GET"])
@login_required
def google_sync_status():
    user_id = current_account_id()
    history = [
        {
            "syncedAt": log.synced_at.isoformat() + "Z",
            "imported": log.imported_count,
            "updated": log.updated_count,
            "errorCount": log.error_count,
        }
        for log in calendar_service.sync_history(user_id)
    ]
    return jsonify({
        "isConnected": calendar_service.get_tokens(user_id) is not None,
        "history": history,
    }), 200


@calendar_bp.route("/api/calendar/google/bidirectional-sync", methods=["POST"])
@profile_required
def google_push(current_user):
    data = request_data()
    action = data.get("action")
    event_id = data.get("eventId")

    if action == "sync_all":
        result = calendar_service.sync_all(current_user.id)
        return jsonify({"msg": f"{result['synced']} events synced to Google Calendar", **result}), 200

    if action not in ("sync_single", "delete_from_google"):
        return jsonify({"msg": "Unknown action"}), 400
    if not event_id:
        return jsonify({"msg": "eventId is required"}), 400

    if action == "sync_single":
        event = calendar_service.sync_single(event_id, current_user.id)
        return jsonify({"msg": "Event synced to Google Calendar", "externalId": event.external_id, "externalLink": event.external_link}), 200

    calendar_service.delete_from_google(event_id, current_user.id)
    return jsonify({"msg": "Event removed from Google Calendar"}), 200
