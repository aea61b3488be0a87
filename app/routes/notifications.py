from flask import Blueprint, current_app, jsonify

from app.schemas import PushSubscribeSchema, PushUnsubscribeSchema, SendNotificationSchema
from app.services import push as push_service
from app.services.profiles import get_profile
from app.services.session import current_account_id
from app.utils.decorators import login_required, request_data

notifications_bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")

push_subscribe_schema = PushSubscribeSchema()
push_unsubscribe_schema = PushUnsubscribeSchema()
send_notification_schema = SendNotificationSchema()


def _not_configured():
    return jsonify({"msg": "Push notifications are not configured"}), 503


@notifications_bp.route("/vapid-public-key", methods=["GET"])
def vapid_public_key():
    if not push_service.push_configured():
        return _not_configured()
    return jsonify({"publicKey": current_app.config["VAPID_PUBLIC_KEY"]}), 200


@notifications_bp.route("/subscribe", methods=["POST"])
@login_required
def subscribe():
    data = push_subscribe_schema.load(request_data())
    subscription = data["subscription"]
    push_service.save_subscription(
        current_account_id(),
        subscription["endpoint"],
        subscription["keys"]["p256dh"],
        subscription["keys"]["auth"],
    )
    return jsonify({"msg": "Subscription saved"}), 200


@notifications_bp.route("/subscribe", methods=["DELETE"])
@login_required
def unsubscribe():
    data = push_unsubscribe_schema.load(request_data())
    push_service.remove_subscription(current_account_id(), data["endpoint"])
    return jsonify({"msg": "Subscription removed"}), 200


@notifications_bp.route("/send", methods=["POST"])
@login_required
def send():
    if not push_service.push_configured():
        return _not_configured()

    sender_id = current_account_id()
    data = send_notification_schema.load(request_data())
    targets = data["targetUserIds"] if data["targetUserIds"] is not None else [sender_id]

    if any(target != sender_id for target in targets):
        sender = get_profile(sender_id)
        if sender is None or not sender.is_active_coach:
            return jsonify({"msg": "Only active coaches can notify other users"}), 403

    subscriptions = push_service.subscriptions_for(targets)
    if not subscriptions:
        return jsonify({"msg": "No subscription found", "stats": {"success": 0, "failed": 0}}), 200

    if data["customPayload"]:
        payload, notification_type = data["customPayload"], "custom"
    else:
        notification_type = data["notificationType"]
        payload = push_service.preset_payload(notification_type)

    result = push_service.send_bulk(subscriptions, payload)
    push_service.log_notification(sender_id, len(targets), notification_type, payload, result)
    current_app.logger.info(
        "Notification %s sent by %s: %s delivered, %s failed",
        notification_type, sender_id, result["success"], result["failed"],
    )

    return jsonify({
        "msg": f"{result['success']} notifications sent, {result['failed']} failed",
        "stats": result,
    }), 200
