from marshmallow import fields, validate, validates_schema, ValidationError

from . import InputSchema

NOTIFICATION_TYPES = ("training", "motivation", "social", "task", "emergency")


class SubscriptionKeysSchema(InputSchema):
    p256dh = fields.String(required=True)
    auth = fields.String(required=True)


class SubscriptionSchema(InputSchema):
    endpoint = fields.Url(required=True, schemes={"https", "http"})
    keys = fields.Nested(SubscriptionKeysSchema, required=True)


class PushSubscribeSchema(InputSchema):
    subscription = fields.Nested(SubscriptionSchema, required=True)


class PushUnsubscribeSchema(InputSchema):
    endpoint = fields.String(required=True)


class NotificationActionSchema(InputSchema):
    action = fields.String(required=True)
    title = fields.String(required=True)
    icon = fields.String()


class NotificationPayloadSchema(InputSchema):
    title = fields.String(required=True)
    body = fields.String(required=True)
    icon = fields.String()
    badge = fields.String()
    image = fields.String()
    data = fields.Dict()
    actions = fields.List(fields.Nested(NotificationActionSchema))
    tag = fields.String()
    requireInteraction = fields.Boolean()
    silent = fields.Boolean()
    timestamp = fields.Integer()
    vibrate = fields.List(fields.Integer())


class SendNotificationSchema(InputSchema):
    targetUserIds = fields.List(fields.String(), load_default=None)
    notificationType = fields.String(load_default="motivation", validate=validate.OneOf(NOTIFICATION_TYPES))
    customPayload = fields.Nested(NotificationPayloadSchema, load_default=None)

    @validates_schema
    def require_targets_or_payload(self, data, **kwargs):
        targets = data.get("targetUserIds")
        if targets is not None and not targets and not data.get("customPayload"):
            raise ValidationError("targetUserIds or customPayload is required", "targetUserIds")
