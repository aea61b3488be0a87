from datetime import datetime
from app.extensions import db


class NotificationLog(db.Model):
    __tablename__ = "notification_logs"

    id = db.Column(db.Integer, primary_key=True)
    sender_id = db.Column(db.String(36), db.ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True, index=True)
    recipient_count = db.Column(db.Integer, default=0, nullable=False)
    notification_type = db.Column(db.String(30), nullable=False)
    payload = db.Column(db.JSON, default=dict)
    success_count = db.Column(db.Integer, default=0, nullable=False)
    failed_count = db.Column(db.Integer, default=0, nullable=False)
    sent_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
