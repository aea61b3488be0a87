from datetime import datetime, timedelta
from app.extensions import db


class CalendarTokens(db.Model):
    __tablename__ = "google_calendar_tokens"

    user_id = db.Column(db.String(36), db.ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True)
    access_token = db.Column(db.Text, nullable=False)
    refresh_token = db.Column(db.Text, nullable=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def is_expired(self, leeway_seconds=60):
        return datetime.utcnow() + timedelta(seconds=leeway_seconds) >= self.expires_at
