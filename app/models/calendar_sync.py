from datetime import datetime
from app.extensions import db


class GoogleCalendarSync(db.Model):
    """One Google Calendar import run and its outcome."""
    __tablename__ = "google_calendar_syncs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(36), db.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    imported_count = db.Column(db.Integer, default=0, nullable=False)
    updated_count = db.Column(db.Integer, default=0, nullable=False)
    error_count = db.Column(db.Integer, default=0, nullable=False)
    errors = db.Column(db.JSON, nullable=True)
    synced_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
