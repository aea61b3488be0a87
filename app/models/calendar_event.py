import uuid
from datetime import datetime
from app.extensions import db


class CalendarEvent(db.Model):
    __tablename__ = "calendar_events"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    organizer_id = db.Column(db.String(36), db.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    event_type = db.Column(
        db.String(30),
        db.CheckConstraint("event_type IN ('training','competition','individual_session','meeting','other')"),
        nullable=False,
        default="other",
    )
    start_datetime = db.Column(db.DateTime, nullable=False, index=True)
    end_datetime = db.Column(db.DateTime, nullable=False)
    all_day = db.Column(db.Boolean, default=False, nullable=False)
    location = db.Column(db.String(255), nullable=True)
    max_participants = db.Column(db.Integer, nullable=True)
    visibility = db.Column(
        db.String(20),
        db.CheckConstraint("visibility IN ('public','private','coaches_only')"),
        nullable=False,
        default="public",
    )
    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('active','cancelled','completed')"),
        nullable=False,
        default="active",
        index=True,
    )
    color = db.Column(db.String(7), nullable=True)

    # Google Calendar link
    source = db.Column(db.String(20), nullable=False, default="manual")
    external_id = db.Column(db.String(255), nullable=True, index=True)
    external_link = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    organizer = db.relationship("Profile", foreign_keys=[organizer_id], back_populates="events_organized")
    participants = db.relationship(
        "EventParticipant",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="EventParticipant.created_at",
    )

    __table_args__ = (
        db.CheckConstraint("end_datetime > start_datetime", name="ck_calendar_events_ends_after_start"),
        db.CheckConstraint("max_participants IS NULL OR max_participants > 0", name="ck_calendar_events_capacity"),
        db.UniqueConstraint("organizer_id", "external_id", name="uq_calendar_events_organizer_external"),
    )

    def participant_ids(self):
        return {p.participant_id for p in self.participants}

    def __repr__(self):
        return f"<CalendarEvent {self.title} {self.start_datetime:%Y-%m-%d %H:%M}>"


class EventParticipant(db.Model):
    __tablename__ = "calendar_event_participants"

    event_id = db.Column(db.String(36), db.ForeignKey("calendar_events.id", ondelete="CASCADE"), primary_key=True)
    participant_id = db.Column(db.String(36), db.ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True, index=True)
    status = db.Column(
        db.String(20),
        db.CheckConstraint("status IN ('invited','accepted','declined','maybe','attended','absent')"),
        nullable=False,
        default="invited",
    )
    coach_notes = db.Column(db.Text, nullable=True)
    responded_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    event = db.relationship("CalendarEvent", back_populates="participants")
    participant = db.relationship("Profile", foreign_keys=[participant_id], back_populates="event_participations")
