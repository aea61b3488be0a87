import uuid
from datetime import datetime
from app.extensions import db


class Note(db.Model):
    __tablename__ = "notes"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    coach_id = db.Column(db.String(36), db.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    athlete_id = db.Column(db.String(36), db.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    category = db.Column(
        db.String(20),
        db.CheckConstraint("category IN ('technique','mental','physique','tactique')"),
        nullable=False,
    )
    context = db.Column(
        db.String(20),
        db.CheckConstraint("context IN ('entrainement','competition')"),
        nullable=False,
    )
    content = db.Column(db.Text, nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    coach = db.relationship("Profile", foreign_keys=[coach_id], back_populates="notes_written")
    athlete = db.relationship("Profile", foreign_keys=[athlete_id], back_populates="notes_received")

    __table_args__ = (
        db.Index("idx_notes_athlete_date", "athlete_id", "date"),
    )
