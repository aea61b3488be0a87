from datetime import datetime
from app.extensions import db

PROFILES_TABLE = "profiles"


class Profile(db.Model):
    __tablename__ = PROFILES_TABLE

    id = db.Column(db.String(36), db.ForeignKey("accounts.id", ondelete="CASCADE"), primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    role = db.Column(
        db.String(20),
        db.CheckConstraint("role IN ('coach','athlete')"),
        nullable=False,
        index=True,
    )
    coach_level = db.Column(
        db.String(20),
        db.CheckConstraint("coach_level IN ('super_admin','principal','junior')"),
        nullable=True,
        index=True,
    )
    active = db.Column(db.Boolean, default=False, nullable=False, index=True)
    managed_by = db.Column(db.String(36), db.ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)

    # Athlete details
    category = db.Column(db.String(50), nullable=True)
    grade = db.Column(db.String(50), nullable=True)
    weight = db.Column(db.Float, nullable=True)
    height = db.Column(db.Float, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    account = db.relationship("Account", back_populates="profile")
    manager = db.relationship("Profile", remote_side=[id], foreign_keys=[managed_by])

    notes_written = db.relationship("Note", foreign_keys="[Note.coach_id]", back_populates="coach", lazy="dynamic", cascade="all, delete-orphan")
    notes_received = db.relationship("Note", foreign_keys="[Note.athlete_id]", back_populates="athlete", lazy="dynamic", cascade="all, delete-orphan")
    recommendations_written = db.relationship("Recommendation", foreign_keys="[Recommendation.coach_id]", back_populates="coach", lazy="dynamic", cascade="all, delete-orphan")
    recommendations_received = db.relationship("Recommendation", foreign_keys="[Recommendation.athlete_id]", back_populates="athlete", lazy="dynamic", cascade="all, delete-orphan")
    events_organized = db.relationship("CalendarEvent", foreign_keys="[CalendarEvent.organizer_id]", back_populates="organizer", lazy="dynamic", cascade="all, delete-orphan")
    event_participations = db.relationship("EventParticipant", foreign_keys="[EventParticipant.participant_id]", back_populates="participant", lazy="dynamic", cascade="all, delete-orphan")

    __table_args__ = (
        db.CheckConstraint("role = 'coach' OR coach_level IS NULL", name="ck_profiles_athlete_has_no_level"),
        db.Index("idx_profiles_role_level", "role", "coach_level"),
    )

    # ------- helper properties -------
    @property
    def is_coach(self):
        return self.role == "coach"

    @property
    def is_athlete(self):
        return self.role == "athlete"

    @property
    def is_active_coach(self):
        return self.is_coach and bool(self.active)

    def __repr__(self):
        return f"<Profile {self.email} {self.role}/{self.coach_level}>"
