import uuid
from datetime import datetime
from app.extensions import db


class Recommendation(db.Model):
    __tablename__ = "recommendations"

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    coach_id = db.Column(db.String(36), db.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    athlete_id = db.Column(db.String(36), db.ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    priority = db.Column(
        db.String(10),
        db.CheckConstraint("priority IN ('haute','moyenne','basse')"),
        nullable=False,
        default="moyenne",
    )
    read_status = db.Column(db.Boolean, default=False, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    coach = db.relationship("Profile", foreign_keys=[coach_id], back_populates="recommendations_written")
    athlete = db.relationship("Profile", foreign_keys=[athlete_id], back_populates="recommendations_received")

    def mark_as_read(self):
        self.read_status = True
        self.updated_at = datetime.utcnow()

    __table_args__ = (
        db.Index("idx_recommendations_athlete_read", "athlete_id", "read_status"),
    )
