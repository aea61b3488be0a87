import uuid
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from app.extensions import db

ACCOUNTS_TABLE = "accounts"


def new_id():
    return str(uuid.uuid4())


class Account(db.Model):
    """Authentication identity. The profile of an account shares its id."""
    __tablename__ = ACCOUNTS_TABLE

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_sign_in_at = db.Column(db.DateTime, nullable=True)

    profile = db.relationship("Profile", uselist=False, back_populates="account")

    # Helpers
    def set_password(self, password: str):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)
