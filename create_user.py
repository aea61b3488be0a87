"""Bootstrap the first super_admin coach.

    python create_user.py admin@example.com "Club Admin"

The password is read from CREATE_USER_PASSWORD or generated.
"""
import os
import secrets
import sys

from app import create_app, db
from app.constants import CoachLevel, UserRole
from app.models import Account, Profile

app = create_app()


def main(argv):
    if len(argv) < 2:
        print("usage: create_user.py EMAIL [NAME]")
        return 1

    email = argv[1].strip().lower()
    name = argv[2] if len(argv) > 2 else "Super Admin"
    password = os.getenv("CREATE_USER_PASSWORD") or secrets.token_urlsafe(12)

    with app.app_context():
        if Account.query.filter_by(email=email).first():
            print(f"User with email '{email}' already exists.")
            return 1

        account = Account(email=email)
        account.set_password(password)
        db.session.add(account)
        db.session.flush()  # assigns the id shared with the profile

        db.session.add(Profile(
            id=account.id,
            email=email,
            name=name,
            role=UserRole.coach.value,
            coach_level=CoachLevel.super_admin.value,
            active=True,
        ))
        db.session.commit()

    print("Super admin created successfully!")
    print(f"Email: {email}")
    if not os.getenv("CREATE_USER_PASSWORD"):
        print(f"Password: {password}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
