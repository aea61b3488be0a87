"""
Pytest configuration and fixtures.

Every test gets a fresh application bound to an in-memory SQLite database;
tables are created before and dropped after each test.
"""
import pytest

from app import create_app
from app.extensions import db
from app.models import Account, Profile

PASSWORD = "password123"


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_account(app):
    def _make(email):
        account = Account(email=email)
        account.set_password(PASSWORD)
        db.session.add(account)
        db.session.commit()
        return account
    return _make


@pytest.fixture
def make_user(make_account):
    """Create an account with its profile. Defaults to an active athlete."""
    def _make(email, role="athlete", coach_level=None, active=True, name=None, managed_by=None, **extra):
        account = make_account(email)
        profile = Profile(
            id=account.id,
            email=email,
            name=name or email.split("@")[0].title(),
            role=role,
            coach_level=coach_level,
            active=active,
            managed_by=managed_by,
            **extra,
        )
        db.session.add(profile)
        db.session.commit()
        return profile
    return _make


@pytest.fixture
def super_admin(make_user):
    return make_user("admin@club.test", role="coach", coach_level="super_admin")


@pytest.fixture
def principal(make_user, super_admin):
    return make_user("principal@club.test", role="coach", coach_level="principal", managed_by=super_admin.id)


@pytest.fixture
def junior(make_user, principal):
    return make_user("junior@club.test", role="coach", coach_level="junior", managed_by=principal.id)


@pytest.fixture
def athlete(make_user):
    return make_user("athlete@club.test", category="Seniors", grade="Ceinture verte")


def login(client, email, password=PASSWORD):
    # Switching users on the same client: drop any existing session first,
    # since the request gate redirects an authenticated caller away from /login.
    client.post("/logout", json={})
    resp = client.post("/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp


def set_cookies(resp):
    return [header for header in resp.headers.getlist("Set-Cookie")]
