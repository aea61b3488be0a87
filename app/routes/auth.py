import re
from datetime import datetime

from flask import Blueprint, current_app, jsonify, redirect, render_template, request, url_for

from app.extensions import db, limiter
from app.models import Account
from app.services.session import end_session, start_session
from app.services.storage import commit
from app.utils.decorators import request_data

auth_bp = Blueprint("auth", __name__)

EMAIL_REGEX = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


def validate_password(password):
    """Validate password strength."""
    if len(password) < 8:
        return False, "Password must be at least 8 characters"
    if not re.search(r"[A-Za-z]", password) or not re.search(r"\d", password):
        return False, "Password must contain letters and numbers"
    return True, "Password is valid"


def _form_error(message, status):
    if request.is_json:
        return jsonify({"msg": message}), status
    return render_template("auth/login.html", error=message), status


@auth_bp.route("/login", methods=["GET"])
def login_page():
    return render_template("auth/login.html")


@auth_bp.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    data = request_data()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        return _form_error("Email and password are required", 400)

    account = Account.query.filter_by(email=email).first()
    if not account or not account.check_password(password):
        current_app.logger.info("Failed login attempt")
        return _form_error("Invalid email or password", 401)

    account.last_sign_in_at = datetime.utcnow()
    commit("Sign-in timestamp update failed")

    if request.is_json:
        response = jsonify({"msg": "Login successful"})
    else:
        response = redirect(url_for("dashboard.dashboard"))
    return start_session(response, account)


@auth_bp.route("/signup", methods=["POST"])
@limiter.limit("5 per hour")
def signup():
    data = request_data()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        return _form_error("Email and password are required", 400)
    if not re.match(EMAIL_REGEX, email) or len(email) > 255:
        return _form_error("Invalid email format", 400)

    is_valid, msg = validate_password(password)
    if not is_valid:
        return _form_error(msg, 400)

    if Account.query.filter_by(email=email).first():
        return _form_error("Registration failed", 400)

    account = Account(email=email)
    account.set_password(password)
    db.session.add(account)
    commit("Account creation failed")
    current_app.logger.info("Account %s created", account.id)

    # A fresh account has no profile yet; the gate sends it to setup-profile
    if request.is_json:
        response = jsonify({"msg": "Account created"})
        response.status_code = 201
    else:
        response = redirect(url_for("profile.setup_profile"))
    return start_session(response, account)


@auth_bp.route("/logout", methods=["POST"])
def logout():
    if request.is_json:
        response = jsonify({"msg": "Logged out"})
    else:
        response = redirect(url_for("auth.login_page"))
    return end_session(response)
