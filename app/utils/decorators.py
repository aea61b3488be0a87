# app/utils/decorators.py
from functools import wraps

from flask import jsonify, redirect, request, url_for

from app.services.access import LOGIN_PATH, SETUP_PROFILE_PATH
from app.services.profiles import get_profile
from app.services.session import current_account_id


def wants_json():
    """API paths and JSON bodies get JSON answers, everything else is a page."""
    return request.path.startswith("/api/") or request.is_json


def request_data():
    """Body of a JSON or form submission as a plain dict."""
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


def done(endpoint, body, status=200, **values):
    """JSON clients get ``body``, form submissions are redirected to ``endpoint``."""
    if request.is_json or not request.form:
        return jsonify(body), status
    return redirect(url_for(endpoint, **values))


def _current_profile():
    return get_profile(current_account_id())


def login_required(view_func):
    """Pages redirect to login, API endpoints answer 401."""
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        if current_account_id() is None:
            if wants_json():
                return jsonify({"msg": "Not authenticated"}), 401
            return redirect(LOGIN_PATH)
        return view_func(*args, **kwargs)
    return wrapper


def profile_required(view_func):
    """
    Requires a session and a completed profile; the profile is passed to the
    view as ``current_user``.
    """
    @wraps(view_func)
    @login_required
    def wrapper(*args, **kwargs):
        profile = _current_profile()
        if profile is None:
            if wants_json():
                return jsonify({"msg": "Profile not found"}), 403
            return redirect(SETUP_PROFILE_PATH)
        kwargs["current_user"] = profile
        return view_func(*args, **kwargs)
    return wrapper


def active_coach_required(view_func):
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        if current_account_id() is None:
            if wants_json():
                return jsonify({"msg": "Not authenticated"}), 401
            return redirect(LOGIN_PATH)

        profile = _current_profile()
        if profile is None or not profile.is_active_coach:
            return jsonify({"msg": "Active coach access required"}), 403

        kwargs["current_user"] = profile
        return view_func(*args, **kwargs)
    return wrapper
