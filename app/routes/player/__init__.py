# app/routes/player/__init__.py
from flask import Blueprint

athlete_bp = Blueprint("athlete", __name__)

from . import recommendations  # noqa: E402,F401
