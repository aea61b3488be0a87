from flask import Blueprint

coach_bp = Blueprint('coach', __name__)

from . import athletes, notes, recommendations, admin  # noqa: E402,F401
