from flask import Blueprint, current_app, redirect, send_from_directory

from app.services.access import DASHBOARD_PATH, LOGIN_PATH
from app.services.session import current_account_id

home_bp = Blueprint('home', __name__)


@home_bp.route('/')
def index():
    # Normally answered by the request gate already
    return redirect(DASHBOARD_PATH if current_account_id() else LOGIN_PATH)


@home_bp.route('/sw.js')
def service_worker():
    """Served from the root so the worker's scope covers the whole app."""
    response = send_from_directory(current_app.static_folder, 'sw.js', mimetype='application/javascript')
    response.headers['Service-Worker-Allowed'] = '/'
    response.headers['Cache-Control'] = 'no-cache'
    return response
