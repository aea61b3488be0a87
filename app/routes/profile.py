from flask import Blueprint, current_app, jsonify, redirect, render_template, request, url_for
from marshmallow import ValidationError

from app.constants import ATHLETE_CATEGORIES, GRADES
from app.models import Account
from app.schemas import ProfileSchema, SetupProfileSchema
from app.services.profiles import create_own_profile, get_profile
from app.services.session import current_account_id
from app.extensions import db
from app.utils.decorators import login_required, profile_required, request_data

profile_bp = Blueprint("profile", __name__)
profile_schema = ProfileSchema()
setup_profile_schema = SetupProfileSchema()


@profile_bp.route("/profile", methods=["GET"])
@profile_required
def my_profile(current_user):
    if request.is_json:
        return jsonify(profile_schema.dump(current_user)), 200
    return render_template("profile/profile.html", user=current_user)


@profile_bp.route("/setup-profile", methods=["GET", "POST"])
@login_required
def setup_profile():
    account = db.session.get(Account, current_account_id())
    if get_profile(account.id) is not None:
        return redirect(url_for("dashboard.dashboard"))

    if request.method == "GET":
        return render_template(
            "profile/setup_profile.html",
            email=account.email,
            categories=ATHLETE_CATEGORIES,
            grades=GRADES,
        )

    try:
        data = setup_profile_schema.load(request_data())
    except ValidationError as err:
        if request.is_json:
            return jsonify({"msg": "Invalid input", "errors": err.messages}), 400
        return render_template(
            "profile/setup_profile.html",
            email=account.email,
            categories=ATHLETE_CATEGORIES,
            grades=GRADES,
            errors=err.messages,
        ), 400

    profile = create_own_profile(account, data)
    current_app.logger.info("Profile setup completed for %s", account.id)

    if request.is_json:
        return jsonify(profile_schema.dump(profile)), 201
    return redirect(url_for("dashboard.dashboard"))
