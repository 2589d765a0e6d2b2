from flask import Blueprint, request
from brewhub.version import API_PREFIX
from brewhub.auth import UnknownRole
from brewhub.services.dashboards import dashboard_for
from brewhub.utils import ok, error, auth_required

me_bp = Blueprint("me", __name__, url_prefix=f"{API_PREFIX}/me")


@me_bp.before_request
@auth_required
def _enforce_auth():
    """Any authenticated profile may use these endpoints."""
    return None


@me_bp.route("", methods=["GET"])
def profile():
    return ok({"profile": request.user.to_dict()})


@me_bp.route("/dashboard", methods=["GET"])
def dashboard():
    try:
        data = dashboard_for(request.user)
    except UnknownRole as e:
        return error(str(e), status=403)
    return ok(data)
