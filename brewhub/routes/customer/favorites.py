from flask import request
from brewhub.services import catalog
from brewhub.utils import ok, error, transactional, internal_error_response
from . import customer_bp


@customer_bp.route("/favorites", methods=["GET"])
def list_favorites():
    favorites = catalog.list_favorites(request.user.user_id)
    return ok({"vendors": [f.vendor.to_dict() for f in favorites]})


@customer_bp.route("/favorites/<int:vendor_id>", methods=["POST"])
def add_favorite(vendor_id):
    try:
        with transactional("Failed to add favorite"):
            catalog.add_favorite(request.user.user_id, vendor_id)
    except catalog.CatalogError as e:
        return error(str(e), status=e.status_code)
    except Exception:
        return internal_error_response()
    return ok(message="Vendor added to favorites")


@customer_bp.route("/favorites/<int:vendor_id>", methods=["DELETE"])
def remove_favorite(vendor_id):
    try:
        with transactional("Failed to remove favorite"):
            removed = catalog.remove_favorite(request.user.user_id, vendor_id)
    except Exception:
        return internal_error_response()
    if not removed:
        return error("Favorite not found", status=404)
    return ok(message="Vendor removed from favorites")
