from flask import Blueprint, request
from brewhub.version import API_PREFIX
from brewhub.services import catalog
from brewhub.utils import ok, error

public_bp = Blueprint("public", __name__, url_prefix=API_PREFIX)


@public_bp.route("/vendors", methods=["GET"])
def list_vendors():
    category = request.args.get("category")
    q = (request.args.get("q") or "").strip()
    vendors = catalog.active_vendors(category=category, query=q or None)
    return ok({"vendors": [v.to_dict() for v in vendors]})


@public_bp.route("/vendors/<int:vendor_id>", methods=["GET"])
def vendor_detail(vendor_id):
    try:
        vendor = catalog.get_vendor(vendor_id)
    except catalog.CatalogNotFound as e:
        return error(str(e), status=404)
    if not vendor.is_active:
        return error("Vendor not found", status=404)
    products = catalog.available_products(vendor.id)
    return ok({
        "vendor": vendor.to_dict(),
        "products": [p.to_dict() for p in products],
    })


@public_bp.route("/categories", methods=["GET"])
def list_categories():
    return ok({"categories": [c.to_dict() for c in catalog.active_categories()]})


@public_bp.route("/search", methods=["GET"])
def search():
    q = (request.args.get("q") or "").strip()
    if not q:
        return error("Search query required", status=400)
    return ok({
        "vendors": [v.to_dict() for v in catalog.active_vendors(query=q)],
        "products": [p.to_dict() for p in catalog.search_products(q)],
    })
