from decimal import Decimal as D
import logging
from flask import Blueprint, request
from brewhub.utils.responses import ok
from brewhub.utils.jwt import create_access_token
from models import db
from models.profile import Profile
from models.vendor import Vendor
from models.product import Product


test_support_bp = Blueprint("test_support_bp", __name__)


@test_support_bp.route("/__ok", methods=["GET"])
def __ok():
    return ok({"ping": "pong"})


@test_support_bp.route("/__boom", methods=["GET"])
def __boom():
    raise RuntimeError("boom")


@test_support_bp.route("/__log", methods=["GET"])
def __log():
    logging.getLogger(__name__).info("test log line")
    return ok({"logged": True})


@test_support_bp.route("/__auth/login_stub", methods=["POST"])
def __login_stub():
    """Create the profile if needed and mint a provider-style token for it."""
    j = request.get_json() or {}
    user_id = j.get("user_id", "test-user")
    role = j.get("role", "customer")
    profile = db.session.get(Profile, user_id)
    if profile is None:
        db.session.add(Profile(user_id=user_id, role=role, full_name=j.get("full_name")))
    else:
        profile.role = role
    db.session.commit()
    return ok({"access": create_access_token(user_id)})


@test_support_bp.route("/__seed/vendor", methods=["POST"])
def __seed_vendor():
    """
    Body:
    {
      "owner_id": "v1",
      "name": "Taproom",
      "delivery_fee": 3,
      "min_order": 15,
      "is_active": true,
      "products": [{"name": "A", "price": 10}, {"name": "B", "price": 5}]
    }
    Returns: {"vendor_id": ..., "product_ids": [...]}
    """
    j = request.get_json() or {}
    owner_id = j.get("owner_id", "v1")
    if db.session.get(Profile, owner_id) is None:
        db.session.add(Profile(user_id=owner_id, role="vendor"))
        db.session.flush()
    vendor = Vendor(
        owner_id=owner_id,
        name=j.get("name", "Taproom"),
        category=j.get("category", "brewery"),
        delivery_fee=D(str(j.get("delivery_fee", 0))),
        min_order=D(str(j.get("min_order", 0))),
        is_active=j.get("is_active", True),
    )
    db.session.add(vendor)
    db.session.flush()
    product_ids = []
    for p in j.get("products", [{"name": "A", "price": 10}]):
        product = Product(
            vendor_id=vendor.id,
            name=p.get("name", "A"),
            price=D(str(p.get("price", 10))),
            category=p.get("category"),
            is_available=p.get("is_available", True),
        )
        db.session.add(product)
        db.session.flush()
        product_ids.append(product.id)
    db.session.commit()
    return ok({"vendor_id": vendor.id, "product_ids": product_ids})
