from flask import request, current_app
from models import db
from models.product import Product
from models.vendor import Vendor
from brewhub.schemas.cart import AddToCartRequest, UpdateCartRequest, RemoveFromCartRequest
from brewhub.services.checkout import VendorTerms
from brewhub.utils import ok, error, transactional, internal_error_response, validate_schema
from . import customer_bp, current_cart


def _cart_view(cart):
    data = cart.to_dict()
    vendor = db.session.get(Vendor, cart.vendor_id()) if cart.vendor_id() else None
    if vendor is not None:
        terms = VendorTerms.of(vendor)
        data["vendor"] = {"id": vendor.id, "name": vendor.name}
        data["delivery_fee"] = float(terms.delivery_fee)
        data["min_order"] = float(terms.min_order)
        data["meets_min_order"] = cart.total_price() >= terms.min_order
        data["grand_total"] = float(cart.total_price() + terms.delivery_fee)
    return data


@customer_bp.route("/cart/add", methods=["POST"])
@validate_schema(AddToCartRequest)
def add_to_cart():
    body = request.validated_data
    product = db.session.get(Product, body.product_id)
    if not product or not product.is_available or not product.vendor.is_active:
        return error("Product not available", status=404)
    max_qty = current_app.config["MAX_QUANTITY_PER_ITEM"]
    cart = current_cart()
    existing = cart.line(product.id)
    same_vendor = cart.vendor_id() in (None, product.vendor_id)
    if same_vendor and (existing.quantity if existing else 0) + body.quantity > max_qty:
        return error(f"Max limit is {max_qty} units per item", status=400)
    try:
        with transactional("Failed to add to cart"):
            outcome = cart.add_item(product, body.quantity)
    except Exception:
        return internal_error_response()
    if not outcome.added:
        return error(outcome.message, status=409, cart=_cart_view(cart))
    return ok(_cart_view(cart), message=outcome.message)


@customer_bp.route("/cart/update", methods=["POST"])
@validate_schema(UpdateCartRequest)
def update_cart_quantity():
    body = request.validated_data
    max_qty = current_app.config["MAX_QUANTITY_PER_ITEM"]
    if body.quantity > max_qty:
        return error(f"Quantity must be at most {max_qty}", status=400)
    cart = current_cart()
    if cart.line(body.product_id) is None:
        return error("Item not found in cart", status=404)
    try:
        with transactional("Failed to update cart quantity"):
            cart.set_quantity(body.product_id, body.quantity)
    except Exception:
        return internal_error_response()
    return ok(_cart_view(cart), message="Cart quantity updated")


@customer_bp.route("/cart/view", methods=["GET"])
def view_cart():
    return ok(_cart_view(current_cart()))


@customer_bp.route("/cart/remove", methods=["POST"])
@validate_schema(RemoveFromCartRequest)
def remove_item():
    cart = current_cart()
    try:
        with transactional("Failed to remove cart item"):
            removed = cart.remove_item(request.validated_data.product_id)
    except Exception:
        return internal_error_response()
    if not removed:
        return error("Item not found", status=404)
    return ok(_cart_view(cart), message="Item removed")


@customer_bp.route("/cart/clear", methods=["POST"])
def clear_cart():
    cart = current_cart()
    try:
        with transactional("Failed to clear cart"):
            cart.clear()
    except Exception:
        return internal_error_response()
    return ok(_cart_view(cart), message="Cart cleared")
