import logging
from flask import request, current_app
from flask_limiter.util import get_remote_address
from extensions import limiter
from models import db
from models.order import Order, OrderStatusLog
from brewhub.metrics import CHECKOUTS
from brewhub.schemas.checkout import CheckoutRequest
from brewhub.services.checkout import CheckoutDetails, CheckoutError, place_order
from brewhub.services.order_status import OrderStatus, can_transition, next_status, transition_order
from brewhub.utils import ok, error, transactional, internal_error_response, validate_schema
from brewhub.routes.order_actions import apply_order_update
from . import customer_bp, current_cart

logger = logging.getLogger(__name__)


@customer_bp.route("/order/confirm", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["ORDER_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many orders from this IP",
)
@validate_schema(CheckoutRequest)
def confirm_order():
    user = request.user
    body = request.validated_data
    details = CheckoutDetails(
        delivery_address=body.delivery_address,
        phone=body.phone,
        notes=body.notes or "",
        payment_method=body.payment_method,
    )
    cart = current_cart()
    try:
        with transactional("Order confirmation failed"):
            new_order = place_order(user, cart, details)
    except CheckoutError as e:
        CHECKOUTS.labels("rejected").inc()
        return error(e.message, status=400, reason=e.code)
    except Exception:
        CHECKOUTS.labels("failed").inc()
        return internal_error_response()
    CHECKOUTS.labels("placed").inc()
    if len(cart):
        try:
            cart.clear()
        except OSError:
            logger.exception("order %s placed but cart %s could not be cleared", new_order.id, cart.key)
    return ok(
        {"order_id": new_order.id, "order": new_order.to_dict()},
        message="Order placed successfully",
    )


@customer_bp.route("/order/history", methods=["GET"])
def get_order_history():
    user = request.user
    orders = (
        Order.query.filter_by(user_id=user.user_id)
        .order_by(Order.created_at.desc())
        .all()
    )
    return ok({"orders": [o.to_dict() for o in orders]})


@customer_bp.route("/orders/<int:order_id>", methods=["GET"])
def get_order(order_id):
    user = request.user
    order = db.session.get(Order, order_id)
    if not order or order.user_id != user.user_id:
        return error("Order not found", status=404)
    history = (
        OrderStatusLog.query.filter_by(order_id=order.id)
        .order_by(OrderStatusLog.id.asc())
        .all()
    )
    data = order.to_dict()
    data["history"] = [h.to_dict() for h in history]
    data["cancellable"] = can_transition(order.status, OrderStatus.CANCELLED)
    upcoming = next_status(order.status)
    data["next_status"] = upcoming.value if upcoming else None
    return ok({"order": data})


@customer_bp.route("/orders/<int:order_id>/cancel", methods=["POST"])
def cancel_order_customer(order_id):
    return apply_order_update(
        transition_order,
        order_id,
        OrderStatus.CANCELLED,
        "Failed to cancel order",
        "Order cancelled",
    )
