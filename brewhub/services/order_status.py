"""Order lifecycle rules, enforced where status is written.

    pending -> confirmed -> preparing -> ready -> delivered
    pending -> cancelled

Payment status is simulated/manual: pending -> paid | failed, failed -> paid.
"""
import logging
from enum import Enum
from typing import Dict, FrozenSet, Optional

from models import db
from models.order import Order, OrderStatusLog
from models.vendor import Vendor
from brewhub.auth import Role, exhaustive, role_has_scope
from brewhub.metrics import ORDER_STATUS_CHANGES

logger = logging.getLogger(__name__)


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


ORDER_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

FORWARD_ACTIONS: Dict[OrderStatus, OrderStatus] = {
    OrderStatus.PENDING: OrderStatus.CONFIRMED,
    OrderStatus.CONFIRMED: OrderStatus.PREPARING,
    OrderStatus.PREPARING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.DELIVERED,
}

PAYMENT_TRANSITIONS: Dict[PaymentStatus, FrozenSet[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PAID}),
    PaymentStatus.PAID: frozenset(),
}


class OrderStateError(Exception):
    status_code = 400


class InvalidTransition(OrderStateError):
    status_code = 409


class NotAuthorized(OrderStateError):
    status_code = 403


class OrderNotFound(OrderStateError):
    status_code = 404


def _parse(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        raise OrderStateError(f"Invalid {enum_cls.__name__}: {value!r}") from None


def next_status(status) -> Optional[OrderStatus]:
    """The single forward action offered for ``status``, if any."""
    return FORWARD_ACTIONS.get(_parse(OrderStatus, status))


def can_transition(current, target) -> bool:
    return _parse(OrderStatus, target) in ORDER_TRANSITIONS[_parse(OrderStatus, current)]


def is_terminal(status) -> bool:
    return not ORDER_TRANSITIONS[_parse(OrderStatus, status)]


def _owned_vendor_id(actor) -> Optional[int]:
    vendor = Vendor.query.filter_by(owner_id=actor.user_id).first()
    return vendor.id if vendor else None


def _admin_may(actor, order, action) -> bool:
    return True


def _vendor_may(actor, order, action) -> bool:
    return role_has_scope(Role.VENDOR, action) and order.vendor_id == _owned_vendor_id(actor)


def _customer_may(actor, order, action) -> bool:
    return action == "cancel_own_order" and order.user_id == actor.user_id


_ACTOR_RULES = exhaustive({
    Role.ADMIN: _admin_may,
    Role.VENDOR: _vendor_may,
    Role.CUSTOMER: _customer_may,
})


def _authorize(actor, order: Order, action: str) -> None:
    role = Role.parse(actor.role)
    if not _ACTOR_RULES[role](actor, order, action):
        raise NotAuthorized("Unauthorized")


def _status_action(actor, target: OrderStatus) -> str:
    if target is OrderStatus.CANCELLED:
        if Role.parse(actor.role) is Role.CUSTOMER:
            return "cancel_own_order"
        return "cancel_order"
    return "advance_order"


def _locked_order(order_id) -> Order:
    order = (
        Order.query.filter_by(id=order_id)
        .with_for_update()
        .first()
    )
    if order is None:
        raise OrderNotFound("Order not found")
    return order


def transition_order(actor, order_id, new_status) -> Order:
    """Move an order to ``new_status`` if the lifecycle and actor allow it."""
    target = _parse(OrderStatus, new_status)
    order = _locked_order(order_id)
    _authorize(actor, order, _status_action(actor, target))
    current = _parse(OrderStatus, order.status)
    if target not in ORDER_TRANSITIONS[current]:
        raise InvalidTransition(
            f"Cannot move order from {current.value} to {target.value}"
        )
    order.status = target.value
    db.session.add(
        OrderStatusLog(
            order_id=order.id,
            field="status",
            old_value=current.value,
            new_value=target.value,
            updated_by=actor.user_id,
        )
    )
    ORDER_STATUS_CHANGES.labels("status", current.value, target.value).inc()
    logger.info("order %s status %s -> %s by %s", order.id, current.value, target.value, actor.user_id)
    return order


def update_payment_status(actor, order_id, new_status) -> Order:
    target = _parse(PaymentStatus, new_status)
    order = _locked_order(order_id)
    _authorize(actor, order, "update_payment")
    current = _parse(PaymentStatus, order.payment_status)
    if target not in PAYMENT_TRANSITIONS[current]:
        raise InvalidTransition(
            f"Cannot move payment from {current.value} to {target.value}"
        )
    if OrderStatus(order.status) is OrderStatus.CANCELLED:
        raise InvalidTransition("Order is cancelled")
    order.payment_status = target.value
    db.session.add(
        OrderStatusLog(
            order_id=order.id,
            field="payment_status",
            old_value=current.value,
            new_value=target.value,
            updated_by=actor.user_id,
        )
    )
    ORDER_STATUS_CHANGES.labels("payment_status", current.value, target.value).inc()
    logger.info("order %s payment %s -> %s by %s", order.id, current.value, target.value, actor.user_id)
    return order


__all__ = [
    "FORWARD_ACTIONS",
    "ORDER_TRANSITIONS",
    "PAYMENT_TRANSITIONS",
    "InvalidTransition",
    "NotAuthorized",
    "OrderNotFound",
    "OrderStateError",
    "OrderStatus",
    "PaymentStatus",
    "can_transition",
    "is_terminal",
    "next_status",
    "transition_order",
    "update_payment_status",
]
