import logging
import random
import string
import time
from decimal import Decimal
from enum import Enum
from typing import NamedTuple

from models import db
from models.order import Order, OrderItem, OrderStatusLog
from models.product import Product
from models.vendor import Vendor
from brewhub.services.cart import CartStore

logger = logging.getLogger(__name__)


class CheckoutError(Exception):
    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    USSD = "ussd"
    CARD = "card"
    MOBILE_MONEY = "mobile_money"
    CASH_ON_DELIVERY = "cash_on_delivery"


# card and mobile money are listed to customers but not accepted yet
AVAILABLE_PAYMENT_METHODS = (
    PaymentMethod.BANK_TRANSFER,
    PaymentMethod.USSD,
    PaymentMethod.CASH_ON_DELIVERY,
)


class VendorTerms(NamedTuple):
    delivery_fee: Decimal
    min_order: Decimal

    @classmethod
    def of(cls, vendor) -> "VendorTerms":
        return cls(
            Decimal(str(vendor.delivery_fee or 0)),
            Decimal(str(vendor.min_order or 0)),
        )


class CheckoutDetails(NamedTuple):
    delivery_address: str
    phone: str
    notes: str = ""
    payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY


def validate_checkout(cart: CartStore, terms: VendorTerms, delivery_address, phone) -> None:
    """Raise CheckoutError naming the first violated checkout condition."""
    if len(cart) == 0:
        raise CheckoutError("empty_cart", "Cart is empty")
    if cart.total_price() < terms.min_order:
        raise CheckoutError(
            "below_min_order",
            f"Minimum order amount is {terms.min_order:.2f}",
        )
    if not isinstance(delivery_address, str) or not delivery_address.strip():
        raise CheckoutError("missing_delivery_address", "Delivery address is required")
    if not isinstance(phone, str) or not phone.strip():
        raise CheckoutError("missing_phone", "Phone number is required")


def payment_reference() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"BH_{int(time.time() * 1000)}_{suffix}"


def _checkout_vendor(cart: CartStore) -> Vendor:
    vendor_id = cart.vendor_id()
    if vendor_id is None:
        raise CheckoutError("empty_cart", "Cart is empty")
    vendor = db.session.get(Vendor, vendor_id)
    if vendor is None or not vendor.is_active:
        raise CheckoutError("vendor_unavailable", "This vendor is not taking orders right now")
    return vendor


def _check_products(cart: CartStore, vendor: Vendor) -> None:
    ids = [line.product_id for line in cart.items]
    products = {
        p.id: p
        for p in Product.query.filter(Product.id.in_(ids)).all()
    }
    for line in cart.items:
        product = products.get(line.product_id)
        if product is None or product.vendor_id != vendor.id or not product.is_available:
            raise CheckoutError(
                "product_unavailable", f"{line.name} is no longer available"
            )


def place_order(user, cart: CartStore, details: CheckoutDetails) -> Order:
    """Create one order and its items from ``cart`` and empty the cart.

    Runs inside the caller's transaction: the order, its items and the
    cleared cart snapshot are committed together or not at all. A cart on
    non-transactional storage is left untouched; the caller clears it once
    the commit has succeeded.
    """
    vendor = _checkout_vendor(cart)
    terms = VendorTerms.of(vendor)
    validate_checkout(cart, terms, details.delivery_address, details.phone)
    if details.payment_method not in AVAILABLE_PAYMENT_METHODS:
        raise CheckoutError("payment_method_unavailable", "Payment method is not available yet")
    _check_products(cart, vendor)

    lines = cart.items
    subtotal = sum((line.line_total for line in lines), Decimal("0"))
    order = Order(
        user_id=user.user_id,
        vendor_id=vendor.id,
        total_amount=subtotal + terms.delivery_fee,
        delivery_fee=terms.delivery_fee,
        status="pending",
        payment_status="pending",
        payment_method=details.payment_method.value,
        payment_reference=payment_reference(),
        delivery_address=details.delivery_address.strip(),
        phone=details.phone.strip(),
        notes=details.notes or None,
    )
    db.session.add(order)
    db.session.flush()

    for line in lines:
        db.session.add(
            OrderItem(
                order_id=order.id,
                product_id=line.product_id,
                name=line.name,
                quantity=line.quantity,
                unit_price=line.unit_price,
                total_price=line.line_total,
            )
        )
    db.session.add(
        OrderStatusLog(
            order_id=order.id,
            field="status",
            old_value=None,
            new_value="pending",
            updated_by=user.user_id,
        )
    )
    db.session.flush()

    if cart.transactional:
        cart.clear()
    logger.info(
        "order %s placed for vendor %s with %d item(s), total %s",
        order.id, vendor.id, len(lines), order.total_amount,
    )
    return order


__all__ = [
    "AVAILABLE_PAYMENT_METHODS",
    "CheckoutDetails",
    "CheckoutError",
    "PaymentMethod",
    "VendorTerms",
    "payment_reference",
    "place_order",
    "validate_checkout",
]
