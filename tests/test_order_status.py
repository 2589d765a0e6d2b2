from types import SimpleNamespace
import pytest

from models import db
from models.order import Order, OrderStatusLog
from brewhub.services.order_status import (
    InvalidTransition,
    NotAuthorized,
    OrderNotFound,
    OrderStateError,
    OrderStatus,
    can_transition,
    is_terminal,
    next_status,
    transition_order,
)
from conftest import auth_header, obtain_token, seed_vendor


@pytest.mark.parametrize(
    "current,expected",
    [
        ("pending", OrderStatus.CONFIRMED),
        ("confirmed", OrderStatus.PREPARING),
        ("preparing", OrderStatus.READY),
        ("ready", OrderStatus.DELIVERED),
        ("delivered", None),
        ("cancelled", None),
    ],
)
def test_next_status(current, expected):
    assert next_status(current) == expected


def test_cancel_only_from_pending():
    assert can_transition("pending", "cancelled")
    for status in ("confirmed", "preparing", "ready", "delivered"):
        assert not can_transition(status, "cancelled")


def test_no_backward_or_skipping_moves():
    assert not can_transition("ready", "preparing")
    assert not can_transition("pending", "delivered")
    assert not can_transition("delivered", "pending")


def test_terminal_states():
    assert is_terminal("delivered")
    assert is_terminal("cancelled")
    assert not is_terminal("pending")


def test_unknown_status_rejected():
    with pytest.raises(OrderStateError):
        next_status("shipped")


# --- placing and moving orders through the API ---

def _place_order(client, api, customer_id="cust-1"):
    vendor_id, (pid,) = seed_vendor(client)
    headers = auth_header(obtain_token(client, customer_id, "customer"))
    client.post(f"{api}/customer/cart/add", json={"product_id": pid}, headers=headers)
    r = client.post(
        f"{api}/customer/order/confirm",
        json={"delivery_address": "12 Hop Lane", "phone": "555-0100"},
        headers=headers,
    )
    return r.get_json()["data"]["order_id"], headers


def _set_status(client, api, headers, order_id, status, scope="vendor"):
    return client.post(f"{api}/{scope}/orders/{order_id}/status", json={"status": status}, headers=headers)


def test_vendor_walks_order_forward(client, api):
    order_id, _ = _place_order(client, api)
    vendor = auth_header(obtain_token(client, "v1", "vendor"))

    listing = client.get(f"{api}/vendor/orders", headers=vendor).get_json()["data"]["orders"]
    assert listing[0]["next_action"] == "confirmed"

    for status in ("confirmed", "preparing", "ready", "delivered"):
        r = _set_status(client, api, vendor, order_id, status)
        assert r.status_code == 200, r.get_json()
        assert r.get_json()["data"]["status"] == status

    log = OrderStatusLog.query.filter_by(order_id=order_id, field="status").order_by(OrderStatusLog.id).all()
    assert [(row.old_value, row.new_value) for row in log] == [
        (None, "pending"),
        ("pending", "confirmed"),
        ("confirmed", "preparing"),
        ("preparing", "ready"),
        ("ready", "delivered"),
    ]
    assert all(row.updated_by == "v1" for row in log[1:])


def test_vendor_cannot_skip_or_go_back(client, api):
    order_id, _ = _place_order(client, api)
    vendor = auth_header(obtain_token(client, "v1", "vendor"))

    r = _set_status(client, api, vendor, order_id, "ready")
    assert r.status_code == 409
    _set_status(client, api, vendor, order_id, "confirmed")
    r = _set_status(client, api, vendor, order_id, "pending")
    assert r.status_code == 409
    assert db.session.get(Order, order_id).status == "confirmed"


def test_unknown_status_value(client, api):
    order_id, _ = _place_order(client, api)
    vendor = auth_header(obtain_token(client, "v1", "vendor"))
    r = _set_status(client, api, vendor, order_id, "shipped")
    assert r.status_code == 400


def test_other_vendor_cannot_touch_order(client, api):
    order_id, _ = _place_order(client, api)
    seed_vendor(client, owner_id="v2", name="Rival")
    rival = auth_header(obtain_token(client, "v2", "vendor"))
    r = _set_status(client, api, rival, order_id, "confirmed")
    assert r.status_code == 403
    assert db.session.get(Order, order_id).status == "pending"


def test_missing_order(client, api):
    seed_vendor(client)
    vendor = auth_header(obtain_token(client, "v1", "vendor"))
    assert _set_status(client, api, vendor, 999, "confirmed").status_code == 404


def test_customer_cancels_pending_order(client, api):
    order_id, headers = _place_order(client, api)

    detail = client.get(f"{api}/customer/orders/{order_id}", headers=headers).get_json()["data"]["order"]
    assert detail["cancellable"] is True
    assert detail["next_status"] == "confirmed"

    r = client.post(f"{api}/customer/orders/{order_id}/cancel", headers=headers)
    assert r.status_code == 200
    assert r.get_json()["data"]["status"] == "cancelled"

    detail = client.get(f"{api}/customer/orders/{order_id}", headers=headers).get_json()["data"]["order"]
    assert detail["cancellable"] is False
    assert [h["new_value"] for h in detail["history"]] == ["pending", "cancelled"]


def test_customer_cannot_cancel_confirmed_order(client, api):
    order_id, headers = _place_order(client, api)
    vendor = auth_header(obtain_token(client, "v1", "vendor"))
    _set_status(client, api, vendor, order_id, "confirmed")

    r = client.post(f"{api}/customer/orders/{order_id}/cancel", headers=headers)
    assert r.status_code == 409
    assert db.session.get(Order, order_id).status == "confirmed"


def test_customer_cannot_cancel_someone_elses_order(client, api):
    order_id, _ = _place_order(client, api)
    other = auth_header(obtain_token(client, "cust-2", "customer"))
    assert client.post(f"{api}/customer/orders/{order_id}/cancel", headers=other).status_code == 403
    assert client.get(f"{api}/customer/orders/{order_id}", headers=other).status_code == 404


def test_customer_cannot_advance_order(client):
    order_id, _ = _place_order(client, "/api/v1")
    actor = SimpleNamespace(user_id="cust-1", role="customer")
    with pytest.raises(NotAuthorized):
        transition_order(actor, order_id, "confirmed")


def test_transition_service_errors(client):
    order_id, _ = _place_order(client, "/api/v1")
    admin = SimpleNamespace(user_id="root", role="admin")
    with pytest.raises(OrderNotFound):
        transition_order(admin, 12345, "confirmed")
    with pytest.raises(InvalidTransition):
        transition_order(admin, order_id, "delivered")


def test_admin_can_cancel_any_pending_order(client, api):
    order_id, _ = _place_order(client, api)
    admin = auth_header(obtain_token(client, "root", "admin"))
    r = _set_status(client, api, admin, order_id, "cancelled", scope="admin")
    assert r.status_code == 200
    assert r.get_json()["data"]["status"] == "cancelled"


def test_vendor_payment_updates(client, api):
    order_id, _ = _place_order(client, api)
    vendor = auth_header(obtain_token(client, "v1", "vendor"))

    def pay(value):
        return client.post(
            f"{api}/vendor/orders/{order_id}/payment-status",
            json={"payment_status": value},
            headers=vendor,
        )

    assert pay("failed").status_code == 200
    r = pay("paid")
    assert r.status_code == 200
    assert r.get_json()["data"]["payment_status"] == "paid"
    assert pay("pending").status_code == 409

    log = OrderStatusLog.query.filter_by(order_id=order_id, field="payment_status").all()
    assert [(row.old_value, row.new_value) for row in log] == [("pending", "failed"), ("failed", "paid")]


def test_payment_update_refused_for_cancelled_order(client, api):
    order_id, headers = _place_order(client, api)
    client.post(f"{api}/customer/orders/{order_id}/cancel", headers=headers)
    vendor = auth_header(obtain_token(client, "v1", "vendor"))
    r = client.post(
        f"{api}/vendor/orders/{order_id}/payment-status",
        json={"payment_status": "paid"},
        headers=vendor,
    )
    assert r.status_code == 409
