from sqlalchemy import func

from models import db
from models.order import Order
from models.product import Category, Product
from models.profile import Profile
from models.vendor import Vendor
from brewhub.auth import Role, dispatch, exhaustive
from brewhub.services.order_status import OrderStatus, is_terminal, next_status

RECENT_ORDERS = 10


def _status_counts(query):
    rows = (
        query.with_entities(Order.status, func.count(Order.id))
        .group_by(Order.status)
        .all()
    )
    counts = {status.value: 0 for status in OrderStatus}
    counts.update({status: count for status, count in rows})
    return counts


def _with_next_action(order):
    data = order.to_dict(include_items=False)
    upcoming = next_status(order.status)
    data["next_action"] = upcoming.value if upcoming else None
    return data


def customer_dashboard(profile):
    query = Order.query.filter_by(user_id=profile.user_id)
    recent = query.order_by(Order.created_at.desc()).limit(RECENT_ORDERS).all()
    return {
        "role": Role.CUSTOMER.value,
        "order_counts": _status_counts(query),
        "recent_orders": [o.to_dict() for o in recent],
        "vendor_application_status": profile.vendor_application_status,
    }


def vendor_dashboard(profile):
    vendor = Vendor.query.filter_by(owner_id=profile.user_id).first()
    if vendor is None:
        return {"role": Role.VENDOR.value, "vendor": None}
    query = Order.query.filter_by(vendor_id=vendor.id)
    open_orders = (
        query.filter(Order.status.in_([s.value for s in OrderStatus if not is_terminal(s)]))
        .order_by(Order.created_at.asc())
        .all()
    )
    return {
        "role": Role.VENDOR.value,
        "vendor": vendor.to_dict(),
        "product_count": Product.query.filter_by(vendor_id=vendor.id).count(),
        "order_counts": _status_counts(query),
        "open_orders": [_with_next_action(o) for o in open_orders],
    }


def admin_dashboard(profile):
    pending = Profile.query.filter_by(vendor_application_status="pending").count()
    return {
        "role": Role.ADMIN.value,
        "pending_applications": pending,
        "category_count": Category.query.count(),
        "vendor_count": Vendor.query.count(),
        "order_counts": _status_counts(db.session.query(Order)),
    }


DASHBOARDS = exhaustive({
    Role.ADMIN: admin_dashboard,
    Role.VENDOR: vendor_dashboard,
    Role.CUSTOMER: customer_dashboard,
})


def dashboard_for(profile):
    """Build the dashboard for the profile's role; unknown roles raise."""
    return dispatch(DASHBOARDS, profile.role, profile)
