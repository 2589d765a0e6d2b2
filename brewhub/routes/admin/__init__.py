from flask import Blueprint, request
from brewhub.version import API_PREFIX
from brewhub.auth import Role
from brewhub.schemas.admin import CategoryRequest, RoleChangeRequest
from brewhub.schemas.checkout import StatusUpdateRequest, PaymentStatusUpdateRequest
from brewhub.services import applications, catalog
from brewhub.services.order_status import transition_order, update_payment_status
from brewhub.utils import (
    ok,
    error,
    auth_required,
    role_required,
    transactional,
    internal_error_response,
    validate_schema,
)
from brewhub.routes.order_actions import apply_order_update
from models.profile import Profile
from models.order import Order

admin_bp = Blueprint("admin", __name__, url_prefix=f"{API_PREFIX}/admin")


@admin_bp.before_request
@auth_required
@role_required(Role.ADMIN)
def _enforce_admin_role():
    """Ensure the requester is an authenticated admin."""
    return None


# --- Vendor applications ---
@admin_bp.route("/applications", methods=["GET"])
def list_applications():
    pending = applications.pending_applications()
    return ok({"applications": [p.application_dict() for p in pending]})


@admin_bp.route("/applications/<user_id>/approve", methods=["POST"])
def approve_application(user_id):
    try:
        with transactional("Failed to approve application"):
            vendor = applications.approve_application(user_id)
    except applications.ApplicationError as e:
        return error(str(e), status=e.status_code)
    except Exception:
        return internal_error_response()
    return ok({"vendor": vendor.to_dict()}, message="Application approved")


@admin_bp.route("/applications/<user_id>/reject", methods=["POST"])
def reject_application(user_id):
    try:
        with transactional("Failed to reject application"):
            profile = applications.reject_application(user_id)
    except applications.ApplicationError as e:
        return error(str(e), status=e.status_code)
    except Exception:
        return internal_error_response()
    return ok(profile.application_dict(), message="Application rejected")


# --- Categories ---
@admin_bp.route("/categories", methods=["GET"])
def list_categories():
    return ok({"categories": [c.to_dict() for c in catalog.all_categories()]})


@admin_bp.route("/categories", methods=["POST"])
@validate_schema(CategoryRequest)
def add_category():
    body = request.validated_data
    try:
        with transactional("Failed to add category"):
            category = catalog.create_category(body.name, body.description, body.image_url)
    except catalog.CatalogError as e:
        return error(str(e), status=e.status_code)
    except Exception:
        return internal_error_response()
    return ok({"category": category.to_dict()}, message="Category added", status=201)


@admin_bp.route("/categories/<int:category_id>/toggle", methods=["POST"])
def toggle_category(category_id):
    try:
        with transactional("Failed to update category"):
            category = catalog.toggle_category(category_id)
    except catalog.CatalogError as e:
        return error(str(e), status=e.status_code)
    except Exception:
        return internal_error_response()
    state = "activated" if category.is_active else "deactivated"
    return ok({"category": category.to_dict()}, message=f"Category {state}")


# --- Orders ---
@admin_bp.route("/orders", methods=["GET"])
def list_orders():
    orders = Order.query.order_by(Order.id.desc()).limit(50).all()
    return ok({"orders": [o.to_dict(include_items=False) for o in orders]})


@admin_bp.route("/orders/<int:order_id>/status", methods=["POST"])
@validate_schema(StatusUpdateRequest)
def update_order_status(order_id):
    new_status = request.validated_data.status
    return apply_order_update(
        transition_order,
        order_id,
        new_status,
        "Failed to update order status",
        f"Order status changed to {new_status}",
    )


@admin_bp.route("/orders/<int:order_id>/payment-status", methods=["POST"])
@validate_schema(PaymentStatusUpdateRequest)
def update_order_payment(order_id):
    new_status = request.validated_data.payment_status
    return apply_order_update(
        update_payment_status,
        order_id,
        new_status,
        "Failed to update payment status",
        f"Payment status changed to {new_status}",
    )


# --- Users ---
@admin_bp.route("/users", methods=["GET"])
def list_users():
    users = Profile.query.order_by(Profile.created_at.desc()).limit(50).all()
    return ok({"users": [u.to_dict() for u in users]})


@admin_bp.route("/users/<user_id>/role", methods=["POST"])
@validate_schema(RoleChangeRequest)
def change_user_role(user_id):
    try:
        with transactional("Failed to change role"):
            profile = applications.change_role(user_id, request.validated_data.role)
    except applications.ApplicationError as e:
        return error(str(e), status=e.status_code)
    except Exception:
        return internal_error_response()
    return ok({"profile": profile.to_dict()}, message="Role updated")
