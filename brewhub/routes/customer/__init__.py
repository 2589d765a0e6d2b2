from flask import Blueprint, request, current_app
from brewhub.version import API_PREFIX
from brewhub.auth import Role
from brewhub.services.cart import CartStore, DatabaseCartStorage, FileCartStorage, user_cart_key
from brewhub.utils import auth_required, role_required

customer_bp = Blueprint("customer", __name__, url_prefix=f"{API_PREFIX}/customer")


@customer_bp.before_request
@auth_required
@role_required(Role.CUSTOMER)
def _enforce_customer_role():
    """Ensure the requester is an authenticated customer."""
    return None


def current_cart() -> CartStore:
    if current_app.config.get("CART_STORAGE_BACKEND") == "file":
        storage = FileCartStorage(current_app.config["CART_STORAGE_DIR"])
    else:
        storage = DatabaseCartStorage()
    return CartStore(storage, key=user_cart_key(request.user.user_id))


from . import cart  # noqa: E402
from . import orders  # noqa: E402
from . import favorites  # noqa: E402
from . import application  # noqa: E402
