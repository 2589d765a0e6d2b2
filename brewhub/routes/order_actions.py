from flask import request
from brewhub.services.order_status import OrderStateError
from brewhub.utils import ok, error, transactional, internal_error_response


def apply_order_update(update, order_id, value, failure_message, success_message):
    """Run a status/payment update for the current user inside a transaction."""
    try:
        with transactional(failure_message):
            order = update(request.user, order_id, value)
        return ok(order.to_dict(), message=success_message)
    except OrderStateError as e:
        return error(str(e), status=e.status_code)
    except Exception:
        return internal_error_response()
