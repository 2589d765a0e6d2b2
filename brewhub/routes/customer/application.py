from flask import request
from brewhub.schemas.vendor import VendorApplicationRequest
from brewhub.services.applications import ApplicationError, submit_application
from brewhub.utils import ok, error, transactional, internal_error_response, validate_schema
from . import customer_bp


@customer_bp.route("/vendor-application", methods=["POST"])
@validate_schema(VendorApplicationRequest)
def apply_as_vendor():
    body = request.validated_data
    try:
        with transactional("Failed to submit vendor application"):
            profile = submit_application(
                request.user, body.business_name, body.description, body.category
            )
    except ApplicationError as e:
        return error(str(e), status=e.status_code)
    except Exception:
        return internal_error_response()
    return ok(profile.application_dict(), message="Application submitted for review")
