import logging
from flask import Blueprint, g, request
from werkzeug.exceptions import HTTPException
from brewhub.utils.responses import error

logger = logging.getLogger(__name__)

errors_bp = Blueprint("errors_bp", __name__)


@errors_bp.app_errorhandler(HTTPException)
def handle_http_exception(e):
    msg = e.description or getattr(e, "name", "HTTP Error")
    return error(msg, status=e.code, code=e.code)


@errors_bp.app_errorhandler(Exception)
def handle_unexpected_exception(e):
    logger.exception("Unhandled exception on %s %s", request.method, request.path)
    return error(
        "An unexpected error occurred. Please try again later.",
        status=500,
        code=500,
        request_id=getattr(g, "request_id", None),
    )
