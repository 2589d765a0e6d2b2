from functools import wraps
from flask import request
from pydantic import ValidationError
from .responses import validation_error_response


def validate_schema(schema):
    """Decorator to validate request JSON against a Pydantic schema."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                obj = schema(**(request.get_json(silent=True) or {}))
            except ValidationError as ve:
                return validation_error_response(
                    ve.errors(include_url=False, include_context=False)
                )
            request.validated_data = obj
            return fn(*args, **kwargs)
        return wrapper

    return decorator
