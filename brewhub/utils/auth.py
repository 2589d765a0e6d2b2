import logging
from functools import wraps
from flask import request, g
from .responses import error
from brewhub.auth import Role, UnknownRole, role_has_scope
from .jwt import decode_token, TokenError
from models import db
from models.profile import Profile

logger = logging.getLogger(__name__)


def _provision_profile(payload) -> Profile:
    # The auth provider creates profiles on signup; cover tokens that raced it
    profile = Profile(
        user_id=payload["sub"],
        email=payload.get("email"),
        role=Role.CUSTOMER.value,
    )
    db.session.add(profile)
    db.session.commit()
    logger.info("provisioned customer profile for %s", profile.user_id)
    return profile


def auth_required(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        auth = request.headers.get("Authorization", "")
        if not auth:
            return error("Auth header missing", status=401)
        token = auth.split(" ", 1)[1] if auth.startswith("Bearer ") else auth
        try:
            payload = decode_token(token)
        except TokenError as e:
            return error(str(e), status=401)

        g.user_id = payload["sub"]
        user = db.session.get(Profile, g.user_id)
        if user is None:
            user = _provision_profile(payload)
        request.user = user
        return func(*args, **kwargs)

    return wrapper


def _to_set(obj):
    return set(obj) if isinstance(obj, (list, tuple, set)) else {obj}


def role_required(required):
    """Authorize based on profile role or a scoped action ("vendor:manage_menu")."""
    required_set = _to_set(required)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            raw = getattr(getattr(request, "user", None), "role", None)
            if not raw:
                return error("Role missing", status=403)
            try:
                role = Role.parse(raw)
            except UnknownRole as e:
                return error(str(e), status=403)
            g.role = role
            for entry in required_set:
                if isinstance(entry, str) and ":" in entry:
                    r, action = entry.split(":", 1)
                    if role == Role.parse(r) and role_has_scope(role, action):
                        break
                elif role == Role.parse(entry):
                    break
            else:
                return error("Forbidden", status=403)
            return fn(*args, **kwargs)

        return wrapper

    return decorator
