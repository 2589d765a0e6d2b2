from flask import g
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os


def rate_limit_key():
    """Authenticated callers are limited per user, anonymous ones per IP."""
    user_id = getattr(g, "user_id", None)
    return f"user:{user_id}" if user_id else get_remote_address()


limiter = Limiter(
    key_func=rate_limit_key,
    storage_uri=os.getenv("RATELIMIT_STORAGE_URL", "memory://"),
    strategy="fixed-window",
    default_limits=[os.getenv("RATELIMIT_DEFAULT", "300 per hour")],
)
