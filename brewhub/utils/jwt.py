import datetime as dt
from typing import Dict, Optional
import jwt
from flask import current_app


class TokenError(Exception):
    pass


def _secret() -> str:
    return current_app.config["AUTH_JWT_SECRET"]


def _audience() -> Optional[str]:
    return current_app.config.get("AUTH_JWT_AUDIENCE") or None


def create_access_token(user_id: str, role: str = "authenticated", minutes: int = 15) -> str:
    """Mint a provider-style access token.

    Production tokens come from the auth provider; this is used by the
    testing blueprint and local tooling only.
    """
    payload: Dict = {
        "sub": user_id,
        "role": role,
        "exp": dt.datetime.now(dt.timezone.utc) + dt.timedelta(minutes=minutes),
    }
    aud = _audience()
    if aud:
        payload["aud"] = aud
    return jwt.encode(payload, _secret(), algorithm="HS256")


def decode_token(token: str) -> Dict:
    aud = _audience()
    try:
        data = jwt.decode(
            token,
            _secret(),
            algorithms=["HS256"],
            audience=aud,
            options={"verify_aud": aud is not None},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("token expired")
    except jwt.InvalidTokenError:
        raise TokenError("invalid token")

    if not data.get("sub"):
        raise TokenError("token has no subject")
    return data
