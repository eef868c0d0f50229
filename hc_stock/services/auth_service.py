"""
Password hashing and JWT session tokens.

Token payload mirrors what the frontend decodes for role checks:
    {"user": {"id": <int>, "role": "admin" | "user"}, "exp": ..., "iat": ...}
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
from jose import JWTError, jwt

from hc_stock.config.settings import settings
from hc_stock.services.exceptions import AuthenticationError

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:_BCRYPT_MAX_BYTES],
            hashed.encode("utf-8"),
        )
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(user_id: int, role: str) -> str:
    """
    Create JWT access token for user

    Returns:
        JWT token string valid for settings.jwt_expire_minutes
    """
    now = datetime.now(timezone.utc)
    payload = {
        "user": {"id": user_id, "role": role},
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate JWT token

    Returns:
        The "user" claim: {"id": ..., "role": ...}

    Raises:
        AuthenticationError if token invalid/expired
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthenticationError("Token không hợp lệ") from None

    user = payload.get("user")
    if not isinstance(user, dict) or "id" not in user:
        raise AuthenticationError("Token không hợp lệ")
    return user
