"""
auth.py — Password hashing and signed session tokens.

Tokens are HS256 JWTs carrying the user id (`sub`), username and admin
flag. Hashing uses werkzeug's salted PBKDF2/scrypt helpers.
"""
import logging
from datetime import datetime, timedelta, timezone

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from services.errors import AuthError

logger = logging.getLogger("fantasy")


def hash_password(password):
    return generate_password_hash(password)


def verify_password(password_hash, password):
    return check_password_hash(password_hash, password)


def issue_token(user, secret, algorithm="HS256", expiry_minutes=60):
    """Sign a token for a users row (or dict with the same keys)."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user["user_id"]),
        "username": user["username"],
        "is_admin": bool(user["is_admin"]),
        "iat": now,
        "exp": now + timedelta(minutes=expiry_minutes),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token, secret, algorithm="HS256"):
    """Return {user_id, username, is_admin} or raise AuthError."""
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token expired")
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected token: {e}")
        raise AuthError("Invalid token")

    try:
        user_id = int(payload["sub"])
    except (KeyError, ValueError):
        raise AuthError("Invalid user ID in token")

    return {
        "user_id": user_id,
        "username": payload.get("username", ""),
        "is_admin": bool(payload.get("is_admin", False)),
    }
