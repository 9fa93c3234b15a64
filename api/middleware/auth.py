"""
auth.py — Bearer-token decorators for protected routes.

The decoded identity is stored on flask.g.current_user as
{user_id, username, is_admin}.
"""
import logging
from functools import wraps

from flask import current_app, g, request

from services.auth import decode_token
from services.errors import AuthError, ForbiddenError

logger = logging.getLogger("fantasy")


def _authenticate():
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthError("Missing bearer token")
    g.current_user = decode_token(
        token.strip(),
        current_app.config["JWT_SECRET"],
        current_app.config["JWT_ALGORITHM"],
    )
    return g.current_user


def login_required(func):
    """Reject requests without a valid token."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        _authenticate()
        return func(*args, **kwargs)
    return wrapper


def admin_required(func):
    """Reject requests whose token lacks the admin flag."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        user = _authenticate()
        if not user["is_admin"]:
            logger.warning(f"Admin route {request.path} refused for {user['username']}")
            raise ForbiddenError("Admin access required")
        return func(*args, **kwargs)
    return wrapper


def current_user_id():
    return g.current_user["user_id"]
