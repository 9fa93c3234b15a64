"""
auth.py — /api/auth endpoints: register, login, current user.
"""
import logging
from flask import Blueprint, current_app, jsonify, request

from api.middleware.auth import current_user_id, login_required
from api.middleware.rate_limiter import LOGIN_LIMIT, REGISTER_LIMIT, limiter
from api.schemas.common import MessageSchema
from api.schemas.team_schema import LoginSchema, RegisterSchema, TokenResponseSchema, UserSchema
from services.auth import hash_password, issue_token, verify_password
from services.errors import AuthError, NotFoundError

logger = logging.getLogger("fantasy")

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")

_store = None


def init_auth_bp(store):
    global _store
    _store = store


@auth_bp.route("/register", methods=["POST"])
@limiter.limit(REGISTER_LIMIT)
def register():
    data = RegisterSchema().load(request.get_json(silent=True) or {})
    username = data["username"].strip()
    _store.create_user(
        username=username,
        password_hash=hash_password(data["password"]),
        budget=current_app.config["DEFAULT_BUDGET"],
        team_name=current_app.config["DEFAULT_TEAM_NAME"],
    )
    return jsonify(MessageSchema().dump({"message": "Registration successful"})), 201


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(LOGIN_LIMIT)
def login():
    data = LoginSchema().load(request.get_json(silent=True) or {})
    user = _store.get_user_by_username(data["username"].strip())
    if user is None or not verify_password(user["password"], data["password"]):
        logger.info(f"Failed login for {data['username']!r}")
        raise AuthError("Invalid username or password")

    token = issue_token(
        user,
        current_app.config["JWT_SECRET"],
        current_app.config["JWT_ALGORITHM"],
        current_app.config["JWT_EXPIRY_MINUTES"],
    )
    logger.info(f"User {user['username']} logged in (admin={bool(user['is_admin'])})")
    return jsonify(TokenResponseSchema().dump({"token": token, "user": dict(user)}))


@auth_bp.route("/me")
@login_required
def me():
    user = _store.get_user(current_user_id())
    if user is None:
        raise NotFoundError("User not found")
    return jsonify(UserSchema().dump(dict(user)))
