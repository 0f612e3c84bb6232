from __future__ import annotations

from functools import wraps

from flask import jsonify
from flask_login import current_user

from jarla.extensions import db, login_manager
from jarla.models import User
from jarla.utils.jwt_utils import decode_token, get_bearer_token


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.request_loader
def load_user_from_request(req):
    """Let @login_required work with Bearer tokens."""
    token = get_bearer_token(req.headers.get("Authorization", ""))
    if not token:
        return None
    payload = decode_token(token)
    if not payload or payload.get("type") != "access":
        return None
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
    return db.session.get(User, user_id)


@login_manager.unauthorized_handler
def _unauthorized():
    return jsonify({"message": "Unauthorized"}), 401


def current_role() -> str:
    if not current_user or not current_user.is_authenticated:
        return "guest"
    return (getattr(current_user, "role", None) or "creator").strip().lower()


def is_admin() -> bool:
    return current_role() == "admin"


def role_required(*roles):
    """Require an authenticated user holding one of `roles` (admins always pass)."""

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            if not current_user or not current_user.is_authenticated:
                return jsonify({"message": "Unauthorized"}), 401
            role = current_role()
            if role != "admin" and role not in roles:
                return jsonify({"message": f"Only {'/'.join(roles)} accounts can do this"}), 403
            return fn(*args, **kwargs)

        return wrapper

    return decorator
