from __future__ import annotations

import re

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required
from sqlalchemy.exc import IntegrityError

from jarla.extensions import db
from jarla.models import User, Profile, BusinessProfile
from jarla.utils.jwt_utils import create_access_token

auth_bp = Blueprint("auth_bp", __name__, url_prefix="/api/auth")

MIN_AGE = 16
MAX_AGE = 100
MIN_PASSWORD_LENGTH = 8

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _token_response(user: User, status: int = 200):
    token = create_access_token(user.id, role=user.role)
    return jsonify({"ok": True, "token": token, "user": user.to_dict()}), status


@auth_bp.post("/register")
def register():
    data = request.get_json(silent=True) or {}
    email = str(data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    role = str(data.get("role") or "creator").strip().lower()

    if not email or not password:
        return jsonify({"message": "email and password required"}), 400
    if not _EMAIL_RE.match(email):
        return jsonify({"message": "invalid email"}), 400
    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"message": f"password must be at least {MIN_PASSWORD_LENGTH} characters"}), 400
    if role not in ("creator", "business"):
        return jsonify({"message": "role must be creator or business"}), 400

    age = None
    if role == "creator":
        try:
            age = int(data.get("age"))
        except (TypeError, ValueError):
            return jsonify({"message": "age required"}), 400
        if age < MIN_AGE or age > MAX_AGE:
            return jsonify({"message": f"creators must be between {MIN_AGE} and {MAX_AGE}"}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({"message": "email already registered"}), 409

    user = User(email=email, role=role, age=age)
    user.set_password(password)
    try:
        db.session.add(user)
        db.session.flush()
        if role == "creator":
            db.session.add(Profile(user_id=user.id))
        else:
            company = str(data.get("company_name") or "").strip()
            db.session.add(BusinessProfile(user_id=user.id, company_name=company))
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"message": "email already registered"}), 409

    current_app.logger.info("registered %s user %s", role, user.id)
    return _token_response(user, 201)


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    email = str(data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not email or not password:
        return jsonify({"message": "email and password required"}), 400

    user = User.query.filter_by(email=email).first()
    if not user or not user.password_hash or not user.check_password(password):
        return jsonify({"message": "invalid credentials"}), 401
    return _token_response(user)


@auth_bp.get("/me")
@login_required
def me():
    return jsonify({"ok": True, "user": current_user.to_dict()}), 200
