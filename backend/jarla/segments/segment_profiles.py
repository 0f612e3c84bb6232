from __future__ import annotations

import math
import re
from datetime import datetime, timedelta

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required
from sqlalchemy.exc import IntegrityError

from jarla.auth import role_required
from jarla.extensions import db
from jarla.models import Profile

profiles_bp = Blueprint("profiles_bp", __name__, url_prefix="/api/me")

USERNAME_COOLDOWN_DAYS = 14
_USERNAME_RE = re.compile(r"^[a-z0-9._]+$")

_TEXT_FIELDS = ("full_name", "bio", "avatar_url", "phone_number")


def validate_username(raw: str) -> tuple[str, str | None]:
    name = str(raw or "").strip().lower()
    if len(name) < 3:
        return name, "Username must be at least 3 characters"
    if len(name) > 30:
        return name, "Username must be under 30 characters"
    if not _USERNAME_RE.match(name):
        return name, "Only letters, numbers, dots and underscores"
    return name, None


def days_until_username_change(profile: Profile, now: datetime | None = None) -> int:
    if not profile.username_changed_at:
        return 0
    now = now or datetime.utcnow()
    elapsed = (now - profile.username_changed_at) / timedelta(days=1)
    return max(0, math.ceil(USERNAME_COOLDOWN_DAYS - elapsed))


def _get_or_create(user_id: int) -> Profile:
    p = Profile.query.filter_by(user_id=int(user_id)).first()
    if not p:
        p = Profile(user_id=int(user_id))
        db.session.add(p)
        db.session.commit()
    return p


@profiles_bp.get("/profile")
@login_required
@role_required("creator")
def get_profile():
    p = _get_or_create(current_user.id)
    out = p.to_dict()
    out["days_until_username_change"] = days_until_username_change(p)
    return jsonify({"ok": True, "profile": out}), 200


@profiles_bp.patch("/profile")
@login_required
@role_required("creator")
def update_profile():
    data = request.get_json(silent=True) or {}
    p = _get_or_create(current_user.id)

    if "username" in data:
        name, error = validate_username(data.get("username"))
        if error:
            return jsonify({"message": error}), 400
        if name != (p.username or ""):
            wait = days_until_username_change(p) if p.username else 0
            if wait > 0:
                return jsonify({
                    "message": f"You can change your username again in {wait} days.",
                    "days_until_username_change": wait,
                }), 403
            if Profile.query.filter(Profile.username == name, Profile.user_id != p.user_id).first():
                return jsonify({"message": "Username is taken"}), 409
            # the first pick does not start the cooldown
            if p.username:
                p.username_changed_at = datetime.utcnow()
            p.username = name

    for field in _TEXT_FIELDS:
        if field in data:
            value = str(data.get(field) or "").strip()
            setattr(p, field, value or None)

    p.updated_at = datetime.utcnow()
    try:
        db.session.add(p)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"message": "Username is taken"}), 409
    return jsonify({"ok": True, "profile": p.to_dict()}), 200
