from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from jarla.auth import role_required
from jarla.extensions import db
from jarla.models import BusinessProfile

business_profiles_bp = Blueprint("business_profiles_bp", __name__, url_prefix="/api/business")


def profile_for(user_id: int) -> BusinessProfile:
    bp = BusinessProfile.query.filter_by(user_id=int(user_id)).first()
    if not bp:
        bp = BusinessProfile(user_id=int(user_id), company_name="")
        db.session.add(bp)
        db.session.commit()
    return bp


@business_profiles_bp.get("/profile")
@login_required
@role_required("business")
def get_profile():
    return jsonify({"ok": True, "profile": profile_for(current_user.id).to_dict()}), 200


@business_profiles_bp.patch("/profile")
@login_required
@role_required("business")
def update_profile():
    data = request.get_json(silent=True) or {}
    if "company_name" in data and not str(data.get("company_name") or "").strip():
        return jsonify({"message": "company_name cannot be empty"}), 400

    bp = profile_for(current_user.id)
    changed = bp.apply_updates(data)
    try:
        db.session.add(bp)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({"message": "Failed", "error": str(e)}), 500
    return jsonify({"ok": True, "profile": bp.to_dict(), "changed": changed}), 200
