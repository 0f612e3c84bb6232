from __future__ import annotations

from datetime import datetime

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from jarla.auth import role_required
from jarla.extensions import db
from jarla.models import TikTokAccount

tiktok_accounts_bp = Blueprint("tiktok_accounts_bp", __name__, url_prefix="/api/me/tiktok-accounts")


@tiktok_accounts_bp.get("")
@login_required
@role_required("creator")
def list_accounts():
    rows = TikTokAccount.query.filter_by(user_id=int(current_user.id)).order_by(TikTokAccount.created_at.desc()).all()
    return jsonify([a.to_dict() for a in rows]), 200


@tiktok_accounts_bp.post("")
@login_required
@role_required("creator")
def link_account():
    data = request.get_json(silent=True) or {}
    tiktok_user_id = str(data.get("tiktok_user_id") or "").strip()
    username = str(data.get("tiktok_username") or "").strip().lstrip("@")
    if not tiktok_user_id or not username:
        return jsonify({"message": "tiktok_user_id and tiktok_username required"}), 400
    try:
        followers = max(0, int(data.get("follower_count") or 0))
    except (TypeError, ValueError):
        followers = 0

    acct = TikTokAccount.query.filter_by(user_id=int(current_user.id), tiktok_user_id=tiktok_user_id).first()
    status = 200
    if not acct:
        acct = TikTokAccount(user_id=int(current_user.id), tiktok_user_id=tiktok_user_id)
        status = 201
    acct.tiktok_username = username
    acct.follower_count = followers
    acct.is_active = True
    if data.get("access_token"):
        acct.access_token = str(data["access_token"])
    if data.get("refresh_token"):
        acct.refresh_token = str(data["refresh_token"])
    acct.updated_at = datetime.utcnow()

    try:
        db.session.add(acct)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({"message": "Failed", "error": str(e)}), 500
    return jsonify({"ok": True, "account": acct.to_dict()}), status


@tiktok_accounts_bp.delete("/<int:account_id>")
@login_required
@role_required("creator")
def deactivate_account(account_id: int):
    acct = TikTokAccount.query.filter_by(id=account_id, user_id=int(current_user.id)).first()
    if not acct:
        return jsonify({"message": "Not found"}), 404
    acct.is_active = False
    acct.updated_at = datetime.utcnow()
    db.session.commit()
    return jsonify({"ok": True, "account": acct.to_dict()}), 200
