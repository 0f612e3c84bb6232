from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from jarla.extensions import db
from jarla.models import Campaign, Favorite

favorites_bp = Blueprint("favorites_bp", __name__, url_prefix="/api")


@favorites_bp.post("/campaigns/<int:campaign_id>/favorite")
@login_required
def add_favorite(campaign_id: int):
    if not db.session.get(Campaign, campaign_id):
        return jsonify({"message": "Campaign not found"}), 404
    uid = int(current_user.id)
    if not Favorite.query.filter_by(user_id=uid, campaign_id=campaign_id).first():
        db.session.add(Favorite(user_id=uid, campaign_id=campaign_id))
        db.session.commit()
    return jsonify({"ok": True, "favorite": True}), 200


@favorites_bp.delete("/campaigns/<int:campaign_id>/favorite")
@login_required
def remove_favorite(campaign_id: int):
    Favorite.query.filter_by(user_id=int(current_user.id), campaign_id=campaign_id).delete()
    db.session.commit()
    return jsonify({"ok": True, "favorite": False}), 200


@favorites_bp.get("/me/favorites")
@login_required
def my_favorites():
    rows = (db.session.query(Campaign)
            .join(Favorite, Favorite.campaign_id == Campaign.id)
            .filter(Favorite.user_id == int(current_user.id), Campaign.is_active.is_(True))
            .order_by(Favorite.created_at.desc())
            .all())
    return jsonify([c.to_dict() for c in rows]), 200
