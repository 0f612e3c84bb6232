from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from jarla.auth import is_admin
from jarla.extensions import db
from jarla.jobs.stats_refresher import refresh_submissions
from jarla.models import Campaign, ContentSubmission

tiktok_stats_bp = Blueprint("tiktok_stats_bp", __name__, url_prefix="/api/submissions")


@tiktok_stats_bp.post("/stats/refresh")
@login_required
def refresh_stats():
    data = request.get_json(silent=True) or {}
    raw_ids = data.get("submission_ids")
    if not isinstance(raw_ids, list) or not raw_ids:
        return jsonify({"message": "submission_ids array is required"}), 400
    try:
        ids = [int(i) for i in raw_ids]
    except (TypeError, ValueError):
        return jsonify({"message": "submission_ids must be integers"}), 400

    q = ContentSubmission.query.filter(ContentSubmission.id.in_(ids))
    if not is_admin():
        uid = int(current_user.id)
        q = q.join(Campaign, ContentSubmission.campaign_id == Campaign.id).filter(
            db.or_(ContentSubmission.creator_id == uid, Campaign.business_id == uid)
        )
    subs = q.all()
    try:
        results = refresh_submissions(subs)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error("stats refresh failed: %s", e)
        return jsonify({"message": "Failed", "error": str(e)}), 500
    return jsonify({"results": results}), 200
