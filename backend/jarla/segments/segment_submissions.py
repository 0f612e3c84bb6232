from __future__ import annotations

from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from jarla.auth import is_admin, role_required
from jarla.extensions import db
from jarla.models import AuditLog, Campaign, ContentSubmission, Earning, TikTokAccount, SUBMISSION_STATUSES
from jarla.utils.audit import write_audit
from jarla.utils.earnings import sync_submission_earning
from jarla.utils.tiktok import is_tiktok_url, parse_video_id

submissions_bp = Blueprint("submissions_bp", __name__, url_prefix="/api")

REVIEW_OUTCOMES = ("approved", "denied")


def _business_submission(submission_id: int) -> ContentSubmission | None:
    sub = db.session.get(ContentSubmission, submission_id)
    if not sub or not sub.campaign:
        return None
    if int(sub.campaign.business_id) != int(current_user.id) and not is_admin():
        return None
    return sub


# -----------------------------
# Creator side
# -----------------------------
@submissions_bp.post("/campaigns/<int:campaign_id>/submissions")
@login_required
@role_required("creator")
def submit_content(campaign_id: int):
    campaign = db.session.get(Campaign, campaign_id)
    if not campaign or not campaign.is_active:
        return jsonify({"message": "Campaign not found"}), 404

    data = request.get_json(silent=True) or {}
    url = str(data.get("tiktok_video_url") or "").strip()
    if not url or not is_tiktok_url(url):
        return jsonify({"message": "a https TikTok video URL is required"}), 400

    try:
        account_id = int(data.get("tiktok_account_id"))
    except (TypeError, ValueError):
        return jsonify({"message": "tiktok_account_id required"}), 400
    account = TikTokAccount.query.filter_by(id=account_id, user_id=int(current_user.id), is_active=True).first()
    if not account:
        return jsonify({"message": "Link an active TikTok account first"}), 400

    if ContentSubmission.query.filter_by(campaign_id=campaign.id, tiktok_video_url=url).first():
        return jsonify({"message": "This video was already submitted to this campaign"}), 409

    sub = ContentSubmission(
        campaign_id=campaign.id,
        creator_id=int(current_user.id),
        tiktok_account_id=account.id,
        tiktok_video_url=url,
        tiktok_video_id=parse_video_id(url),
        status="pending_review",
    )
    try:
        db.session.add(sub)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error("submission insert failed: %s", e)
        return jsonify({"message": "Failed", "error": str(e)}), 500
    return jsonify({"ok": True, "submission": sub.to_dict()}), 201


@submissions_bp.get("/me/submissions")
@login_required
@role_required("creator")
def my_submissions():
    rows = (ContentSubmission.query
            .filter_by(creator_id=int(current_user.id))
            .order_by(ContentSubmission.created_at.desc())
            .limit(200)
            .all())
    return jsonify([s.to_dict() for s in rows]), 200


# -----------------------------
# Business side
# -----------------------------
@submissions_bp.get("/business/submissions")
@login_required
@role_required("business")
def business_submissions():
    status = (request.args.get("status") or "").strip()
    if status and status not in SUBMISSION_STATUSES:
        return jsonify({"message": f"status must be one of {', '.join(SUBMISSION_STATUSES)}"}), 400

    q = ContentSubmission.query.join(Campaign, ContentSubmission.campaign_id == Campaign.id)
    if not is_admin():
        q = q.filter(Campaign.business_id == int(current_user.id))
    if status:
        q = q.filter(ContentSubmission.status == status)
    campaign_id = request.args.get("campaign_id", type=int)
    if campaign_id:
        q = q.filter(ContentSubmission.campaign_id == campaign_id)
    rows = q.order_by(ContentSubmission.created_at.desc()).limit(500).all()
    return jsonify([s.to_dict() for s in rows]), 200


@submissions_bp.get("/business/submissions/<int:submission_id>")
@login_required
@role_required("business")
def business_submission(submission_id: int):
    sub = _business_submission(submission_id)
    if not sub:
        return jsonify({"message": "Submission not found"}), 404
    out = sub.to_dict()
    earning = Earning.query.filter_by(submission_id=sub.id).first()
    out["earning"] = earning.to_dict() if earning else None
    out["history"] = [row.to_dict() for row in AuditLog.trail("content_submission", sub.id)]
    return jsonify(out), 200


@submissions_bp.post("/business/submissions/<int:submission_id>/review")
@login_required
@role_required("business")
def review_submission(submission_id: int):
    sub = _business_submission(submission_id)
    if not sub:
        return jsonify({"message": "Submission not found"}), 404

    data = request.get_json(silent=True) or {}
    outcome = str(data.get("status") or "").strip().lower()
    if outcome not in REVIEW_OUTCOMES:
        return jsonify({"message": "status must be approved or denied"}), 400
    if sub.status != "pending_review":
        return jsonify({"message": f"Submission already {sub.status}"}), 409

    sub.status = outcome
    sub.review_notes = str(data.get("review_notes") or "").strip() or None
    sub.reviewed_at = datetime.utcnow()
    sub.reviewed_by = int(current_user.id)
    sub.updated_at = datetime.utcnow()
    sync_submission_earning(sub)
    write_audit(current_user.id, f"submission_{outcome}", "content_submission", sub.id, {"notes": sub.review_notes})
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({"message": "Failed", "error": str(e)}), 500
    return jsonify({"ok": True, "submission": sub.to_dict()}), 200


@submissions_bp.post("/business/submissions/<int:submission_id>/mark-paid")
@login_required
@role_required("business")
def mark_submission_paid(submission_id: int):
    sub = _business_submission(submission_id)
    if not sub:
        return jsonify({"message": "Submission not found"}), 404
    if sub.status == "paid":
        return jsonify({"ok": True, "submission": sub.to_dict()}), 200
    if sub.status != "approved":
        return jsonify({"message": "Only approved submissions can be paid"}), 409

    earning = sync_submission_earning(sub)
    sub.status = "paid"
    sub.updated_at = datetime.utcnow()
    earning.is_paid = True
    earning.paid_at = datetime.utcnow()
    write_audit(current_user.id, "submission_paid", "content_submission", sub.id, {"amount": earning.amount})
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({"message": "Failed", "error": str(e)}), 500
    return jsonify({"ok": True, "submission": sub.to_dict(), "earning": earning.to_dict()}), 200
