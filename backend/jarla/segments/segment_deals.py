from __future__ import annotations

from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required
from sqlalchemy import func

from jarla.auth import is_admin, role_required
from jarla.extensions import db
from jarla.jobs.stats_refresher import refresh_applications
from jarla.models import BusinessProfile, Deal, DealApplication
from jarla.segments.segment_business_campaigns import clean_list
from jarla.utils.audit import write_audit
from jarla.utils.payouts import deal_earnings
from jarla.utils.tiktok import is_tiktok_url, parse_video_id

deals_bp = Blueprint("deals_bp", __name__, url_prefix="/api")

_DECISIONS = ("accepted", "rejected")


def _float(raw) -> float:
    try:
        return float(raw or 0.0)
    except (TypeError, ValueError):
        return 0.0


def _owned_deal(deal_id: int) -> Deal | None:
    d = db.session.get(Deal, deal_id)
    if not d:
        return None
    if int(d.business_id) != int(current_user.id) and not is_admin():
        return None
    return d


def _earned(deal: Deal, app_row: DealApplication) -> float:
    if app_row.status != "accepted":
        return 0.0
    return deal_earnings(app_row.current_views, deal.rate_per_view, deal.max_earnings)


# -----------------------------
# Business side
# -----------------------------
@deals_bp.post("/business/deals")
@login_required
@role_required("business")
def create_deal():
    data = request.get_json(silent=True) or {}
    title = str(data.get("title") or "").strip()
    rate = _float(data.get("rate_per_view"))
    max_earnings = _float(data.get("max_earnings"))

    errors = []
    if not title:
        errors.append("title required")
    if rate <= 0:
        errors.append("rate_per_view must be > 0")
    if max_earnings <= 0:
        errors.append("max_earnings must be > 0")
    if errors:
        return jsonify({"message": "Invalid deal", "errors": errors}), 400

    bp = BusinessProfile.query.filter_by(user_id=int(current_user.id)).first()
    d = Deal(
        business_id=int(current_user.id),
        brand_name=str(data.get("brand_name") or (bp.company_name if bp else "") or "My Brand").strip(),
        brand_logo_url=data.get("brand_logo_url") or (bp.logo_url if bp else None),
        title=title,
        description=str(data.get("description") or "").strip() or None,
        guidelines=clean_list(data.get("guidelines")),
        category=str(data.get("category") or "").strip() or None,
        cover_image_url=str(data.get("cover_image_url") or "").strip() or None,
        rate_per_view=round(rate, 1),
        max_earnings=max_earnings,
        total_budget=_float(data.get("total_budget")) or None,
        status="active",
        is_active=True,
    )
    try:
        db.session.add(d)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error("deal create failed: %s", e)
        return jsonify({"message": "Failed", "error": str(e)}), 500
    return jsonify({"ok": True, "deal": d.to_dict()}), 201


@deals_bp.get("/business/deals")
@login_required
@role_required("business")
def my_deals():
    rows = Deal.query.filter_by(business_id=int(current_user.id)).order_by(Deal.created_at.desc()).all()
    counts = dict(
        db.session.query(DealApplication.deal_id, func.count(DealApplication.id))
        .filter(DealApplication.deal_id.in_([d.id for d in rows] or [0]))
        .group_by(DealApplication.deal_id)
        .all()
    )
    out = []
    for d in rows:
        item = d.to_dict()
        item["application_count"] = int(counts.get(d.id, 0))
        out.append(item)
    return jsonify(out), 200


@deals_bp.get("/business/deals/<int:deal_id>")
@login_required
@role_required("business")
def my_deal(deal_id: int):
    d = _owned_deal(deal_id)
    if not d:
        return jsonify({"message": "Deal not found"}), 404
    out = d.to_dict()
    out["applications"] = [a.to_dict(earned=_earned(d, a)) for a in d.applications]
    return jsonify(out), 200


@deals_bp.delete("/business/deals/<int:deal_id>")
@login_required
@role_required("business")
def delete_deal(deal_id: int):
    d = _owned_deal(deal_id)
    if not d:
        return jsonify({"message": "Deal not found"}), 404
    db.session.delete(d)
    db.session.commit()
    return jsonify({"ok": True, "deleted": True}), 200


@deals_bp.post("/business/deals/<int:deal_id>/applications/<int:application_id>/decision")
@login_required
@role_required("business")
def decide_application(deal_id: int, application_id: int):
    d = _owned_deal(deal_id)
    if not d:
        return jsonify({"message": "Deal not found"}), 404
    a = DealApplication.query.filter_by(id=application_id, deal_id=d.id).first()
    if not a:
        return jsonify({"message": "Application not found"}), 404

    data = request.get_json(silent=True) or {}
    decision = str(data.get("status") or "").strip().lower()
    if decision not in _DECISIONS:
        return jsonify({"message": "status must be accepted or rejected"}), 400

    a.status = decision
    a.reviewed_at = datetime.utcnow()
    write_audit(current_user.id, f"deal_application_{decision}", "deal_application", a.id, {"deal_id": d.id})
    db.session.commit()
    return jsonify({"ok": True, "application": a.to_dict(earned=_earned(d, a))}), 200


# -----------------------------
# Creator side
# -----------------------------
@deals_bp.get("/deals")
@login_required
def deals_feed():
    rows = Deal.query.filter_by(is_active=True).order_by(Deal.created_at.desc()).limit(100).all()
    mine = {}
    if current_user.role == "creator":
        mine = {
            int(a.deal_id): a.status
            for a in DealApplication.query.filter_by(creator_id=int(current_user.id)).all()
        }
    out = []
    for d in rows:
        item = d.to_dict()
        item["application_status"] = mine.get(int(d.id))
        out.append(item)
    return jsonify(out), 200


@deals_bp.post("/deals/<int:deal_id>/apply")
@login_required
@role_required("creator")
def apply_to_deal(deal_id: int):
    d = db.session.get(Deal, deal_id)
    if not d or not d.is_active:
        return jsonify({"message": "Deal not found"}), 404

    existing = DealApplication.query.filter_by(deal_id=d.id, creator_id=int(current_user.id)).first()
    if existing:
        return jsonify({"ok": True, "already_applied": True, "application": existing.to_dict()}), 200

    data = request.get_json(silent=True) or {}
    a = DealApplication(
        deal_id=d.id,
        creator_id=int(current_user.id),
        status="pending",
        message=str(data.get("message") or "").strip() or None,
    )
    try:
        db.session.add(a)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({"message": "Failed", "error": str(e)}), 500
    return jsonify({"ok": True, "already_applied": False, "application": a.to_dict()}), 201


@deals_bp.get("/deals/<int:deal_id>/application")
@login_required
@role_required("creator")
def my_application(deal_id: int):
    a = DealApplication.query.filter_by(deal_id=deal_id, creator_id=int(current_user.id)).first()
    if not a:
        return jsonify({"message": "Application not found"}), 404
    return jsonify(a.to_dict(earned=_earned(a.deal, a))), 200


@deals_bp.patch("/deals/<int:deal_id>/application")
@login_required
@role_required("creator")
def attach_video(deal_id: int):
    a = DealApplication.query.filter_by(deal_id=deal_id, creator_id=int(current_user.id)).first()
    if not a:
        return jsonify({"message": "Application not found"}), 404
    if a.status != "accepted":
        return jsonify({"message": "Application has not been accepted"}), 409

    data = request.get_json(silent=True) or {}
    url = str(data.get("tiktok_video_url") or "").strip()
    if not is_tiktok_url(url):
        return jsonify({"message": "a https TikTok video URL is required"}), 400
    a.tiktok_video_url = url
    a.tiktok_video_id = parse_video_id(url)
    db.session.commit()
    return jsonify({"ok": True, "application": a.to_dict(earned=_earned(a.deal, a))}), 200


@deals_bp.post("/deal-applications/stats/refresh")
@login_required
def refresh_application_stats():
    data = request.get_json(silent=True) or {}
    raw_ids = data.get("application_ids")
    if not isinstance(raw_ids, list) or not raw_ids:
        return jsonify({"message": "application_ids array is required"}), 400
    try:
        ids = [int(i) for i in raw_ids]
    except (TypeError, ValueError):
        return jsonify({"message": "application_ids must be integers"}), 400

    q = DealApplication.query.filter(DealApplication.id.in_(ids), DealApplication.status == "accepted")
    if not is_admin():
        uid = int(current_user.id)
        q = q.join(Deal, DealApplication.deal_id == Deal.id).filter(
            db.or_(DealApplication.creator_id == uid, Deal.business_id == uid)
        )
    apps = q.all()
    try:
        results = refresh_applications(apps)
    except Exception as e:
        db.session.rollback()
        current_app.logger.error("deal stats refresh failed: %s", e)
        return jsonify({"message": "Failed", "error": str(e)}), 500
    earned = {str(a.id): _earned(a.deal, a) for a in apps if str(a.id) in results}
    return jsonify({"results": results, "earned": earned}), 200
