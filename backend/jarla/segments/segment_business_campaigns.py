from __future__ import annotations

from datetime import datetime

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required
from sqlalchemy import func

from jarla.auth import is_admin, role_required
from jarla.extensions import db
from jarla.models import BusinessProfile, Campaign, CampaignTier, ContentSubmission
from jarla.utils.payouts import normalize_tiers, validate_tiers

business_campaigns_bp = Blueprint("business_campaigns_bp", __name__, url_prefix="/api/business/campaigns")

_TEXT_FIELDS = ("title", "description", "category", "product_visibility", "video_length", "cover_image_url")
_LIST_FIELDS = ("guidelines", "example_image_urls", "assets_urls")
_STATUSES = ("draft", "active", "ended")


def clean_list(values) -> list | None:
    if not isinstance(values, list):
        return None
    cleaned = [str(v).strip() for v in values if str(v or "").strip()]
    return cleaned or None


def parse_deadline(raw) -> datetime | None:
    if not raw:
        return None
    return datetime.fromisoformat(str(raw).replace("Z", "+00:00")).replace(tzinfo=None)


def _positive_or_none(raw, field: str) -> float | None:
    if raw in (None, ""):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"{field} must be numeric")
    if value < 0:
        raise ValueError(f"{field} must be >= 0")
    return value


def _apply(c: Campaign, data: dict) -> list[str]:
    errors = []
    for field in _TEXT_FIELDS:
        if field in data:
            setattr(c, field, (str(data.get(field) or "")).strip() or None)
    for field in _LIST_FIELDS:
        if field in data:
            setattr(c, field, clean_list(data.get(field)))
    for field in ("total_budget", "max_earnings"):
        if field in data:
            try:
                setattr(c, field, _positive_or_none(data.get(field), field))
            except ValueError as e:
                errors.append(str(e))
    if "deadline" in data:
        try:
            c.deadline = parse_deadline(data.get("deadline"))
        except ValueError:
            errors.append("deadline must be an ISO date")
    if "status" in data:
        status = str(data.get("status") or "").strip().lower()
        if status not in _STATUSES:
            errors.append(f"status must be one of {', '.join(_STATUSES)}")
        else:
            c.status = status
            c.is_active = status == "active"
    if "is_active" in data:
        c.is_active = bool(data.get("is_active"))
    if not (c.title or "").strip():
        errors.append("title required")
    return errors


def _set_tiers(c: Campaign, rows) -> None:
    c.tiers = [
        CampaignTier(min_views=t.min_views, max_views=t.max_views, rate_per_view=t.rate)
        for t in normalize_tiers(rows)
    ]


def _owned_campaign(campaign_id: int) -> Campaign | None:
    c = db.session.get(Campaign, campaign_id)
    if not c:
        return None
    if int(c.business_id) != int(current_user.id) and not is_admin():
        return None
    return c


@business_campaigns_bp.post("")
@login_required
@role_required("business")
def create_campaign():
    data = request.get_json(silent=True) or {}
    tier_rows = data.get("tiers") or []
    errors = validate_tiers(tier_rows)

    bp = BusinessProfile.query.filter_by(user_id=int(current_user.id)).first()
    c = Campaign(
        business_id=int(current_user.id),
        brand_name=str(data.get("brand_name") or (bp.company_name if bp else "") or "My Brand").strip(),
        brand_logo_url=data.get("brand_logo_url") or (bp.logo_url if bp else None),
        status="active",
        is_active=True,
    )
    errors = _apply(c, data) + errors
    if errors:
        return jsonify({"message": "Invalid campaign", "errors": errors}), 400

    _set_tiers(c, tier_rows)
    try:
        db.session.add(c)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error("campaign create failed: %s", e)
        return jsonify({"message": "Failed", "error": str(e)}), 500
    current_app.logger.info("business %s created campaign %s", current_user.id, c.id)
    return jsonify({"ok": True, "campaign": c.to_dict()}), 201


@business_campaigns_bp.get("")
@login_required
@role_required("business")
def my_campaigns():
    rows = Campaign.query.filter_by(business_id=int(current_user.id)).order_by(Campaign.created_at.desc()).all()
    counts = dict(
        db.session.query(ContentSubmission.campaign_id, func.count(ContentSubmission.id))
        .filter(ContentSubmission.campaign_id.in_([c.id for c in rows] or [0]))
        .group_by(ContentSubmission.campaign_id)
        .all()
    )
    out = []
    for c in rows:
        d = c.to_dict()
        d["submission_count"] = int(counts.get(c.id, 0))
        out.append(d)
    return jsonify(out), 200


@business_campaigns_bp.get("/<int:campaign_id>")
@login_required
@role_required("business")
def my_campaign(campaign_id: int):
    c = _owned_campaign(campaign_id)
    if not c:
        return jsonify({"message": "Campaign not found"}), 404
    subs = ContentSubmission.query.filter_by(campaign_id=c.id).order_by(ContentSubmission.created_at.desc()).all()
    out = c.to_dict()
    out["submissions"] = [s.to_dict() for s in subs]
    out["total_views"] = sum(int(s.current_views or 0) for s in subs)
    return jsonify(out), 200


@business_campaigns_bp.patch("/<int:campaign_id>")
@login_required
@role_required("business")
def update_campaign(campaign_id: int):
    c = _owned_campaign(campaign_id)
    if not c:
        return jsonify({"message": "Campaign not found"}), 404
    data = request.get_json(silent=True) or {}

    errors = _apply(c, data)
    if "tiers" in data:
        errors += validate_tiers(data.get("tiers") or [])
    if errors:
        db.session.rollback()
        return jsonify({"message": "Invalid campaign", "errors": errors}), 400
    if "tiers" in data:
        _set_tiers(c, data.get("tiers"))

    c.updated_at = datetime.utcnow()
    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({"message": "Failed", "error": str(e)}), 500
    return jsonify({"ok": True, "campaign": c.to_dict()}), 200


@business_campaigns_bp.delete("/<int:campaign_id>")
@login_required
@role_required("business")
def delete_campaign(campaign_id: int):
    c = _owned_campaign(campaign_id)
    if not c:
        return jsonify({"message": "Campaign not found"}), 404
    if ContentSubmission.query.filter_by(campaign_id=c.id).count():
        # keep history for creators who already posted; just take it off the feed
        c.is_active = False
        c.status = "ended"
        db.session.commit()
        return jsonify({"ok": True, "deleted": False, "ended": True}), 200
    db.session.delete(c)
    db.session.commit()
    return jsonify({"ok": True, "deleted": True}), 200
