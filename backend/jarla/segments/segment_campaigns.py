from __future__ import annotations

from flask import Blueprint, jsonify, request

from jarla.extensions import db
from jarla.models import Campaign
from jarla.utils.budget import PAYMENT_TIERS, PRESET_BUDGETS, quote
from jarla.utils.payouts import earnings_curve

campaigns_bp = Blueprint("campaigns_bp", __name__, url_prefix="/api")

BATCH_SIZE = 6
MAX_BATCH_SIZE = 50


def _page_args() -> tuple[int, int]:
    try:
        offset = max(0, int(request.args.get("offset", 0)))
    except (TypeError, ValueError):
        offset = 0
    try:
        limit = int(request.args.get("limit", BATCH_SIZE))
    except (TypeError, ValueError):
        limit = BATCH_SIZE
    return offset, max(1, min(limit, MAX_BATCH_SIZE))


@campaigns_bp.get("/campaigns")
def list_campaigns():
    offset, limit = _page_args()
    q = Campaign.query.filter_by(is_active=True)
    category = (request.args.get("category") or "").strip()
    if category:
        q = q.filter(Campaign.category.ilike(category))
    rows = q.order_by(Campaign.created_at.desc(), Campaign.id.desc()).offset(offset).limit(limit).all()
    return jsonify({
        "campaigns": [c.to_dict() for c in rows],
        "offset": offset,
        "next_offset": offset + len(rows),
        "has_more": len(rows) == limit,
    }), 200


@campaigns_bp.get("/campaigns/lookup")
def lookup_campaigns():
    """Active campaigns by id, in the order asked (recent/favorite lists)."""
    ids = []
    for raw in (request.args.get("ids") or "").split(","):
        raw = raw.strip()
        if raw.isdigit():
            ids.append(int(raw))
    if not ids:
        return jsonify([]), 200
    rows = Campaign.query.filter(Campaign.id.in_(ids), Campaign.is_active.is_(True)).all()
    by_id = {int(c.id): c for c in rows}
    return jsonify([by_id[i].to_dict() for i in ids if i in by_id]), 200


@campaigns_bp.get("/campaigns/<int:campaign_id>")
def get_campaign(campaign_id: int):
    c = db.session.get(Campaign, campaign_id)
    if not c:
        return jsonify({"message": "Campaign not found"}), 404
    return jsonify(c.to_dict()), 200


@campaigns_bp.get("/campaigns/<int:campaign_id>/earnings-curve")
def campaign_earnings_curve(campaign_id: int):
    c = db.session.get(Campaign, campaign_id)
    if not c:
        return jsonify({"message": "Campaign not found"}), 404
    return jsonify({
        "campaign_id": int(c.id),
        "max_earnings": float(c.max_earnings or 0.0),
        "points": earnings_curve(c.tiers, c.max_earnings or 0.0),
    }), 200


@campaigns_bp.get("/budget/quote")
def budget_quote():
    try:
        budget = float(request.args.get("budget", PRESET_BUDGETS[0]))
        tier = int(request.args.get("tier", 0))
    except (TypeError, ValueError):
        return jsonify({"message": "budget and tier must be numeric"}), 400
    dragging = (request.args.get("dragging") or "").lower() in ("1", "true", "yes")
    try:
        out = quote(budget, tier, dragging=dragging)
    except ValueError as e:
        return jsonify({"message": str(e)}), 400
    out["payment_tiers"] = PAYMENT_TIERS
    out["presets"] = PRESET_BUDGETS
    return jsonify(out), 200
