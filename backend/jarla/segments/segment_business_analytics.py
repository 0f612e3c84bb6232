from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from jarla.auth import role_required
from jarla.models import Campaign, ContentSubmission
from jarla.utils.payouts import earnings_for_views

business_analytics_bp = Blueprint("business_analytics_bp", __name__, url_prefix="/api/business")


def campaign_stats(c: Campaign, subs: list) -> dict:
    """Views, reach and budget use of one campaign.

    Spent budget is what the non-denied submissions have earned on the
    campaign tiers, never more than the campaign's total budget.
    """
    counted = [s for s in subs if s.status != "denied"]
    total_views = sum(int(s.current_views or 0) for s in counted)
    spent = sum(earnings_for_views(c.tiers, s.current_views, c.max_earnings or 0.0) for s in counted)
    total_budget = float(c.total_budget or 0.0)
    if total_budget > 0:
        spent = min(spent, total_budget)
    return {
        "id": int(c.id),
        "title": c.title,
        "brand_name": c.brand_name,
        "status": c.status,
        "total_views": total_views,
        "creators_count": len({int(s.creator_id) for s in counted}),
        "total_budget": total_budget,
        "spent_budget": round(spent, 2),
    }


@business_analytics_bp.get("/analytics")
@login_required
@role_required("business")
def business_analytics():
    uid = int(current_user.id)
    campaigns = Campaign.query.filter_by(business_id=uid).order_by(Campaign.created_at.desc()).all()
    subs_by_campaign = {}
    creators = set()
    if campaigns:
        rows = ContentSubmission.query.filter(ContentSubmission.campaign_id.in_([c.id for c in campaigns])).all()
        for s in rows:
            subs_by_campaign.setdefault(int(s.campaign_id), []).append(s)
            if s.status != "denied":
                creators.add(int(s.creator_id))

    stats = [campaign_stats(c, subs_by_campaign.get(int(c.id), [])) for c in campaigns]
    totals = {
        "views": sum(s["total_views"] for s in stats),
        # a creator active on several campaigns counts once
        "creators": len(creators),
        "total_budget": sum(s["total_budget"] for s in stats),
        "spent_budget": round(sum(s["spent_budget"] for s in stats), 2),
    }
    return jsonify({"campaigns": stats, "totals": totals}), 200
