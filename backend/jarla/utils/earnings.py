from __future__ import annotations

from datetime import datetime

from sqlalchemy import func

from jarla.extensions import db
from jarla.models import ContentSubmission, Earning, Withdrawal
from jarla.utils.payouts import earnings_for_views

# Creator withdrawals are capped per calendar year for tax compliance.
ANNUAL_WITHDRAWAL_CAP = 10000.0

EARNING_STATUSES = ("approved", "paid")


def sync_submission_earning(sub: ContentSubmission) -> Earning | None:
    """Bring the earning row of an approved submission in line with its views.

    Paid earnings are frozen. Does not commit.
    """
    if sub.status not in EARNING_STATUSES or not sub.campaign:
        return None
    earning = Earning.query.filter_by(submission_id=sub.id).first()
    if earning and earning.is_paid:
        return earning

    views = int(sub.current_views or 0)
    amount = earnings_for_views(sub.campaign.tiers, views, sub.campaign.max_earnings or 0.0)
    if not earning:
        earning = Earning(creator_id=sub.creator_id, submission_id=sub.id)
        db.session.add(earning)
    earning.amount = amount
    earning.views_counted = views
    earning.updated_at = datetime.utcnow()
    return earning


def earnings_summary(creator_id: int) -> dict:
    rows = Earning.query.filter_by(creator_id=int(creator_id)).order_by(Earning.created_at.desc()).all()
    total = sum(float(e.amount or 0.0) for e in rows)
    paid = sum(float(e.amount or 0.0) for e in rows if e.is_paid)
    return {
        "earnings": [e.to_dict() for e in rows],
        "total": round(total, 2),
        "paid": round(paid, 2),
        "pending": round(total - paid, 2),
        "total_views": sum(int(e.views_counted or 0) for e in rows),
    }


def _withdrawn(creator_id: int, since: datetime | None = None) -> float:
    q = db.session.query(func.coalesce(func.sum(Withdrawal.amount), 0.0)).filter(
        Withdrawal.user_id == int(creator_id),
        Withdrawal.status != "rejected",
    )
    if since is not None:
        q = q.filter(Withdrawal.created_at >= since)
    return float(q.scalar() or 0.0)


def available_balance(creator_id: int) -> float:
    paid = db.session.query(func.coalesce(func.sum(Earning.amount), 0.0)).filter(
        Earning.creator_id == int(creator_id),
        Earning.is_paid.is_(True),
    ).scalar()
    return round(max(0.0, float(paid or 0.0) - _withdrawn(creator_id)), 2)


def withdrawn_this_year(creator_id: int, now: datetime | None = None) -> float:
    now = now or datetime.utcnow()
    return round(_withdrawn(creator_id, since=datetime(now.year, 1, 1)), 2)
