"""View-count to earnings bucketing for campaign tiers and flat-rate deals.

Every rate here is SEK per 1000 views.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional


@dataclass(frozen=True)
class Tier:
    min_views: int
    max_views: Optional[int]
    rate: float


def _as_tier(row) -> Tier:
    if isinstance(row, Tier):
        return row
    if isinstance(row, dict):
        max_views = row.get("max_views")
        return Tier(
            min_views=int(row.get("min_views") or 0),
            max_views=int(max_views) if max_views is not None else None,
            rate=float(row.get("rate", row.get("rate_per_view")) or 0.0),
        )
    # CampaignTier model rows
    return Tier(
        min_views=int(row.min_views or 0),
        max_views=int(row.max_views) if row.max_views is not None else None,
        rate=float(row.rate_per_view or 0.0),
    )


def normalize_tiers(rows: Iterable) -> List[Tier]:
    return sorted((_as_tier(r) for r in rows), key=lambda t: t.min_views)


def validate_tiers(rows: Iterable) -> List[str]:
    errors: List[str] = []
    if rows is not None and not isinstance(rows, (list, tuple)):
        return ["tiers must be a list"]
    try:
        tiers = normalize_tiers(rows or [])
    except (AttributeError, TypeError, ValueError):
        return ["tiers must have numeric min_views, max_views and rate"]
    if not tiers:
        return ["at least one tier is required"]

    for i, t in enumerate(tiers):
        label = f"tier {i + 1}"
        if t.min_views < 0:
            errors.append(f"{label}: min_views must be >= 0")
        if t.rate <= 0:
            errors.append(f"{label}: rate must be > 0")
        if t.max_views is not None and t.max_views <= t.min_views:
            errors.append(f"{label}: max_views must be greater than min_views")
        is_last = i == len(tiers) - 1
        if t.max_views is None and not is_last:
            errors.append(f"{label}: only the last tier may be open-ended")
        if not is_last and t.max_views is not None and tiers[i + 1].min_views < t.max_views:
            errors.append(f"{label}: overlaps tier {i + 2}")
    return errors


def earnings_for_views(rows: Iterable, views: int, max_earnings: float = 0.0) -> float:
    try:
        v = int(views or 0)
    except (TypeError, ValueError):
        return 0.0
    if v <= 0:
        return 0.0

    total = 0.0
    for t in normalize_tiers(rows or []):
        if v <= t.min_views:
            break
        upper = v if t.max_views is None else min(v, t.max_views)
        counted = upper - t.min_views
        if counted > 0:
            total += counted / 1000.0 * t.rate

    cap = float(max_earnings or 0.0)
    if cap > 0:
        total = min(total, cap)
    return round(total, 2)


def earnings_curve(rows: Iterable, max_earnings: float = 0.0) -> List[dict]:
    """Boundary points of the earnings-by-views graph."""
    tiers = normalize_tiers(rows or [])
    cap = float(max_earnings or 0.0)
    points = [{"views": 0, "earnings": 0.0, "rate": tiers[0].rate if tiers else 0.0}]

    cumulative = 0.0
    for t in tiers:
        if t.max_views is not None:
            cumulative += (t.max_views - t.min_views) / 1000.0 * t.rate
            earned = min(cumulative, cap) if cap > 0 else cumulative
            points.append({"views": t.max_views, "earnings": round(earned, 2), "rate": t.rate})
        elif t.rate > 0 and cap > cumulative:
            extra_views = (cap - cumulative) / t.rate * 1000.0
            points.append({"views": int(round(t.min_views + extra_views)), "earnings": round(cap, 2), "rate": t.rate})
    return points


def deal_earnings(views: int, rate_per_thousand: float, max_earnings: float = 0.0) -> float:
    return earnings_for_views([Tier(0, None, float(rate_per_thousand or 0.0))], views, max_earnings)
