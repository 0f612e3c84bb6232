from __future__ import annotations

import math

MIN_BUDGET = 15000
MAX_BUDGET = 500000
SNAP_STEP = 5000
MIN_CREATOR_POOL = 20000

# Guaranteed-reach presets offered to brands.
PAYMENT_TIERS = [
    {"payout": 100, "views": 3000},
    {"payout": 500, "views": 15000},
]

PRESET_BUDGETS = [15000, 25000, 50000, 100000, 250000]

# Deal rate slider (SEK per 1000 views): the first 75% of the track covers
# 0.5..5.0, the rest 5.0..10.0.
RATE_MIN = 0.5
RATE_MID = 5.0
RATE_MAX = 10.0
RATE_BREAK = 75.0


def clamp_budget(budget: float) -> float:
    return max(float(MIN_BUDGET), min(float(MAX_BUDGET), float(budget or MIN_BUDGET)))


def budget_to_slider(budget: float) -> float:
    b = clamp_budget(budget)
    lo, hi = math.log(MIN_BUDGET), math.log(MAX_BUDGET)
    return (math.log(b) - lo) / (hi - lo) * 100.0


def slider_to_budget(position: float) -> int:
    p = max(0.0, min(100.0, float(position or 0.0)))
    lo, hi = math.log(MIN_BUDGET), math.log(MAX_BUDGET)
    return int(round(math.exp(lo + p / 100.0 * (hi - lo))))


def snap(value: float) -> int:
    # Half-way values round up.
    return int(math.floor(float(value) / SNAP_STEP + 0.5)) * SNAP_STEP


def pool_ratio(budget: float) -> float:
    """Share of the budget that reaches creators: 75% at the floor, 95% at the ceiling."""
    b = clamp_budget(budget)
    return 0.75 + 0.20 * (b - MIN_BUDGET) / (MAX_BUDGET - MIN_BUDGET)


def quote(budget: float, tier_index: int = 0, dragging: bool = False) -> dict:
    b = clamp_budget(budget)
    if tier_index < 0 or tier_index >= len(PAYMENT_TIERS):
        raise ValueError(f"tier must be between 0 and {len(PAYMENT_TIERS) - 1}")
    tier = PAYMENT_TIERS[tier_index]

    raw_pool = b * pool_ratio(b)
    if dragging:
        total = b
        pool = max(MIN_CREATOR_POOL, round(raw_pool))
    else:
        total = snap(b)
        pool = max(MIN_CREATOR_POOL, snap(raw_pool))
    # The pool floor must not push the fee below zero.
    pool = min(pool, total)

    fee = total - pool
    fee_percent = round(fee / total * 100.0, 1) if total else 0.0
    creators = int(pool // tier["payout"])
    return {
        "budget": total,
        "creator_pool": pool,
        "fee_amount": fee,
        "fee_percent": fee_percent,
        "tier": tier_index,
        "guaranteed_creators": creators,
        "guaranteed_views": creators * tier["views"],
        "slider_position": round(budget_to_slider(b), 2),
    }


def rate_to_slider(rate: float) -> float:
    r = float(rate or 0.0)
    if r <= RATE_MIN:
        return 0.0
    if r <= RATE_MID:
        return (math.log(r) - math.log(RATE_MIN)) / (math.log(RATE_MID) - math.log(RATE_MIN)) * RATE_BREAK
    r = min(r, RATE_MAX)
    return RATE_BREAK + (math.log(r) - math.log(RATE_MID)) / (math.log(RATE_MAX) - math.log(RATE_MID)) * (100.0 - RATE_BREAK)


def slider_to_rate(position: float) -> float:
    p = float(position or 0.0)
    if p <= 0:
        return RATE_MIN
    p = min(p, 100.0)
    if p <= RATE_BREAK:
        log_val = math.log(RATE_MIN) + p / RATE_BREAK * (math.log(RATE_MID) - math.log(RATE_MIN))
    else:
        log_val = math.log(RATE_MID) + (p - RATE_BREAK) / (100.0 - RATE_BREAK) * (math.log(RATE_MAX) - math.log(RATE_MID))
    return round(math.exp(log_val), 1)
