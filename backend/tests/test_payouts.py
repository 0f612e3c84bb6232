from jarla.utils.payouts import Tier, deal_earnings, earnings_curve, earnings_for_views, validate_tiers

TIERS = [
    {"min_views": 10000, "max_views": None, "rate": 5},
    {"min_views": 0, "max_views": 10000, "rate": 10},
]


class TestEarningsForViews:
    def test_within_first_tier(self):
        assert earnings_for_views(TIERS, 5000) == 50.0

    def test_spans_tiers_regardless_of_input_order(self):
        assert earnings_for_views(TIERS, 20000) == 150.0

    def test_capped_at_max_earnings(self):
        assert earnings_for_views(TIERS, 20000, max_earnings=120) == 120.0

    def test_zero_cap_means_uncapped(self):
        assert earnings_for_views(TIERS, 1000000, max_earnings=0) == 100.0 + 990 * 5

    def test_zero_negative_and_garbage_views(self):
        assert earnings_for_views(TIERS, 0) == 0.0
        assert earnings_for_views(TIERS, -50) == 0.0
        assert earnings_for_views(TIERS, "lots") == 0.0

    def test_no_tiers(self):
        assert earnings_for_views([], 5000) == 0.0

    def test_gap_between_tiers_earns_nothing(self):
        gapped = [Tier(0, 1000, 10.0), Tier(5000, None, 10.0)]
        assert earnings_for_views(gapped, 4000) == 10.0
        assert earnings_for_views(gapped, 6000) == 20.0

    def test_rounded_to_two_decimals(self):
        assert earnings_for_views([Tier(0, None, 3.333)], 1000) == 3.33


class TestValidateTiers:
    def test_valid(self):
        assert validate_tiers(TIERS) == []

    def test_empty(self):
        assert validate_tiers([]) == ["at least one tier is required"]

    def test_not_a_list(self):
        assert validate_tiers("0-1000") == ["tiers must be a list"]

    def test_non_numeric(self):
        assert validate_tiers([{"min_views": "many", "rate": 1}])

    def test_overlap_and_open_middle(self):
        errors = validate_tiers([
            {"min_views": 0, "max_views": None, "rate": 1},
            {"min_views": 500, "max_views": 2000, "rate": 1},
        ])
        assert any("open-ended" in e for e in errors)

        errors = validate_tiers([
            {"min_views": 0, "max_views": 1000, "rate": 1},
            {"min_views": 500, "max_views": None, "rate": 1},
        ])
        assert any("overlaps" in e for e in errors)

    def test_rate_and_bounds(self):
        errors = validate_tiers([{"min_views": 100, "max_views": 50, "rate": 0}])
        assert any("rate must be > 0" in e for e in errors)
        assert any("greater than min_views" in e for e in errors)


class TestEarningsCurve:
    def test_points(self):
        points = earnings_curve(TIERS, max_earnings=200)
        assert points == [
            {"views": 0, "earnings": 0.0, "rate": 10.0},
            {"views": 10000, "earnings": 100.0, "rate": 10.0},
            {"views": 30000, "earnings": 200.0, "rate": 5.0},
        ]

    def test_open_tier_without_cap_adds_nothing(self):
        assert len(earnings_curve(TIERS, max_earnings=0)) == 2

    def test_bounded_tier_respects_cap(self):
        points = earnings_curve([Tier(0, 100000, 10.0)], max_earnings=50)
        assert points[-1] == {"views": 100000, "earnings": 50.0, "rate": 10.0}

    def test_no_tiers(self):
        assert earnings_curve([]) == [{"views": 0, "earnings": 0.0, "rate": 0.0}]


class TestDealEarnings:
    def test_flat_rate(self):
        assert deal_earnings(4000, 2.5, 1000) == 10.0

    def test_capped(self):
        assert deal_earnings(1000000, 5, 300) == 300.0
