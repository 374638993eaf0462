"""
Tests for probability/spread/moneyline conversion, totals, juice and props.
"""

import pytest

from fantasy_odds.pricing import (
    TotalContext,
    calculate_spread_from_probability,
    calculate_total,
    convert_spread_to_moneyline,
    format_spread_line,
    generate_prop_bets,
    generate_spread_juice,
    generate_total_juice,
    odds_to_implied_probability,
    probability_to_american_odds,
    validate_odds_consistency,
)

SEEDS = [f"seed-{i}" for i in range(50)]


class TestSpreadFromProbability:

    def test_coin_flip(self):
        assert calculate_spread_from_probability(0.5) == 0.0

    def test_team1_favourite_is_negative(self):
        assert calculate_spread_from_probability(0.55) == -3.0
        assert calculate_spread_from_probability(0.65) == -7.0

    def test_team1_underdog_is_positive(self):
        assert calculate_spread_from_probability(0.3) == 9.5

    def test_heavy_favourite(self):
        assert calculate_spread_from_probability(0.9) == -16.0

    def test_power_diff_nudge(self):
        assert calculate_spread_from_probability(0.5, power_diff=5.0) == -1.0

    def test_half_point_rounding(self):
        spread = calculate_spread_from_probability(0.61)
        assert spread * 2 == int(spread * 2)


class TestSpreadToMoneyline:

    def test_pickem_band(self):
        for seed in SEEDS:
            odds = convert_spread_to_moneyline(0, True, seed_key=seed)
            assert -123 <= odds <= -117, f"Pick'em odds {odds} outside jitter band"

    def test_pickem_is_seeded(self):
        assert convert_spread_to_moneyline(0, seed_key="x") == convert_spread_to_moneyline(0, seed_key="x")

    def test_curve_breakpoint(self):
        assert convert_spread_to_moneyline(3, True) == -143
        assert convert_spread_to_moneyline(3, False) == 121

    def test_no_vig(self):
        assert convert_spread_to_moneyline(7, True, vig=0.0) == -220
        assert convert_spread_to_moneyline(7, False, vig=0.0) == 180

    def test_negative_spread_uses_magnitude(self):
        assert convert_spread_to_moneyline(-3, True) == convert_spread_to_moneyline(3, True)

    def test_clamped_at_extremes(self):
        assert convert_spread_to_moneyline(200, True) == -5000
        assert convert_spread_to_moneyline(200, False) == 5000

    def test_monotone_in_spread(self):
        spreads = [x / 2 for x in range(1, 81)]
        favorites = [convert_spread_to_moneyline(s, True) for s in spreads]
        underdogs = [convert_spread_to_moneyline(s, False) for s in spreads]
        assert all(a >= b for a, b in zip(favorites, favorites[1:])), "Favourite odds must not shorten"
        assert all(a <= b for a, b in zip(underdogs, underdogs[1:])), "Underdog odds must not shorten"

    def test_bounds(self):
        for spread in (0.5, 1.5, 4.5, 10, 15, 30, 60):
            assert -5000 <= convert_spread_to_moneyline(spread, True) <= -101
            assert 100 <= convert_spread_to_moneyline(spread, False) <= 5000


class TestTotals:

    def test_missing_averages_default(self):
        ctx = TotalContext(variance=0.0, week_number=5)
        assert calculate_total(None, 120.0, ctx) == 220.0

    def test_implausible_averages_default(self):
        ctx = TotalContext(variance=0.0, week_number=5)
        assert calculate_total(70.0, 75.0, ctx) == 220.0

    def test_early_season_inflation(self):
        ctx = TotalContext(variance=0.0, week_number=1)
        assert calculate_total(100.0, 100.0, ctx) == 204.0

    def test_clamped(self):
        ctx = TotalContext(variance=0.0, week_number=5)
        assert calculate_total(200.0, 200.0, ctx) == 320.0

    def test_jitter_within_three_percent(self):
        for seed in SEEDS:
            total = calculate_total(120.0, 120.0, TotalContext(variance=0.06, week_number=5, seed_key=seed))
            assert 232.5 <= total <= 247.5, f"Total {total} outside +/-3% band"
            assert total * 2 == int(total * 2)

    def test_deterministic(self):
        ctx = TotalContext(variance=0.06, week_number=4, seed_key="4-11-w4-total")
        assert calculate_total(131.35, 118.80, ctx) == calculate_total(131.35, 118.80, ctx)


class TestJuice:

    def test_close_game_asymmetric_bands(self):
        for seed in SEEDS:
            juice = generate_spread_juice(1.0, seed)
            assert -125 <= juice.favorite <= -115
            assert -115 <= juice.underdog <= -105

    def test_big_spread_shared(self):
        for seed in SEEDS:
            juice = generate_spread_juice(-12.0, seed)
            assert juice.favorite == juice.underdog
            assert -116 <= juice.favorite <= -108

    def test_mid_spread_mirrored(self):
        for seed in SEEDS:
            juice = generate_spread_juice(5.0, seed)
            assert juice.favorite + juice.underdog == -220
            assert -125 <= juice.favorite <= -100

    def test_total_juice_bounds(self):
        for seed in SEEDS:
            juice = generate_total_juice(seed)
            assert -120 <= juice.over <= -105
            assert -120 <= juice.under <= -105


class TestOddsHelpers:

    def test_implied_probability(self):
        assert odds_to_implied_probability(-110) == pytest.approx(110 / 210)
        assert odds_to_implied_probability(150) == pytest.approx(0.4)

    def test_probability_to_odds_without_vig(self):
        assert probability_to_american_odds(0.5, add_vig=False) == -100
        assert probability_to_american_odds(0.75, add_vig=False) == -300
        assert probability_to_american_odds(0.25, add_vig=False) == 300

    def test_probability_to_odds_clamped(self):
        assert probability_to_american_odds(1.0, add_vig=False) == -9900

    def test_consistency_validation(self):
        assert validate_odds_consistency(-3, -143, 121)["is_consistent"]
        result = validate_odds_consistency(-3, -400, 121)
        assert not result["is_consistent"]
        assert result["team1_expected"] == -143

    def test_spread_line_format(self):
        assert format_spread_line(-3.5, True, False) == "-3.5"
        assert format_spread_line(-3.5, False, False) == "+3.5"
        assert format_spread_line(-28.0, True, False) == "-28"
        assert format_spread_line(-28.0, False, False) == "+28"
        assert format_spread_line(0.0, True, True) == "PK"


class TestProps:

    def test_team_total_lines(self, crude_crushers, constant_sorrow):
        props = generate_prop_bets(crude_crushers, constant_sorrow, "Crude Crushers", "Team of Constant Sorrow")
        team1 = props["team_totals"]["team1"]
        assert team1["name"] == "Crude Crushers"
        assert team1["over"]["line"] == 126.5
        assert team1["over"]["odds"] == -115
        assert team1["under"]["odds"] == -105
        assert props["margin_of_victory"]["over_14"]["odds"] == 250
