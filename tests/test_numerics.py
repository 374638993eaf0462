"""
Tests for rounding, normal-distribution and score statistics helpers.
"""

import pytest

from fantasy_odds.errors import NumericalDegeneracyError
from fantasy_odds.numerics import (
    clamp,
    inverse_erf,
    inverse_normal_cdf,
    mean,
    normal_cdf,
    population_variance,
    round_half_up,
    round_to_half,
)


class TestRounding:

    def test_round_half_up_ties_toward_positive(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(-2.5) == -2
        assert round_half_up(-143.15) == -143

    def test_round_to_half(self):
        assert round_to_half(1.24) == 1.0
        assert round_to_half(1.25) == 1.5
        assert round_to_half(27.99) == 28.0
        assert round_to_half(-0.25) == 0.0

    def test_clamp(self):
        assert clamp(5, 0, 3) == 3
        assert clamp(-5, 0, 3) == 0
        assert clamp(1.5, 0, 3) == 1.5


class TestNormal:

    def test_median_is_zero(self):
        assert inverse_normal_cdf(0.5) == pytest.approx(0.0, abs=1e-12)

    def test_known_quantile(self):
        assert inverse_normal_cdf(0.975) == pytest.approx(1.96, abs=0.02)
        assert inverse_normal_cdf(0.025) == pytest.approx(-1.96, abs=0.02)

    def test_round_trip_through_cdf(self):
        for p in (0.1, 0.3, 0.65, 0.9):
            assert normal_cdf(inverse_normal_cdf(p)) == pytest.approx(p, abs=0.005)

    @pytest.mark.parametrize("p", [0.0, 1.0, -0.2, 1.5])
    def test_quantile_outside_open_interval_raises(self, p):
        with pytest.raises(NumericalDegeneracyError):
            inverse_normal_cdf(p)

    def test_inverse_erf_bounds(self):
        with pytest.raises(NumericalDegeneracyError) as exc_info:
            inverse_erf(1.0)
        assert exc_info.value.step == "inverse_erf"


class TestScoreStatistics:

    def test_mean_empty(self):
        assert mean([]) == 0.0

    def test_mean(self):
        assert mean([150.0, 155.0, 152.0, 154.0]) == pytest.approx(152.75)

    def test_population_variance(self):
        assert population_variance([1.0, 3.0]) == pytest.approx(1.0)
        assert population_variance([]) == 0.0

    def test_population_variance_about_center(self):
        assert population_variance([1.0, 3.0], center=0.0) == pytest.approx(5.0)
