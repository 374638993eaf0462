"""
Distribution Spread Model

Treats the final margin (team1 - team2) as normally distributed:

    mu    = 0.65 * raw_margin + 0.30 * power_margin + 0.05 * momentum_boost
    sigma = sqrt(var1 + var2) * consistency_factor * momentum_factor

and reads the spread off the inverse normal CDF at (1 - p):

    spread = mu + sigma * z(1 - p)

The sign follows the win probability: team1 favoured (p > 0.5) is negative.
"""

import math

from ..config import settings
from ..errors import NumericalDegeneracyError
from ..logging_config import get_logger
from ..numerics import clamp, inverse_normal_cdf
from ..variance import ScoreVarianceCalculator, default_variance_calculator
from .base import SpreadBasis, SpreadContext, SpreadResult, SpreadStrategy, finalize_spread

logger = get_logger(__name__)


class DistributionSpreadModel(SpreadStrategy):
    """
    Normal-margin spread model.

    Works for any pair of teams, including synthesized defaults with no
    score history.
    """

    MODEL_NAME: str = "distribution"
    MODEL_VERSION: str = "1.0.0"

    # Margin blend
    RAW_MARGIN_WEIGHT: float = 0.65
    POWER_MARGIN_WEIGHT: float = 0.30
    MOMENTUM_MARGIN_WEIGHT: float = 0.05
    POWER_MARGIN_POINTS: float = 2.5   # Margin points per power-diff point
    MAX_EXPECTED_MARGIN: float = 20.0

    def __init__(self, variance_calculator: ScoreVarianceCalculator | None = None, **config_overrides):
        cfg = settings.engine
        self.RAW_MARGIN_WEIGHT = cfg.raw_margin_weight
        self.POWER_MARGIN_WEIGHT = cfg.power_margin_weight
        self.MOMENTUM_MARGIN_WEIGHT = cfg.momentum_margin_weight
        self.POWER_MARGIN_POINTS = cfg.power_margin_points
        self.MAX_EXPECTED_MARGIN = cfg.max_expected_margin
        super().__init__(**config_overrides)

        self.variance_calculator = variance_calculator or default_variance_calculator()

    def expected_margin(self, context: SpreadContext) -> tuple[float, float]:
        """Blended expected margin (clamped) and the momentum boost that fed it."""
        power = context.power
        momentum_boost = power.team1.momentum_component - power.team2.momentum_component
        mu = (
            self.RAW_MARGIN_WEIGHT * context.scoring_gap
            + self.POWER_MARGIN_WEIGHT * (power.power_diff * self.POWER_MARGIN_POINTS)
            + self.MOMENTUM_MARGIN_WEIGHT * momentum_boost
        )
        return clamp(mu, -self.MAX_EXPECTED_MARGIN, self.MAX_EXPECTED_MARGIN), momentum_boost

    def predict(self, context: SpreadContext) -> SpreadResult:
        """
        Spread from the normal-margin model.

        Raises:
            NumericalDegeneracyError: non-finite intermediate or quantile
        """
        power = context.power
        p = context.win_probability

        var1 = self.variance_calculator.team_variance(context.team1)
        var2 = self.variance_calculator.team_variance(context.team2)

        mu, momentum_boost = self.expected_margin(context)

        avg_consistency = (power.team1.consistency_ratio + power.team2.consistency_ratio) / 2
        aligned_momentum = power.team1.momentum_component > 0 and power.team2.momentum_component > 0
        sigma = self.variance_calculator.matchup_sigma(var1, var2, avg_consistency, aligned_momentum)

        z = inverse_normal_cdf(1 - p)
        spread_raw = mu + sigma.sigma * z
        if not math.isfinite(spread_raw):
            raise NumericalDegeneracyError("distribution_spread", spread_raw)

        if p > 0.5:
            signed = -abs(spread_raw)
        elif p < 0.5:
            signed = abs(spread_raw)
        else:
            signed = -abs(spread_raw) if mu >= 0 else abs(spread_raw)

        spread = finalize_spread(
            signed,
            scoring_gap=context.scoring_gap,
            power_diff=context.power_diff,
            favorite_is_team1=p >= 0.5,
        )

        logger.debug(
            "distribution_spread",
            mu=round(mu, 3),
            sigma=round(sigma.sigma, 3),
            z=round(z, 4),
            spread_raw=round(spread_raw, 3),
            spread=spread,
        )

        return SpreadResult(
            spread=spread,
            confidence=None,
            basis=SpreadBasis.DISTRIBUTION,
            model=self.model_id,
            breakdown={
                "raw_mu": context.scoring_gap,
                "mu": mu,
                "momentum_boost": momentum_boost,
                "team1_variance": var1.variance,
                "team2_variance": var2.variance,
                "base_sigma": sigma.base_sigma,
                "sigma": sigma.sigma,
                "avg_consistency": avg_consistency,
                "z": z,
                "spread_raw": spread_raw,
            },
        )


# Singleton instance
distribution_spread_model = DistributionSpreadModel()
