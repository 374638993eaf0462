"""
Score variance modelling for fantasy matchups.

Each team's weekly score is treated as roughly normal. With two or more games
of history the observed population variance is used (floored); otherwise a
proxy coefficient of variation that grows with scoring level stands in.
"""
from dataclasses import dataclass
import math
from typing import Optional

from .config import settings
from .logging_config import get_logger
from .models import TeamSeasonStats
from .numerics import population_variance

logger = get_logger(__name__)


@dataclass
class TeamVariance:
    """Variance estimate for one team."""
    variance: float
    observed: bool          # True when derived from score history
    games_used: int

    @property
    def std_dev(self) -> float:
        return math.sqrt(self.variance)


@dataclass
class MatchupSigma:
    """Breakdown of the combined margin sigma for a matchup."""
    base_sigma: float
    consistency_factor: float
    momentum_factor: float
    sigma: float


class ScoreVarianceCalculator:
    """
    Estimates per-team score variance and the combined margin sigma.

    Higher-scoring teams without history get a wider proxy spread:
    CV = 0.12 + avg/1000, so a 120-point team is modelled at 24% CV.
    """

    def __init__(
        self,
        variance_floor: float = 100.0,
        base_coefficient_of_variation: float = 0.12,
        coefficient_of_variation_per_point: float = 0.001,
        consistency_sigma_reduction: float = 0.30,
        momentum_sigma_factor: float = 0.95,
        min_sigma: float = 6.0,
    ):
        self.variance_floor = variance_floor
        self.base_coefficient_of_variation = base_coefficient_of_variation
        self.coefficient_of_variation_per_point = coefficient_of_variation_per_point
        self.consistency_sigma_reduction = consistency_sigma_reduction
        self.momentum_sigma_factor = momentum_sigma_factor
        self.min_sigma = min_sigma

    def team_variance(self, stats: Optional[TeamSeasonStats]) -> TeamVariance:
        """Observed (floored) variance with >= 2 scores, proxy variance otherwise."""
        scores = stats.scores if stats is not None else ()
        if len(scores) >= 2:
            observed = population_variance(scores)
            return TeamVariance(
                variance=max(self.variance_floor, observed),
                observed=True,
                games_used=len(scores),
            )

        average = stats.average_score if stats is not None else 0.0
        cv = self.base_coefficient_of_variation + average * self.coefficient_of_variation_per_point
        return TeamVariance(variance=(average * cv) ** 2, observed=False, games_used=len(scores))

    def matchup_sigma(
        self,
        team1: TeamVariance,
        team2: TeamVariance,
        avg_consistency: float,
        aligned_positive_momentum: bool,
    ) -> MatchupSigma:
        """
        Combined margin sigma, tightened for consistent matchups.

        Args:
            team1: Variance estimate for team1
            team2: Variance estimate for team2
            avg_consistency: Mean consistency ratio of both teams, bounded [0, 1]
            aligned_positive_momentum: Both teams trending upward

        Returns:
            MatchupSigma with breakdown and final sigma
        """
        base_sigma = math.sqrt(team1.variance + team2.variance)
        consistency = max(0.0, min(1.0, avg_consistency))
        consistency_factor = 1.0 - consistency * self.consistency_sigma_reduction
        momentum_factor = self.momentum_sigma_factor if aligned_positive_momentum else 1.0

        sigma = max(self.min_sigma, base_sigma * consistency_factor * momentum_factor)

        logger.debug(
            "matchup_sigma",
            base_sigma=round(base_sigma, 3),
            consistency_factor=round(consistency_factor, 3),
            momentum_factor=momentum_factor,
            sigma=round(sigma, 3),
        )

        return MatchupSigma(
            base_sigma=base_sigma,
            consistency_factor=consistency_factor,
            momentum_factor=momentum_factor,
            sigma=sigma,
        )


def default_variance_calculator() -> ScoreVarianceCalculator:
    """Calculator wired to the current engine settings."""
    cfg = settings.engine
    return ScoreVarianceCalculator(
        variance_floor=cfg.variance_floor,
        base_coefficient_of_variation=cfg.base_coefficient_of_variation,
        coefficient_of_variation_per_point=cfg.coefficient_of_variation_per_point,
        consistency_sigma_reduction=cfg.consistency_sigma_reduction,
        momentum_sigma_factor=cfg.momentum_sigma_factor,
        min_sigma=cfg.min_sigma,
    )
