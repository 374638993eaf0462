"""
Historical Spread Model ("enhanced dynamic")

Spread built directly from this season's scoring history. Starts from the
raw average difference, shrunk for matchup uncertainty:

    base = avg_diff * (1 - min(1, combined_sd / 50) * 0.3)

then adds five adjustments:
1. Consistency asymmetry (steadier team gets the nod)
2. Recent-form divergence (last 25% of games, x0.3)
3. Early-vs-late trend (x0.2)
4. Cold momentum (+/-2.5)
5. Variance uncertainty penalty

No DPR and no head-to-head inputs.
"""

import math
from typing import Sequence

from ..errors import NumericalDegeneracyError
from ..logging_config import get_logger
from ..models import TeamSeasonStats
from ..numerics import clamp, mean
from ..resolution import Found, resolve_team_stats
from ..variance import ScoreVarianceCalculator, TeamVariance, default_variance_calculator
from .base import SpreadBasis, SpreadContext, SpreadResult, SpreadStrategy, finalize_spread

logger = get_logger(__name__)


class HistoricalSpreadModel(SpreadStrategy):
    """
    Enhanced dynamic spread from per-team score history.

    Looks teams up in the stats map itself (roster id, then name) so it can
    report `missing-teams` / `no-stats` instead of pricing synthesized
    defaults.
    """

    MODEL_NAME: str = "historical"
    MODEL_VERSION: str = "1.0.0"

    # Base spread shrinkage
    UNCERTAINTY_SD_SCALE: float = 50.0
    UNCERTAINTY_SHRINK: float = 0.3

    # Adjustments
    CONSISTENCY_WEIGHT: float = 0.25
    VOLATILE_ERROR_COEFF: float = 0.15
    VOLATILE_DAMPING: float = 0.8
    RECENT_FORM_SHARE: float = 0.25
    RECENT_FORM_WEIGHT: float = 0.3
    TREND_WEIGHT: float = 0.2
    COLD_PENALTY: float = 2.5
    VARIANCE_UNCERTAINTY_SCALE: float = 200.0
    MAX_VARIANCE_UNCERTAINTY: float = 0.3
    VARIANCE_PENALTY_BASE: float = 0.2

    # Minimum score history (per team) for the full "enhanced" treatment
    MIN_HISTORY: int = 3

    # Confidence
    BASE_CONFIDENCE: float = 0.7

    def __init__(self, variance_calculator: ScoreVarianceCalculator | None = None, **config_overrides):
        super().__init__(**config_overrides)
        self.variance_calculator = variance_calculator or default_variance_calculator()

    def predict(self, context: SpreadContext) -> SpreadResult:
        """
        Spread from score history.

        Returns a zero-spread result tagged `no-stats` or `missing-teams`
        when the map cannot supply both teams.

        Raises:
            NumericalDegeneracyError: non-finite spread
        """
        if not context.team_stats:
            return SpreadResult(spread=0.0, confidence=0.3, basis=SpreadBasis.NO_STATS, model=self.model_id)

        lookup1 = resolve_team_stats(context.team_stats, context.team1_id, context.team1_name)
        lookup2 = resolve_team_stats(context.team_stats, context.team2_id, context.team2_name)
        if not isinstance(lookup1, Found) or not isinstance(lookup2, Found):
            logger.debug(
                "historical_spread_missing_team",
                team1=context.team1_id or context.team1_name,
                team2=context.team2_id or context.team2_name,
            )
            return SpreadResult(spread=0.0, confidence=0.3, basis=SpreadBasis.MISSING_TEAMS, model=self.model_id)

        team1, team2 = lookup1.stats, lookup2.stats
        full_history = len(team1.scores) >= self.MIN_HISTORY and len(team2.scores) >= self.MIN_HISTORY

        var1 = self.variance_calculator.team_variance(team1)
        var2 = self.variance_calculator.team_variance(team2)
        err1 = self._error_coefficient(team1, var1)
        err2 = self._error_coefficient(team2, var2)

        avg_diff = team1.average_score - team2.average_score
        combined_sd = math.sqrt(var1.variance + var2.variance)
        uncertainty = min(1.0, combined_sd / self.UNCERTAINTY_SD_SCALE)
        base_spread = avg_diff * (1 - uncertainty * self.UNCERTAINTY_SHRINK)

        # 1. Consistency asymmetry
        volatility = self.VOLATILE_DAMPING if max(err1, err2) > self.VOLATILE_ERROR_COEFF else 1.0
        consistency_adj = (err2 - err1) * avg_diff * self.CONSISTENCY_WEIGHT * volatility

        # 2-3. Recent form and trend need real history on both sides
        recent_form_adj = 0.0
        trend_adj = 0.0
        if full_history:
            recent_form_adj = self._recent_form_adjustment(team1, team2, avg_diff)
            trend_adj = (self._trend(team1.scores) - self._trend(team2.scores)) * self.TREND_WEIGHT

        # 4. Cold momentum
        momentum_adj = 0.0
        if team1.is_cold and not team2.is_cold:
            momentum_adj -= self.COLD_PENALTY
        if team2.is_cold and not team1.is_cold:
            momentum_adj += self.COLD_PENALTY

        # 5. Variance uncertainty penalty
        avg_variance = (var1.variance + var2.variance) / 2
        variance_uncertainty = min(avg_variance / self.VARIANCE_UNCERTAINTY_SCALE, self.MAX_VARIANCE_UNCERTAINTY)
        variance_penalty = (err1 - err2) * avg_diff * (self.VARIANCE_PENALTY_BASE + variance_uncertainty)

        total_adj = consistency_adj + recent_form_adj + trend_adj + momentum_adj + variance_penalty
        raw_spread = -(base_spread + total_adj)
        if not math.isfinite(raw_spread):
            raise NumericalDegeneracyError("historical_spread", raw_spread)

        spread = finalize_spread(raw_spread, scoring_gap=avg_diff, power_diff=context.power_diff)
        confidence = self._confidence(team1, team2, raw_spread)
        basis = SpreadBasis.ENHANCED if full_history else SpreadBasis.DYNAMIC_STATS

        logger.debug(
            "historical_spread",
            basis=basis.value,
            base_spread=round(base_spread, 2),
            total_adjustment=round(total_adj, 2),
            spread=spread,
            confidence=confidence,
        )

        return SpreadResult(
            spread=spread,
            confidence=confidence,
            basis=basis,
            model=self.model_id,
            breakdown={
                "base_spread": round(base_spread, 1),
                "avg_diff": round(avg_diff, 1),
                "team1_variance": round(var1.variance, 1),
                "team2_variance": round(var2.variance, 1),
                "team1_error_coeff": round(err1, 3),
                "team2_error_coeff": round(err2, 3),
                "consistency_adjustment": round(consistency_adj, 1),
                "recent_form_adjustment": round(recent_form_adj, 1),
                "trend_adjustment": round(trend_adj, 1),
                "momentum_adjustment": round(momentum_adj, 1),
                "variance_penalty": round(variance_penalty, 1),
                "total_adjustment": round(total_adj, 1),
                "raw_spread": round(raw_spread, 1),
            },
        )

    @staticmethod
    def _error_coefficient(stats: TeamSeasonStats, variance: TeamVariance) -> float:
        """Std-dev over average; lower means more predictable."""
        if stats.average_score <= 0:
            return 0.0
        return variance.std_dev / stats.average_score

    def _recent_form_adjustment(self, team1: TeamSeasonStats, team2: TeamSeasonStats, avg_diff: float) -> float:
        games = team1.games_played or len(team1.scores)
        window = max(1, math.floor(games * self.RECENT_FORM_SHARE))
        recent_diff = mean(team1.scores[-window:]) - mean(team2.scores[-window:])
        return (recent_diff - avg_diff) * self.RECENT_FORM_WEIGHT

    @staticmethod
    def _trend(scores: Sequence[float]) -> float:
        """Late-half average minus early-half average (positive = improving)."""
        half = len(scores) // 2
        return mean(scores[half:]) - mean(scores[:half])

    def _confidence(self, team1: TeamSeasonStats, team2: TeamSeasonStats, raw_spread: float) -> float:
        confidence = self.BASE_CONFIDENCE

        min_games = min(team1.games_played, team2.games_played)
        if min_games >= 4:
            confidence += 0.2
        elif min_games >= 2:
            confidence += 0.1

        abs_spread = abs(raw_spread)
        if abs_spread > 20:
            confidence -= 0.3
        elif abs_spread > 12:
            confidence -= 0.2
        elif abs_spread > 6:
            confidence -= 0.1

        return round(clamp(confidence, 0.1, 0.95), 2)


# Singleton instance
historical_spread_model = HistoricalSpreadModel()
