"""
Team power model.

Turns one team's season scoring into a 0-100 power score:

    power = 50 + points (+/-60) + consistency (0..25) + momentum (+/-15)

- Points: scoring advantage over the league average, squashed with tanh so a
  single outlier team cannot dominate.
- Consistency: coefficient of variation against a 0.3 reference; a perfectly
  steady team earns the full 25.
- Momentum: last (up to) three games against everything before them.
"""

from dataclasses import dataclass, field
import math
from typing import Any, Mapping, Optional

from .models import TeamSeasonStats
from .numerics import clamp, mean, population_variance

NEUTRAL_POWER = 50.0

POINTS_WEIGHT = 60.0
CONSISTENCY_WEIGHT = 25.0
MOMENTUM_WEIGHT = 15.0

POINTS_SCALE = 3.0
MOMENTUM_SCALE = 2.0
REFERENCE_CV = 0.3
RECENT_GAMES = 3

# Average assumed for league members with no scoring data
FALLBACK_LEAGUE_SCORE = 100.0


@dataclass
class PowerResult:
    power_score: float
    points_component: float
    consistency_component: float
    momentum_component: float
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def consistency_ratio(self) -> float:
        """Consistency as a 0-1 ratio of its maximum weight."""
        return self.consistency_component / CONSISTENCY_WEIGHT

    @property
    def momentum_ratio(self) -> float:
        return self.momentum_component / MOMENTUM_WEIGHT


@dataclass
class PowerDifferential:
    power_diff: float       # (power1 - power2) / 10
    team1: PowerResult
    team2: PowerResult


def _league_average(stats: TeamSeasonStats, all_stats: Mapping[str, TeamSeasonStats]) -> float:
    averages = [s.average_score or FALLBACK_LEAGUE_SCORE for s in all_stats.values()]
    if not averages:
        return stats.average_score
    return sum(averages) / len(averages)


def calculate_advanced_team_power(
    stats: Optional[TeamSeasonStats],
    all_stats: Optional[Mapping[str, TeamSeasonStats]] = None,
) -> PowerResult:
    """
    Score one team on the 0-100 power scale.

    Missing stats return the neutral 50 with all components zero.
    """
    if stats is None:
        return PowerResult(
            power_score=NEUTRAL_POWER,
            points_component=0.0,
            consistency_component=0.0,
            momentum_component=0.0,
        )

    average = stats.average_score
    scores = stats.scores

    # 1. Points component
    league_average = _league_average(stats, all_stats or {})
    points_advantage = (average - league_average) / league_average if league_average > 0 else 0.0
    points_component = math.tanh(points_advantage * POINTS_SCALE) * POINTS_WEIGHT

    # 2. Consistency component
    consistency_component = 0.0
    if len(scores) >= 2 and average > 0:
        std_dev = math.sqrt(population_variance(scores, center=average))
        cv = std_dev / average
        consistency_component = max(0.0, 1.0 - cv / REFERENCE_CV) * CONSISTENCY_WEIGHT

    # 3. Momentum component
    momentum_component = 0.0
    if len(scores) >= 2:
        recent_count = min(RECENT_GAMES, len(scores))
        recent = scores[-recent_count:]
        early = scores[:-recent_count]
        if early:
            early_avg = mean(early)
            if early_avg > 0:
                trend = (mean(recent) - early_avg) / early_avg
                momentum_component = math.tanh(trend * MOMENTUM_SCALE) * MOMENTUM_WEIGHT

    total = NEUTRAL_POWER + points_component + consistency_component + momentum_component

    return PowerResult(
        power_score=clamp(total, 0.0, 100.0),
        points_component=points_component,
        consistency_component=consistency_component,
        momentum_component=momentum_component,
        details={
            "average_score": average,
            "league_average": league_average,
            "points_advantage_pct": points_advantage * 100,
            "consistency": consistency_component / CONSISTENCY_WEIGHT,
            "momentum": momentum_component / MOMENTUM_WEIGHT,
        },
    )


def calculate_team_power_differential(
    team1: Optional[TeamSeasonStats],
    team2: Optional[TeamSeasonStats],
    all_stats: Optional[Mapping[str, TeamSeasonStats]] = None,
) -> PowerDifferential:
    """Power differential on a tenth-of-a-point scale: (power1 - power2) / 10."""
    team1_power = calculate_advanced_team_power(team1, all_stats)
    team2_power = calculate_advanced_team_power(team2, all_stats)
    return PowerDifferential(
        power_diff=(team1_power.power_score - team2_power.power_score) / 10,
        team1=team1_power,
        team2=team2_power,
    )
