"""
Win probability from current-season performance.

Weighted blend of four signals:
- DPR logistic (50%)
- Scoring average logistic (30%)
- Hot/cold form (10%)
- Win differential (10%)

Result is clamped to [0.05, 0.95]; a team missing from the stats map yields
a coin flip.
"""

from dataclasses import dataclass
import math
from typing import Any, Mapping, Optional

from .logging_config import get_logger
from .models import TeamSeasonStats
from .numerics import clamp
from .resolution import Found, resolve_team_stats
from .season_stats import map_team_names_to_roster_ids

logger = get_logger(__name__)

DPR_WEIGHT = 0.5
SCORING_WEIGHT = 0.3
FORM_WEIGHT = 0.1
RECORD_WEIGHT = 0.1

DPR_SLOPE = 5.0
SCORING_SLOPE = 0.05
RECORD_STEP = 0.1

DEFAULT_DPR = 1.0


@dataclass
class WinProbabilityBreakdown:
    win_probability: float
    dpr_diff: float
    dpr_prob: float
    scoring_diff: float
    scoring_prob: float
    form_prob: float
    form_reason: str
    record_diff: int
    record_prob: float
    team1: Optional[TeamSeasonStats] = None
    team2: Optional[TeamSeasonStats] = None
    error: Optional[str] = None


def _logistic(x: float) -> float:
    return 1.0 / (1.0 + math.exp(-x))


def form_probability(team1: TeamSeasonStats, team2: TeamSeasonStats) -> tuple[float, str]:
    """Hot/cold form signal for team1 and the reason it was chosen."""
    if team1.is_hot and team2.is_cold:
        return 0.75, "team1 hot vs team2 cold"
    if team1.is_cold and team2.is_hot:
        return 0.25, "team1 cold vs team2 hot"
    if team1.is_hot and not team2.is_hot:
        return 0.6, "team1 hot"
    if team2.is_hot and not team1.is_hot:
        return 0.4, "team2 hot"
    if team1.is_cold and not team2.is_cold:
        return 0.4, "team1 cold"
    if team2.is_cold and not team1.is_cold:
        return 0.6, "team2 cold"
    return 0.5, "neutral"


def win_probability_from_stats(team1: TeamSeasonStats, team2: TeamSeasonStats) -> WinProbabilityBreakdown:
    """Blend the four signals for two resolved teams."""
    dpr1 = team1.dpr if team1.dpr is not None else DEFAULT_DPR
    dpr2 = team2.dpr if team2.dpr is not None else DEFAULT_DPR
    dpr_diff = dpr1 - dpr2
    dpr_prob = _logistic(dpr_diff * DPR_SLOPE)

    scoring_diff = team1.avg_per_game - team2.avg_per_game
    scoring_prob = _logistic(scoring_diff * SCORING_SLOPE)

    form_prob, form_reason = form_probability(team1, team2)

    record_diff = team1.wins - team2.wins
    record_prob = clamp(0.5 + record_diff * RECORD_STEP, 0.2, 0.8)

    blended = (
        dpr_prob * DPR_WEIGHT
        + scoring_prob * SCORING_WEIGHT
        + form_prob * FORM_WEIGHT
        + record_prob * RECORD_WEIGHT
    )

    return WinProbabilityBreakdown(
        win_probability=clamp(blended, 0.05, 0.95),
        dpr_diff=dpr_diff,
        dpr_prob=dpr_prob,
        scoring_diff=scoring_diff,
        scoring_prob=scoring_prob,
        form_prob=form_prob,
        form_reason=form_reason,
        record_diff=record_diff,
        record_prob=record_prob,
        team1=team1,
        team2=team2,
    )


def calculate_detailed_win_probability(
    team1_identifier: Any,
    team2_identifier: Any,
    team_stats: Mapping[str, TeamSeasonStats],
) -> WinProbabilityBreakdown:
    """
    Win probability for team1 with a per-signal breakdown.

    Identifiers may be roster ids or display names.
    """
    lookup1 = resolve_team_stats(team_stats, roster_id=team1_identifier, name=_as_name(team1_identifier))
    lookup2 = resolve_team_stats(team_stats, roster_id=team2_identifier, name=_as_name(team2_identifier))

    if not isinstance(lookup1, Found) or not isinstance(lookup2, Found):
        logger.warning(
            "win_probability_missing_team",
            team1=str(team1_identifier),
            team2=str(team2_identifier),
        )
        return WinProbabilityBreakdown(
            win_probability=0.5,
            dpr_diff=0.0,
            dpr_prob=0.5,
            scoring_diff=0.0,
            scoring_prob=0.5,
            form_prob=0.5,
            form_reason="neutral",
            record_diff=0,
            record_prob=0.5,
            error=f"Missing team data for {team1_identifier} or {team2_identifier}",
        )

    return win_probability_from_stats(lookup1.stats, lookup2.stats)


def calculate_win_probability(
    team1_identifier: Any,
    team2_identifier: Any,
    team_stats: Mapping[str, TeamSeasonStats],
) -> float:
    """P(team1 beats team2) on a 0-1 scale."""
    return calculate_detailed_win_probability(team1_identifier, team2_identifier, team_stats).win_probability


def calculate_win_probability_by_names(
    team1_name: str,
    team2_name: str,
    team_stats: Mapping[str, TeamSeasonStats],
) -> dict[str, Any]:
    """Map display names to roster ids, then compute the win probability."""
    mapping = map_team_names_to_roster_ids(team_stats, team1_name, team2_name)

    if not mapping["team1_roster_id"] or not mapping["team2_roster_id"]:
        return {
            "win_probability": 0.5,
            "error": "Could not map team names to roster IDs",
            "mapping": mapping,
        }

    return {
        "win_probability": calculate_win_probability(
            mapping["team1_roster_id"], mapping["team2_roster_id"], team_stats
        ),
        "mapping": mapping,
    }


def _as_name(identifier: Any) -> Optional[str]:
    return identifier if isinstance(identifier, str) else None
