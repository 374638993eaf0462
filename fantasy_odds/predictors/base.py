"""
Base Spread Strategy

Both spread models (distribution and historical) implement this interface.
Each returns a SpreadResult tagged with the basis it was computed from, so
the market assembler can choose between them with an explicit policy.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from ..config import settings
from ..models import TeamSeasonStats
from ..numerics import round_to_half
from ..power import PowerDifferential


class SpreadBasis(str, Enum):
    """Where a spread came from."""
    ENHANCED = "enhanced"              # Full score history for both teams
    DYNAMIC_STATS = "dynamic-stats"    # Both teams known, short history
    DISTRIBUTION = "distribution"      # Normal-margin model
    PROBABILITY = "probability"        # Piecewise probability converter
    NO_STATS = "no-stats"
    MISSING_TEAMS = "missing-teams"


HISTORICAL_BASES = frozenset({SpreadBasis.ENHANCED, SpreadBasis.DYNAMIC_STATS})


@dataclass
class SpreadContext:
    """
    Everything a spread model needs for one matchup.

    `team1`/`team2` are always populated (defaults for unresolved teams);
    `team_stats` is the full roster-keyed map for models that do their own
    lookup.
    """
    team1: TeamSeasonStats
    team2: TeamSeasonStats
    win_probability: float
    power: PowerDifferential
    team_stats: Mapping[str, TeamSeasonStats] = field(default_factory=dict)
    team1_id: Optional[str] = None
    team2_id: Optional[str] = None
    team1_name: Optional[str] = None
    team2_name: Optional[str] = None

    @property
    def power_diff(self) -> float:
        return self.power.power_diff

    @property
    def scoring_gap(self) -> float:
        return self.team1.average_score - self.team2.average_score


@dataclass
class SpreadResult:
    """
    Spread for a single matchup.

    `spread` is on the favourite convention (negative = team1 favoured) and
    already rounded to the half point.
    """
    spread: float
    confidence: Optional[float]
    basis: SpreadBasis
    breakdown: dict[str, Any] = field(default_factory=dict)
    model: str = ""          # "<name> v<version>" of the producing model

    @property
    def is_historical(self) -> bool:
        return self.basis in HISTORICAL_BASES


def finalize_spread(
    raw_spread: float,
    scoring_gap: float,
    power_diff: float,
    favorite_is_team1: Optional[bool] = None,
) -> float:
    """
    Round a raw spread to the half point and apply the pick'em rule.

    A line under half a point becomes pick'em only when the teams are also
    close on scoring and power; otherwise the model is trusted and the line
    becomes a half point. Large lines are not capped.

    Args:
        raw_spread: Unrounded spread (negative = team1 favoured)
        scoring_gap: Season average difference (team1 - team2)
        power_diff: Power differential (tenth-of-a-point scale)
        favorite_is_team1: Side to favour when raw_spread is exactly zero

    Returns:
        Signed spread, 0.0 for pick'em
    """
    cfg = settings.engine
    if (
        abs(raw_spread) < 0.5
        and abs(scoring_gap) < cfg.pickem_gap_threshold
        and abs(power_diff) < cfg.pickem_power_threshold
    ):
        return 0.0

    magnitude = max(0.5, round_to_half(abs(raw_spread)))

    if raw_spread < 0:
        return -magnitude
    if raw_spread > 0:
        return magnitude
    if favorite_is_team1 is None:
        favorite_is_team1 = scoring_gap + power_diff >= 0
    return -magnitude if favorite_is_team1 else magnitude


class SpreadStrategy(ABC):
    """
    Abstract base class for spread models.

    Subclasses implement predict(); calibration constants are class
    attributes that can be overridden per instance.
    """

    MODEL_NAME: str = "base"
    MODEL_VERSION: str = "0.0.0"

    def __init__(self, **config_overrides):
        """
        Initialize model with optional config overrides.

        Args:
            config_overrides: Override default calibration parameters
        """
        for key, value in config_overrides.items():
            if hasattr(self, key.upper()):
                setattr(self, key.upper(), value)

    @property
    def model_id(self) -> str:
        return f"{self.MODEL_NAME} v{self.MODEL_VERSION}"

    @abstractmethod
    def predict(self, context: SpreadContext) -> SpreadResult:
        """
        Compute the spread for a matchup.

        Raises:
            NumericalDegeneracyError: when the model's math degenerates
        """
        pass
