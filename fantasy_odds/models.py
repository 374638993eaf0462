"""
Domain models for the fantasy odds engine.

Inputs (season stats, matchup descriptors) and the assembled market output.
All lines use the favourite convention: a NEGATIVE spread means team1 is
favoured.
"""

from dataclasses import asdict, dataclass
from typing import Any, Mapping, Optional


def _first(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


@dataclass(frozen=True)
class TeamSeasonStats:
    """
    One team's season statistics - the core input of every market.

    `scores` is chronological. `games_played` normally equals
    wins + losses + ties but the engine tolerates mismatches.
    """
    roster_id: Optional[str] = None
    name: Optional[str] = None
    owner_id: Optional[str] = None
    average_score: float = 0.0
    scores: tuple[float, ...] = ()
    wins: int = 0
    losses: int = 0
    ties: int = 0
    games_played: int = 0
    dpr: Optional[float] = None
    is_hot: bool = False
    is_cold: bool = False

    # Derived by the season stats builder
    rank: Optional[int] = None
    tier: Optional[int] = None
    points_for: float = 0.0
    points_against: float = 0.0
    win_percentage: float = 0.0
    streak: int = 0
    streak_type: Optional[str] = None

    @property
    def avg_per_game(self) -> float:
        return self.average_score

    @property
    def record(self) -> str:
        base = f"{self.wins}-{self.losses}"
        return f"{base}-{self.ties}" if self.ties > 0 else base

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], roster_id: Optional[str] = None) -> "TeamSeasonStats":
        """
        Build stats from a loosely shaped mapping.

        Accepts both the camelCase keys the dashboard produced
        (``averageScore``, ``avgPerGame``, ``isCold``) and snake_case.
        """
        scores = tuple(float(s) for s in (_first(data, "scores", "weeklyScores", "weekly_scores") or ()))
        wins = int(_first(data, "wins", default=0))
        losses = int(_first(data, "losses", default=0))
        ties = int(_first(data, "ties", default=0))
        games_played = int(_first(data, "gamesPlayed", "games_played", default=wins + losses + ties))
        average = _first(data, "averageScore", "average_score", "avgPerGame", "avg_per_game")
        if average is None:
            average = sum(scores) / len(scores) if scores else 0.0
        dpr = _first(data, "dpr", "DPR")
        rid = _first(data, "rosterId", "roster_id", default=roster_id)

        return cls(
            roster_id=str(rid) if rid is not None else None,
            name=_first(data, "name", "team_name"),
            owner_id=_first(data, "ownerId", "owner_id"),
            average_score=float(average),
            scores=scores,
            wins=wins,
            losses=losses,
            ties=ties,
            games_played=games_played,
            dpr=float(dpr) if dpr is not None else None,
            is_hot=bool(_first(data, "isHot", "is_hot", default=False)),
            is_cold=bool(_first(data, "isCold", "is_cold", default=False)),
            rank=_first(data, "rank"),
            tier=_first(data, "tier"),
            points_for=float(_first(data, "pointsFor", "points_for", default=0.0)),
            points_against=float(_first(data, "pointsAgainst", "points_against", default=0.0)),
            win_percentage=float(_first(data, "winPercentage", "win_percentage", default=0.0)),
            streak=int(_first(data, "streak", default=0)),
            streak_type=_first(data, "streakType", "streak_type"),
        )

    def __str__(self) -> str:
        label = self.name or f"Team {self.roster_id}"
        return f"{label} ({self.record}): avg={self.average_score:.2f} n={len(self.scores)}"


@dataclass(frozen=True)
class Matchup:
    """A single head-to-head pairing to be priced."""
    team1_id: Optional[str] = None
    team2_id: Optional[str] = None
    team1_name: Optional[str] = None
    team2_name: Optional[str] = None
    win_probability: Optional[float] = None  # Caller-supplied P(team1 wins)
    week: Optional[int] = None


@dataclass(frozen=True)
class MarketOptions:
    vig: float = 0.045
    include_prop_bets: bool = True
    week_number: int = 3


@dataclass
class SpreadSide:
    name: Optional[str]
    line: str       # "PK", "+3.5", "-3.5"
    odds: int


@dataclass
class SpreadMarket:
    team1: SpreadSide
    team2: SpreadSide


@dataclass
class MoneylineSide:
    name: Optional[str]
    odds: int


@dataclass
class MoneylineMarket:
    team1: MoneylineSide
    team2: MoneylineSide


@dataclass
class TotalSide:
    line: float
    odds: int


@dataclass
class TotalMarket:
    over: TotalSide
    under: TotalSide


@dataclass
class PowerAnalysis:
    """Diagnostic breakdown shipped alongside the market."""
    team1_power: float
    team2_power: float
    power_diff: float
    team1_details: dict[str, Any]
    team2_details: dict[str, Any]
    original_win_prob: Optional[float]
    computed_win_prob: Optional[float]
    adjusted_win_prob: float
    spread: float
    spread_basis: str
    spread_confidence: Optional[float]
    is_pick: bool


@dataclass
class BettingMarkets:
    """Complete market for one matchup."""
    spread: SpreadMarket
    moneyline: MoneylineMarket
    total: TotalMarket
    power_analysis: PowerAnalysis
    props: Optional[dict[str, Any]] = None
    seed_key: str = ""

    @property
    def is_pick(self) -> bool:
        return self.power_analysis.is_pick

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
