"""
Team stats resolution.

Stats maps are keyed by roster id, but callers sometimes only know a display
name. Resolution is an explicit two-step lookup - roster id first, then a
case-insensitive exact name scan - returning a tagged result instead of a
falsy value so the fallback path stays auditable.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .models import TeamSeasonStats


@dataclass(frozen=True)
class Found:
    stats: TeamSeasonStats
    matched_by: str  # "roster_id" or "name"


@dataclass(frozen=True)
class NotFound:
    roster_id: Optional[str]
    name: Optional[str]


StatsLookup = Union[Found, NotFound]


def coerce_stats(value: Any, roster_id: Optional[str] = None) -> Optional[TeamSeasonStats]:
    """Accept TeamSeasonStats or a raw mapping; anything else is unusable."""
    if isinstance(value, TeamSeasonStats):
        return value
    if isinstance(value, Mapping):
        return TeamSeasonStats.from_dict(value, roster_id=roster_id)
    return None


def coerce_stats_map(team_stats: Optional[Mapping[Any, Any]]) -> dict[str, TeamSeasonStats]:
    """Normalise a stats map to str roster id -> TeamSeasonStats, dropping junk entries."""
    normalised: dict[str, TeamSeasonStats] = {}
    for key, value in (team_stats or {}).items():
        stats = coerce_stats(value, roster_id=str(key))
        if stats is not None:
            normalised[str(key)] = stats
    return normalised


def find_by_name(team_stats: Mapping[str, TeamSeasonStats], name: Optional[str]) -> Optional[TeamSeasonStats]:
    """Case-insensitive exact name match across all entries."""
    if not name:
        return None
    target = name.strip().casefold()
    for stats in team_stats.values():
        if stats.name and stats.name.strip().casefold() == target:
            return stats
    return None


def resolve_team_stats(
    team_stats: Mapping[str, TeamSeasonStats],
    roster_id: Optional[Any] = None,
    name: Optional[str] = None,
) -> StatsLookup:
    """
    Resolve one team's stats by roster id, falling back to its name.

    Args:
        team_stats: Roster-keyed stats map (already normalised)
        roster_id: Roster id to try first
        name: Display name to scan for when the id misses

    Returns:
        Found with the matching stats, or NotFound
    """
    if roster_id is not None:
        stats = team_stats.get(str(roster_id))
        if stats is not None:
            return Found(stats=stats, matched_by="roster_id")

    stats = find_by_name(team_stats, name)
    if stats is not None:
        return Found(stats=stats, matched_by="name")

    return NotFound(roster_id=str(roster_id) if roster_id is not None else None, name=name)


def default_team_stats(
    roster_id: Optional[str],
    name: Optional[str],
    average_score: float = 120.0,
) -> TeamSeasonStats:
    """Neutral stats synthesized for a team that could not be resolved."""
    return TeamSeasonStats(
        roster_id=roster_id,
        name=name,
        average_score=average_score,
        games_played=0,
        scores=(),
    )


def stats_or_default(lookup: StatsLookup, average_score: float = 120.0) -> TeamSeasonStats:
    if isinstance(lookup, Found):
        return lookup.stats
    return default_team_stats(lookup.roster_id, lookup.name, average_score)
