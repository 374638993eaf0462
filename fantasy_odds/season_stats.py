"""
Dynamic season stats builder.

Turns raw per-season records (and, when available, the season's matchup
results) into the roster-keyed TeamSeasonStats map the odds engine consumes.
Season keys are accepted as either strings or integers.

Each raw record may carry camelCase or snake_case keys:
    wins, losses, ties, averageScore, totalPointsFor/pointsFor,
    totalPointsAgainst/pointsAgainst, dpr, scores/weeklyScores, owner_id, tier
"""

from dataclasses import dataclass
import math
from typing import Any, Callable, Mapping, Optional, Sequence

from .logging_config import get_logger
from .models import TeamSeasonStats
from .numerics import mean, population_variance

logger = get_logger(__name__)

RECENT_FORM_GAMES = 4       # games considered for streaks
HOT_COLD_RECENT_GAMES = 3   # games compared against the season average
HOT_COLD_SIGMA = 0.5        # deviation (in std-devs) that marks a team hot/cold
FALLBACK_LEAGUE_SCORE = 100.0

TeamDetailsFn = Callable[[Any, Any], Optional[Mapping[str, Any]]]


@dataclass
class GameResult:
    week: int
    scored: float
    allowed: float

    @property
    def win(self) -> bool:
        return self.scored > self.allowed


@dataclass
class StreakInfo:
    is_hot: bool = False
    is_cold: bool = False
    streak: int = 0
    streak_type: Optional[str] = None
    win_rate: float = 0.0


def normalize_season_key(season: Any) -> Optional[str]:
    return str(season) if season is not None else None


def _alternate_season_key(season: Any) -> Any:
    if isinstance(season, str):
        try:
            return int(season)
        except ValueError:
            return season
    return season


def get_season_data(data: Optional[Mapping[Any, Any]], season: Any) -> Any:
    """Look up `season` in a season-keyed mapping, tolerating str/int keys."""
    if not data or season is None:
        return None
    value = data.get(normalize_season_key(season))
    if value is None:
        value = data.get(_alternate_season_key(season))
    return value


def _first(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def calculate_streaks(recent_games: Sequence[GameResult]) -> StreakInfo:
    """
    Streak-based form over the most recent games.

    Hot: win rate >= 75% or 3+ straight wins. Cold: win rate <= 25% or 3+
    straight losses.
    """
    if len(recent_games) < 2:
        return StreakInfo()

    wins = sum(1 for game in recent_games if game.win)
    win_rate = wins / len(recent_games)

    streak = 0
    streak_type: Optional[str] = None
    for game in reversed(recent_games):
        result = "win" if game.win else "loss"
        if streak_type is None:
            streak_type = result
            streak = 1
        elif result == streak_type:
            streak += 1
        else:
            break

    return StreakInfo(
        is_hot=win_rate >= 0.75 or (streak >= 3 and streak_type == "win"),
        is_cold=win_rate <= 0.25 or (streak >= 3 and streak_type == "loss"),
        streak=streak,
        streak_type=streak_type,
        win_rate=win_rate,
    )


def score_form(scores: Sequence[float], season_average: float) -> tuple[bool, bool]:
    """
    Hot/cold from scoring: the recent mean (last 3 games) sits more than half
    a standard deviation above (hot) or below (cold) the season average.
    """
    if len(scores) < 2:
        return False, False
    std_dev = math.sqrt(population_variance(scores))
    if std_dev == 0:
        return False, False
    recent_mean = mean(scores[-HOT_COLD_RECENT_GAMES:])
    deviation = (recent_mean - season_average) / std_dev
    return deviation > HOT_COLD_SIGMA, deviation < -HOT_COLD_SIGMA


def calculate_dpr(
    average_score: float,
    wins: int,
    losses: int,
    games_played: int,
    league_average: float,
) -> float:
    """
    Dominant Performance Rating from scoring ratio and win rate.

    DPR = scoring_ratio * 0.7 + win_rate * 0.6 + 0.4; 1.0 before any games.
    """
    if games_played <= 0:
        return 1.0
    scoring_ratio = average_score / (league_average or FALLBACK_LEAGUE_SCORE)
    decided = wins + losses
    win_rate = wins / decided if decided > 0 else 0.0
    return scoring_ratio * 0.7 + win_rate * 0.6 + 0.4


def _games_by_roster(matchups: Sequence[Mapping[str, Any]]) -> dict[str, list[GameResult]]:
    games: dict[str, list[GameResult]] = {}
    for matchup in matchups:
        team1_id = str(_first(matchup, "team1_roster_id", "t1", default=""))
        team2_id = str(_first(matchup, "team2_roster_id", "t2", default=""))
        if not team1_id or not team2_id:
            continue

        score1 = float(_first(matchup, "team1_score", "score1", default=0))
        score2 = float(_first(matchup, "team2_score", "score2", default=0))
        try:
            week = int(matchup.get("week") or 0)
        except (TypeError, ValueError):
            week = 0

        games.setdefault(team1_id, []).append(GameResult(week=week, scored=score1, allowed=score2))
        games.setdefault(team2_id, []).append(GameResult(week=week, scored=score2, allowed=score1))

    for results in games.values():
        results.sort(key=lambda g: g.week)
    return games


def _team_name(
    roster_id: str,
    record: Mapping[str, Any],
    season: Any,
    team_details: Optional[TeamDetailsFn],
) -> str:
    details = None
    if team_details is not None:
        try:
            details = team_details(roster_id, season)
            owner_id = _first(record, "owner_id", "ownerId")
            if not details and owner_id is not None:
                details = team_details(owner_id, season)
        except Exception as e:
            logger.warning("team_details_lookup_failed", roster_id=roster_id, error=str(e))
            details = None

    if details:
        name = _first(details, "name", "team_name")
        if name:
            return str(name)
    return str(_first(record, "name", "team_name", default=f"Team {roster_id}"))


def build_dynamic_season_stats(
    season_records: Optional[Mapping[Any, Mapping[Any, Mapping[str, Any]]]],
    season: Any,
    matchups_by_season: Optional[Mapping[Any, Sequence[Mapping[str, Any]]]] = None,
    team_details: Optional[TeamDetailsFn] = None,
) -> dict[str, TeamSeasonStats]:
    """
    Build the roster-keyed stats map for one season.

    Args:
        season_records: season -> roster id -> raw record
        season: Season identifier (str or int)
        matchups_by_season: season -> list of matchup results (optional)
        team_details: Callable (roster_or_owner_id, season) -> {"name": ...}

    Returns:
        Dict of roster id -> TeamSeasonStats, empty when the season is missing
    """
    if not season_records or season is None:
        logger.warning("season_stats_missing_input", season=normalize_season_key(season))
        return {}

    season_data = get_season_data(season_records, season)
    if not season_data:
        logger.warning("season_stats_no_season", season=normalize_season_key(season))
        return {}

    season_matchups = get_season_data(matchups_by_season, season) or []
    games = _games_by_roster(season_matchups)

    records = {str(rid): record for rid, record in season_data.items()}
    averages = [float(_first(r, "averageScore", "average_score", default=0) or 0) for r in records.values()]
    league_average = sum(averages) / len(averages) if averages else FALLBACK_LEAGUE_SCORE

    ranked = sorted(
        records,
        key=lambda rid: float(_first(records[rid], "averageScore", "average_score", default=0) or 0),
        reverse=True,
    )

    stats: dict[str, TeamSeasonStats] = {}
    for index, roster_id in enumerate(ranked):
        record = records[roster_id]
        roster_games = games.get(roster_id, [])

        wins = int(_first(record, "wins", default=0))
        losses = int(_first(record, "losses", default=0))
        ties = int(_first(record, "ties", default=0))
        games_played = wins + losses + ties
        win_percentage = wins / games_played if games_played > 0 else 0.0

        points_for = float(_first(record, "totalPointsFor", "pointsFor", "points_for", default=0))
        points_against = float(_first(record, "totalPointsAgainst", "pointsAgainst", "points_against", default=0))
        average = _first(record, "averageScore", "average_score")
        if not average:
            average = points_for / games_played if games_played > 0 else 0.0
        average = float(average)

        raw_scores = _first(record, "scores", "weeklyScores", "weekly_scores")
        if raw_scores:
            scores = tuple(float(s) for s in raw_scores)
        else:
            scores = tuple(g.scored for g in roster_games)

        streaks = calculate_streaks(roster_games[-RECENT_FORM_GAMES:])
        if len(scores) >= 2:
            is_hot, is_cold = score_form(scores, average)
        else:
            is_hot, is_cold = streaks.is_hot, streaks.is_cold

        dpr = _first(record, "dpr", "DPR")
        if dpr is None:
            dpr = calculate_dpr(average, wins, losses, games_played, league_average)

        tier = _first(record, "tier")
        if tier is None:
            tier = 1 if index < 4 else 2 if index < 8 else 3

        owner_id = _first(record, "owner_id", "ownerId")

        stats[roster_id] = TeamSeasonStats(
            roster_id=roster_id,
            name=_team_name(roster_id, record, season, team_details),
            owner_id=str(owner_id) if owner_id is not None else None,
            average_score=round(average, 2),
            scores=scores,
            wins=wins,
            losses=losses,
            ties=ties,
            games_played=games_played,
            dpr=round(float(dpr), 3),
            is_hot=is_hot,
            is_cold=is_cold,
            rank=index + 1,
            tier=int(tier),
            points_for=round(points_for, 2),
            points_against=round(points_against, 2),
            win_percentage=round(win_percentage, 3),
            streak=streaks.streak,
            streak_type=streaks.streak_type,
        )

    logger.debug("season_stats_built", season=normalize_season_key(season), teams=len(stats))
    return stats


def get_stats_by_team_name(
    team_stats: Optional[Mapping[str, TeamSeasonStats]],
    team_name: Optional[str],
) -> Optional[TeamSeasonStats]:
    """Exact (case-sensitive) display-name lookup."""
    if not team_stats or not team_name:
        return None
    for stats in team_stats.values():
        if stats.name == team_name:
            return stats
    return None


def map_team_names_to_roster_ids(
    team_stats: Optional[Mapping[str, TeamSeasonStats]],
    team1_name: Optional[str],
    team2_name: Optional[str],
) -> dict[str, Any]:
    team1 = get_stats_by_team_name(team_stats, team1_name)
    team2 = get_stats_by_team_name(team_stats, team2_name)
    return {
        "team1_roster_id": team1.roster_id if team1 else None,
        "team2_roster_id": team2.roster_id if team2 else None,
        "team1_stats": team1,
        "team2_stats": team2,
    }
