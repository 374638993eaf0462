"""
Pytest configuration and fixtures for fantasy odds engine tests.
"""

import pytest

from fantasy_odds.models import Matchup, TeamSeasonStats


def _stats(roster_id, name, scores, average=None, wins=0, losses=0, **kwargs) -> TeamSeasonStats:
    scores = tuple(scores)
    if average is None:
        average = sum(scores) / len(scores) if scores else 0.0
    return TeamSeasonStats(
        roster_id=roster_id,
        name=name,
        average_score=average,
        scores=scores,
        wins=wins,
        losses=losses,
        games_played=wins + losses,
        **kwargs,
    )


@pytest.fixture
def crude_crushers() -> TeamSeasonStats:
    """Above-average, steady scorer."""
    return _stats(
        "4", "Crude Crushers",
        [123.52, 118.57, 144.38, 138.93],
        average=131.35, wins=3, losses=1, dpr=1.049,
    )


@pytest.fixture
def constant_sorrow() -> TeamSeasonStats:
    """Volatile scorer in a cold stretch."""
    return _stats(
        "11", "Team of Constant Sorrow",
        [141.64, 88.37, 113.89, 126.76],
        average=118.80, wins=1, losses=3, dpr=0.889, is_cold=True,
    )


@pytest.fixture
def juggernaut() -> TeamSeasonStats:
    """Very high, low-variance scorer (152.75 over four games)."""
    return _stats("A", "Juggernauts", [150.0, 155.0, 152.0, 154.0], wins=4, losses=0)


@pytest.fixture
def mismatch_stats(juggernaut, constant_sorrow) -> dict[str, TeamSeasonStats]:
    return {"A": juggernaut, "11": constant_sorrow}


@pytest.fixture
def even_stats() -> dict[str, TeamSeasonStats]:
    """Two teams averaging 120 with identical score histories and no form flags."""
    scores = [115.0, 125.0, 118.0, 122.0]
    return {
        "E1": _stats("E1", "Even Steven", scores, wins=2, losses=2),
        "E2": _stats("E2", "Level Best", scores, wins=2, losses=2),
    }


@pytest.fixture
def league_stats(crude_crushers, constant_sorrow, juggernaut) -> dict[str, TeamSeasonStats]:
    return {"4": crude_crushers, "11": constant_sorrow, "A": juggernaut}


@pytest.fixture
def mismatch_matchup() -> Matchup:
    return Matchup(team1_id="A", team2_id="11", win_probability=0.651, week=5)


@pytest.fixture
def season_records() -> dict:
    """Nine-team season keyed by an integer season."""
    return {
        2024: {
            "1": {"wins": 4, "losses": 0, "averageScore": 150.0, "totalPointsFor": 600.0, "totalPointsAgainst": 480.0},
            "2": {"wins": 3, "losses": 1, "averageScore": 140.0, "totalPointsFor": 560.0, "totalPointsAgainst": 500.0},
            "3": {"wins": 3, "losses": 1, "averageScore": 135.0, "totalPointsFor": 540.0, "totalPointsAgainst": 510.0},
            "4": {"wins": 2, "losses": 2, "averageScore": 130.0, "totalPointsFor": 520.0, "totalPointsAgainst": 520.0},
            "5": {"wins": 2, "losses": 2, "averageScore": 125.0, "totalPointsFor": 500.0, "totalPointsAgainst": 505.0},
            "6": {"wins": 2, "losses": 2, "averageScore": 120.0, "totalPointsFor": 480.0, "totalPointsAgainst": 490.0},
            "7": {"wins": 1, "losses": 3, "averageScore": 115.0, "totalPointsFor": 460.0, "totalPointsAgainst": 530.0},
            "8": {"wins": 1, "losses": 3, "averageScore": 110.0, "totalPointsFor": 440.0, "totalPointsAgainst": 540.0},
            "9": {"wins": 0, "losses": 4, "averageScore": 100.0, "totalPointsFor": 400.0, "totalPointsAgainst": 560.0},
        }
    }
