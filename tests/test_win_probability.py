"""
Tests for the record/DPR/form win probability model.
"""

import pytest

from fantasy_odds.models import TeamSeasonStats
from fantasy_odds.win_probability import (
    calculate_detailed_win_probability,
    calculate_win_probability,
    calculate_win_probability_by_names,
    form_probability,
    win_probability_from_stats,
)


def _team(roster_id, **kwargs) -> TeamSeasonStats:
    return TeamSeasonStats(roster_id=roster_id, name=f"Team {roster_id}", **kwargs)


class TestWinProbability:

    def test_identical_teams_coin_flip(self, even_stats):
        assert calculate_win_probability("E1", "E2", even_stats) == pytest.approx(0.5)

    def test_missing_team_coin_flip(self, even_stats):
        breakdown = calculate_detailed_win_probability("E1", "nope", even_stats)
        assert breakdown.win_probability == 0.5
        assert breakdown.error is not None

    def test_stronger_team_favoured(self, league_stats):
        p = calculate_win_probability("4", "11", league_stats)
        assert 0.5 < p <= 0.95
        assert calculate_win_probability("11", "4", league_stats) < 0.5

    def test_lookup_by_name(self, league_stats):
        by_id = calculate_win_probability("4", "11", league_stats)
        by_name = calculate_win_probability("Crude Crushers", "Team of Constant Sorrow", league_stats)
        assert by_name == pytest.approx(by_id)

    def test_clamped(self):
        strong = _team("1", average_score=250.0, wins=12, dpr=3.0, is_hot=True)
        weak = _team("2", average_score=60.0, losses=12, dpr=0.2, is_cold=True)
        assert win_probability_from_stats(strong, weak).win_probability == 0.95
        assert win_probability_from_stats(weak, strong).win_probability == 0.05

    def test_missing_dpr_defaults_to_one(self):
        team1 = _team("1", average_score=120.0)
        team2 = _team("2", average_score=120.0, dpr=1.0)
        breakdown = win_probability_from_stats(team1, team2)
        assert breakdown.dpr_diff == 0.0
        assert breakdown.dpr_prob == 0.5

    def test_record_component_clamped(self):
        team1 = _team("1", average_score=120.0, wins=10)
        team2 = _team("2", average_score=120.0)
        assert win_probability_from_stats(team1, team2).record_prob == 0.8

    def test_breakdown_weights(self):
        team1 = _team("1", average_score=130.0, wins=3, dpr=1.1)
        team2 = _team("2", average_score=120.0, wins=1, dpr=1.0)
        b = win_probability_from_stats(team1, team2)
        expected = b.dpr_prob * 0.5 + b.scoring_prob * 0.3 + b.form_prob * 0.1 + b.record_prob * 0.1
        assert b.win_probability == pytest.approx(expected)


class TestFormProbability:

    @pytest.mark.parametrize(
        "flags1, flags2, expected",
        [
            ({"is_hot": True}, {"is_cold": True}, 0.75),
            ({"is_cold": True}, {"is_hot": True}, 0.25),
            ({"is_hot": True}, {}, 0.6),
            ({}, {"is_hot": True}, 0.4),
            ({"is_cold": True}, {}, 0.4),
            ({}, {"is_cold": True}, 0.6),
            ({}, {}, 0.5),
            ({"is_hot": True}, {"is_hot": True}, 0.5),
        ],
    )
    def test_form_table(self, flags1, flags2, expected):
        prob, _ = form_probability(_team("1", **flags1), _team("2", **flags2))
        assert prob == expected


class TestByNames:

    def test_mapped(self, league_stats):
        result = calculate_win_probability_by_names("Crude Crushers", "Juggernauts", league_stats)
        assert result["mapping"]["team1_roster_id"] == "4"
        assert result["win_probability"] < 0.5

    def test_unmapped(self, league_stats):
        result = calculate_win_probability_by_names("Crude Crushers", "Ghosts", league_stats)
        assert result["win_probability"] == 0.5
        assert "error" in result
