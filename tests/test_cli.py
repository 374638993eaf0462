"""
Tests for the fantasy-odds command line.
"""

import json

import pytest

from fantasy_odds.cli import main


@pytest.fixture
def stats_file(tmp_path):
    path = tmp_path / "stats.json"
    path.write_text(json.dumps({
        "A": {"name": "Juggernauts", "averageScore": 152.75, "scores": [150, 155, 152, 154], "wins": 4},
        "11": {
            "name": "Team of Constant Sorrow",
            "averageScore": 118.80,
            "scores": [141.64, 88.37, 113.89, 126.76],
            "wins": 1,
            "losses": 3,
            "isCold": True,
        },
    }))
    return path


class TestMarketsCommand:

    def test_prints_market_json(self, stats_file, capsys):
        code = main(["markets", "--stats", str(stats_file), "--team1", "A", "--team2", "11", "--week", "5"])
        assert code == 0
        market = json.loads(capsys.readouterr().out)
        assert market["seed_key"] == "A-11-w5"
        assert market["spread"]["team1"]["name"] == "Juggernauts"
        assert float(market["spread"]["team1"]["line"]) < -5
        assert market["props"] is not None

    def test_no_props_and_names(self, stats_file, capsys):
        code = main([
            "markets", "--stats", str(stats_file), "--team1", "A", "--team2", "11",
            "--name1", "Big Dogs", "--no-props", "--win-prob", "0.6", "--vig", "0.05",
        ])
        assert code == 0
        market = json.loads(capsys.readouterr().out)
        assert market["props"] is None
        assert market["spread"]["team1"]["name"] == "Big Dogs"
        assert market["power_analysis"]["original_win_prob"] == 0.6

    def test_deterministic_output(self, stats_file, capsys):
        argv = ["markets", "--stats", str(stats_file), "--team1", "A", "--team2", "11"]
        main(argv)
        first = capsys.readouterr().out
        main(argv)
        assert capsys.readouterr().out == first

    def test_season_records(self, tmp_path, capsys, season_records):
        path = tmp_path / "season.json"
        path.write_text(json.dumps({"records": {str(k): v for k, v in season_records.items()}}))
        code = main(["markets", "--stats", str(path), "--team1", "1", "--team2", "9", "--season", "2024"])
        assert code == 0
        market = json.loads(capsys.readouterr().out)
        assert market["spread"]["team1"]["name"] == "Team 1"
        assert market["moneyline"]["team1"]["odds"] < 0

    def test_missing_file(self, tmp_path, capsys):
        code = main(["markets", "--stats", str(tmp_path / "nope.json"), "--team1", "1", "--team2", "2"])
        assert code == 1
        assert "cannot read" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        code = main(["markets", "--stats", str(path), "--team1", "1", "--team2", "2"])
        assert code == 1
        assert "invalid JSON" in capsys.readouterr().err

    def test_requires_subcommand(self):
        with pytest.raises(SystemExit):
            main([])
