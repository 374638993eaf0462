"""
Command-line entry point.

Prices one matchup from a JSON stats file and prints the market as JSON:

    fantasy-odds markets --stats stats.json --team1 4 --team2 11 --week 5

The stats file is a roster-keyed map of team stats. With --season it is
instead read as season records ({season: {roster_id: record}}), optionally
wrapped as {"records": ..., "matchups": {season: [...]}}, and run through
the season stats builder first.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from .config import settings
from .logging_config import get_logger
from .markets import generate_clean_betting_markets
from .models import MarketOptions, Matchup
from .season_stats import build_dynamic_season_stats

logger = get_logger(__name__)


def _load_json(path: str) -> Any:
    with Path(path).open(encoding="utf-8") as f:
        return json.load(f)


def _team_stats_from_file(data: Any, season: Optional[str]) -> Any:
    if season is None:
        return data
    if isinstance(data, dict) and "records" in data:
        return build_dynamic_season_stats(data["records"], season, data.get("matchups"))
    return build_dynamic_season_stats(data, season)


def build_parser() -> argparse.ArgumentParser:
    cfg = settings.engine
    parser = argparse.ArgumentParser(prog="fantasy-odds", description="Deterministic fantasy football betting lines.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    markets = subparsers.add_parser("markets", help="Price a single matchup and print the market as JSON.")
    markets.add_argument("--stats", required=True, help="JSON file with team stats (or season records with --season).")
    markets.add_argument("--team1", required=True, help="Roster id of team1.")
    markets.add_argument("--team2", required=True, help="Roster id of team2.")
    markets.add_argument("--name1", default=None, help="Display name of team1 (also used for lookup).")
    markets.add_argument("--name2", default=None, help="Display name of team2 (also used for lookup).")
    markets.add_argument("--week", type=int, default=None, help=f"Week number (default {cfg.default_week}).")
    markets.add_argument("--win-prob", type=float, default=None, help="Caller-supplied P(team1 wins).")
    markets.add_argument("--vig", type=float, default=cfg.default_vig, help="Book margin.")
    markets.add_argument("--no-props", action="store_true", help="Omit prop bets.")
    markets.add_argument("--season", default=None, help="Treat the stats file as season records for this season.")
    return parser


def run_markets(args: argparse.Namespace) -> int:
    cfg = settings.engine
    try:
        data = _load_json(args.stats)
    except OSError as e:
        logger.error("stats_file_unreadable", path=args.stats, error=str(e))
        print(f"error: cannot read stats file {args.stats}: {e}", file=sys.stderr)
        return 1
    except json.JSONDecodeError as e:
        logger.error("stats_file_invalid_json", path=args.stats, error=str(e))
        print(f"error: invalid JSON in {args.stats}: {e}", file=sys.stderr)
        return 1

    if not isinstance(data, dict):
        print(f"error: {args.stats} must contain a JSON object", file=sys.stderr)
        return 1

    team_stats = _team_stats_from_file(data, args.season)

    matchup = Matchup(
        team1_id=args.team1,
        team2_id=args.team2,
        team1_name=args.name1,
        team2_name=args.name2,
        win_probability=args.win_prob,
        week=args.week,
    )
    options = MarketOptions(
        vig=args.vig,
        include_prop_bets=cfg.include_prop_bets and not args.no_props,
        week_number=args.week if args.week is not None else cfg.default_week,
    )

    markets = generate_clean_betting_markets(matchup, team_stats, options)
    print(json.dumps(markets.to_dict(), indent=2))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "markets":
        return run_markets(args)

    parser.print_help()
    return 2


if __name__ == "__main__":
    sys.exit(main())
