"""
Line pricing: probability to spread, spread to moneyline, totals and juice.

Curves imitate real sportsbook behaviour: small spreads cluster near even
money, big spreads blow out with the favourite's price growing faster than
the underdog's payout. Every "random" choice is drawn from a seeded source so
a matchup always prices the same way.

Sign convention: a NEGATIVE spread means team1 is favoured.
"""

from dataclasses import dataclass
import math
from typing import Any, Optional

from .config import settings
from .logging_config import get_logger
from .models import TeamSeasonStats
from .numerics import clamp, round_half_up, round_to_half, seeded_offset
from .seeded_random import seeded_random_from_string

logger = get_logger(__name__)

# (abs spread, favourite odds, underdog odds) before vig
MONEYLINE_CURVE: tuple[tuple[float, float, float], ...] = (
    (0.0, -110.0, 100.0),
    (1.5, -122.0, 102.0),
    (3.0, -140.0, 118.0),
    (4.5, -165.0, 138.0),
    (7.0, -220.0, 180.0),
    (10.0, -300.0, 240.0),
    (15.0, -433.0, 340.0),
)
# Per-point growth past the last breakpoint
FAVORITE_TAIL_SLOPE = 35.0
UNDERDOG_TAIL_SLOPE = 25.0

PICKEM_BASE_ODDS = -120
PICKEM_JITTER_WIDTH = 6  # -3..+3

MIN_FAVORITE_ODDS = -5000
MAX_FAVORITE_ODDS = -101
MIN_UNDERDOG_ODDS = 100
MAX_UNDERDOG_ODDS = 5000

STANDARD_JUICE = -110


@dataclass
class SpreadJuice:
    favorite: int
    underdog: int


@dataclass
class TotalJuice:
    over: int
    under: int


@dataclass
class TotalContext:
    """Matchup context for the total calculator."""
    pace: float = 1.0
    variance: float = 0.03
    week_number: int = 3
    seed_key: str = "total"


# ─────────────────────────────────────────────────────────────────────────────
# PROBABILITY -> SPREAD
# ─────────────────────────────────────────────────────────────────────────────

def calculate_spread_from_probability(win_probability: float, power_diff: float = 0.0) -> float:
    """
    Baseline spread from team1's win probability.

    |p - 0.5|   spread magnitude
    <= 0.05     0 -> 3
    <= 0.15     3 -> 7
    <= 0.30     7 -> 14
    >  0.30     14 + 20 per unit beyond

    Team1 favoured (p > 0.5) gives a negative spread. A power differential
    nudges the line by -0.2 points per power point.
    """
    prob_diff = win_probability - 0.5
    magnitude = abs(prob_diff)
    direction = math.copysign(1.0, prob_diff) if prob_diff != 0 else 0.0

    if magnitude <= 0.05:
        spread = -prob_diff * 60
    elif magnitude <= 0.15:
        spread = -(3 + (magnitude - 0.05) * 40) * direction
    elif magnitude <= 0.30:
        spread = -(7 + (magnitude - 0.15) * (7 / 0.15)) * direction
    else:
        spread = -(14 + (magnitude - 0.30) * 20) * direction

    spread -= power_diff * 0.2
    return round_to_half(spread)


# ─────────────────────────────────────────────────────────────────────────────
# SPREAD -> MONEYLINE
# ─────────────────────────────────────────────────────────────────────────────

def _curve_odds(abs_spread: float) -> tuple[float, float]:
    """Interpolate (favourite, underdog) odds from the moneyline curve."""
    for (lo, fav_lo, dog_lo), (hi, fav_hi, dog_hi) in zip(MONEYLINE_CURVE, MONEYLINE_CURVE[1:]):
        if abs_spread <= hi:
            fraction = (abs_spread - lo) / (hi - lo)
            return (
                fav_lo + (fav_hi - fav_lo) * fraction,
                dog_lo + (dog_hi - dog_lo) * fraction,
            )

    last_spread, last_fav, last_dog = MONEYLINE_CURVE[-1]
    beyond = abs_spread - last_spread
    return last_fav - beyond * FAVORITE_TAIL_SLOPE, last_dog + beyond * UNDERDOG_TAIL_SLOPE


def pickem_moneyline(seed_key: str) -> int:
    """Coin-flip price: -120 with a seeded -3..+3 jitter."""
    rng = seeded_random_from_string(seed_key)
    return PICKEM_BASE_ODDS + seeded_offset(rng, PICKEM_JITTER_WIDTH)


def convert_spread_to_moneyline(
    abs_spread: float,
    is_favorite: bool = True,
    vig: float = 0.045,
    seed_key: str = "moneyline",
) -> int:
    """
    American moneyline for one side of a spread.

    Args:
        abs_spread: Spread magnitude in points
        is_favorite: Price the favourite (True) or the underdog (False)
        vig: Book margin; both sides are scaled by (1 + vig/2)
        seed_key: Seed for the pick'em jitter (unused for non-zero spreads)

    Returns:
        American odds, favourite in [-5000, -101], underdog in [+100, +5000]
    """
    abs_spread = abs(abs_spread)
    if abs_spread == 0:
        return pickem_moneyline(seed_key)

    favorite, underdog = _curve_odds(abs_spread)

    vig_factor = 1 + vig * 0.5
    favorite_odds = round_half_up(favorite * vig_factor)
    underdog_odds = round_half_up(underdog * vig_factor)

    favorite_odds = int(clamp(favorite_odds, MIN_FAVORITE_ODDS, MAX_FAVORITE_ODDS))
    underdog_odds = int(clamp(underdog_odds, MIN_UNDERDOG_ODDS, MAX_UNDERDOG_ODDS))

    return favorite_odds if is_favorite else underdog_odds


# ─────────────────────────────────────────────────────────────────────────────
# TOTALS
# ─────────────────────────────────────────────────────────────────────────────

def calculate_total(
    team1_avg: Optional[float],
    team2_avg: Optional[float],
    context: Optional[TotalContext] = None,
) -> float:
    """
    Over/under line from both teams' scoring averages.

    Missing or implausible averages (sum < 150) fall back to 220. Early weeks
    get a 2% bump, then a seeded multiplicative jitter is applied before the
    line is clamped to [180, 320] and rounded to the half point.
    """
    cfg = settings.engine
    ctx = context or TotalContext()

    if team1_avg is None or team2_avg is None:
        base_total = cfg.default_total
    else:
        base_total = team1_avg + team2_avg
        if not math.isfinite(base_total) or base_total < cfg.min_plausible_total:
            base_total = cfg.default_total

    total = base_total * ctx.pace

    if ctx.week_number <= cfg.early_season_week:
        total *= 1 + cfg.early_season_inflation

    rng = seeded_random_from_string(ctx.seed_key)
    total *= 1 + (rng() - 0.5) * ctx.variance

    total = clamp(total, cfg.min_total, cfg.max_total)
    return round_to_half(total)


# ─────────────────────────────────────────────────────────────────────────────
# JUICE
# ─────────────────────────────────────────────────────────────────────────────

def generate_spread_juice(spread: float, seed_key: str) -> SpreadJuice:
    """
    Spread juice for favourite and underdog.

    - Close games (<= 1.5): asymmetric, favourite -115..-125, dog -105..-115
    - Big spreads (>= 10): shared -108..-116
    - Otherwise: +/-8 mirrored around -110, clamped to [-125, -100]
    """
    abs_spread = abs(spread)
    rng = seeded_random_from_string(seed_key)

    if abs_spread <= 1.5:
        favorite = -115 - round_half_up(rng() * 10)
        underdog = -105 - round_half_up(rng() * 10)
        return SpreadJuice(favorite=favorite, underdog=underdog)

    if abs_spread >= 10:
        juice = -108 - round_half_up(rng() * 8)
        return SpreadJuice(favorite=juice, underdog=juice)

    offset = seeded_offset(rng, 16)
    return SpreadJuice(
        favorite=int(clamp(STANDARD_JUICE + offset, -125, -100)),
        underdog=int(clamp(STANDARD_JUICE - offset, -125, -100)),
    )


def generate_total_juice(seed_key: str) -> TotalJuice:
    """Over/under juice: +/-6 mirrored around -110, clamped to [-120, -105]."""
    rng = seeded_random_from_string(seed_key)
    offset = seeded_offset(rng, 12)
    return TotalJuice(
        over=int(clamp(STANDARD_JUICE + offset, -120, -105)),
        under=int(clamp(STANDARD_JUICE - offset, -120, -105)),
    )


# ─────────────────────────────────────────────────────────────────────────────
# ODDS HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def odds_to_implied_probability(american_odds: float) -> float:
    if american_odds > 0:
        return 100 / (american_odds + 100)
    return abs(american_odds) / (abs(american_odds) + 100)


def probability_to_american_odds(
    probability: float,
    add_vig: bool = True,
    vig_amount: float = 0.045,
) -> int:
    """American odds for a probability, optionally shaded by the vig."""
    adjusted = probability
    if add_vig:
        adjusted = probability + vig_amount if probability >= 0.5 else probability - vig_amount

    adjusted = clamp(adjusted, 0.01, 0.99)

    if adjusted >= 0.5:
        return round_half_up(-(adjusted / (1 - adjusted)) * 100)
    return round_half_up(((1 - adjusted) / adjusted) * 100)


def validate_odds_consistency(
    spread: float,
    team1_ml: int,
    team2_ml: int,
    vig: float = 0.045,
    seed_key: str = "moneyline",
) -> dict[str, Any]:
    """
    Check a pair of moneylines against the curve implied by `spread`.

    Tolerance widens with the spread: 50 under 3 points, 100 under 7, 200 beyond.
    """
    abs_spread = abs(spread)
    expected_team1 = convert_spread_to_moneyline(abs_spread, spread < 0, vig, seed_key)
    expected_team2 = convert_spread_to_moneyline(abs_spread, spread > 0, vig, seed_key)

    team1_diff = abs(team1_ml - expected_team1)
    team2_diff = abs(team2_ml - expected_team2)

    tolerance = 50 if abs_spread < 3 else 100 if abs_spread < 7 else 200
    consistent = team1_diff <= tolerance and team2_diff <= tolerance

    if not consistent:
        logger.warning(
            "moneyline_inconsistent",
            spread=spread,
            team1_ml=team1_ml,
            team2_ml=team2_ml,
            expected_team1=expected_team1,
            expected_team2=expected_team2,
        )

    return {
        "is_consistent": consistent,
        "team1_expected": expected_team1,
        "team2_expected": expected_team2,
        "team1_actual": team1_ml,
        "team2_actual": team2_ml,
        "adjustment_needed": not consistent,
    }


def format_points(value: float) -> str:
    """Render a half-point line without a trailing .0 (28.0 -> '28')."""
    return f"{value:g}"


def format_spread_line(spread: float, is_team1: bool, is_pick: bool) -> str:
    """
    Display string for one side of the spread.

    Team2's line is always the exact negation of team1's.
    """
    if is_pick:
        return "PK"
    line = spread if is_team1 else -spread
    if line > 0:
        return f"+{format_points(line)}"
    return format_points(line)


# ─────────────────────────────────────────────────────────────────────────────
# PROPS
# ─────────────────────────────────────────────────────────────────────────────

def generate_prop_bets(
    team1_stats: TeamSeasonStats,
    team2_stats: TeamSeasonStats,
    team1_name: Optional[str],
    team2_name: Optional[str],
) -> dict[str, Any]:
    """Team total and margin-of-victory props."""
    team1_line = round_to_half((team1_stats.average_score or 100) - 5)
    team2_line = round_to_half((team2_stats.average_score or 100) - 5)

    return {
        "team_totals": {
            "team1": {
                "name": team1_name,
                "over": {"line": team1_line, "odds": -115},
                "under": {"line": team1_line, "odds": -105},
            },
            "team2": {
                "name": team2_name,
                "over": {"line": team2_line, "odds": -115},
                "under": {"line": team2_line, "odds": -105},
            },
        },
        "margin_of_victory": {
            "under_7": {"odds": 140},
            "7_to_14": {"odds": 180},
            "over_14": {"odds": 250},
        },
    }
