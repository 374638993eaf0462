"""
Market assembler.

`generate_clean_betting_markets` prices one matchup end to end:

1. Resolve both teams (roster id, then name; defaults when unresolved)
2. Power differential
3. Win probability: caller's value blended with the computed one, then
   nudged by power and clamped
4. Spread (historical model when it has real stats, else distribution)
5. Moneylines, total and juice, all seeded from the matchup key

Every "random" draw uses a seed derived from "{team1}-{team2}-w{week}" plus a
purpose suffix, so the same inputs always price identically.
"""

import math
from dataclasses import replace
from typing import Any, Mapping, Optional

from .config import settings
from .errors import NumericalDegeneracyError
from .logging_config import get_logger, log_error, log_market
from .models import (
    BettingMarkets,
    MarketOptions,
    Matchup,
    MoneylineMarket,
    MoneylineSide,
    PowerAnalysis,
    SpreadMarket,
    SpreadSide,
    TeamSeasonStats,
    TotalMarket,
    TotalSide,
)
from .numerics import clamp
from .power import PowerDifferential, calculate_team_power_differential
from .predictors import (
    SpreadBasis,
    SpreadContext,
    SpreadResult,
    distribution_spread_model,
    historical_spread_model,
    select_spread_result,
)
from .pricing import (
    TotalContext,
    calculate_spread_from_probability,
    calculate_total,
    convert_spread_to_moneyline,
    format_spread_line,
    generate_prop_bets,
    generate_spread_juice,
    generate_total_juice,
    validate_odds_consistency,
)
from .resolution import coerce_stats_map, resolve_team_stats, stats_or_default
from .win_probability import calculate_detailed_win_probability

logger = get_logger(__name__)


def default_market_options() -> MarketOptions:
    cfg = settings.engine
    return MarketOptions(
        vig=cfg.default_vig,
        include_prop_bets=cfg.include_prop_bets,
        week_number=cfg.default_week,
    )


def _resolve_week(week: Any, default: int) -> int:
    if isinstance(week, bool) or not isinstance(week, int):
        return default
    return week


def normalize_market_options(options: Optional[MarketOptions]) -> MarketOptions:
    """Fill missing or unusable option values from the engine defaults."""
    if options is None:
        return default_market_options()
    cfg = settings.engine
    vig = options.vig
    if isinstance(vig, bool) or not isinstance(vig, (int, float)) or not math.isfinite(vig):
        vig = cfg.default_vig
    return replace(
        options,
        vig=vig,
        include_prop_bets=bool(options.include_prop_bets),
        week_number=_resolve_week(options.week_number, cfg.default_week),
    )


def build_seed_key(matchup: Matchup, week: int) -> str:
    """Base seed for a matchup; ids preferred over names."""
    team1 = matchup.team1_id or matchup.team1_name or "team1"
    team2 = matchup.team2_id or matchup.team2_name or "team2"
    return f"{team1}-{team2}-w{week}"


def blend_win_probability(caller: Optional[float], computed: Optional[float]) -> float:
    """
    Combine the caller's win probability with the model's.

    A computed value near a coin flip defers to the caller (30/70); otherwise
    the computed value dominates (70/30).
    """
    cfg = settings.engine
    if computed is None:
        return caller if caller is not None else 0.5
    if caller is None:
        return computed

    if abs(computed - 0.5) <= cfg.coin_flip_band:
        weight = 1 - cfg.computed_probability_weight
    else:
        weight = cfg.computed_probability_weight
    return computed * weight + caller * (1 - weight)


def _computed_win_probability(matchup: Matchup, team_stats: Mapping[str, TeamSeasonStats]) -> Optional[float]:
    if not matchup.team1_id or not matchup.team2_id or not team_stats:
        return None
    breakdown = calculate_detailed_win_probability(matchup.team1_id, matchup.team2_id, team_stats)
    if breakdown.error:
        return None
    return breakdown.win_probability


def _spread_result(context: SpreadContext) -> SpreadResult:
    historical: Optional[SpreadResult] = None
    try:
        historical = historical_spread_model.predict(context)
    except NumericalDegeneracyError as e:
        logger.warning("historical_spread_degenerate", step=e.step, value=e.value)

    try:
        distribution = distribution_spread_model.predict(context)
    except NumericalDegeneracyError as e:
        logger.warning("distribution_spread_degenerate", step=e.step, value=e.value)
        distribution = SpreadResult(
            spread=calculate_spread_from_probability(context.win_probability, context.power_diff),
            confidence=None,
            basis=SpreadBasis.PROBABILITY,
            model="probability converter",
        )

    return select_spread_result(historical, distribution)


def _power_details(power: PowerDifferential, team: int) -> dict[str, Any]:
    result = power.team1 if team == 1 else power.team2
    return {
        **result.details,
        "points_component": result.points_component,
        "consistency_component": result.consistency_component,
        "momentum_component": result.momentum_component,
    }


def _build_markets(
    matchup: Matchup,
    team_stats: Mapping[str, TeamSeasonStats],
    options: MarketOptions,
) -> BettingMarkets:
    cfg = settings.engine
    week = _resolve_week(matchup.week, options.week_number)
    seed_key = build_seed_key(matchup, week)

    # 1. Team resolution
    team1 = stats_or_default(
        resolve_team_stats(team_stats, matchup.team1_id, matchup.team1_name),
        cfg.default_average_score,
    )
    team2 = stats_or_default(
        resolve_team_stats(team_stats, matchup.team2_id, matchup.team2_name),
        cfg.default_average_score,
    )
    team1_name = matchup.team1_name or team1.name or f"Team {matchup.team1_id}"
    team2_name = matchup.team2_name or team2.name or f"Team {matchup.team2_id}"

    # 2. Power
    power = calculate_team_power_differential(team1, team2, team_stats)

    # 3. Win probability
    computed = _computed_win_probability(matchup, team_stats)
    blended = blend_win_probability(matchup.win_probability, computed)
    adjusted = clamp(
        blended + power.power_diff * cfg.power_probability_factor,
        cfg.min_win_probability,
        cfg.max_win_probability,
    )

    # 4. Spread
    result = _spread_result(SpreadContext(
        team1=team1,
        team2=team2,
        win_probability=adjusted,
        power=power,
        team_stats=team_stats,
        team1_id=matchup.team1_id,
        team2_id=matchup.team2_id,
        team1_name=matchup.team1_name,
        team2_name=matchup.team2_name,
    ))
    spread = result.spread
    abs_spread = abs(spread)
    is_pick = abs_spread == 0
    is_team1_favorite = spread < 0

    # 5. Moneylines
    if is_pick:
        team1_ml = convert_spread_to_moneyline(0, True, options.vig, f"{seed_key}-ml-pk-team1")
        team2_ml = convert_spread_to_moneyline(0, False, options.vig, f"{seed_key}-ml-pk-team2")
    else:
        team1_ml = convert_spread_to_moneyline(abs_spread, is_team1_favorite, options.vig, f"{seed_key}-ml-team1")
        team2_ml = convert_spread_to_moneyline(abs_spread, not is_team1_favorite, options.vig, f"{seed_key}-ml-team2")

    # 6. Total
    total = calculate_total(
        team1.average_score,
        team2.average_score,
        TotalContext(
            pace=1 + power.power_diff * cfg.pace_per_power_point,
            variance=cfg.total_variance,
            week_number=week,
            seed_key=f"{seed_key}-total",
        ),
    )

    # 7. Juice
    spread_juice = generate_spread_juice(spread, f"{seed_key}-spread-juice")
    total_juice = generate_total_juice(f"{seed_key}-total-juice")
    team1_juice = spread_juice.favorite if (is_pick or is_team1_favorite) else spread_juice.underdog
    team2_juice = spread_juice.underdog if (is_pick or is_team1_favorite) else spread_juice.favorite

    if not is_pick:
        consistency = validate_odds_consistency(spread, team1_ml, team2_ml, options.vig)
    else:
        consistency = {"is_consistent": True}

    markets = BettingMarkets(
        spread=SpreadMarket(
            team1=SpreadSide(name=team1_name, line=format_spread_line(spread, True, is_pick), odds=team1_juice),
            team2=SpreadSide(name=team2_name, line=format_spread_line(spread, False, is_pick), odds=team2_juice),
        ),
        moneyline=MoneylineMarket(
            team1=MoneylineSide(name=team1_name, odds=team1_ml),
            team2=MoneylineSide(name=team2_name, odds=team2_ml),
        ),
        total=TotalMarket(
            over=TotalSide(line=total, odds=total_juice.over),
            under=TotalSide(line=total, odds=total_juice.under),
        ),
        power_analysis=PowerAnalysis(
            team1_power=power.team1.power_score,
            team2_power=power.team2.power_score,
            power_diff=power.power_diff,
            team1_details=_power_details(power, 1),
            team2_details=_power_details(power, 2),
            original_win_prob=matchup.win_probability,
            computed_win_prob=computed,
            adjusted_win_prob=adjusted,
            spread=spread,
            spread_basis=result.basis.value,
            spread_confidence=result.confidence,
            is_pick=is_pick,
        ),
        props=generate_prop_bets(team1, team2, team1_name, team2_name) if options.include_prop_bets else None,
        seed_key=seed_key,
    )

    log_market(
        logger,
        seed_key=seed_key,
        team1=team1_name,
        team2=team2_name,
        spread=spread,
        basis=result.basis.value,
        spread_model=result.model,
        service_version=settings.service_version,
        win_probability=round(adjusted, 4),
        total=total,
        odds_consistent=consistency["is_consistent"],
    )
    return markets


def generate_clean_betting_markets(
    matchup: Matchup,
    team_stats: Optional[Mapping[Any, Any]] = None,
    options: Optional[MarketOptions] = None,
) -> BettingMarkets:
    """
    Price a matchup: spread, moneyline, total, juice and optional props.

    Args:
        matchup: Teams to price, with an optional caller win probability
        team_stats: Roster-keyed stats (TeamSeasonStats or raw mappings)
        options: Vig, props toggle and default week

    Returns:
        BettingMarkets; a neutral market is returned if pricing fails
    """
    options = normalize_market_options(options)
    try:
        return _build_markets(matchup, coerce_stats_map(team_stats), options)
    except Exception as e:
        log_error(logger, e, {
            "operation": "generate_clean_betting_markets",
            "team1": matchup.team1_id or matchup.team1_name,
            "team2": matchup.team2_id or matchup.team2_name,
        })
        neutral = Matchup(
            team1_id=matchup.team1_id,
            team2_id=matchup.team2_id,
            team1_name=matchup.team1_name,
            team2_name=matchup.team2_name,
            week=matchup.week,
        )
        return _build_markets(neutral, {}, default_market_options())
