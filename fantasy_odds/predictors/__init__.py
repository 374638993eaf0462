"""
Spread models.

Two independent strategies behind one interface:
- Historical ("enhanced dynamic"): season scoring history, preferred when
  both teams are in the stats map
- Distribution: normal-margin model, works for any pair of teams

`select_spread_result` is the explicit policy between them.
"""

from typing import Optional

# Import base classes first (no circular dependencies)
from .base import (
    HISTORICAL_BASES,
    SpreadBasis,
    SpreadContext,
    SpreadResult,
    SpreadStrategy,
    finalize_spread,
)

# Import concrete models
from .distribution import DistributionSpreadModel, distribution_spread_model
from .historical import HistoricalSpreadModel, historical_spread_model


def select_spread_result(
    historical: Optional[SpreadResult],
    distribution: SpreadResult,
) -> SpreadResult:
    """Historical result when it was computed from real stats, else distribution."""
    if historical is not None and historical.is_historical:
        return historical
    return distribution


__all__ = [
    # Base classes
    "HISTORICAL_BASES",
    "SpreadBasis",
    "SpreadContext",
    "SpreadResult",
    "SpreadStrategy",
    "finalize_spread",
    # Model classes
    "DistributionSpreadModel",
    "HistoricalSpreadModel",
    # Singleton instances
    "distribution_spread_model",
    "historical_spread_model",
    # Policy
    "select_spread_result",
]
