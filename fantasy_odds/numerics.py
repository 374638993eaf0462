"""
Numeric helpers shared by the pricing and spread modules.

Rounding follows sportsbook display convention (ties toward +infinity), and
the inverse normal CDF uses Winitzki's closed-form inverse error function,
accurate to roughly 2e-3 - plenty for display odds.
"""

import math
from typing import Sequence

import numpy as np

from .errors import NumericalDegeneracyError
from .seeded_random import RandomSource

_WINITZKI_A = 0.147


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 toward +infinity."""
    return int(math.floor(value + 0.5))


def round_to_half(value: float) -> float:
    """Round to the nearest 0.5, ties toward +infinity."""
    return math.floor(value * 2 + 0.5) / 2


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def seeded_offset(rng: RandomSource, width: float) -> int:
    """Integer offset in [-width/2, +width/2] drawn from a seeded source."""
    return round_half_up((rng() - 0.5) * width)


def inverse_erf(x: float) -> float:
    """
    Approximate inverse error function on (-1, 1).

    Raises NumericalDegeneracyError outside the open interval or when the
    approximation does not produce a finite value.
    """
    if not -1.0 < x < 1.0:
        raise NumericalDegeneracyError("inverse_erf", x)

    ln_term = math.log(1.0 - x * x)
    first = 2.0 / (math.pi * _WINITZKI_A) + ln_term / 2.0
    second = ln_term / _WINITZKI_A
    result = math.copysign(math.sqrt(math.sqrt(first * first - second) - first), x)

    if not math.isfinite(result):
        raise NumericalDegeneracyError("inverse_erf", result)
    return result


def inverse_normal_cdf(p: float) -> float:
    """Standard normal quantile: z such that P(Z <= z) = p."""
    if not 0.0 < p < 1.0:
        raise NumericalDegeneracyError("inverse_normal_cdf", p)
    return math.sqrt(2.0) * inverse_erf(2.0 * p - 1.0)


def normal_cdf(z: float) -> float:
    return 0.5 * (1.0 + math.erf(z / math.sqrt(2.0)))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))


def population_variance(values: Sequence[float], center: float | None = None) -> float:
    """
    Population variance of `values`.

    With `center` the squared deviations are taken about that value instead of
    the sample mean (the power model measures spread about the season average).
    """
    if len(values) == 0:
        return 0.0
    arr = np.asarray(values, dtype=float)
    if center is None:
        return float(np.var(arr))
    return float(np.mean((arr - center) ** 2))
