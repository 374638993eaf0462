"""
Deterministic pseudo-random streams seeded from strings.

xmur3 hashes the seed string into a 32-bit integer and mulberry32 turns that
integer into a uniform stream in [0, 1). Both are bit-exact with their usual
JavaScript formulations, so a seed key such as ``"4-11-w5-total"`` produces
the same juice and jitter wherever the engine runs.
"""

from typing import Callable

MASK_32 = 0xFFFFFFFF

RandomSource = Callable[[], float]


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply, result kept unsigned."""
    return (a * b) & MASK_32


def _utf16_code_units(text: str) -> list[int]:
    encoded = text.encode("utf-16-le", "surrogatepass")
    return [int.from_bytes(encoded[i:i + 2], "little") for i in range(0, len(encoded), 2)]


def xmur3(text: str) -> Callable[[], int]:
    """Return a hash function yielding successive 32-bit seeds for `text`."""
    units = _utf16_code_units(text)
    h = (1779033703 ^ len(units)) & MASK_32
    for unit in units:
        h = _imul(h ^ unit, 3432918353)
        h = ((h << 13) | (h >> 19)) & MASK_32

    def next_seed() -> int:
        nonlocal h
        h = _imul(h ^ (h >> 16), 2246822507)
        h = _imul(h ^ (h >> 13), 3266489909)
        h ^= h >> 16
        return h

    return next_seed


def mulberry32(seed: int) -> RandomSource:
    """Return a generator of floats in [0, 1) driven by a 32-bit seed."""
    state = seed & MASK_32

    def next_float() -> float:
        nonlocal state
        state = (state + 0x6D2B79F5) & MASK_32
        t = _imul(state ^ (state >> 15), 1 | state)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & MASK_32) ^ t
        return ((t ^ (t >> 14)) & MASK_32) / 4294967296

    return next_float


def seeded_random_from_string(seed: object) -> RandomSource:
    """
    Create a reproducible random source from an arbitrary key.

    Same seed, same infinite sequence. Falsy seeds (None, "", 0) use "seed".
    """
    text = str(seed) if seed else "seed"
    return mulberry32(xmur3(text)())
