"""Exceptions raised inside the odds engine.

None of these escape ``generate_clean_betting_markets``; the assembler
catches them and degrades to a simpler line.
"""


class OddsEngineError(Exception):
    """Base class for odds engine errors."""


class NumericalDegeneracyError(OddsEngineError):
    """A spread calculation produced a non-finite or undefined value."""

    def __init__(self, step: str, value: float | None = None):
        self.step = step
        self.value = value
        detail = f" (value={value!r})" if value is not None else ""
        super().__init__(f"Numerically degenerate result in {step}{detail}")
