# This file holds the holdings-amount input state: the text being edited and the confirmed value.
# It exists so the chart only recomputes on an explicit "Generate chart" action, not on every keystroke.
# Parsing goes through Decimal so rounding to satoshi precision is exact rather than float-approximate.

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation

LOGGER = logging.getLogger("holdings_chart")

MULTIPLIER_DECIMAL_PLACES = 8
_QUANTUM = Decimal(1).scaleb(-MULTIPLIER_DECIMAL_PLACES)


class InvalidMultiplierInput(ValueError):
    """Raised when confirmation text is not a finite, non-negative decimal."""


def parse_multiplier(text: str) -> float:
    candidate = text.strip()
    if not candidate:
        raise InvalidMultiplierInput("Holdings amount is empty")
    try:
        value = Decimal(candidate)
    except InvalidOperation as exc:
        raise InvalidMultiplierInput(f"Holdings amount is not a number: {text!r}") from exc
    if not value.is_finite() or math.isinf(float(value)):
        raise InvalidMultiplierInput(f"Holdings amount must be finite: {text!r}")
    if value < 0:
        raise InvalidMultiplierInput(f"Holdings amount must not be negative: {text!r}")
    # Precision must cover every integer digit plus the fractional places kept.
    context = Context(prec=max(28, value.adjusted() + MULTIPLIER_DECIMAL_PLACES + 2))
    return float(value.quantize(_QUANTUM, rounding=ROUND_HALF_UP, context=context))


def multiplier_text(value: float) -> str:
    """Canonical text for a committed amount: `1`, `0.5`, `2.12345679`."""

    normalized = Decimal(repr(float(value))).normalize()
    text = f"{normalized:f}"
    return "0" if text == "-0" else text


class MultiplierInput:
    def __init__(self, committed: float = 1.0) -> None:
        self._committed = parse_multiplier(repr(float(committed)))
        self._committed_text = multiplier_text(self._committed)
        self.pending_text = self._committed_text

    @property
    def committed(self) -> float:
        return self._committed

    @property
    def committed_text(self) -> str:
        return self._committed_text

    @property
    def can_confirm(self) -> bool:
        return bool(self.pending_text) and self.pending_text != self._committed_text

    def confirm(self) -> bool:
        """Commit the pending text; return True when the committed amount was updated."""

        try:
            value = parse_multiplier(self.pending_text)
        except InvalidMultiplierInput as exc:
            LOGGER.debug("holdings amount rejected: %s", exc)
            return False
        self._committed = value
        self._committed_text = multiplier_text(value)
        return True
