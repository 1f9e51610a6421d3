"""Ingredient amount parsing and grouping-key normalization.

Amounts are summed only when both the ingredient name and the unit match
after trimming and case-folding. There is no conversion between units, so
"500 g" and "1 kg" of the same ingredient stay separate shopping-list items.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

# Displayed when an ingredient's summed amount is zero or unparseable
FALLBACK_AMOUNT = "1"

UNICODE_FRACTIONS = {
    "¼": 0.25,
    "½": 0.5,
    "¾": 0.75,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "⅛": 0.125,
    "⅜": 0.375,
    "⅝": 0.625,
    "⅞": 0.875,
}

_FRACTION_RE = re.compile(r"^(?:(\d+)\s+)?(\d+)\s*/\s*(\d+)")
_UNICODE_RE = re.compile(r"^(\d+)?\s*([%s])" % "".join(UNICODE_FRACTIONS))
_NUMBER_RE = re.compile(r"^((?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")


@dataclass(frozen=True)
class Parsed:
    value: float


@dataclass(frozen=True)
class Unparseable:
    raw: object


ParseResult = Parsed | Unparseable


def _from_number(raw: float) -> ParseResult:
    value = float(raw)
    if math.isnan(value) or math.isinf(value) or value < 0:
        return Unparseable(raw)
    return Parsed(value)


def parse_amount(raw: object) -> ParseResult:
    """Parse an untrusted ingredient amount.

    Handles: 2, 1.5, "250", "0.5", "1e3", "1/2", "1 1/2", "½", "1½", "100g"
    (leading number, trailing text ignored). Anything else, including
    negatives, is Unparseable.
    """
    if raw is None or isinstance(raw, bool):
        return Unparseable(raw)
    if isinstance(raw, (int, float)):
        return _from_number(raw)

    s = str(raw).strip()
    if not s:
        return Unparseable(raw)

    m = _FRACTION_RE.match(s)
    if m:
        whole, num, den = m.groups()
        if int(den) == 0:
            return Unparseable(raw)
        return Parsed(int(whole or 0) + int(num) / int(den))

    m = _UNICODE_RE.match(s)
    if m:
        whole, frac = m.groups()
        return Parsed(int(whole or 0) + UNICODE_FRACTIONS[frac])

    m = _NUMBER_RE.match(s)
    if m:
        return _from_number(float(m.group(1)))

    return Unparseable(raw)


def amount_value(result: ParseResult) -> float:
    """Numeric contribution of a parse result to a sum."""
    if isinstance(result, Parsed):
        return result.value
    return 0.0


def normalize_name(name: str | None) -> str:
    """Grouping key for an ingredient name."""
    if not name:
        return ""
    return " ".join(name.split()).casefold()


def normalize_unit(unit: str | None) -> str:
    """Grouping key for a unit. No aliasing: "g" and "grams" differ."""
    if not unit:
        return ""
    return unit.strip().casefold()


def format_amount(total: float) -> str:
    """Format a summed amount for display; zero falls back to FALLBACK_AMOUNT."""
    if total <= 0:
        return FALLBACK_AMOUNT
    rounded = round(total, 2)
    if rounded == 0:
        return FALLBACK_AMOUNT
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.2f}".rstrip("0").rstrip(".")
