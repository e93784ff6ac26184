"""
app/validators/value_parsers.py

Type coercion for raw shipment field values.

Numeric coercion failures raise RecordNormalizationError. Date parsing is
permissive and never raises: anything unparseable becomes None.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from dateutil import parser as date_parser

from app.domain.errors import RecordNormalizationError

WEIGHT_QUANTUM = Decimal("0.001")
LBS_PER_KG = Decimal("2.20462262185")

# Multiplier converting a unit into pounds, the canonical weight unit.
WEIGHT_UNIT_FACTORS: dict[str, Decimal] = {
    "lb": Decimal("1"),
    "lbs": Decimal("1"),
    "pound": Decimal("1"),
    "pounds": Decimal("1"),
    "kg": LBS_PER_KG,
    "kgs": LBS_PER_KG,
    "kilogram": LBS_PER_KG,
    "kilograms": LBS_PER_KG,
    "g": LBS_PER_KG / Decimal("1000"),
    "gram": LBS_PER_KG / Decimal("1000"),
    "grams": LBS_PER_KG / Decimal("1000"),
    "oz": Decimal("0.0625"),
    "ounce": Decimal("0.0625"),
    "ounces": Decimal("0.0625"),
}

_WEIGHT_PATTERN = re.compile(r"^([+-]?(?:\d+(?:\.\d*)?|\.\d+))\s*([a-zA-Z]+)?\.?$")
_INT_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.0*)?)$")


def parse_weight(value: str, *, field: str, default_unit: str = "lb") -> Decimal:
    """
    Parse a weight value into pounds.

    The value may carry a unit suffix (``2.5 kg``); otherwise ``default_unit``
    applies. Thousands separators are ignored.
    """

    cleaned = value.strip().replace(",", "")
    match = _WEIGHT_PATTERN.match(cleaned)
    if match is None:
        raise RecordNormalizationError(f"Invalid weight value {value!r}.", field=field, value=value)

    number_raw, unit_raw = match.groups()
    unit = (unit_raw or default_unit).lower()
    factor = WEIGHT_UNIT_FACTORS.get(unit)
    if factor is None:
        raise RecordNormalizationError(f"Unsupported weight unit {unit_raw!r}.", field=field, value=value)

    try:
        number = Decimal(number_raw)
    except InvalidOperation as exc:
        raise RecordNormalizationError(f"Invalid weight value {value!r}.", field=field, value=value) from exc

    if number < 0:
        raise RecordNormalizationError(f"Weight must be non-negative, got {value!r}.", field=field, value=value)

    pounds = number * factor
    if pounds == 0:
        return Decimal("0")
    # Keep non-zero source weights non-zero after rounding.
    return max(pounds.quantize(WEIGHT_QUANTUM), WEIGHT_QUANTUM)


def parse_optional_int(value: str | None, *, field: str, default: int) -> int:
    """
    Parse an integer count; blank -> default, non-integral -> error.
    """

    if value is None or not value.strip():
        return default
    cleaned = value.strip().replace(",", "")
    if not _INT_PATTERN.match(cleaned):
        raise RecordNormalizationError(f"Invalid integer value {value!r}.", field=field, value=value)
    return int(Decimal(cleaned))


def parse_permissive_datetime(value: str | None) -> datetime | None:
    """
    Parse mixed datetime strings -> timezone-aware UTC datetime, or None.
    """

    if value is None or not value.strip():
        return None
    try:
        parsed = date_parser.parse(value.strip())
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is None:
        # assume already UTC if no tz given
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
