"""
app/mappers/identity_deriver.py

Natural-key selection and fallback key synthesis for shipment rows.

A synthesized key embeds the run's clock, so it is unique within a run but
not reproducible across runs over the same source file. Records carrying one
are flagged ``needs_identity_synthesis`` so they are not used as dedup keys.
"""

from __future__ import annotations

import re
import threading
import time
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Mapping

from app.mappers.field_mapper import FieldMapper, FieldResolution
from app.validators.value_parsers import parse_permissive_datetime

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9]")

# Fallback attributes in key order, with the placeholder used when absent.
SYNTHESIS_COMPONENTS: tuple[tuple[str, str], ...] = (
    ("organization", "UNKNOWN"),
    ("location", "UNKNOWN"),
    ("shipping_date", ""),
    ("material", "UNKNOWN"),
    ("weight_lbs", "0"),
)


def sanitize_component(value: str) -> str:
    return _UNSAFE_CHARS.sub("", value)


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


@dataclass(frozen=True)
class DerivedIdentity:
    unique_id: str
    synthesized: bool


class IdentityDeriver:
    """
    Derives ``unique_id`` and ``package_key`` for one row.

    Holds the last issued timestamp so that synthesized keys stay strictly
    increasing within one instance, including across threads.
    """

    def __init__(
        self,
        *,
        field_mapper: FieldMapper | None = None,
        prefix: str = "SHP",
        clock_ns: Callable[[], int] = time.time_ns,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self._field_mapper = field_mapper or FieldMapper()
        self._prefix = sanitize_component(prefix) or "SHP"
        self._clock_ns = clock_ns
        self._today = today
        self._last_stamp = 0
        self._stamp_lock = threading.Lock()

    def derive_key(
        self,
        row: Mapping[str, str],
        columns: FieldResolution | None = None,
    ) -> DerivedIdentity:
        resolution = columns or self._field_mapper.resolve_columns(row.keys())
        natural = resolution.value(row, "unique_id")
        if natural is not None:
            return DerivedIdentity(unique_id=natural, synthesized=False)
        return DerivedIdentity(unique_id=self._synthesize(row, resolution), synthesized=True)

    def derive_package_key(
        self,
        row: Mapping[str, str],
        unique_id: str,
        columns: FieldResolution | None = None,
    ) -> str:
        resolution = columns or self._field_mapper.resolve_columns(row.keys())
        package_id = resolution.value(row, "package_id") or ""
        return f"{package_id}_{unique_id}"

    def _synthesize(self, row: Mapping[str, str], resolution: FieldResolution) -> str:
        components: list[str] = []
        for field_name, placeholder in SYNTHESIS_COMPONENTS:
            if field_name == "shipping_date":
                raw = self._day_component(row, resolution)
            elif field_name == "weight_lbs":
                raw = resolution.value(row, "weight_lbs") or resolution.value(row, "weight_kg") or placeholder
            else:
                raw = resolution.value(row, field_name) or placeholder
            components.append(sanitize_component(raw))
        return "_".join([self._prefix, *components, str(self._next_stamp())])

    def _day_component(self, row: Mapping[str, str], resolution: FieldResolution) -> str:
        raw = resolution.value(row, "shipping_date") or resolution.value(row, "processed_date")
        if raw is None:
            return self._today().isoformat()
        parsed = parse_permissive_datetime(raw)
        if parsed is not None:
            return parsed.date().isoformat()
        return raw[:10]

    def _next_stamp(self) -> int:
        with self._stamp_lock:
            stamp = self._clock_ns()
            if stamp <= self._last_stamp:
                stamp = self._last_stamp + 1
            self._last_stamp = stamp
            return stamp
