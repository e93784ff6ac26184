"""
tests/test_value_parsers.py

Pytest unit tests for weight, integer and date coercion.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.domain.errors import RecordNormalizationError
from app.validators.value_parsers import parse_optional_int, parse_permissive_datetime, parse_weight


class TestParseWeight:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2.5", Decimal("2.5")),
            (" 12 ", Decimal("12")),
            ("1,200", Decimal("1200")),
            ("3 lbs", Decimal("3")),
            ("3lb", Decimal("3")),
            ("16 oz", Decimal("1")),
            ("1 kg", Decimal("2.205")),
            ("0", Decimal("0")),
            ("0.0", Decimal("0")),
            ("0 kg", Decimal("0")),
        ],
    )
    def test_parses_into_pounds(self, raw: str, expected: Decimal) -> None:
        assert parse_weight(raw, field="weight_lbs") == expected

    def test_default_unit_applies_without_suffix(self) -> None:
        assert parse_weight("10", field="weight_kg", default_unit="kg") == Decimal("22.046")

    def test_explicit_suffix_overrides_default_unit(self) -> None:
        assert parse_weight("10 lb", field="weight_kg", default_unit="kg") == Decimal("10")

    def test_tiny_converted_weight_stays_non_zero(self) -> None:
        assert parse_weight("0.0001 kg", field="weight_lbs") == Decimal("0.001")

    def test_tiny_pound_weight_stays_non_zero_at_stored_precision(self) -> None:
        parsed = parse_weight("0.0004", field="weight_lbs", default_unit="lb")

        assert parsed == Decimal("0.001")
        assert parsed.quantize(Decimal("0.001")) != 0

    def test_pound_weight_is_rounded_to_stored_precision(self) -> None:
        assert parse_weight("2.34567 lb", field="weight_lbs") == Decimal("2.346")

    @pytest.mark.parametrize("raw", ["abc", "", "1.2.3", "--1"])
    def test_invalid_values_raise(self, raw: str) -> None:
        with pytest.raises(RecordNormalizationError) as exc_info:
            parse_weight(raw, field="weight_lbs")
        assert exc_info.value.field == "weight_lbs"

    def test_negative_weight_raises(self) -> None:
        with pytest.raises(RecordNormalizationError, match="non-negative"):
            parse_weight("-1", field="weight_lbs")

    def test_unknown_unit_raises(self) -> None:
        with pytest.raises(RecordNormalizationError, match="Unsupported weight unit"):
            parse_weight("5 stone", field="weight_lbs")


class TestParseOptionalInt:
    def test_blank_returns_default(self) -> None:
        assert parse_optional_int(None, field="year", default=2024) == 2024
        assert parse_optional_int("  ", field="year", default=7) == 7

    def test_parses_integral_values(self) -> None:
        assert parse_optional_int("12", field="recycled_pieces", default=0) == 12
        assert parse_optional_int("3.0", field="recycled_pieces", default=0) == 3
        assert parse_optional_int("1,000", field="recycled_pieces", default=0) == 1000

    @pytest.mark.parametrize("raw", ["3.5", "x", "1e3"])
    def test_non_integral_values_raise(self, raw: str) -> None:
        with pytest.raises(RecordNormalizationError):
            parse_optional_int(raw, field="donated_pieces", default=0)


class TestParsePermissiveDatetime:
    def test_naive_values_are_treated_as_utc(self) -> None:
        assert parse_permissive_datetime("2024-03-15") == datetime(2024, 3, 15, tzinfo=timezone.utc)

    def test_aware_values_are_converted_to_utc(self) -> None:
        parsed = parse_permissive_datetime("2024-03-15T10:00:00+02:00")
        assert parsed == datetime(2024, 3, 15, 8, 0, tzinfo=timezone.utc)

    def test_us_style_dates_parse(self) -> None:
        assert parse_permissive_datetime("03/15/2024") == datetime(2024, 3, 15, tzinfo=timezone.utc)

    @pytest.mark.parametrize("raw", [None, "", "   ", "garbage"])
    def test_unparseable_or_blank_returns_none(self, raw: str | None) -> None:
        assert parse_permissive_datetime(raw) is None
