"""
app/validators package marker.
"""

from app.validators.value_parsers import (
    WEIGHT_UNIT_FACTORS,
    parse_optional_int,
    parse_permissive_datetime,
    parse_weight,
)

__all__ = [
    "WEIGHT_UNIT_FACTORS",
    "parse_optional_int",
    "parse_permissive_datetime",
    "parse_weight",
]
