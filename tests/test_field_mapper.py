from __future__ import annotations

import unittest

from app.mappers.field_mapper import (
    DEFAULT_FIELD_SYNONYMS,
    LOGICAL_FIELDS,
    FieldMapper,
    FieldSynonymConfigError,
    merge_field_synonyms,
    normalize_header,
)


class TestNormalizeHeader(unittest.TestCase):
    def test_ignores_case_spacing_and_punctuation(self) -> None:
        self.assertEqual(normalize_header(" Postal Code "), "postalcode")
        self.assertEqual(normalize_header("postal_code"), "postalcode")
        self.assertEqual(normalize_header("Weight (kg)"), "weightkg")


class TestFieldMapper(unittest.TestCase):
    def setUp(self) -> None:
        self.mapper = FieldMapper()

    def test_default_table_covers_every_logical_field(self) -> None:
        self.assertEqual(set(DEFAULT_FIELD_SYNONYMS), set(LOGICAL_FIELDS))

    def test_columns_follow_synonym_priority_not_header_order(self) -> None:
        resolution = self.mapper.resolve_columns(["weight_lbs", "Weight"])

        self.assertEqual(resolution.columns("weight_lbs"), ("Weight", "weight_lbs"))

    def test_value_returns_first_non_blank_synonym(self) -> None:
        row = {"Weight": "  ", "weight_lbs": " 3.5 "}

        self.assertEqual(self.mapper.value(row, "weight_lbs"), "3.5")

    def test_matches_headers_case_insensitively(self) -> None:
        row = {"RETAILER": "AcmeCo", "store name": "Downtown"}
        resolution = self.mapper.resolve_columns(row.keys())

        self.assertEqual(resolution.value(row, "organization"), "AcmeCo")
        self.assertEqual(resolution.value(row, "location"), "Downtown")

    def test_missing_field_resolves_to_none(self) -> None:
        row = {"Barcode": "A1"}

        self.assertIsNone(self.mapper.value(row, "carrier"))
        self.assertEqual(self.mapper.resolve_columns(row.keys()).columns("carrier"), ())

    def test_member_is_a_synonym_for_organization(self) -> None:
        self.assertEqual(self.mapper.value({"Member": "Co-op"}, "organization"), "Co-op")

    def test_rejects_unknown_logical_field(self) -> None:
        with self.assertRaises(FieldSynonymConfigError):
            FieldMapper(synonyms={"not_a_field": ("x",)})

    def test_custom_table_replaces_defaults(self) -> None:
        mapper = FieldMapper(synonyms={"carrier": ("Shipper",)})

        self.assertEqual(mapper.value({"Shipper": "FedEx", "Carrier": "UPS"}, "carrier"), "FedEx")
        self.assertIsNone(mapper.value({"Barcode": "A1"}, "package_id"))


class TestMergeFieldSynonyms(unittest.TestCase):
    def test_overrides_are_prepended_and_deduplicated(self) -> None:
        merged = merge_field_synonyms(
            {"carrier": ("Carrier",)},
            {"carrier": ("Shipper", "carrier")},
        )

        self.assertEqual(merged["carrier"], ("Shipper", "carrier"))
        self.assertEqual(merged["box_type"], ())
        self.assertEqual(set(merged), set(LOGICAL_FIELDS))

    def test_unknown_override_field_raises(self) -> None:
        with self.assertRaises(FieldSynonymConfigError):
            merge_field_synonyms(DEFAULT_FIELD_SYNONYMS, {"colour": ("Color",)})


if __name__ == "__main__":
    unittest.main()
