from __future__ import annotations

import os
import unittest
from unittest.mock import patch

from app.config import get_field_synonyms, get_ingestion_settings, parse_field_synonyms_json
from app.mappers.field_mapper import DEFAULT_FIELD_SYNONYMS, FieldSynonymConfigError
from db.config import get_engine_pool_settings
from db.session import build_connect_args


class TestIngestionSettings(unittest.TestCase):
    def setUp(self) -> None:
        get_ingestion_settings.cache_clear()
        get_field_synonyms.cache_clear()

    def tearDown(self) -> None:
        get_ingestion_settings.cache_clear()
        get_field_synonyms.cache_clear()

    def test_defaults(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = get_ingestion_settings()

        self.assertEqual(settings.chunk_size, 100)
        self.assertTrue(settings.log_record_errors)
        self.assertEqual(settings.synthesized_id_prefix, "SHP")
        self.assertEqual(settings.default_carrier, "UPS")
        self.assertEqual(settings.delimiter, ",")

    def test_environment_overrides(self) -> None:
        env = {
            "INGEST_CHUNK_SIZE": "25",
            "INGEST_LOG_RECORD_ERRORS": "false",
            "INGEST_SYNTHESIZED_ID_PREFIX": "PACT",
            "INGEST_DEFAULT_CARRIER": "FedEx",
            "INGEST_CSV_DELIMITER": "tab",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = get_ingestion_settings()

        self.assertEqual(settings.chunk_size, 25)
        self.assertFalse(settings.log_record_errors)
        self.assertEqual(settings.synthesized_id_prefix, "PACT")
        self.assertEqual(settings.default_carrier, "FedEx")
        self.assertEqual(settings.delimiter, "\t")

    def test_invalid_or_non_positive_chunk_size_is_clamped(self) -> None:
        with patch.dict(os.environ, {"INGEST_CHUNK_SIZE": "0"}, clear=True):
            self.assertEqual(get_ingestion_settings().chunk_size, 1)
        get_ingestion_settings.cache_clear()
        with patch.dict(os.environ, {"INGEST_CHUNK_SIZE": "many"}, clear=True):
            self.assertEqual(get_ingestion_settings().chunk_size, 100)

    def test_field_synonym_overrides_are_merged(self) -> None:
        env = {"INGEST_FIELD_SYNONYMS_JSON": '{"organization": ["Chain"]}'}
        with patch.dict(os.environ, env, clear=True):
            synonyms = get_field_synonyms()

        self.assertEqual(synonyms["organization"][0], "Chain")
        self.assertIn("Retailer", synonyms["organization"])
        self.assertEqual(synonyms["carrier"], DEFAULT_FIELD_SYNONYMS["carrier"])


class TestParseFieldSynonymsJson(unittest.TestCase):
    def test_rejects_invalid_json(self) -> None:
        with self.assertRaises(FieldSynonymConfigError):
            parse_field_synonyms_json("{not json")

    def test_rejects_non_object(self) -> None:
        with self.assertRaises(FieldSynonymConfigError):
            parse_field_synonyms_json('["Retailer"]')

    def test_rejects_non_string_synonyms(self) -> None:
        with self.assertRaises(FieldSynonymConfigError):
            parse_field_synonyms_json('{"organization": "Retailer"}')

    def test_strips_and_drops_blank_synonyms(self) -> None:
        parsed = parse_field_synonyms_json('{"carrier": [" Shipper ", "  "]}')

        self.assertEqual(parsed, {"carrier": ("Shipper",)})


class TestEngineConnectArgs(unittest.TestCase):
    def test_application_name_only_by_default(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = get_engine_pool_settings()

        self.assertEqual(build_connect_args(settings), {"application_name": "shipment-ingest"})

    def test_statement_timeout_becomes_libpq_option(self) -> None:
        env = {"DB_APPLICATION_NAME": "ingest-worker", "DB_STATEMENT_TIMEOUT_MS": "5000"}
        with patch.dict(os.environ, env, clear=True):
            settings = get_engine_pool_settings()

        self.assertEqual(
            build_connect_args(settings),
            {"application_name": "ingest-worker", "options": "-c statement_timeout=5000"},
        )


if __name__ == "__main__":
    unittest.main()
