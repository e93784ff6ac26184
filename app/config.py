"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from functools import lru_cache

from app.mappers.field_mapper import DEFAULT_FIELD_SYNONYMS, FieldSynonymConfigError, merge_field_synonyms
from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


@dataclass(frozen=True)
class IngestionSettings:
    """
    Runtime settings for upload ingestion.
    """

    chunk_size: int = 100
    log_record_errors: bool = True
    synthesized_id_prefix: str = "SHP"
    default_carrier: str = "UPS"
    delimiter: str = ","


@lru_cache(maxsize=1)
def get_ingestion_settings() -> IngestionSettings:
    """
    Return cached ingestion settings from environment variables.
    """

    delimiter = _get_str_env("INGEST_CSV_DELIMITER", ",")
    if delimiter.lower() in {"tab", "\\t"}:
        delimiter = "\t"

    return IngestionSettings(
        chunk_size=max(1, _get_int_env("INGEST_CHUNK_SIZE", 100)),
        log_record_errors=_get_bool_env("INGEST_LOG_RECORD_ERRORS", True),
        synthesized_id_prefix=_get_str_env("INGEST_SYNTHESIZED_ID_PREFIX", "SHP"),
        default_carrier=_get_str_env("INGEST_DEFAULT_CARRIER", "UPS"),
        delimiter=delimiter,
    )


def parse_field_synonyms_json(raw: str) -> dict[str, tuple[str, ...]]:
    """
    Parse a JSON object of logical field -> list of source column synonyms.
    """

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise FieldSynonymConfigError(f"INGEST_FIELD_SYNONYMS_JSON is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise FieldSynonymConfigError("INGEST_FIELD_SYNONYMS_JSON must be a JSON object.")

    parsed: dict[str, tuple[str, ...]] = {}
    for field_name, synonyms in payload.items():
        if not isinstance(synonyms, list) or not all(isinstance(item, str) for item in synonyms):
            raise FieldSynonymConfigError(
                f"Synonyms for field '{field_name}' must be a list of strings."
            )
        parsed[str(field_name).strip()] = tuple(item.strip() for item in synonyms if item.strip())
    return parsed


@lru_cache(maxsize=1)
def get_field_synonyms() -> dict[str, tuple[str, ...]]:
    """
    Return the synonym table: environment overrides first, then defaults.
    """

    raw = _get_optional_str_env("INGEST_FIELD_SYNONYMS_JSON")
    if raw is None:
        return dict(DEFAULT_FIELD_SYNONYMS)
    return merge_field_synonyms(DEFAULT_FIELD_SYNONYMS, parse_field_synonyms_json(raw))
