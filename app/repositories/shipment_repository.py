"""
app/repositories/shipment_repository.py

Persistence layer for normalized shipment line items.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict
from typing import Any

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.shipment import NormalizedShipment
from db.models.shipment import Shipment, ShipmentStatus
from db.repositories.errors import ShipmentPersistenceError

_UNIQUE_ID_CONSTRAINT = "uq_shipments_unique_id"

# Columns left untouched when an existing unique_id is re-ingested.
_IMMUTABLE_COLUMNS = frozenset({"id", "unique_id", "created_at"})


class ShipmentRepository:
    """
    Writes one shipment at a time, keyed on ``unique_id``.

    Each write runs inside a SAVEPOINT so a failed record does not poison the
    enclosing chunk transaction.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def upsert(self, record: NormalizedShipment) -> uuid.UUID:
        """
        Insert the record, or overwrite the row already holding its unique_id.
        """

        payload = self._to_payload(record)
        stmt = insert(Shipment).values(payload)
        update_columns: dict[str, Any] = {
            column: getattr(stmt.excluded, column)
            for column in payload
            if column not in _IMMUTABLE_COLUMNS
        }
        update_columns["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(
            constraint=_UNIQUE_ID_CONSTRAINT,
            set_=update_columns,
        ).returning(Shipment.id)

        try:
            with self._session.begin_nested():
                return self._session.execute(stmt).scalar_one()
        except SQLAlchemyError as exc:
            raise ShipmentPersistenceError(
                f"Failed to persist shipment {record.unique_id!r}: {exc.__class__.__name__}"
            ) from exc

    @staticmethod
    def _to_payload(record: NormalizedShipment) -> dict[str, Any]:
        payload = asdict(record)
        payload["status"] = ShipmentStatus.PROCESSED
        return payload
