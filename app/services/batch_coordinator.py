"""
app/services/batch_coordinator.py

Runs one upload's rows through normalization and persistence, tracking
progress on the upload row.

State machine on ``Upload.status``: queued -> processing -> completed | failed.
Rows are handled strictly in order. A row that fails is recorded and the run
continues; only an error outside the per-row boundary fails the whole upload.
Chunks already committed stay committed when a later chunk fails.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Mapping, Sequence
from functools import lru_cache
from typing import Any

from sqlalchemy.orm import Session

from app.config import get_field_synonyms, get_ingestion_settings
from app.domain.shipment import BatchStats, FailedRow, NormalizedShipment, SkippedRow
from app.logging_utils import log_event
from app.mappers.field_mapper import FieldMapper
from app.mappers.identity_deriver import IdentityDeriver
from app.mappers.reference_resolver import ReferenceResolver
from app.repositories.reference_repository import ReferenceRepository
from app.repositories.shipment_repository import ShipmentRepository
from app.services.shipment_normalizer import ShipmentNormalizer
from db.models.upload import UploadStatus
from db.repositories.errors import ShipmentPersistenceError, UploadNotFoundError
from db.repositories.upload_repository import UploadRepository

logger = logging.getLogger(__name__)

_MAX_ERROR_MESSAGE_LENGTH = 2000


class BatchCoordinator:
    """
    Drives the per-upload ingestion loop.

    Repositories are built from the session handed to ``run`` through the
    injected factories.
    """

    def __init__(
        self,
        *,
        normalizer: ShipmentNormalizer | None = None,
        chunk_size: int = 100,
        log_record_errors: bool = True,
        upload_repository_factory: Callable[[Session], UploadRepository] = UploadRepository,
        shipment_repository_factory: Callable[[Session], ShipmentRepository] = ShipmentRepository,
        reference_repository_factory: Callable[[Session], ReferenceRepository] = ReferenceRepository,
    ) -> None:
        self._normalizer = normalizer or ShipmentNormalizer()
        self._chunk_size = max(1, chunk_size)
        self._log_record_errors = log_record_errors
        self._upload_repository_factory = upload_repository_factory
        self._shipment_repository_factory = shipment_repository_factory
        self._reference_repository_factory = reference_repository_factory

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def run(
        self,
        *,
        db: Session,
        upload_id: uuid.UUID,
        rows: Sequence[Mapping[str, str]],
    ) -> BatchStats:
        """
        Process every row and leave the upload ``completed`` or ``failed``.

        Never raises; a batch-level error is logged and persisted on the upload.
        """

        stats = BatchStats(total=len(rows))
        uploads = self._upload_repository_factory(db)
        started = time.perf_counter()

        try:
            if uploads.mark_processing(upload_id=upload_id, records_total=stats.total) is None:
                raise UploadNotFoundError(f"Upload not found: {upload_id}")
            db.commit()
            log_event(
                logger,
                logging.INFO,
                "batch_started",
                upload_id=upload_id,
                records_total=stats.total,
                chunk_size=self._chunk_size,
            )

            snapshot = self._reference_repository_factory(db).load_snapshot()
            log_event(
                logger,
                logging.INFO,
                "reference_snapshot_loaded",
                upload_id=upload_id,
                loaded_at=snapshot.loaded_at,
                material_mappings=len(snapshot.material_mappings),
                organizations=len(snapshot.organizations),
                locations=len(snapshot.locations),
                programs=len(snapshot.programs),
            )
            resolver = ReferenceResolver(snapshot)
            shipments = self._shipment_repository_factory(db)

            for chunk_index, start in enumerate(range(0, stats.total, self._chunk_size)):
                chunk = rows[start : start + self._chunk_size]
                for offset, row in enumerate(chunk):
                    self._process_row(
                        row,
                        resolver=resolver,
                        shipments=shipments,
                        stats=stats,
                        upload_id=upload_id,
                        row_number=start + offset + 1,
                    )

                uploads.record_progress(
                    upload_id=upload_id,
                    records_processed=stats.processed,
                    records_failed=stats.failed,
                    records_skipped=stats.skipped,
                )
                db.commit()
                log_event(
                    logger,
                    logging.DEBUG,
                    "batch_chunk_committed",
                    upload_id=upload_id,
                    chunk_index=chunk_index,
                    **stats.to_dict(),
                )

            error_details = [error.to_error_detail() for error in stats.errors]
            completed = uploads.mark_completed(
                upload_id=upload_id,
                records_processed=stats.processed,
                records_failed=stats.failed,
                records_skipped=stats.skipped,
                error_details=error_details or None,
            )
            if completed is None:
                raise UploadNotFoundError(f"Upload not found: {upload_id}")
            db.commit()
            stats.status = UploadStatus.COMPLETED
            log_event(
                logger,
                logging.INFO,
                "batch_completed",
                upload_id=upload_id,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                **stats.to_dict(),
            )
        except Exception as exc:
            stats.status = UploadStatus.FAILED
            self._mark_batch_failed(db=db, uploads=uploads, upload_id=upload_id, stats=stats, exc=exc)

        return stats

    def _process_row(
        self,
        row: Mapping[str, str],
        *,
        resolver: ReferenceResolver,
        shipments: ShipmentRepository,
        stats: BatchStats,
        upload_id: uuid.UUID,
        row_number: int,
    ) -> None:
        outcome = self._normalizer.normalize(row, resolver, upload_id=upload_id, row_number=row_number)
        stats.processed += 1

        if isinstance(outcome, SkippedRow):
            stats.skipped += 1
            return

        if isinstance(outcome, NormalizedShipment):
            try:
                shipments.upsert(outcome)
            except ShipmentPersistenceError as exc:
                outcome = FailedRow(
                    row_number=row_number,
                    record_identifier=outcome.unique_id,
                    error_message=str(exc),
                )
            else:
                stats.succeeded += 1
                return

        stats.failed += 1
        stats.errors.append(outcome)
        if self._log_record_errors:
            log_event(
                logger,
                logging.WARNING,
                "record_failed",
                upload_id=upload_id,
                row_number=outcome.row_number,
                record_identifier=outcome.record_identifier,
                error_message=outcome.error_message,
            )

    def _mark_batch_failed(
        self,
        *,
        db: Session,
        uploads: UploadRepository,
        upload_id: uuid.UUID,
        stats: BatchStats,
        exc: Exception,
    ) -> None:
        error_message = f"{type(exc).__name__}: {exc}"[:_MAX_ERROR_MESSAGE_LENGTH]
        logger.exception("Upload batch failed id=%s error=%s", upload_id, error_message)
        error_details: dict[str, Any] = {"error": error_message, "stats": stats.to_dict()}
        try:
            db.rollback()
            failed = uploads.mark_failed(
                upload_id=upload_id,
                error_details=error_details,
                records_processed=stats.processed,
                records_failed=stats.failed,
                records_skipped=stats.skipped,
            )
            if failed is None:
                logger.error("Unable to mark upload as failed because it was not found id=%s", upload_id)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Failed to persist failed upload state id=%s", upload_id)
            return

        log_event(logger, logging.ERROR, "batch_failed", upload_id=upload_id, **error_details)


def build_batch_coordinator() -> BatchCoordinator:
    """
    Wire a coordinator from environment settings.
    """

    settings = get_ingestion_settings()
    field_mapper = FieldMapper(synonyms=get_field_synonyms())
    normalizer = ShipmentNormalizer(
        field_mapper=field_mapper,
        identity_deriver=IdentityDeriver(
            field_mapper=field_mapper,
            prefix=settings.synthesized_id_prefix,
        ),
        default_carrier=settings.default_carrier,
    )
    return BatchCoordinator(
        normalizer=normalizer,
        chunk_size=settings.chunk_size,
        log_record_errors=settings.log_record_errors,
    )


@lru_cache(maxsize=1)
def get_batch_coordinator() -> BatchCoordinator:
    return build_batch_coordinator()
