"""
Upload acceptance, background dispatch, and status lookup.
"""

from __future__ import annotations

import csv
import logging
import uuid
from collections.abc import Callable, Mapping, Sequence
from functools import lru_cache
from typing import Any, Protocol

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session, sessionmaker

from app.config import get_ingestion_settings
from app.domain.errors import UploadDecodeError
from app.domain.reference import ReferenceMappingEntry
from app.domain.shipment import BatchStats
from app.logging_utils import log_event
from app.parsers.tabular_decoder import TabularDecoder
from app.repositories.reference_repository import ReferenceRepository
from app.services.batch_coordinator import BatchCoordinator, get_batch_coordinator
from db.models.upload import Upload
from db.repositories.upload_repository import UploadRepository

logger = logging.getLogger(__name__)


class IngestionTaskExecutor(Protocol):
    def submit(self, task: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        ...


class FastAPIBackgroundTaskExecutor:
    def __init__(self, background_tasks: BackgroundTasks) -> None:
        self._background_tasks = background_tasks

    def submit(self, task: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        self._background_tasks.add_task(task, *args, **kwargs)


class UploadService:
    """
    Accepts uploaded files, hands rows to the batch coordinator, and exposes
    upload state for polling.
    """

    def __init__(
        self,
        *,
        session_factory: sessionmaker[Session] | None = None,
        coordinator: BatchCoordinator | None = None,
        decoder: TabularDecoder | None = None,
    ) -> None:
        if session_factory is None:
            from db.session import SessionLocal

            self._session_factory = SessionLocal
        else:
            self._session_factory = session_factory

        self._coordinator = coordinator or get_batch_coordinator()
        self._decoder = decoder or TabularDecoder(delimiter=get_ingestion_settings().delimiter)

    def accept_upload(
        self,
        *,
        db: Session,
        executor: IngestionTaskExecutor,
        file_name: str,
        content: bytes,
    ) -> Upload:
        """
        Register the upload, decode it, and schedule processing.

        Returns once the row count is known; processing continues in the
        background and is observable only through the upload's state.
        """

        repository = UploadRepository(db)
        upload = repository.create_upload(file_name=file_name)
        db.commit()

        try:
            rows = self._decoder.decode(content.decode("utf-8"))
        except (UnicodeDecodeError, csv.Error) as exc:
            error_message = f"{type(exc).__name__}: {exc}"
            repository.mark_failed(
                upload_id=upload.id,
                error_details={"error": error_message, "stats": BatchStats(total=0).to_dict()},
            )
            db.commit()
            log_event(logger, logging.WARNING, "upload_rejected", upload_id=upload.id, error=error_message)
            raise UploadDecodeError(f"Upload '{file_name}' could not be decoded: {error_message}") from exc

        repository.mark_processing(upload_id=upload.id, records_total=len(rows))
        db.commit()

        try:
            executor.submit(self._run_upload_job, upload.id, rows)
        except Exception:
            repository.mark_failed(
                upload_id=upload.id,
                error_details={
                    "error": "Failed to schedule upload processing.",
                    "stats": BatchStats(total=len(rows)).to_dict(),
                },
            )
            db.commit()
            raise

        log_event(
            logger,
            logging.INFO,
            "upload_accepted",
            upload_id=upload.id,
            file_name=file_name,
            records_total=len(rows),
        )
        return upload

    def get_upload(self, *, db: Session, upload_id: uuid.UUID) -> Upload | None:
        return UploadRepository(db).get_upload(upload_id)

    def list_uploads(
        self,
        *,
        db: Session,
        limit: int = 20,
        offset: int = 0,
        status: str | None = None,
    ) -> list[Upload]:
        return UploadRepository(db).list_uploads(limit=limit, offset=offset, status=status)

    def list_material_mappings(self, *, db: Session) -> list[ReferenceMappingEntry]:
        return ReferenceRepository(db).list_material_mappings()

    def replace_material_mappings(
        self,
        *,
        db: Session,
        entries: Sequence[ReferenceMappingEntry],
    ) -> int:
        count = ReferenceRepository(db).replace_material_mappings(entries)
        db.commit()
        log_event(logger, logging.INFO, "material_mappings_replaced", count=count)
        return count

    def _run_upload_job(self, upload_id: uuid.UUID, rows: Sequence[Mapping[str, str]]) -> None:
        with self._session_factory() as db:
            self._coordinator.run(db=db, upload_id=upload_id, rows=rows)


@lru_cache(maxsize=1)
def get_upload_service() -> UploadService:
    return UploadService()
