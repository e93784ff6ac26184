from __future__ import annotations

import unittest
import uuid
from typing import Any, Callable

from app.domain.errors import UploadDecodeError
from app.parsers.tabular_decoder import TabularDecoder
from app.services.upload_service import UploadService
from db.models.upload import Upload, UploadStatus


class FakeSession:
    """Minimal session surface used by UploadRepository."""

    def __init__(self) -> None:
        self.objects: dict[uuid.UUID, Upload] = {}
        self.pending: list[Upload] = []
        self.commits = 0
        self.closed = False

    def add(self, obj: Upload) -> None:
        self.pending.append(obj)

    def flush(self) -> None:
        for obj in self.pending:
            if obj.id is None:
                obj.id = uuid.uuid4()
            self.objects[obj.id] = obj
        self.pending.clear()

    def refresh(self, obj: Upload) -> None:
        return None

    def get(self, model: type, ident: uuid.UUID) -> Upload | None:
        return self.objects.get(ident)

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        return None

    def __enter__(self) -> FakeSession:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.closed = True


class RecordingExecutor:
    def __init__(self, *, fail: bool = False) -> None:
        self.tasks: list[tuple[Callable[..., None], tuple[Any, ...]]] = []
        self._fail = fail

    def submit(self, task: Callable[..., None], *args: Any, **kwargs: Any) -> None:
        if self._fail:
            raise RuntimeError("queue full")
        self.tasks.append((task, args))


class RecordingCoordinator:
    def __init__(self) -> None:
        self.runs: list[dict[str, Any]] = []

    def run(self, *, db: Any, upload_id: uuid.UUID, rows: Any) -> None:
        self.runs.append({"db": db, "upload_id": upload_id, "rows": rows})


class TestUploadService(unittest.TestCase):
    def setUp(self) -> None:
        self.session = FakeSession()
        self.background_session = FakeSession()
        self.coordinator = RecordingCoordinator()
        self.service = UploadService(
            session_factory=lambda: self.background_session,
            coordinator=self.coordinator,  # type: ignore[arg-type]
            decoder=TabularDecoder(),
        )

    def test_accept_upload_records_total_and_schedules_run(self) -> None:
        executor = RecordingExecutor()
        content = b"Barcode,Weight\nA1,1\nA2,2\nbroken\n"

        upload = self.service.accept_upload(
            db=self.session,  # type: ignore[arg-type]
            executor=executor,
            file_name="shipments.csv",
            content=content,
        )

        self.assertEqual(upload.status, UploadStatus.PROCESSING)
        self.assertEqual(upload.records_total, 2)
        self.assertEqual(upload.file_name, "shipments.csv")
        self.assertIsNotNone(upload.started_at)
        self.assertGreaterEqual(self.session.commits, 2)
        self.assertEqual(len(executor.tasks), 1)
        self.assertEqual(self.coordinator.runs, [])

        task, args = executor.tasks[0]
        task(*args)

        self.assertEqual(len(self.coordinator.runs), 1)
        run = self.coordinator.runs[0]
        self.assertIs(run["db"], self.background_session)
        self.assertEqual(run["upload_id"], upload.id)
        self.assertEqual([row["Barcode"] for row in run["rows"]], ["A1", "A2"])
        self.assertTrue(self.background_session.closed)

    def test_undecodable_content_marks_upload_failed(self) -> None:
        executor = RecordingExecutor()

        with self.assertRaises(UploadDecodeError):
            self.service.accept_upload(
                db=self.session,  # type: ignore[arg-type]
                executor=executor,
                file_name="latin1.csv",
                content="Retailer\nCafé".encode("latin-1"),
            )

        (upload,) = self.session.objects.values()
        self.assertEqual(upload.status, UploadStatus.FAILED)
        self.assertTrue(upload.error_details["error"].startswith("UnicodeDecodeError"))
        self.assertEqual(executor.tasks, [])

    def test_scheduling_failure_marks_upload_failed(self) -> None:
        with self.assertRaises(RuntimeError):
            self.service.accept_upload(
                db=self.session,  # type: ignore[arg-type]
                executor=RecordingExecutor(fail=True),
                file_name="shipments.csv",
                content=b"Barcode,Weight\nA1,1\n",
            )

        (upload,) = self.session.objects.values()
        self.assertEqual(upload.status, UploadStatus.FAILED)
        self.assertEqual(upload.error_details["error"], "Failed to schedule upload processing.")
        self.assertEqual(upload.error_details["stats"]["total"], 1)

    def test_get_upload_returns_none_when_missing(self) -> None:
        self.assertIsNone(self.service.get_upload(db=self.session, upload_id=uuid.uuid4()))  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
