"""
tests/test_api_routes.py

HTTP contract tests for the upload and material mapping routers.

The database session and the upload service are replaced with in-memory
doubles through FastAPI dependency overrides.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.routers import material_mappings_router, uploads_router
from app.domain.errors import UploadDecodeError
from app.domain.reference import ReferenceMappingEntry
from app.services.upload_service import get_upload_service
from db.models.upload import UploadStatus
from db.session import get_db

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def _upload(**overrides: Any) -> SimpleNamespace:
    values: dict[str, Any] = {
        "id": uuid.UUID("33333333-3333-3333-3333-333333333333"),
        "file_name": "shipments.csv",
        "status": UploadStatus.PROCESSING,
        "records_total": 2,
        "records_processed": 0,
        "records_failed": 0,
        "records_skipped": 0,
        "error_details": None,
        "created_at": NOW,
        "updated_at": NOW,
        "started_at": NOW,
        "completed_at": None,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class FakeUploadService:
    def __init__(self) -> None:
        self.accepted: list[tuple[str, bytes]] = []
        self.uploads: dict[uuid.UUID, SimpleNamespace] = {}
        self.replaced: list[ReferenceMappingEntry] = []
        self.decode_error = False

    def accept_upload(self, *, db: Any, executor: Any, file_name: str, content: bytes) -> SimpleNamespace:
        if self.decode_error:
            raise UploadDecodeError(f"Upload '{file_name}' could not be decoded: UnicodeDecodeError")
        self.accepted.append((file_name, content))
        return _upload(file_name=file_name)

    def get_upload(self, *, db: Any, upload_id: uuid.UUID) -> SimpleNamespace | None:
        return self.uploads.get(upload_id)

    def list_uploads(self, *, db: Any, limit: int, offset: int, status: str | None) -> list[SimpleNamespace]:
        return [upload for upload in self.uploads.values() if status is None or upload.status == status]

    def list_material_mappings(self, *, db: Any) -> list[ReferenceMappingEntry]:
        return [ReferenceMappingEntry(source_category="PET", canonical_label="Plastic", is_recyclable=True)]

    def replace_material_mappings(self, *, db: Any, entries: list[ReferenceMappingEntry]) -> int:
        self.replaced = list(entries)
        return len(entries)


@pytest.fixture()
def service() -> FakeUploadService:
    return FakeUploadService()


@pytest.fixture()
def client(service: FakeUploadService) -> TestClient:
    application = FastAPI()
    application.include_router(uploads_router)
    application.include_router(material_mappings_router)
    application.dependency_overrides[get_db] = lambda: object()
    application.dependency_overrides[get_upload_service] = lambda: service
    return TestClient(application)


class TestUploadRoutes:
    def test_accepts_csv_with_202(self, client: TestClient, service: FakeUploadService) -> None:
        response = client.post(
            "/uploads",
            files={"file": ("shipments.csv", b"Barcode,Weight\nA,1\nB,2\n", "text/csv")},
        )

        assert response.status_code == 202
        body = response.json()
        assert body["file_name"] == "shipments.csv"
        assert body["records_total"] == 2
        assert body["status"] == UploadStatus.PROCESSING
        assert service.accepted == [("shipments.csv", b"Barcode,Weight\nA,1\nB,2\n")]

    def test_rejects_non_delimited_file(self, client: TestClient) -> None:
        response = client.post("/uploads", files={"file": ("report.pdf", b"%PDF", "application/pdf")})

        assert response.status_code == 400

    def test_decode_error_maps_to_400(self, client: TestClient, service: FakeUploadService) -> None:
        service.decode_error = True

        response = client.post("/uploads", files={"file": ("bad.csv", b"\xff", "text/csv")})

        assert response.status_code == 400
        assert "could not be decoded" in response.json()["detail"]

    def test_get_upload_returns_progress_and_error_details(
        self,
        client: TestClient,
        service: FakeUploadService,
    ) -> None:
        upload = _upload(
            status=UploadStatus.COMPLETED,
            records_processed=2,
            records_failed=1,
            error_details=[{"record_identifier": "B", "row_number": 2, "error_message": "Invalid weight"}],
            completed_at=NOW,
        )
        service.uploads[upload.id] = upload

        response = client.get(f"/uploads/{upload.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["upload_id"] == str(upload.id)
        assert body["records_failed"] == 1
        assert body["error_details"][0]["record_identifier"] == "B"

    def test_get_missing_upload_is_404(self, client: TestClient) -> None:
        response = client.get(f"/uploads/{uuid.uuid4()}")

        assert response.status_code == 404

    def test_list_uploads_rejects_unknown_status(self, client: TestClient) -> None:
        response = client.get("/uploads", params={"status": "exploded"})

        assert response.status_code == 400

    def test_list_uploads_filters_by_status(self, client: TestClient, service: FakeUploadService) -> None:
        failed = _upload(
            id=uuid.uuid4(),
            status=UploadStatus.FAILED,
            error_details={"error": "ReferenceDataUnavailableError: down", "stats": {"total": 2}},
        )
        service.uploads[failed.id] = failed
        service.uploads[uuid.uuid4()] = _upload(id=uuid.uuid4())

        response = client.get("/uploads", params={"status": "FAILED"})

        assert response.status_code == 200
        uploads = response.json()["uploads"]
        assert len(uploads) == 1
        assert uploads[0]["error_details"]["error"].startswith("ReferenceDataUnavailableError")


class TestMaterialMappingRoutes:
    def test_lists_mappings(self, client: TestClient) -> None:
        response = client.get("/material-mappings")

        assert response.status_code == 200
        assert response.json()["mappings"][0]["canonical_label"] == "Plastic"

    def test_replaces_mappings(self, client: TestClient, service: FakeUploadService) -> None:
        response = client.put(
            "/material-mappings",
            json={
                "mappings": [
                    {"source_category": " PET ", "canonical_label": "Plastic"},
                    {
                        "source_category": "Broken Glass",
                        "canonical_label": "Glass",
                        "is_contamination": True,
                        "contamination_type": "breakage",
                    },
                ]
            },
        )

        assert response.status_code == 200
        assert response.json() == {"replaced": 2}
        assert service.replaced[0].source_category == "PET"
        assert service.replaced[1].is_contamination is True

    def test_rejects_duplicate_categories(self, client: TestClient) -> None:
        response = client.put(
            "/material-mappings",
            json={
                "mappings": [
                    {"source_category": "PET", "canonical_label": "Plastic"},
                    {"source_category": "pet", "canonical_label": "Other"},
                ]
            },
        )

        assert response.status_code == 422
