"""
app/services package marker.
"""

from app.services.batch_coordinator import BatchCoordinator, build_batch_coordinator, get_batch_coordinator
from app.services.shipment_normalizer import ShipmentNormalizer
from app.services.upload_service import (
    FastAPIBackgroundTaskExecutor,
    IngestionTaskExecutor,
    UploadService,
    get_upload_service,
)

__all__ = [
    "BatchCoordinator",
    "build_batch_coordinator",
    "get_batch_coordinator",
    "ShipmentNormalizer",
    "FastAPIBackgroundTaskExecutor",
    "IngestionTaskExecutor",
    "UploadService",
    "get_upload_service",
]
