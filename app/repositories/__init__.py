"""
app/repositories package marker.
"""

from app.repositories.reference_repository import ReferenceRepository
from app.repositories.shipment_repository import ShipmentRepository

__all__ = [
    "ReferenceRepository",
    "ShipmentRepository",
]
