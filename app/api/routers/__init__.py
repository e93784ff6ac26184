"""
app/api/routers package marker.
"""

from app.api.routers.material_mappings import router as material_mappings_router
from app.api.routers.uploads import router as uploads_router

__all__ = [
    "material_mappings_router",
    "uploads_router",
]
