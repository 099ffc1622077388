"""
app/api/routers package marker.
"""

from app.api.routers.production_batches import router as production_batches_router

__all__ = [
    "production_batches_router",
]
