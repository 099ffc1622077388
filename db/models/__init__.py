"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.batch_import_run import BatchImportRun
from db.models.delivery_note import DeliveryNote
from db.models.production_batch import ProductionBatch

__all__ = [
    "BatchImportRun",
    "DeliveryNote",
    "ProductionBatch",
]
