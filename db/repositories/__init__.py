"""
Repository layer exports.
"""

from db.repositories.batch_import_run_repository import BatchImportRunRepository
from db.repositories.delivery_note_repository import DeliveryNoteRepository
from db.repositories.errors import (
    BatchNotFoundError,
    BatchPersistenceError,
    DeliveryNotFoundError,
    ImportRunPersistenceError,
    ReconciliationRepositoryError,
)
from db.repositories.production_batch_repository import ProductionBatchRepository

__all__ = [
    "BatchImportRunRepository",
    "DeliveryNoteRepository",
    "ProductionBatchRepository",
    "ReconciliationRepositoryError",
    "BatchPersistenceError",
    "ImportRunPersistenceError",
    "BatchNotFoundError",
    "DeliveryNotFoundError",
]
