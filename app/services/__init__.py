"""
app/services package marker.
"""

from app.services.batch_import_service import (
    BatchImportError,
    BatchImportService,
    EmptyImportError,
    NoParsableRowsError,
    get_batch_import_service,
)
from app.services.batch_linking_service import (
    BatchLinker,
    BatchLinkingService,
    get_batch_linker,
    get_batch_linking_service,
)

__all__ = [
    "BatchImportError",
    "BatchImportService",
    "EmptyImportError",
    "NoParsableRowsError",
    "get_batch_import_service",
    "BatchLinker",
    "BatchLinkingService",
    "get_batch_linker",
    "get_batch_linking_service",
]
