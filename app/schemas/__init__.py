"""
app/schemas package marker.
"""

from app.schemas.production_batches import (
    BatchImportResponse,
    BatchTextImportRequest,
    ImportRunResponse,
    LinkCandidateResponse,
    ManualLinkRequest,
    ProductionBatchListResponse,
    ProductionBatchResponse,
    RelinkResponse,
    RowErrorResponse,
)

__all__ = [
    "BatchImportResponse",
    "BatchTextImportRequest",
    "ImportRunResponse",
    "LinkCandidateResponse",
    "ManualLinkRequest",
    "ProductionBatchListResponse",
    "ProductionBatchResponse",
    "RelinkResponse",
    "RowErrorResponse",
]
