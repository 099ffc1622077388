"""
app/domain package marker.
"""

from app.domain.production_batch import (
    BatchRecord,
    ComponentScores,
    DeliveryRecord,
    ImportRunSummary,
    LinkCandidate,
    LinkDecision,
    LinkState,
    RowValidationError,
    StoredBatch,
)

__all__ = [
    "BatchRecord",
    "ComponentScores",
    "DeliveryRecord",
    "ImportRunSummary",
    "LinkCandidate",
    "LinkDecision",
    "LinkState",
    "RowValidationError",
    "StoredBatch",
]
