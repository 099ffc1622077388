"""
app/repositories package marker.
"""

from app.repositories.reconciliation_store import ReconciliationStore, SQLAlchemyReconciliationStore

__all__ = [
    "ReconciliationStore",
    "SQLAlchemyReconciliationStore",
]
