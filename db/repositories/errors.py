"""
Repository-layer exceptions for reconciliation storage flows.
"""

from __future__ import annotations


class ReconciliationRepositoryError(Exception):
    """Base exception for reconciliation repository failures."""


class BatchPersistenceError(ReconciliationRepositoryError, RuntimeError):
    """Raised when a production batch cannot be written or updated."""


class ImportRunPersistenceError(ReconciliationRepositoryError, RuntimeError):
    """Raised when the import run audit record cannot be written."""


class BatchNotFoundError(ReconciliationRepositoryError, LookupError):
    """Raised when a referenced production batch does not exist."""


class DeliveryNotFoundError(ReconciliationRepositoryError, LookupError):
    """Raised when a referenced delivery note does not exist."""
