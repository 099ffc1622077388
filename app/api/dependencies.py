"""
app/api/dependencies.py

Shared FastAPI dependencies for request validation and collaborators.
"""

from __future__ import annotations

from fastapi import Depends, File, Header, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from app.repositories.reconciliation_store import ReconciliationStore, SQLAlchemyReconciliationStore
from db.session import get_db

CSV_CONTENT_TYPES = {
    "text/csv",
    "text/plain",
    "text/tab-separated-values",
    "application/csv",
    "application/vnd.ms-excel",
    "application/octet-stream",
}

CSV_EXTENSIONS = (".csv", ".txt", ".tsv")


def get_csv_upload(file: UploadFile | None = File(default=None)) -> UploadFile:
    """
    Validate that a file was sent and looks like a delimited text export
    by extension or MIME type.
    """

    if file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file provided",
        )

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_csv_filename = filename.endswith(CSV_EXTENSIONS)
    is_csv_content_type = content_type in CSV_CONTENT_TYPES

    if not is_csv_filename and not is_csv_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only CSV files are allowed.",
        )

    return file


def get_reconciliation_store(db: Session = Depends(get_db)) -> ReconciliationStore:
    return SQLAlchemyReconciliationStore(db)


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str | None:
    """
    Identity of the caller as forwarded by the gateway. Recorded for
    traceability only; no authorization decision is taken on it.
    """

    if x_user_id is None:
        return None
    stripped = x_user_id.strip()
    return stripped or None
