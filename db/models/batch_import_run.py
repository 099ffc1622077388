"""
db/models/batch_import_run.py

Audit record written once per controller export import.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class BatchImportRun(Base, TimestampMixin):
    __tablename__ = "batch_import_runs"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    rows_seen: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rows_imported: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rows_failed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rows_auto_linked: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    errors: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSONB,
        nullable=True,
        comment="Row-level errors as {row, field, message}",
    )
    imported_by: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Identity of the uploading user, for traceability only",
    )

    __table_args__ = (
        Index("ix_batch_import_runs_created_at", "created_at"),
    )
