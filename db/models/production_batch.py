"""
db/models/production_batch.py

Production batches imported from the batching-plant controller, enriched
with their link to a delivery note.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, Float, Index, Integer, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class ProductionBatch(Base, TimestampMixin):
    __tablename__ = "production_batches"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    import_run_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        nullable=True,
        comment="Import run id; the run row is written after all batches",
    )
    batch_number: Mapped[str] = mapped_column(String(64), nullable=False)
    batch_datetime: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        comment="Plant-local wall-clock time reported by the controller",
    )
    client_name: Mapped[str] = mapped_column(String(255), nullable=False)
    formula_code: Mapped[str] = mapped_column(String(64), nullable=False)
    cement_kg: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    sand_kg: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    gravel_kg: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    water_liters: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    additives_liters: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    total_volume_m3: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    operator_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    raw_data: Mapped[dict[str, Any] | None] = mapped_column(
        JSONB,
        nullable=True,
        comment="Original export row for audit",
    )
    link_status: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="no_match",
        comment="auto_linked, pending, no_match, manual_linked",
    )
    link_confidence: Mapped[int | None] = mapped_column(Integer, nullable=True)
    linked_delivery_id: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        comment="delivery_notes.delivery_number of the linked note",
    )
    content_hash: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="sha256 of batch number, batch time and source filename",
    )

    __table_args__ = (
        Index("ix_production_batches_batch_datetime", "batch_datetime"),
        Index("ix_production_batches_link_status", "link_status"),
        Index("ix_production_batches_content_hash", "content_hash"),
        Index("ix_production_batches_import_run_id", "import_run_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ProductionBatch number={self.batch_number!r} "
            f"status={self.link_status!r} confidence={self.link_confidence}>"
        )
