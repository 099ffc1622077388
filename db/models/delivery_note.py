"""
db/models/delivery_note.py

Delivery note register. Owned by dispatch; the reconciliation flow only
reads it to find link candidates for production batches.
"""

from __future__ import annotations

import uuid
from datetime import date, time

from sqlalchemy import Date, Index, Numeric, String, Time
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class DeliveryNote(Base, TimestampMixin):
    __tablename__ = "delivery_notes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    delivery_number: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        comment="Business identifier printed on the delivery note",
    )
    client_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Client display name",
    )
    formula_code: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
    )
    volume_m3: Mapped[float] = mapped_column(
        Numeric(10, 3, asdecimal=False),
        nullable=False,
        default=0,
    )
    delivery_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )
    departure_time: Mapped[time | None] = mapped_column(
        Time,
        nullable=True,
        comment="Actual plant departure time",
    )
    scheduled_time: Mapped[time | None] = mapped_column(
        Time,
        nullable=True,
        comment="Planned delivery time",
    )

    __table_args__ = (
        Index("ix_delivery_notes_delivery_date", "delivery_date"),
    )

    def __repr__(self) -> str:
        return f"<DeliveryNote number={self.delivery_number!r} date={self.delivery_date}>"
