"""
Read-only repository over the delivery note register.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from db.models.delivery_note import DeliveryNote


class DeliveryNoteRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_for_date(self, delivery_date: date, *, limit: int = 100) -> list[DeliveryNote]:
        stmt: Select[tuple[DeliveryNote]] = (
            select(DeliveryNote)
            .where(DeliveryNote.delivery_date == delivery_date)
            .order_by(DeliveryNote.delivery_number)
            .limit(max(1, limit))
        )
        return list(self._session.scalars(stmt).all())

    def get_by_number(self, delivery_number: str) -> DeliveryNote | None:
        stmt = select(DeliveryNote).where(DeliveryNote.delivery_number == delivery_number.strip())
        return self._session.scalars(stmt).first()
