"""
Repository for production batch persistence and link updates.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from db.models.production_batch import ProductionBatch


class ProductionBatchRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, **values: Any) -> ProductionBatch:
        batch = ProductionBatch(**values)
        self._session.add(batch)
        self._session.flush()
        return batch

    def get(self, batch_id: uuid.UUID) -> ProductionBatch | None:
        return self._session.get(ProductionBatch, batch_id)

    def exists_with_hash(self, content_hash: str) -> bool:
        stmt = select(ProductionBatch.id).where(ProductionBatch.content_hash == content_hash).limit(1)
        return self._session.scalars(stmt).first() is not None

    def update_link(
        self,
        *,
        batch_id: uuid.UUID,
        link_status: str,
        link_confidence: int | None,
        linked_delivery_id: str | None,
    ) -> ProductionBatch | None:
        batch = self.get(batch_id)
        if batch is None:
            return None
        batch.link_status = link_status
        batch.link_confidence = link_confidence
        batch.linked_delivery_id = linked_delivery_id
        self._session.flush()
        return batch

    def list_batches(
        self,
        *,
        limit: int = 100,
        link_status: str | None = None,
    ) -> list[ProductionBatch]:
        stmt: Select[tuple[ProductionBatch]] = select(ProductionBatch)
        if link_status:
            stmt = stmt.where(ProductionBatch.link_status == link_status)
        stmt = stmt.order_by(ProductionBatch.batch_datetime.desc()).limit(max(1, limit))
        return list(self._session.scalars(stmt).all())

    def count_by_status(self) -> dict[str, int]:
        stmt = select(ProductionBatch.link_status, func.count()).group_by(ProductionBatch.link_status)
        return {status: count for status, count in self._session.execute(stmt).all()}
