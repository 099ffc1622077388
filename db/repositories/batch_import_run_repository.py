"""
Repository for the write-once import run audit log.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from db.models.batch_import_run import BatchImportRun


class BatchImportRunRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, **values: Any) -> BatchImportRun:
        run = BatchImportRun(**values)
        self._session.add(run)
        self._session.flush()
        self._session.refresh(run)
        return run

    def list_runs(self, *, limit: int = 50) -> list[BatchImportRun]:
        stmt: Select[tuple[BatchImportRun]] = (
            select(BatchImportRun).order_by(BatchImportRun.created_at.desc()).limit(max(1, limit))
        )
        return list(self._session.scalars(stmt).all())
