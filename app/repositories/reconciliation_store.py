"""
app/repositories/reconciliation_store.py

Storage collaborator of the batch reconciliation flow.

The services depend on the ``ReconciliationStore`` protocol only, so scoring
and classification stay testable without a live database.
``SQLAlchemyReconciliationStore`` is the production implementation.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.production_batch import (
    BatchRecord,
    DeliveryRecord,
    ImportRunSummary,
    LinkDecision,
    LinkState,
    RowValidationError,
    StoredBatch,
)
from db.models.batch_import_run import BatchImportRun
from db.models.delivery_note import DeliveryNote
from db.models.production_batch import ProductionBatch
from db.repositories.batch_import_run_repository import BatchImportRunRepository
from db.repositories.delivery_note_repository import DeliveryNoteRepository
from db.repositories.errors import (
    BatchNotFoundError,
    BatchPersistenceError,
    ImportRunPersistenceError,
)
from db.repositories.production_batch_repository import ProductionBatchRepository


class ReconciliationStore(Protocol):
    def fetch_deliveries_for_date(self, delivery_date: date, *, limit: int) -> list[DeliveryRecord]:
        ...

    def get_delivery(self, delivery_id: str) -> DeliveryRecord | None:
        ...

    def batch_exists(self, content_hash: str) -> bool:
        ...

    def insert_batch(
        self,
        *,
        record: BatchRecord,
        decision: LinkDecision,
        content_hash: str,
        import_run_id: uuid.UUID | None,
    ) -> uuid.UUID:
        ...

    def get_batch(self, batch_id: uuid.UUID) -> StoredBatch | None:
        ...

    def update_batch_link(
        self,
        batch_id: uuid.UUID,
        *,
        link_status: LinkState,
        link_confidence: int | None,
        linked_delivery_id: str | None,
    ) -> StoredBatch:
        ...

    def list_batches(self, *, limit: int, link_status: LinkState | None = None) -> list[StoredBatch]:
        ...

    def count_batches_by_status(self) -> dict[str, int]:
        ...

    def insert_import_run(self, summary: ImportRunSummary) -> ImportRunSummary:
        ...

    def list_import_runs(self, *, limit: int) -> list[ImportRunSummary]:
        ...

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


class SQLAlchemyReconciliationStore:
    """
    ReconciliationStore over one SQLAlchemy session (caller owns lifecycle).
    """

    def __init__(self, session: Session) -> None:
        self._session = session
        self._deliveries = DeliveryNoteRepository(session)
        self._batches = ProductionBatchRepository(session)
        self._runs = BatchImportRunRepository(session)

    def fetch_deliveries_for_date(self, delivery_date: date, *, limit: int) -> list[DeliveryRecord]:
        try:
            notes = self._deliveries.list_for_date(delivery_date, limit=limit)
        except SQLAlchemyError as exc:
            raise BatchPersistenceError(f"Failed to load deliveries for {delivery_date}.") from exc
        return [_to_delivery_record(note) for note in notes]

    def get_delivery(self, delivery_id: str) -> DeliveryRecord | None:
        try:
            note = self._deliveries.get_by_number(delivery_id)
        except SQLAlchemyError as exc:
            raise BatchPersistenceError(f"Failed to load delivery {delivery_id!r}.") from exc
        return _to_delivery_record(note) if note is not None else None

    def batch_exists(self, content_hash: str) -> bool:
        try:
            return self._batches.exists_with_hash(content_hash)
        except SQLAlchemyError as exc:
            raise BatchPersistenceError("Failed to look up duplicate batch.") from exc

    def insert_batch(
        self,
        *,
        record: BatchRecord,
        decision: LinkDecision,
        content_hash: str,
        import_run_id: uuid.UUID | None,
    ) -> uuid.UUID:
        try:
            batch = self._batches.create(
                import_run_id=import_run_id,
                batch_number=record.batch_number,
                batch_datetime=record.batch_datetime,
                client_name=record.client_name,
                formula_code=record.formula_code,
                cement_kg=record.cement_kg,
                sand_kg=record.sand_kg,
                gravel_kg=record.gravel_kg,
                water_liters=record.water_liters,
                additives_liters=record.additives_liters,
                total_volume_m3=record.total_volume_m3,
                operator_name=record.operator_name,
                raw_data=dict(record.raw_data),
                link_status=decision.state.value,
                link_confidence=decision.confidence,
                linked_delivery_id=decision.delivery_id,
                content_hash=content_hash,
            )
        except SQLAlchemyError as exc:
            raise BatchPersistenceError(f"Failed to insert batch {record.batch_number!r}.") from exc
        return batch.id

    def get_batch(self, batch_id: uuid.UUID) -> StoredBatch | None:
        try:
            batch = self._batches.get(batch_id)
        except SQLAlchemyError as exc:
            raise BatchPersistenceError(f"Failed to load batch {batch_id}.") from exc
        return _to_stored_batch(batch) if batch is not None else None

    def update_batch_link(
        self,
        batch_id: uuid.UUID,
        *,
        link_status: LinkState,
        link_confidence: int | None,
        linked_delivery_id: str | None,
    ) -> StoredBatch:
        try:
            batch = self._batches.update_link(
                batch_id=batch_id,
                link_status=link_status.value,
                link_confidence=link_confidence,
                linked_delivery_id=linked_delivery_id,
            )
        except SQLAlchemyError as exc:
            raise BatchPersistenceError(f"Failed to update link of batch {batch_id}.") from exc
        if batch is None:
            raise BatchNotFoundError(f"Batch not found: {batch_id}")
        return _to_stored_batch(batch)

    def list_batches(self, *, limit: int, link_status: LinkState | None = None) -> list[StoredBatch]:
        rows = self._batches.list_batches(
            limit=limit,
            link_status=link_status.value if link_status is not None else None,
        )
        return [_to_stored_batch(row) for row in rows]

    def count_batches_by_status(self) -> dict[str, int]:
        return self._batches.count_by_status()

    def insert_import_run(self, summary: ImportRunSummary) -> ImportRunSummary:
        try:
            run = self._runs.create(
                id=summary.run_id or uuid.uuid4(),
                filename=summary.filename,
                rows_seen=summary.rows_seen,
                rows_imported=summary.rows_imported,
                rows_failed=summary.rows_failed,
                rows_auto_linked=summary.rows_auto_linked,
                errors=[error.to_dict() for error in summary.errors] or None,
                imported_by=summary.imported_by,
            )
        except SQLAlchemyError as exc:
            raise ImportRunPersistenceError("Failed to record import run.") from exc
        return _to_import_run_summary(run, inserted_ids=summary.inserted_ids)

    def list_import_runs(self, *, limit: int) -> list[ImportRunSummary]:
        return [_to_import_run_summary(run) for run in self._runs.list_runs(limit=limit)]

    def commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            raise BatchPersistenceError("Failed to commit transaction.") from exc

    def rollback(self) -> None:
        self._session.rollback()


def _to_delivery_record(note: DeliveryNote) -> DeliveryRecord:
    return DeliveryRecord(
        delivery_id=note.delivery_number,
        client_name=note.client_name or "",
        formula_code=note.formula_code or "",
        volume_m3=float(note.volume_m3 or 0),
        delivery_date=note.delivery_date,
        departure_time=note.departure_time,
        scheduled_time=note.scheduled_time,
    )


def _to_stored_batch(batch: ProductionBatch) -> StoredBatch:
    return StoredBatch(
        id=batch.id,
        record=BatchRecord(
            batch_number=batch.batch_number,
            batch_datetime=batch.batch_datetime,
            client_name=batch.client_name,
            formula_code=batch.formula_code,
            cement_kg=batch.cement_kg,
            sand_kg=batch.sand_kg,
            gravel_kg=batch.gravel_kg,
            water_liters=batch.water_liters,
            additives_liters=batch.additives_liters,
            total_volume_m3=batch.total_volume_m3,
            operator_name=batch.operator_name or "",
            raw_data=dict(batch.raw_data or {}),
        ),
        link_status=LinkState(batch.link_status),
        link_confidence=batch.link_confidence,
        linked_delivery_id=batch.linked_delivery_id,
        import_run_id=batch.import_run_id,
        created_at=batch.created_at,
    )


def _to_import_run_summary(
    run: BatchImportRun,
    *,
    inserted_ids: list[uuid.UUID] | None = None,
) -> ImportRunSummary:
    return ImportRunSummary(
        filename=run.filename,
        rows_seen=run.rows_seen,
        rows_imported=run.rows_imported,
        rows_failed=run.rows_failed,
        rows_auto_linked=run.rows_auto_linked,
        errors=[
            RowValidationError(
                row_number=int(item.get("row", 0)),
                field=str(item.get("field", "")),
                message=str(item.get("message", "")),
            )
            for item in (run.errors or [])
        ],
        inserted_ids=list(inserted_ids or []),
        imported_by=run.imported_by,
        run_id=run.id,
        created_at=run.created_at,
    )
