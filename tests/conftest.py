"""
tests/conftest.py

Shared fixtures: an in-memory ReconciliationStore so services and routers
run without a database.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date, datetime, time, timezone

import pytest

from app.domain.production_batch import (
    BatchRecord,
    DeliveryRecord,
    ImportRunSummary,
    LinkDecision,
    LinkState,
    StoredBatch,
)
from db.repositories.errors import BatchNotFoundError, BatchPersistenceError


class InMemoryReconciliationStore:
    """
    ReconciliationStore backed by dicts. Batch numbers listed in
    ``failing_batch_numbers`` raise BatchPersistenceError on insert, dates in
    ``failing_fetch_dates`` on delivery lookup, and every duplicate check
    fails while ``fail_duplicate_lookups`` is set.
    """

    def __init__(self, deliveries: list[DeliveryRecord] | None = None) -> None:
        self.deliveries: list[DeliveryRecord] = list(deliveries or [])
        self.batches: dict[uuid.UUID, StoredBatch] = {}
        self.hashes: dict[uuid.UUID, str] = {}
        self.runs: list[ImportRunSummary] = []
        self.failing_batch_numbers: set[str] = set()
        self.failing_fetch_dates: set[date] = set()
        self.fail_duplicate_lookups = False
        self.fetch_calls: list[tuple[date, int]] = []
        self.commits = 0
        self.rollbacks = 0

    def fetch_deliveries_for_date(self, delivery_date: date, *, limit: int) -> list[DeliveryRecord]:
        self.fetch_calls.append((delivery_date, limit))
        if delivery_date in self.failing_fetch_dates:
            raise BatchPersistenceError(f"Failed to load deliveries for {delivery_date}.")
        same_day = [d for d in self.deliveries if d.delivery_date == delivery_date]
        return same_day[:limit]

    def get_delivery(self, delivery_id: str) -> DeliveryRecord | None:
        for delivery in self.deliveries:
            if delivery.delivery_id == delivery_id:
                return delivery
        return None

    def batch_exists(self, content_hash: str) -> bool:
        if self.fail_duplicate_lookups:
            raise BatchPersistenceError("Failed to look up duplicate batch.")
        return content_hash in self.hashes.values()

    def insert_batch(
        self,
        *,
        record: BatchRecord,
        decision: LinkDecision,
        content_hash: str,
        import_run_id: uuid.UUID | None,
    ) -> uuid.UUID:
        if record.batch_number in self.failing_batch_numbers:
            raise BatchPersistenceError(f"Failed to insert batch {record.batch_number!r}.")
        batch_id = uuid.uuid4()
        self.batches[batch_id] = StoredBatch(
            id=batch_id,
            record=record,
            link_status=decision.state,
            link_confidence=decision.confidence,
            linked_delivery_id=decision.delivery_id,
            import_run_id=import_run_id,
        )
        self.hashes[batch_id] = content_hash
        return batch_id

    def get_batch(self, batch_id: uuid.UUID) -> StoredBatch | None:
        return self.batches.get(batch_id)

    def update_batch_link(
        self,
        batch_id: uuid.UUID,
        *,
        link_status: LinkState,
        link_confidence: int | None,
        linked_delivery_id: str | None,
    ) -> StoredBatch:
        if batch_id not in self.batches:
            raise BatchNotFoundError(f"Batch not found: {batch_id}")
        updated = replace(
            self.batches[batch_id],
            link_status=link_status,
            link_confidence=link_confidence,
            linked_delivery_id=linked_delivery_id,
        )
        self.batches[batch_id] = updated
        return updated

    def list_batches(self, *, limit: int, link_status: LinkState | None = None) -> list[StoredBatch]:
        items = [
            batch
            for batch in self.batches.values()
            if link_status is None or batch.link_status is link_status
        ]
        items.sort(key=lambda batch: batch.record.batch_datetime, reverse=True)
        return items[:limit]

    def count_batches_by_status(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for batch in self.batches.values():
            counts[batch.link_status.value] = counts.get(batch.link_status.value, 0) + 1
        return counts

    def insert_import_run(self, summary: ImportRunSummary) -> ImportRunSummary:
        persisted = replace(summary, created_at=datetime.now(timezone.utc))
        self.runs.append(persisted)
        return persisted

    def list_import_runs(self, *, limit: int) -> list[ImportRunSummary]:
        return list(reversed(self.runs))[:limit]

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


def make_batch(**overrides: object) -> BatchRecord:
    values: dict[str, object] = {
        "batch_number": "B-001",
        "batch_datetime": datetime(2024, 3, 1, 10, 0),
        "client_name": "ACME Corp",
        "formula_code": "C25",
        "cement_kg": 350.0,
        "sand_kg": 800.0,
        "gravel_kg": 1000.0,
        "water_liters": 180.0,
        "additives_liters": 2.5,
        "total_volume_m3": 8.0,
        "operator_name": "J. Martin",
    }
    values.update(overrides)
    return BatchRecord(**values)  # type: ignore[arg-type]


def make_delivery(**overrides: object) -> DeliveryRecord:
    values: dict[str, object] = {
        "delivery_id": "BL-001",
        "client_name": "ACME",
        "formula_code": "C25",
        "volume_m3": 8.0,
        "delivery_date": date(2024, 3, 1),
        "departure_time": time(10, 5),
        "scheduled_time": None,
    }
    values.update(overrides)
    return DeliveryRecord(**values)  # type: ignore[arg-type]


CSV_HEADER = "BatchNumber,DateTime,Client,Formula,Cement,Sand,Gravel,Water,Additives,TotalVolume,Operator"


@pytest.fixture()
def store() -> InMemoryReconciliationStore:
    return InMemoryReconciliationStore()
