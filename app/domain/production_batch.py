"""
app/domain/production_batch.py

Domain models used by the batch-to-delivery reconciliation flow.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Mapping

RawRow = Mapping[str, str]


class LinkState(str, Enum):
    """
    Link status of a production batch against the delivery register.

    The classifier only ever produces AUTO_LINKED, PENDING or NO_MATCH.
    MANUAL_LINKED is written when an operator confirms a link by hand.
    """

    AUTO_LINKED = "auto_linked"
    PENDING = "pending"
    NO_MATCH = "no_match"
    MANUAL_LINKED = "manual_linked"


@dataclass(frozen=True)
class BatchRecord:
    """
    Typed production batch parsed from one controller export row.
    """

    batch_number: str
    batch_datetime: datetime
    client_name: str
    formula_code: str
    cement_kg: float
    sand_kg: float
    gravel_kg: float
    water_liters: float
    additives_liters: float
    total_volume_m3: float
    operator_name: str
    raw_data: dict[str, str] = field(default_factory=dict)

    @property
    def batch_date(self) -> date:
        return self.batch_datetime.date()


@dataclass(frozen=True)
class DeliveryRecord:
    """
    Same-day delivery note considered as a link candidate. Read-only.
    """

    delivery_id: str
    client_name: str
    formula_code: str
    volume_m3: float
    delivery_date: date
    departure_time: time | None = None
    scheduled_time: time | None = None

    @property
    def reference_time(self) -> time | None:
        """Actual plant departure when known, otherwise the planned time."""
        if self.departure_time is not None:
            return self.departure_time
        return self.scheduled_time


@dataclass(frozen=True)
class ComponentScores:
    date: int = 0
    client: int = 0
    volume: int = 0
    formula: int = 0

    @property
    def total(self) -> int:
        return self.date + self.client + self.volume + self.formula


@dataclass(frozen=True)
class LinkCandidate:
    """
    Scored pairing of one batch with one delivery note.
    """

    delivery_id: str
    scores: ComponentScores

    @property
    def confidence(self) -> int:
        return self.scores.total


@dataclass(frozen=True)
class LinkDecision:
    """
    Outcome of classifying the candidates of one batch.

    auto_linked and pending always carry a delivery id; no_match never does.
    """

    state: LinkState
    confidence: int
    delivery_id: str | None = None
    candidates: tuple[LinkCandidate, ...] = ()

    def __post_init__(self) -> None:
        if self.state is LinkState.MANUAL_LINKED:
            raise ValueError("manual_linked is not a classifier outcome.")
        if self.state is LinkState.NO_MATCH and self.delivery_id is not None:
            raise ValueError("no_match decisions cannot carry a delivery id.")
        if self.state is not LinkState.NO_MATCH and not self.delivery_id:
            raise ValueError(f"{self.state.value} decisions require a delivery id.")
        if not 0 <= self.confidence <= 100:
            raise ValueError("confidence must be within 0..100.")

    @classmethod
    def auto_linked(
        cls,
        delivery_id: str,
        confidence: int,
        candidates: tuple[LinkCandidate, ...] = (),
    ) -> "LinkDecision":
        return cls(LinkState.AUTO_LINKED, confidence, delivery_id, candidates)

    @classmethod
    def pending(
        cls,
        delivery_id: str,
        confidence: int,
        candidates: tuple[LinkCandidate, ...] = (),
    ) -> "LinkDecision":
        return cls(LinkState.PENDING, confidence, delivery_id, candidates)

    @classmethod
    def no_match(
        cls,
        confidence: int = 0,
        candidates: tuple[LinkCandidate, ...] = (),
    ) -> "LinkDecision":
        return cls(LinkState.NO_MATCH, confidence, None, candidates)


@dataclass(frozen=True)
class RowValidationError:
    """
    One row-level import error detail.
    """

    row_number: int
    field: str
    message: str
    value: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {"row": self.row_number, "field": self.field, "message": self.message}


@dataclass(frozen=True)
class StoredBatch:
    """
    A persisted production batch with its current link fields.
    """

    id: uuid.UUID
    record: BatchRecord
    link_status: LinkState
    link_confidence: int | None
    linked_delivery_id: str | None
    import_run_id: uuid.UUID | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class ImportRunSummary:
    """
    End-of-run summary for one controller export import.
    """

    filename: str
    rows_seen: int
    rows_imported: int
    rows_failed: int
    rows_auto_linked: int
    errors: list[RowValidationError] = field(default_factory=list)
    inserted_ids: list[uuid.UUID] = field(default_factory=list)
    imported_by: str | None = None
    run_id: uuid.UUID | None = None
    created_at: datetime | None = None

    @property
    def rows_pending_link(self) -> int:
        return self.rows_imported - self.rows_auto_linked
