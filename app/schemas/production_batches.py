"""
app/schemas/production_batches.py

Request and response schemas for batch import and linking endpoints.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.domain.production_batch import (
    ImportRunSummary,
    LinkCandidate,
    LinkDecision,
    LinkState,
    RowValidationError,
    StoredBatch,
)


class BatchTextImportRequest(BaseModel):
    """
    JSON body carrying an export as text.
    """

    csv_content: str = ""
    filename: str | None = Field(default=None, max_length=255)


class ManualLinkRequest(BaseModel):
    delivery_id: str = Field(..., min_length=1, max_length=64)


class RowErrorResponse(BaseModel):
    """
    API response model for one row-level import error.
    """

    row: int = Field(..., ge=0)
    field: str
    message: str

    @classmethod
    def from_domain(cls, error: RowValidationError) -> "RowErrorResponse":
        return cls(row=error.row_number, field=error.field, message=error.message)


class ImportCountsResponse(BaseModel):
    total_rows: int = Field(..., ge=0)
    imported: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    auto_linked: int = Field(..., ge=0)
    pending_link: int = Field(..., ge=0)


class BatchImportResponse(BaseModel):
    """
    API response model for one completed import.
    """

    success: bool = True
    import_run_id: UUID | None = None
    summary: ImportCountsResponse
    inserted_ids: list[UUID] = Field(default_factory=list)
    errors: list[RowErrorResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, summary: ImportRunSummary) -> "BatchImportResponse":
        return cls(
            import_run_id=summary.run_id,
            summary=ImportCountsResponse(
                total_rows=summary.rows_seen,
                imported=summary.rows_imported,
                failed=summary.rows_failed,
                auto_linked=summary.rows_auto_linked,
                pending_link=summary.rows_pending_link,
            ),
            inserted_ids=list(summary.inserted_ids),
            errors=[RowErrorResponse.from_domain(error) for error in summary.errors],
        )


class ImportRunResponse(BaseModel):
    id: UUID | None = None
    filename: str
    rows_seen: int
    rows_imported: int
    rows_failed: int
    rows_auto_linked: int
    imported_by: str | None = None
    created_at: datetime | None = None
    errors: list[RowErrorResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, summary: ImportRunSummary) -> "ImportRunResponse":
        return cls(
            id=summary.run_id,
            filename=summary.filename,
            rows_seen=summary.rows_seen,
            rows_imported=summary.rows_imported,
            rows_failed=summary.rows_failed,
            rows_auto_linked=summary.rows_auto_linked,
            imported_by=summary.imported_by,
            created_at=summary.created_at,
            errors=[RowErrorResponse.from_domain(error) for error in summary.errors],
        )


class ProductionBatchResponse(BaseModel):
    id: UUID
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
    link_status: str
    link_confidence: int | None = None
    linked_delivery_id: str | None = None
    import_run_id: UUID | None = None

    @classmethod
    def from_domain(cls, batch: StoredBatch) -> "ProductionBatchResponse":
        record = batch.record
        return cls(
            id=batch.id,
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
            link_status=batch.link_status.value,
            link_confidence=batch.link_confidence,
            linked_delivery_id=batch.linked_delivery_id,
            import_run_id=batch.import_run_id,
        )


class ProductionBatchListResponse(BaseModel):
    counts: dict[str, int] = Field(default_factory=dict)
    items: list[ProductionBatchResponse] = Field(default_factory=list)


class ComponentScoresResponse(BaseModel):
    date: int = Field(..., ge=0, le=25)
    client: int = Field(..., ge=0, le=35)
    volume: int = Field(..., ge=0, le=25)
    formula: int = Field(..., ge=0, le=15)


class LinkCandidateResponse(BaseModel):
    delivery_id: str
    confidence: int = Field(..., ge=0, le=100)
    scores: ComponentScoresResponse

    @classmethod
    def from_domain(cls, candidate: LinkCandidate) -> "LinkCandidateResponse":
        return cls(
            delivery_id=candidate.delivery_id,
            confidence=candidate.confidence,
            scores=ComponentScoresResponse(
                date=candidate.scores.date,
                client=candidate.scores.client,
                volume=candidate.scores.volume,
                formula=candidate.scores.formula,
            ),
        )


class RelinkResponse(BaseModel):
    """
    API response model for an automatic re-link of one stored batch.
    """

    linked: bool
    link_status: str
    confidence: int = Field(..., ge=0, le=100)
    delivery_id: str | None = None
    candidates: list[LinkCandidateResponse] = Field(default_factory=list)
    batch: ProductionBatchResponse

    @classmethod
    def from_domain(cls, batch: StoredBatch, decision: LinkDecision) -> "RelinkResponse":
        return cls(
            linked=decision.state is LinkState.AUTO_LINKED,
            link_status=decision.state.value,
            confidence=decision.confidence,
            delivery_id=decision.delivery_id,
            candidates=[LinkCandidateResponse.from_domain(c) for c in decision.candidates],
            batch=ProductionBatchResponse.from_domain(batch),
        )
