"""
app/api/routers/production_batches.py

Controller export import and batch-to-delivery linking endpoints.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status

from app.api.dependencies import get_csv_upload, get_current_user_id, get_reconciliation_store
from app.domain.production_batch import ImportRunSummary, LinkState
from app.repositories.reconciliation_store import ReconciliationStore
from app.schemas.production_batches import (
    BatchImportResponse,
    BatchTextImportRequest,
    ImportRunResponse,
    ManualLinkRequest,
    ProductionBatchListResponse,
    ProductionBatchResponse,
    RelinkResponse,
)
from app.services.batch_import_service import (
    BatchImportError,
    BatchImportService,
    get_batch_import_service,
)
from app.services.batch_linking_service import BatchLinkingService, get_batch_linking_service
from db.repositories.errors import (
    BatchNotFoundError,
    BatchPersistenceError,
    DeliveryNotFoundError,
    ImportRunPersistenceError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/production-batches", tags=["production-batches"])


def _run_import(
    *,
    service: BatchImportService,
    store: ReconciliationStore,
    text: str,
    filename: str | None,
    imported_by: str | None,
) -> ImportRunSummary:
    try:
        return service.import_text(
            text=text,
            store=store,
            filename=filename,
            imported_by=imported_by,
        )
    except BatchImportError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except ImportRunPersistenceError as exc:
        logger.error("Import run could not be recorded filename=%r: %s", filename, exc.__cause__ or exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to record the import run.",
        ) from exc
    except Exception as exc:
        logger.exception("Unexpected batch import failure filename=%r", filename)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unexpected error during import.",
        ) from exc


@router.post("/import", response_model=BatchImportResponse)
def import_batch_file(
    file: UploadFile = Depends(get_csv_upload),
    imported_by: str | None = Depends(get_current_user_id),
    store: ReconciliationStore = Depends(get_reconciliation_store),
    import_service: BatchImportService = Depends(get_batch_import_service),
) -> BatchImportResponse:
    """
    Import one controller export sent as a multipart file upload.
    """

    try:
        raw = file.file.read()
    finally:
        file.file.close()

    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CSV must be UTF-8 encoded.",
        ) from exc

    summary = _run_import(
        service=import_service,
        store=store,
        text=text,
        filename=file.filename,
        imported_by=imported_by,
    )
    return BatchImportResponse.from_domain(summary)


@router.post("/import/text", response_model=BatchImportResponse)
def import_batch_text(
    payload: BatchTextImportRequest,
    imported_by: str | None = Depends(get_current_user_id),
    store: ReconciliationStore = Depends(get_reconciliation_store),
    import_service: BatchImportService = Depends(get_batch_import_service),
) -> BatchImportResponse:
    """
    Import one controller export sent as JSON text.
    """

    summary = _run_import(
        service=import_service,
        store=store,
        text=payload.csv_content,
        filename=payload.filename,
        imported_by=imported_by,
    )
    return BatchImportResponse.from_domain(summary)


@router.get("/import-runs", response_model=list[ImportRunResponse])
def list_import_runs(
    limit: int = Query(default=50, ge=1, le=500, description="Max runs returned, newest first"),
    store: ReconciliationStore = Depends(get_reconciliation_store),
) -> list[ImportRunResponse]:
    return [ImportRunResponse.from_domain(run) for run in store.list_import_runs(limit=limit)]


@router.get("", response_model=ProductionBatchListResponse)
def list_production_batches(
    link_status: LinkState | None = Query(default=None, description="Optional link state filter"),
    limit: int = Query(default=100, ge=1, le=500, description="Max batches returned, newest first"),
    store: ReconciliationStore = Depends(get_reconciliation_store),
    linking_service: BatchLinkingService = Depends(get_batch_linking_service),
) -> ProductionBatchListResponse:
    listing = linking_service.list_batches(store=store, link_status=link_status, limit=limit)
    return ProductionBatchListResponse(
        counts=listing.counts,
        items=[ProductionBatchResponse.from_domain(batch) for batch in listing.batches],
    )


@router.get("/{batch_id}", response_model=ProductionBatchResponse)
def get_production_batch(
    batch_id: UUID,
    store: ReconciliationStore = Depends(get_reconciliation_store),
) -> ProductionBatchResponse:
    batch = store.get_batch(batch_id)
    if batch is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Batch not found.")
    return ProductionBatchResponse.from_domain(batch)


@router.post("/{batch_id}/auto-link", response_model=RelinkResponse)
def relink_production_batch(
    batch_id: UUID,
    store: ReconciliationStore = Depends(get_reconciliation_store),
    linking_service: BatchLinkingService = Depends(get_batch_linking_service),
) -> RelinkResponse:
    """
    Re-run automatic linking for one stored batch.
    """

    try:
        batch, decision = linking_service.relink(batch_id=batch_id, store=store)
    except BatchNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except BatchPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to update batch link.",
        ) from exc
    return RelinkResponse.from_domain(batch, decision)


@router.post("/{batch_id}/link", response_model=ProductionBatchResponse)
def link_production_batch(
    batch_id: UUID,
    payload: ManualLinkRequest,
    store: ReconciliationStore = Depends(get_reconciliation_store),
    linking_service: BatchLinkingService = Depends(get_batch_linking_service),
) -> ProductionBatchResponse:
    """
    Link one stored batch to a delivery note chosen by an operator.
    """

    try:
        batch = linking_service.link_manually(
            batch_id=batch_id,
            delivery_id=payload.delivery_id,
            store=store,
        )
    except (BatchNotFoundError, DeliveryNotFoundError) as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except BatchPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to update batch link.",
        ) from exc
    return ProductionBatchResponse.from_domain(batch)
