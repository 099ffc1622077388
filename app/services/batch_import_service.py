"""
app/services/batch_import_service.py

Import coordinator for production-line controller exports.

Each data row is validated, linked to a same-day delivery note and persisted
in file order, one row at a time. Row-level failures (bad fields, duplicate
rows, database errors) are recorded and skipped; the import carries on with
the next row. Once every row has been handled a single import run record is
written with the counts and the full error list.

Invocation-level failures (empty input, nothing parsable) raise before any
row is touched. If the process dies mid-import, the rows already committed
stay and no import run is written.
"""

from __future__ import annotations

import hashlib
import logging
import uuid
from functools import lru_cache

from app.config import get_batch_import_settings
from app.domain.production_batch import (
    BatchRecord,
    ImportRunSummary,
    LinkState,
    RowValidationError,
)
from app.parsers.delimited_text import parse_delimited_text
from app.repositories.reconciliation_store import ReconciliationStore
from app.services.batch_linking_service import BatchLinker, get_batch_linker
from app.validators.batch_row_validator import BatchRowValidator
from db.repositories.errors import BatchPersistenceError, ImportRunPersistenceError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "upload.csv"


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class BatchImportError(ValueError):
    """
    Raised when an import cannot start at all.
    """


class EmptyImportError(BatchImportError):
    """
    Raised when no file or only blank content was supplied.
    """


class NoParsableRowsError(BatchImportError):
    """
    Raised when no data line matches the header layout.
    """


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


def compute_content_hash(record: BatchRecord, filename: str) -> str:
    payload = "|".join((record.batch_number, record.batch_datetime.isoformat(), filename))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class BatchImportService:
    """
    Coordinates parsing, validation, linking and persistence of one export.
    """

    def __init__(
        self,
        *,
        log_validation_errors: bool = True,
        reject_duplicates: bool = False,
        linker: BatchLinker | None = None,
        validator: BatchRowValidator | None = None,
    ) -> None:
        self._log_validation_errors = log_validation_errors
        self._reject_duplicates = reject_duplicates
        self._linker = linker or BatchLinker()
        self._validator = validator or BatchRowValidator()

    def import_text(
        self,
        *,
        text: str,
        store: ReconciliationStore,
        filename: str | None = None,
        imported_by: str | None = None,
    ) -> ImportRunSummary:
        """
        Import one controller export and return the persisted run summary.

        Args:
            text:         Raw export content.
            store:        Delivery/batch store collaborator.
            filename:     Source filename recorded on the run.
            imported_by:  Uploading user identity, recorded for traceability.
        """

        if not text or not text.strip():
            raise EmptyImportError("Empty CSV content")

        table = parse_delimited_text(text)
        if not table.rows:
            raise NoParsableRowsError("No valid rows found")

        source_name = (filename or "").strip() or DEFAULT_FILENAME
        run_id = uuid.uuid4()
        logger.info(
            "Batch import started run_id=%s filename=%r rows=%d dropped_lines=%d imported_by=%s",
            run_id,
            source_name,
            len(table.rows),
            table.dropped_lines,
            imported_by,
        )

        rows_imported = 0
        rows_failed = 0
        rows_auto_linked = 0
        errors: list[RowValidationError] = []
        inserted_ids: list[uuid.UUID] = []

        for row_number, raw_row in enumerate(table.rows, start=1):
            record, row_errors = self._validator.validate_row(raw_row=raw_row, row_number=row_number)
            if row_errors or record is None:
                rows_failed += 1
                for error in row_errors:
                    self._record_error(errors, error)
                continue

            content_hash = compute_content_hash(record, source_name)
            try:
                if self._reject_duplicates and store.batch_exists(content_hash):
                    rows_failed += 1
                    self._record_error(
                        errors,
                        RowValidationError(
                            row_number=row_number,
                            field="BatchNumber",
                            message="Duplicate batch already imported",
                            value=record.batch_number,
                        ),
                    )
                    continue

                decision = self._linker.link(record, store)
                batch_id = store.insert_batch(
                    record=record,
                    decision=decision,
                    content_hash=content_hash,
                    import_run_id=run_id,
                )
                store.commit()
            except BatchPersistenceError as exc:
                store.rollback()
                rows_failed += 1
                logger.warning(
                    "Batch persistence failed run_id=%s row=%s batch=%s: %s",
                    run_id,
                    row_number,
                    record.batch_number,
                    exc.__cause__ or exc,
                )
                self._record_error(
                    errors,
                    RowValidationError(
                        row_number=row_number,
                        field="database",
                        message=str(exc.__cause__ or exc),
                        value=record.batch_number,
                    ),
                )
                continue

            rows_imported += 1
            inserted_ids.append(batch_id)
            if decision.state is LinkState.AUTO_LINKED:
                rows_auto_linked += 1

        summary = ImportRunSummary(
            filename=source_name,
            rows_seen=len(table.rows),
            rows_imported=rows_imported,
            rows_failed=rows_failed,
            rows_auto_linked=rows_auto_linked,
            errors=errors,
            inserted_ids=inserted_ids,
            imported_by=imported_by,
            run_id=run_id,
        )

        try:
            persisted = store.insert_import_run(summary)
            store.commit()
        except ImportRunPersistenceError:
            store.rollback()
            raise
        except BatchPersistenceError as exc:
            store.rollback()
            raise ImportRunPersistenceError("Failed to record import run.") from exc

        logger.info(
            "Batch import completed run_id=%s seen=%d imported=%d failed=%d auto_linked=%d",
            run_id,
            summary.rows_seen,
            summary.rows_imported,
            summary.rows_failed,
            summary.rows_auto_linked,
        )
        return persisted

    def _record_error(self, errors: list[RowValidationError], error: RowValidationError) -> None:
        if self._log_validation_errors:
            logger.warning(
                "Batch import row error row=%s field=%s message=%s value=%r",
                error.row_number,
                error.field,
                error.message,
                error.value,
            )
        errors.append(error)


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_batch_import_service() -> BatchImportService:
    """
    Build and cache the import service with env-driven settings.
    """

    settings = get_batch_import_settings()
    return BatchImportService(
        log_validation_errors=settings.log_validation_errors,
        reject_duplicates=settings.reject_duplicates,
        linker=get_batch_linker(),
    )
