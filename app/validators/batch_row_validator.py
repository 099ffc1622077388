"""
app/validators/batch_row_validator.py

Row-level validation and type parsing for controller batch exports.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Mapping

from app.domain.production_batch import BatchRecord, RowValidationError

REQUIRED_FIELDS: tuple[str, ...] = (
    "BatchNumber",
    "DateTime",
    "Client",
    "Formula",
    "Cement",
    "Sand",
    "Gravel",
    "Water",
    "Additives",
    "TotalVolume",
    "Operator",
)

NUMERIC_FIELDS: tuple[str, ...] = (
    "Cement",
    "Sand",
    "Gravel",
    "Water",
    "Additives",
    "TotalVolume",
)

TIMESTAMP_FORMATS: tuple[str, ...] = (
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%d/%m/%Y",
    "%Y/%m/%d",
)


class BatchRowValidator:
    """
    Validates and parses one raw export row into a BatchRecord.

    All fields are checked before returning, so one bad value never hides
    errors in the other fields of the same row.
    """

    def validate_row(
        self,
        *,
        raw_row: Mapping[str, str],
        row_number: int,
    ) -> tuple[BatchRecord | None, list[RowValidationError]]:
        errors: list[RowValidationError] = []

        for column in REQUIRED_FIELDS:
            if self._is_blank(raw_row.get(column)):
                errors.append(
                    RowValidationError(
                        row_number=row_number,
                        field=column,
                        message=f"{column} is required",
                        value=self._stringify_value(raw_row.get(column)),
                    )
                )

        numbers: dict[str, float] = {}
        for column in NUMERIC_FIELDS:
            value = raw_row.get(column)
            if self._is_blank(value):
                continue
            parsed = self._parse_number(
                value=str(value),
                row_number=row_number,
                column=column,
                errors=errors,
            )
            if parsed is not None:
                numbers[column] = parsed

        batch_datetime = None
        if not self._is_blank(raw_row.get("DateTime")):
            batch_datetime = self._parse_timestamp(
                value=str(raw_row["DateTime"]),
                row_number=row_number,
                errors=errors,
            )

        if errors or batch_datetime is None:
            return None, errors

        return (
            BatchRecord(
                batch_number=raw_row["BatchNumber"].strip(),
                batch_datetime=batch_datetime,
                client_name=raw_row["Client"].strip(),
                formula_code=raw_row["Formula"].strip(),
                cement_kg=numbers["Cement"],
                sand_kg=numbers["Sand"],
                gravel_kg=numbers["Gravel"],
                water_liters=numbers["Water"],
                additives_liters=numbers["Additives"],
                total_volume_m3=numbers["TotalVolume"],
                operator_name=raw_row["Operator"].strip(),
                raw_data=dict(raw_row),
            ),
            [],
        )

    def _parse_number(
        self,
        *,
        value: str,
        row_number: int,
        column: str,
        errors: list[RowValidationError],
    ) -> float | None:
        raw = value.strip()
        try:
            parsed = float(raw)
        except ValueError:
            parsed = math.nan

        if not math.isfinite(parsed):
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    field=column,
                    message=f"{column} must be a number",
                    value=raw,
                )
            )
            return None

        if parsed < 0:
            errors.append(
                RowValidationError(
                    row_number=row_number,
                    field=column,
                    message=f"{column} must not be negative",
                    value=raw,
                )
            )
            return None

        return parsed

    def _parse_timestamp(
        self,
        *,
        value: str,
        row_number: int,
        errors: list[RowValidationError],
    ) -> datetime | None:
        raw = value.strip()

        normalized = raw[:-1] + "+00:00" if raw.endswith("Z") else raw
        try:
            parsed = datetime.fromisoformat(normalized)
            # Controller clocks are plant-local; keep the reported wall-clock time.
            return parsed.replace(tzinfo=None)
        except ValueError:
            pass

        for fmt in TIMESTAMP_FORMATS:
            try:
                return datetime.strptime(raw, fmt)
            except ValueError:
                continue

        errors.append(
            RowValidationError(
                row_number=row_number,
                field="DateTime",
                message="Invalid datetime format",
                value=raw,
            )
        )
        return None

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return str(value).strip() == ""

    @staticmethod
    def _stringify_value(value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

