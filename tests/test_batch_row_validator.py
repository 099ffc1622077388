from __future__ import annotations

import unittest
from datetime import datetime

from app.validators.batch_row_validator import BatchRowValidator


def _valid_row(**overrides: str) -> dict[str, str]:
    row = {
        "BatchNumber": "B-001",
        "DateTime": "2024-03-01T10:00",
        "Client": "ACME Corp",
        "Formula": "C25",
        "Cement": "350",
        "Sand": "800",
        "Gravel": "1000",
        "Water": "180",
        "Additives": "2.5",
        "TotalVolume": "8",
        "Operator": "J. Martin",
    }
    row.update(overrides)
    return row


class TestBatchRowValidator(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = BatchRowValidator()

    def test_valid_row_is_parsed_into_typed_record(self) -> None:
        record, errors = self.validator.validate_row(raw_row=_valid_row(), row_number=1)

        self.assertEqual(errors, [])
        self.assertIsNotNone(record)
        assert record is not None
        self.assertEqual(record.batch_number, "B-001")
        self.assertEqual(record.batch_datetime, datetime(2024, 3, 1, 10, 0))
        self.assertEqual(record.total_volume_m3, 8.0)
        self.assertEqual(record.additives_liters, 2.5)
        self.assertEqual(record.raw_data["Client"], "ACME Corp")

    def test_every_missing_field_is_reported(self) -> None:
        row = _valid_row(Client="", Operator="   ")

        record, errors = self.validator.validate_row(raw_row=row, row_number=4)

        self.assertIsNone(record)
        self.assertEqual(
            [(error.row_number, error.field, error.message) for error in errors],
            [(4, "Client", "Client is required"), (4, "Operator", "Operator is required")],
        )

    def test_absent_column_counts_as_missing(self) -> None:
        row = _valid_row()
        del row["Formula"]

        _, errors = self.validator.validate_row(raw_row=row, row_number=1)

        self.assertEqual([error.field for error in errors], ["Formula"])

    def test_blank_numeric_field_only_reports_required(self) -> None:
        _, errors = self.validator.validate_row(raw_row=_valid_row(Cement=""), row_number=2)

        self.assertEqual([error.message for error in errors], ["Cement is required"])

    def test_non_numeric_value_is_rejected(self) -> None:
        record, errors = self.validator.validate_row(
            raw_row=_valid_row(TotalVolume="abc"),
            row_number=3,
        )

        self.assertIsNone(record)
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].field, "TotalVolume")
        self.assertEqual(errors[0].message, "TotalVolume must be a number")
        self.assertEqual(errors[0].value, "abc")

    def test_non_finite_value_is_rejected(self) -> None:
        _, errors = self.validator.validate_row(raw_row=_valid_row(Sand="inf"), row_number=1)

        self.assertEqual([error.message for error in errors], ["Sand must be a number"])

    def test_negative_value_is_rejected(self) -> None:
        _, errors = self.validator.validate_row(raw_row=_valid_row(Water="-1"), row_number=1)

        self.assertEqual([error.message for error in errors], ["Water must not be negative"])

    def test_zero_volume_is_accepted(self) -> None:
        record, errors = self.validator.validate_row(
            raw_row=_valid_row(TotalVolume="0"),
            row_number=1,
        )

        self.assertEqual(errors, [])
        assert record is not None
        self.assertEqual(record.total_volume_m3, 0.0)

    def test_invalid_datetime_is_rejected(self) -> None:
        record, errors = self.validator.validate_row(
            raw_row=_valid_row(DateTime="yesterday"),
            row_number=7,
        )

        self.assertIsNone(record)
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].field, "DateTime")
        self.assertEqual(errors[0].message, "Invalid datetime format")

    def test_field_and_datetime_errors_are_collected_together(self) -> None:
        row = _valid_row(DateTime="nope", Cement="x", Operator="")

        _, errors = self.validator.validate_row(raw_row=row, row_number=1)

        self.assertEqual(
            sorted(error.field for error in errors),
            ["Cement", "DateTime", "Operator"],
        )

    def test_utc_suffix_keeps_wall_clock_time(self) -> None:
        record, _ = self.validator.validate_row(
            raw_row=_valid_row(DateTime="2024-03-01T10:00:00Z"),
            row_number=1,
        )

        assert record is not None
        self.assertEqual(record.batch_datetime, datetime(2024, 3, 1, 10, 0))
        self.assertIsNone(record.batch_datetime.tzinfo)

    def test_day_first_controller_format_is_accepted(self) -> None:
        record, errors = self.validator.validate_row(
            raw_row=_valid_row(DateTime="01/03/2024 10:00"),
            row_number=1,
        )

        self.assertEqual(errors, [])
        assert record is not None
        self.assertEqual(record.batch_datetime, datetime(2024, 3, 1, 10, 0))

    def test_surrounding_whitespace_is_trimmed(self) -> None:
        record, _ = self.validator.validate_row(
            raw_row=_valid_row(BatchNumber="  B-009 ", TotalVolume=" 7.5 "),
            row_number=1,
        )

        assert record is not None
        self.assertEqual(record.batch_number, "B-009")
        self.assertEqual(record.total_volume_m3, 7.5)

    def test_error_serializes_to_row_field_message(self) -> None:
        _, errors = self.validator.validate_row(raw_row=_valid_row(Client=""), row_number=5)

        self.assertEqual(
            errors[0].to_dict(),
            {"row": 5, "field": "Client", "message": "Client is required"},
        )
