"""
app/validators package marker.
"""

from app.validators.batch_row_validator import NUMERIC_FIELDS, REQUIRED_FIELDS, BatchRowValidator

__all__ = [
    "BatchRowValidator",
    "NUMERIC_FIELDS",
    "REQUIRED_FIELDS",
]
