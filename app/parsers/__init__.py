"""
app/parsers package marker.
"""

from app.parsers.delimited_text import ParsedTable, detect_delimiter, parse_delimited_text, split_fields

__all__ = [
    "ParsedTable",
    "detect_delimiter",
    "parse_delimited_text",
    "split_fields",
]
