"""
app/parsers/delimited_text.py

Tolerant parser for production-line controller exports.

The controller writes one header line followed by data lines. The delimiter
varies with the controller's regional settings, so it is detected from the
header: semicolon first, then tab, then comma. Quoted spans may contain the
delimiter; the quote characters themselves are dropped.

Data lines whose field count differs from the header are dropped here. They
are structural parse failures, not validation errors, and are never counted
as rows.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_LINE_SPLIT = re.compile(r"\r?\n")
_QUOTE = '"'


@dataclass(frozen=True)
class ParsedTable:
    """
    Header list plus header-labeled data rows, in file order.
    """

    headers: list[str] = field(default_factory=list)
    rows: list[dict[str, str]] = field(default_factory=list)
    dropped_lines: int = 0


def detect_delimiter(header_line: str) -> str:
    if ";" in header_line:
        return ";"
    if "\t" in header_line:
        return "\t"
    return ","


def split_fields(line: str, delimiter: str) -> list[str]:
    """
    Split one line on ``delimiter`` outside double-quoted spans.

    Every ``"`` toggles the quoted state, so a doubled quote inside a quoted
    span is read as close-then-reopen and contributes no character.
    """

    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in line:
        if char == _QUOTE:
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    fields.append("".join(current).strip())
    return fields


def parse_delimited_text(text: str) -> ParsedTable:
    """
    Parse raw export text into header-labeled rows.

    Blank lines are ignored. Returns an empty table for blank input.
    """

    lines = [line for line in _LINE_SPLIT.split(text.lstrip("\ufeff")) if line.strip()]
    if not lines:
        return ParsedTable()

    delimiter = detect_delimiter(lines[0])
    headers = split_fields(lines[0], delimiter)

    rows: list[dict[str, str]] = []
    dropped = 0
    for line in lines[1:]:
        values = split_fields(line, delimiter)
        if len(values) != len(headers):
            dropped += 1
            continue
        rows.append(dict(zip(headers, values)))

    return ParsedTable(headers=headers, rows=rows, dropped_lines=dropped)
