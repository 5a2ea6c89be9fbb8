"""View encoders for the aggregate.

All functions are pure: they take the aggregate rows and return a
value ready to be put in a response body.
"""

from collections.abc import Iterable, Sequence
from typing import Any

from org_overview.dto import AggregatedRowItem
from org_overview.entities import NOT_AVAILABLE, AggregatedRow

CSV_DELIMITER = ";"
# Byte-order marker so spreadsheet applications detect UTF-8
CSV_BOM = "\ufeff"
# Characters that force a value to be quoted
_CSV_SPECIAL = (CSV_DELIMITER, '"', "\n", "\r")


def field_names() -> list[str]:
    """Serialized row field names, in column order."""
    return AggregatedRowItem.wire_field_names()


def row_to_dict(row: AggregatedRow) -> dict[str, Any]:
    """Convert a row to its wire representation."""
    return AggregatedRowItem.from_entity(row).model_dump(by_alias=True)


def csv_cell(value: Any) -> str:
    """Quote one CSV value when it holds the delimiter, a quote or a line break."""
    text = "" if value is None else str(value)
    if any(char in text for char in _CSV_SPECIAL):
        return '"' + text.replace('"', '""') + '"'
    return text


def encode_full(rows: Iterable[AggregatedRow]) -> list[dict[str, Any]]:
    """Full JSON view: every row, every field."""
    return [row_to_dict(row) for row in rows]


def encode_names(rows: Iterable[AggregatedRow]) -> list[str]:
    """Name-only JSON view, skipping rows without a known name."""
    return [row.name for row in rows if row.name and row.name != NOT_AVAILABLE]


def encode_csv(rows: Sequence[AggregatedRow]) -> str:
    """CSV export of the aggregate.

    Semicolon-delimited, one header line, newline-separated rows with no
    trailing newline, prefixed with a UTF-8 byte-order marker. Values
    containing the delimiter, a quote, \\n or \\r are quoted with
    internal quotes doubled.

    Returns:
        The CSV text, or an empty string for an empty aggregate
    """
    if not rows:
        return ""

    lines = [CSV_DELIMITER.join(csv_cell(name) for name in field_names())]
    for row in rows:
        lines.append(CSV_DELIMITER.join(csv_cell(value) for value in row_to_dict(row).values()))
    return CSV_BOM + "\n".join(lines)
