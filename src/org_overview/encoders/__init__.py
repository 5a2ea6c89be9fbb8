"""Stateless encoders turning the aggregate into response bodies."""

from .views import (
    CSV_BOM,
    CSV_DELIMITER,
    csv_cell,
    encode_csv,
    encode_full,
    encode_names,
    field_names,
    row_to_dict,
)

__all__ = [
    "CSV_BOM",
    "CSV_DELIMITER",
    "csv_cell",
    "encode_csv",
    "encode_full",
    "encode_names",
    "field_names",
    "row_to_dict",
]
