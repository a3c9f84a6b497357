"""Export stage: delimiter sanitization and the table presenter payload."""

from .sanitize import (
    DEFAULT_PLACEHOLDER,
    PLACEHOLDER_TOKENS,
    cell_strings,
    columns_needing_sanitization,
    placeholder_for,
    sanitize_for_export,
)
from .table import (
    EXPORT_FORMATS,
    TableColumn,
    TableView,
    build_table_view,
    frame_records,
    package_table_view,
    write_export_csv,
)

__all__ = [
    "DEFAULT_PLACEHOLDER",
    "EXPORT_FORMATS",
    "PLACEHOLDER_TOKENS",
    "TableColumn",
    "TableView",
    "build_table_view",
    "cell_strings",
    "columns_needing_sanitization",
    "frame_records",
    "package_table_view",
    "placeholder_for",
    "sanitize_for_export",
    "write_export_csv",
]
