"""CSV export package."""

from flow_ledger.export.csv_export import (
    EXPORT_HEADERS,
    build_csv,
    export_filename,
    write_csv,
)

__all__ = ["EXPORT_HEADERS", "build_csv", "export_filename", "write_csv"]
