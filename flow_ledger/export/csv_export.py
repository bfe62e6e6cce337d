"""
CSV Export

Turns LedgerEngine.export_rows output into the downloadable file: a
header row, every field quoted, rows joined with newlines, and a
filename carrying the export date.

Pure formatting. Which transactions end up in the file is decided by
the engine's query before the rows get here.
"""

import csv
import io
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union


EXPORT_HEADERS = (
    "Description",
    "Amount",
    "Type",
    "Category",
    "Date",
    "Notes",
    "Recurring",
)

FILENAME_PREFIX = "transactions"


def build_csv(
    rows: Iterable[Sequence[object]],
    headers: Sequence[str] = EXPORT_HEADERS,
) -> str:
    """
    Render rows as CSV text.

    Every field is quoted and embedded quotes are doubled, so
    descriptions containing commas or quotes survive a spreadsheet
    import. There is no trailing newline.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue().rstrip("\n")


def export_filename(on: Optional[date] = None) -> str:
    """e.g. transactions_2026-03-01.csv"""
    on = on or date.today()
    return f"{FILENAME_PREFIX}_{on.isoformat()}.csv"


def write_csv(
    rows: Iterable[Sequence[object]],
    directory: Union[str, Path],
    on: Optional[date] = None,
) -> Path:
    """
    Write the export file into a directory and return its path.

    The directory is created if needed. An export from earlier the same
    day is overwritten.
    """
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)

    path = target_dir / export_filename(on)
    path.write_text(build_csv(rows), encoding="utf-8")
    return path
