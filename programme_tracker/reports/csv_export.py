"""
CSV Rendering

Rows are plain dicts. The header is the key order of the first row;
later rows missing a column get an empty cell, and keys the first row
did not have are dropped.
"""

import csv
import io
from typing import Any, Sequence

from programme_tracker.operations.errors import ExportError


def to_csv(rows: Sequence[dict[str, Any]]) -> str:
    """
    Render rows as CSV text.

    Fields containing a comma, quote or line break are quoted, with
    inner quotes doubled. None renders as an empty cell.

    Raises:
        ExportError: There are no rows
    """
    if not rows:
        raise ExportError("No data available for export")

    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=list(rows[0].keys()),
        restval="",
        extrasaction="ignore",
        lineterminator="\n",
    )
    writer.writeheader()
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")
