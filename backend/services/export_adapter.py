"""
Battery Charging Log - Export Adapter
Version: 1.0.0

Turns search rows into a CSV download or an on-screen table. In both
cases the first row's keys define the columns and their order; later
rows are projected onto exactly those columns.
"""

import csv
import io
import logging
import re
from urllib.parse import quote
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from config import settings
from models.query import AdminQuery, IdentifierQuery
from services.errors import EmptyResultError

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPE = "text/csv"

# Characters kept as-is in the plain `filename=` fallback
_ASCII_FILENAME_RE = re.compile(r"[^A-Za-z0-9._-]")


def columns_for(rows: Sequence[Mapping[str, Any]]) -> List[str]:
    return list(rows[0].keys()) if rows else []


def to_csv(rows: Sequence[Mapping[str, Any]]) -> Optional[bytes]:
    """
    CSV bytes for the rows, or None when there are none.

    An empty result never produces a header-only file.
    """
    if not rows:
        return None

    columns = columns_for(rows)
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns, extrasaction="ignore",
                            lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow({col: _csv_value(row.get(col)) for col in columns})

    logger.debug(f"Rendered {len(rows)} rows x {len(columns)} columns to CSV")
    return buffer.getvalue().encode("utf-8")


def _csv_value(value: Any) -> Any:
    return "" if value is None else value


def to_table(rows: Sequence[Mapping[str, Any]],
             placeholder: Optional[str] = None) -> Dict[str, List]:
    """Columns plus row values, missing cells shown as the placeholder"""
    if placeholder is None:
        placeholder = settings.EXPORT_PLACEHOLDER
    columns = columns_for(rows)
    table_rows = []
    for row in rows:
        cells = []
        for col in columns:
            value = row.get(col)
            cells.append(placeholder if value is None else value)
        table_rows.append(cells)
    return {"columns": columns, "rows": table_rows}


def export_filename(query: AdminQuery) -> str:
    if isinstance(query, IdentifierQuery):
        return f"battery_{query.battery_id}_export.csv"
    return f"rows_{query.date_from}_to_{query.date_to}_export.csv"


def content_disposition(filename: str) -> str:
    """
    Attachment header for a download filename.

    The plain `filename=` is ASCII with anything unsafe replaced by "_";
    `filename*=` (RFC 5987) carries the exact name percent-encoded as UTF-8.
    """
    fallback = _ASCII_FILENAME_RE.sub("_", filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


def render_export(query: AdminQuery, rows: Sequence[Mapping[str, Any]]) -> Tuple[str, bytes]:
    """
    Filename and CSV bytes for a download.

    Raises:
        EmptyResultError: no rows matched, so there is nothing to download
    """
    csv_data = to_csv(rows)
    if csv_data is None:
        scope = "that Battery ID" if isinstance(query, IdentifierQuery) else "that date range"
        raise EmptyResultError(f"No data found for {scope}")
    return export_filename(query), csv_data
