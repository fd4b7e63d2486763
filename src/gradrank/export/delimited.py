from __future__ import annotations

import csv
import io
import logging
import pathlib
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional, Sequence

from ..config import get_settings
from ..core.models import RankingRecord
from ..errors import ExportError


logger = logging.getLogger(__name__)

EXPORT_HEADERS = ["Rank", "Name", "ID", "Department", "GPA"]
MIME_TYPE = "text/csv;charset=utf-8"


def _format_gpa(gpa: float, decimals: int) -> str:
    # Ties round away from zero; Decimal(float) is exact
    return str(Decimal(gpa).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP))


def _rows(records: Sequence[RankingRecord], decimals: int) -> List[List[str]]:
    rows = []
    for pos, r in enumerate(records, start=1):
        rank = r.rank if r.rank is not None else pos
        rows.append([str(rank), r.name, r.external_id, r.department, _format_gpa(r.gpa, decimals)])
    return rows


def export_to_delimited(
    records: Sequence[RankingRecord],
    quote: bool = False,
    decimals: Optional[int] = None,
) -> str:
    """Serialize ranked records in their given order, header row first.

    Values are written as-is by default, so a comma inside a value corrupts the row.
    ``quote=True`` switches to RFC 4180 minimal quoting, identical output for comma-free data.
    """
    if decimals is None:
        decimals = get_settings().gpa_decimals
    rows = [EXPORT_HEADERS] + _rows(records, decimals)
    if not quote:
        return "\n".join(",".join(row) for row in rows)

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue().rstrip("\n")


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{get_settings().export_prefix}_{today.isoformat()}.csv"


def write_export(
    records: Sequence[RankingRecord],
    directory: pathlib.Path,
    quote: bool = False,
    today: Optional[date] = None,
) -> pathlib.Path:
    if not records:
        raise ExportError()
    directory = pathlib.Path(directory)
    path = directory / export_filename(today)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(export_to_delimited(records, quote=quote), encoding=get_settings().encoding)
    except OSError as e:
        raise ExportError(f"Error writing file: {path.name}") from e
    logger.info("Exported %d ranked records to %s", len(records), path)
    return path
