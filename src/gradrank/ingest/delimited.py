from __future__ import annotations

import logging
import math
import re
from typing import Dict, List, Optional, Union

from ..core.headers import CanonicalField, REQUIRED_FIELDS, find_column_index, missing_fields
from ..core.models import ParseResult, RankingRecord, RowError, RowErrorReason


logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def _split_row(line: str) -> List[str]:
    # Plain comma split, no quoting support
    return [c.strip() for c in line.split(",")]


def _parse_gpa(value: str) -> Optional[float]:
    # Whole cell must be a plain decimal number; a numeric prefix such as "3.5abc" is rejected
    if not _NUMBER.fullmatch(value):
        return None
    try:
        gpa = float(value)
    except ValueError:
        return None
    return gpa if math.isfinite(gpa) else None


def validate_file_structure(content: str) -> bool:
    """Check that the text has a header plus one more line and names all four required columns.

    Column names are matched loosely: "Student Name", "StudentID", "Dept" and "GPA"
    all qualify. A header followed only by a trailing newline is accepted.
    """
    lines = content.split("\n")
    if len(lines) < 2:
        return False
    return not missing_fields(lines[0].split(","))


def _build_record(
    values: List[str],
    width: int,
    idx: Dict[CanonicalField, int],
) -> Union[RankingRecord, RowErrorReason]:
    if len(values) != width:
        return RowErrorReason.COLUMN_COUNT
    if any(i == -1 for i in idx.values()):
        return RowErrorReason.MISSING_COLUMN

    name = values[idx[CanonicalField.NAME]]
    external_id = values[idx[CanonicalField.ID]]
    if not name or not external_id:
        return RowErrorReason.EMPTY_FIELD

    gpa = _parse_gpa(values[idx[CanonicalField.GPA]])
    if gpa is None:
        return RowErrorReason.INVALID_GPA

    return RankingRecord(
        name=name,
        external_id=external_id,
        department=values[idx[CanonicalField.DEPARTMENT]],
        gpa=gpa,
    )


def parse_rows(content: str, file_name: Optional[str] = None) -> ParseResult:
    """Parse every data line into a record, collecting rejected lines as RowErrors."""
    lines = content.split("\n")
    headers = _split_row(lines[0])
    idx = {field: find_column_index(headers, field) for field in REQUIRED_FIELDS}

    result = ParseResult()
    for line_number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        outcome = _build_record(_split_row(line), len(headers), idx)
        if isinstance(outcome, RankingRecord):
            result.records.append(outcome)
            continue
        logger.debug("Skipping line %d (%s): %r", line_number, outcome.value, line)
        result.skipped.append(RowError(line_number=line_number, reason=outcome, raw=line, file_name=file_name))
    return result


def parse_records(content: str) -> List[RankingRecord]:
    return parse_rows(content).records
