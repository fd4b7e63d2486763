from __future__ import annotations

import re
from enum import Enum
from typing import List, Sequence


class CanonicalField(str, Enum):
    NAME = "name"
    ID = "id"
    DEPARTMENT = "department"
    GPA = "gpa"
    UNRECOGNIZED = "unrecognized"


REQUIRED_FIELDS = (
    CanonicalField.NAME,
    CanonicalField.ID,
    CanonicalField.DEPARTMENT,
    CanonicalField.GPA,
)

# Checked in order, first full match wins
_HEADER_RULES = [
    (CanonicalField.NAME, re.compile(r"(student|stud)?(name|names)")),
    (CanonicalField.ID, re.compile(r"(student|stud)?(id|ids)")),
    (CanonicalField.DEPARTMENT, re.compile(r"department|dept|departments")),
    (CanonicalField.GPA, re.compile(r"gpa|grade|grades|point|points|average|averages")),
]

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def _strip(token: str) -> str:
    return _NON_ALNUM.sub("", (token or "").lower())


def normalize_header_token(token: str) -> CanonicalField:
    """Classify a raw header cell as one of the canonical fields.

    Every input maps to exactly one value; tokens that match no rule are
    ``CanonicalField.UNRECOGNIZED``.
    """
    stripped = _strip(token)
    for field, pattern in _HEADER_RULES:
        if pattern.fullmatch(stripped):
            return field
    return CanonicalField.UNRECOGNIZED


def normalize_header(token: str) -> str:
    """Return the matching key for a header cell.

    Recognized tokens collapse to their canonical key ("Student Name" -> "name"),
    anything else keeps its stripped form ("First Name" -> "firstname") so that
    substring matching can still find it.
    """
    field = normalize_header_token(token)
    if field is CanonicalField.UNRECOGNIZED:
        return _strip(token)
    return field.value


def normalize_headers(headers: Sequence[str]) -> List[str]:
    return [normalize_header(h.strip()) for h in headers]


def find_column_index(headers: Sequence[str], field: CanonicalField) -> int:
    """Index of the first header whose normalized form contains the field key, else -1."""
    target = normalize_header(field.value)
    for i, h in enumerate(headers):
        if target in normalize_header(h):
            return i
    return -1


def missing_fields(headers: Sequence[str]) -> List[CanonicalField]:
    normalized = normalize_headers(headers)
    return [f for f in REQUIRED_FIELDS if not any(f.value in h for h in normalized)]
