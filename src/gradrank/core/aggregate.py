from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, Hashable, Iterable, List, Optional

from .models import RankingRecord, RankingSummary


SORTABLE_COLUMNS = ("rank", "name", "external_id", "department", "gpa")


def merge_and_rank(
    records: Iterable[RankingRecord],
    dedupe_key: Optional[Callable[[RankingRecord], Hashable]] = None,
) -> List[RankingRecord]:
    """
    Order records by GPA (descending) and assign dense 1-based ranks.

    Input is the concatenation of every file's records in processing order.
    Tie-breaks: equal GPAs keep that order (Python's sort is stable, also with reverse=True).
    Any incoming rank is overwritten. With ``dedupe_key`` only the first record per key is kept;
    by default nothing is merged.
    """
    merged: List[RankingRecord] = []
    seen = set()
    for r in records:
        if dedupe_key is not None:
            key = dedupe_key(r)
            if key in seen:
                continue
            seen.add(key)
        merged.append(r)

    ordered = sorted(merged, key=lambda r: r.gpa, reverse=True)
    return [r.model_copy(update={"rank": i}) for i, r in enumerate(ordered, start=1)]


def find_duplicate_ids(records: Iterable[RankingRecord]) -> List[str]:
    counts: Dict[str, int] = {}
    for r in records:
        counts[r.external_id] = counts.get(r.external_id, 0) + 1
    return [ext_id for ext_id, n in counts.items() if n > 1]


def summarize(records: List[RankingRecord], threshold: float = 2.0) -> RankingSummary:
    departments: Dict[str, int] = {}
    for r in records:
        departments[r.department] = departments.get(r.department, 0) + 1

    eligible = sum(1 for r in records if r.gpa >= threshold)
    duplicates = find_duplicate_ids(records)
    mixed = eligible < len(records)

    warnings: List[str] = []
    if mixed:
        warnings.append("Some students are below the graduation GPA threshold")
    if duplicates:
        warnings.append(f"Duplicate student ids across files: {', '.join(duplicates)}")
    if records and eligible == 0:
        warnings.append("No eligible students found for ranking")

    return RankingSummary(
        total_students=len(records),
        eligible_students=eligible,
        has_duplicates=bool(duplicates),
        mixed_graduation_status=mixed,
        departments=departments,
        warnings=warnings,
        last_updated=datetime.now(),
    )


def filter_rankings(
    records: Iterable[RankingRecord],
    query: Optional[str] = None,
    department: Optional[str] = None,
) -> List[RankingRecord]:
    q = (query or "").strip().lower()
    out: List[RankingRecord] = []
    for r in records:
        if department and r.department != department:
            continue
        if q and q not in r.name.lower() and q not in r.external_id.lower():
            continue
        out.append(r)
    return out


def sort_rankings(
    records: Iterable[RankingRecord],
    by: str = "rank",
    descending: bool = False,
) -> List[RankingRecord]:
    """Re-sort for display; ranks stay as assigned."""
    if by not in SORTABLE_COLUMNS:
        raise ValueError(f"cannot sort by {by!r}, expected one of {', '.join(SORTABLE_COLUMNS)}")

    def key(r: RankingRecord):
        v = getattr(r, by)
        if isinstance(v, str):
            return v.lower()
        # unranked records go last
        return v if v is not None else float("inf")

    return sorted(records, key=key, reverse=descending)
