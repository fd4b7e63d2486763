from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class RankingRecord(BaseModel):
    name: str
    external_id: str  # the "id" column, not necessarily numeric
    department: str
    gpa: float
    rank: Optional[int] = None  # assigned by merge_and_rank, never read from input


class RankingFile(BaseModel):
    file_name: str
    byte_size: int
    raw_content: str


class RowErrorReason(str, Enum):
    COLUMN_COUNT = "column_count"
    MISSING_COLUMN = "missing_column"
    EMPTY_FIELD = "empty_field"
    INVALID_GPA = "invalid_gpa"


class RowError(BaseModel):
    line_number: int  # 1-based line in the source text
    reason: RowErrorReason
    raw: str
    file_name: Optional[str] = None


class ParseResult(BaseModel):
    records: List[RankingRecord] = Field(default_factory=list)
    skipped: List[RowError] = Field(default_factory=list)


class RankingSummary(BaseModel):
    total_students: int
    eligible_students: int
    has_duplicates: bool
    mixed_graduation_status: bool
    departments: Dict[str, int]  # department -> record count, first-seen order
    warnings: List[str] = Field(default_factory=list)
    last_updated: datetime
