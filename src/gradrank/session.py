from __future__ import annotations

import logging
import pathlib
from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field

from .config import get_settings
from .core.aggregate import merge_and_rank, summarize
from .core.models import RankingRecord, RankingSummary
from .errors import RankingImportError
from .export.delimited import write_export
from .ingest.files import FileLike, import_batch


logger = logging.getLogger(__name__)


class Severity(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    severity: Severity
    message: str


class SessionState(BaseModel):
    records: List[RankingRecord] = Field(default_factory=list)
    files_loaded: bool = False
    rankings_created: bool = False
    skipped_rows: int = 0
    notifications: List[Notification] = Field(default_factory=list)


class RankingSession:
    """Owns the ranking state of one page lifetime; every surface reads from ``state``."""

    def __init__(self, state: Optional[SessionState] = None):
        self.state = state or SessionState()

    def _notify(self, severity: Severity, message: str) -> None:
        self.state.notifications.append(Notification(severity=severity, message=message))

    def load_batch(self, files: Iterable[FileLike]) -> bool:
        """Import a file selection. On any file-level error the previous rankings are kept."""
        try:
            batch = import_batch(files)
        except RankingImportError as e:
            logger.warning("Batch import failed: %s (%s)", e.message, e.code)
            self._notify(Severity.ERROR, e.message)
            return False

        if not batch.records:
            return False

        self.state.records = merge_and_rank(batch.records)
        self.state.files_loaded = True
        self.state.rankings_created = False
        self.state.skipped_rows = len(batch.skipped)
        self._notify(Severity.SUCCESS, "Faculty ranking files successfully loaded.")
        if batch.skipped:
            self._notify(Severity.WARNING, f"{len(batch.skipped)} malformed row(s) were skipped.")
        return True

    def create_rankings(self) -> bool:
        if not self.state.files_loaded:
            return False
        self.state.rankings_created = True
        self._notify(
            Severity.SUCCESS,
            "University rankings have been successfully created based on the loaded faculty rankings.",
        )
        return True

    def export(self, directory: pathlib.Path, quote: bool = False) -> Optional[pathlib.Path]:
        try:
            path = write_export(self.state.records, directory, quote=quote)
        except RankingImportError as e:
            self._notify(Severity.ERROR, e.message)
            return None
        self._notify(Severity.SUCCESS, "University rankings have been successfully downloaded.")
        return path

    def summary(self) -> RankingSummary:
        return summarize(self.state.records, threshold=get_settings().graduation_gpa_threshold)

    def dismiss(self, index: int) -> None:
        if 0 <= index < len(self.state.notifications):
            del self.state.notifications[index]

    def reset(self) -> None:
        self.state = SessionState()

    def to_json(self) -> str:
        return self.state.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> "RankingSession":
        return cls(SessionState.model_validate_json(data))
