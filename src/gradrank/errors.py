"""
File-level errors raised while importing or exporting rankings.

Row-level problems are not exceptions: they come back as ``RowError`` values
on a ``ParseResult`` so a single bad line never blocks the rest of a file.
Any of these errors aborts the whole batch it was raised in.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class RankingImportError(Exception):
    """Base exception for ranking import/export failures"""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class UnsupportedFileType(RankingImportError):
    """Selected file does not have the expected extension"""

    def __init__(self, file_name: str):
        super().__init__(
            "Please select valid CSV files only.",
            code="UNSUPPORTED_FILE_TYPE",
            details={"file_name": file_name},
        )


class StructureInvalid(RankingImportError):
    """Header row lacks one of the required columns"""

    def __init__(self, file_name: str, missing: Optional[list] = None):
        super().__init__(
            "Invalid CSV structure. File must contain columns for: "
            "name, id, department, and gpa (or similar variations).",
            code="STRUCTURE_INVALID",
            details={"file_name": file_name, "missing": list(missing or [])},
        )


class ReadFailure(RankingImportError):
    """Underlying file read failed"""

    def __init__(self, file_name: str, reason: str = ""):
        super().__init__(
            f"Error reading file: {file_name}",
            code="READ_FAILURE",
            details={"file_name": file_name, "reason": reason},
        )


class ExportError(RankingImportError):
    def __init__(self, message: str = "No data to export"):
        super().__init__(message, code="EXPORT_FAILED")
