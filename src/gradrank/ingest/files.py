from __future__ import annotations

import logging
import pathlib
from typing import Iterable, List, Union

from pydantic import BaseModel, Field

from ..config import get_settings
from ..core.headers import missing_fields
from ..core.models import RankingFile, RankingRecord, RowError
from ..errors import ReadFailure, StructureInvalid, UnsupportedFileType
from .delimited import parse_rows, validate_file_structure


logger = logging.getLogger(__name__)

FileLike = Union[RankingFile, str, pathlib.Path]


class BatchResult(BaseModel):
    records: List[RankingRecord] = Field(default_factory=list)
    skipped: List[RowError] = Field(default_factory=list)
    file_names: List[str] = Field(default_factory=list)


def _check_extension(file_name: str) -> None:
    if not file_name.lower().endswith(get_settings().allowed_extension):
        raise UnsupportedFileType(file_name)


def load_ranking_file(path: Union[str, pathlib.Path]) -> RankingFile:
    path = pathlib.Path(path)
    _check_extension(path.name)
    try:
        data = path.read_bytes()
        content = data.decode(get_settings().encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise ReadFailure(path.name, reason=str(e)) from e
    return RankingFile(file_name=path.name, byte_size=len(data), raw_content=content)


def import_batch(files: Iterable[FileLike]) -> BatchResult:
    """Import a file selection as one unit.

    Files are processed in order and their records concatenated. The first file that
    has the wrong extension, cannot be read or lacks a required column aborts the whole
    batch; nothing from earlier files is returned. Bad rows inside a valid file are
    only collected in ``skipped``.
    """
    result = BatchResult()
    for f in files:
        rf = f if isinstance(f, RankingFile) else load_ranking_file(f)
        _check_extension(rf.file_name)
        if not validate_file_structure(rf.raw_content):
            header = rf.raw_content.split("\n", 1)[0]
            raise StructureInvalid(rf.file_name, missing=[m.value for m in missing_fields(header.split(","))])

        parsed = parse_rows(rf.raw_content, file_name=rf.file_name)
        if parsed.skipped:
            logger.warning("%s: skipped %d malformed row(s)", rf.file_name, len(parsed.skipped))
        logger.info("%s: parsed %d record(s)", rf.file_name, len(parsed.records))
        result.records.extend(parsed.records)
        result.skipped.extend(parsed.skipped)
        result.file_names.append(rf.file_name)
    return result
