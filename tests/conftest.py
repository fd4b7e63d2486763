"""Shared fixtures for the gradrank test suite."""

from __future__ import annotations

import pytest

from gradrank.config import get_settings
from gradrank.core.models import RankingFile, RankingRecord


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ce_csv() -> str:
    return (
        "Name,ID,Department,GPA\n"
        "Jane Smith,118,Computer Engineering,3.95\n"
        "John Doe,234,Computer Engineering,3.75\n"
    )


@pytest.fixture
def ee_csv() -> str:
    return (
        "Student Name,StudentID,Dept,GPA\n"
        "Ali Veli,301,Electrical Engineering,3.80\n"
        "Ayse Kaya,302,Electrical Engineering,1.90\n"
    )


@pytest.fixture
def write_csv(tmp_path):
    def _write(name: str, content: str):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def records():
    return [
        RankingRecord(name="A", external_id="1", department="CE", gpa=3.1),
        RankingRecord(name="B", external_id="2", department="EE", gpa=3.9),
        RankingRecord(name="C", external_id="3", department="CE", gpa=2.4),
    ]


@pytest.fixture
def make_file():
    def _make(name: str, content: str) -> RankingFile:
        return RankingFile(file_name=name, byte_size=len(content.encode("utf-8")), raw_content=content)

    return _make
