from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Ranking import/export settings, overridable via GRADRANK_* environment variables"""

    model_config = SettingsConfigDict(env_prefix="GRADRANK_")

    # Ingestion
    allowed_extension: str = ".csv"
    encoding: str = "utf-8"

    # Ranking
    graduation_gpa_threshold: float = 2.0

    # Export
    export_prefix: str = "university_rankings"
    gpa_decimals: int = 2

    log_level: str = "WARNING"

    @field_validator("allowed_extension")
    @classmethod
    def _dotted(cls, v: str) -> str:
        v = v.strip().lower()
        return v if v.startswith(".") else f".{v}"

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.strip().upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"unknown log level {v!r}")
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()
