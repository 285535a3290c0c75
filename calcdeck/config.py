"""Runtime settings read from CALCDECK_* environment variables."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "CALCDECK_"
DEFAULT_REFERENCE_CASES = Path(__file__).resolve().parent.parent / "data" / "reference_cases.csv"


class Settings(BaseModel):
    precision: int = Field(4, ge=0, le=12)
    log_level: str = "INFO"
    base_url: str = "https://example.com"
    site_name: str = "CalcDeck"
    require_calc_info: bool = True
    reference_cases: Path = DEFAULT_REFERENCE_CASES

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level '{value}'")
        return level

    @field_validator("base_url")
    @classmethod
    def _strip_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from CALCDECK_<FIELD> variables; unset ones keep defaults."""
        env = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls.model_validate(values)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
