"""Runtime settings, read from ``FIRST_MILLION_*`` environment variables."""

from __future__ import annotations

import os
from typing import List, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from first_million.core.solvers import DEFAULT_MAX_MONTHS

ENV_PREFIX = "FIRST_MILLION_"

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


class ConfigurationError(Exception):
    """Raised when the environment holds settings that cannot be used."""


class Settings(BaseModel):
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    database: str = "first_million.db"
    log_level: str = "INFO"
    max_months: int = Field(DEFAULT_MAX_MONTHS, gt=0)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v: object) -> object:
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {v!r}")
        return level

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        raw = {
            key[len(ENV_PREFIX):].lower(): value
            for key, value in environ.items()
            if key.startswith(ENV_PREFIX)
        }
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {ENV_PREFIX}* settings: {e}") from e
