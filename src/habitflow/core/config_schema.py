"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``.  Call
``Config.validated()`` to obtain a typed, validated ``HabitflowConfig``
instance.  Existing dict-based access continues to work unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PathsConfig(BaseModel):
    """File-system paths used by the application."""

    data_dir: Path
    log_dir: Path | None = None

    @field_validator("data_dir", "log_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v


class StoreConfig(BaseModel):
    """Which backend holds habits and logs, plus its settings."""

    model_config = ConfigDict(extra="allow")

    backend: str = "json"
    path: Path | None = None

    @field_validator("backend")
    @classmethod
    def _non_empty_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("store.backend must not be empty")
        return v

    @field_validator("path", mode="before")
    @classmethod
    def _expand_path(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser() if v else None
        return v


class InsightsConfig(BaseModel):
    """Settings for the remote insight-generation call."""

    model: str = "gpt-4o-mini"
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    timeout: int = Field(default=60, gt=0)
    num_retries: int = Field(default=2, ge=0)


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    file: str = ""

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {v!r}")
        return v


class HabitflowConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so callers can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig(data_dir=Path("~/.habitflow-data"))
    store: StoreConfig = StoreConfig()
    insights: InsightsConfig = InsightsConfig()
    logging: LoggingConfig = LoggingConfig()
