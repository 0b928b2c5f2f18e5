"""
Configuration for export-diff, loaded from YAML and validated with pydantic.

Example file:

    status_order: [modified, added, removed, unchanged]
    logging:
      level: DEBUG
    store:
      manifest: exports/versions.yaml
    fetch:
      timeout: 10
    display:
      show_unchanged: false
      max_preview_lines: 5
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .differ import ChangeType
from .exceptions import ConfigError
from .reconciler import DEFAULT_STATUS_ORDER, status_rank

CONFIG_ENV_VAR = "EXPORT_DIFF_CONFIG"


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    model_config = ConfigDict(extra="forbid")

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return value


class StoreConfig(BaseModel):
    manifest: Optional[str] = Field(None, description="YAML manifest listing export versions")
    model_config = ConfigDict(extra="forbid")


class FetchConfig(BaseModel):
    timeout: float = Field(30.0, gt=0)
    model_config = ConfigDict(extra="forbid")


class DisplayConfig(BaseModel):
    show_unchanged: bool = False
    max_preview_lines: int = Field(5, ge=1)
    model_config = ConfigDict(extra="forbid")


class ExportDiffConfig(BaseModel):
    status_order: list[ChangeType] = Field(default_factory=lambda: list(DEFAULT_STATUS_ORDER))
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    model_config = ConfigDict(extra="forbid")

    @field_validator("status_order")
    @classmethod
    def _complete_order(cls, value: list[ChangeType]) -> list[ChangeType]:
        status_rank(value)
        return value


def load_config(path: str | Path | None = None) -> ExportDiffConfig:
    """
    Load configuration from `path`, or from $EXPORT_DIFF_CONFIG, or defaults.

    Relative store.manifest paths are resolved against the config file's directory.
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return ExportDiffConfig()

    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {p}")

    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError("Config root must be a mapping")

    try:
        config = ExportDiffConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {p}:\n{e}") from e

    manifest = config.store.manifest
    if manifest and not Path(manifest).is_absolute():
        config.store.manifest = str(p.parent / manifest)

    return config
