# src/config/settings.py — v1
"""Typed configuration loaded from the environment via pydantic-settings.

Every option can be set as ``EARL_REPORT_<FIELD>`` in the environment or in a
``.env`` file, and overridden per call through ``load_settings``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from earlreport.core.queries import MANIFEST_QUERY

_SIZE_RE = re.compile(r"^\d+\s*(KB|MB|GB)$", re.IGNORECASE)


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Report generation settings."""

    model_config = SettingsConfigDict(
        env_prefix="EARL_REPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Report metadata ===
    name: str | None = None
    bib_ref: str | None = None
    homepage: str | None = None

    # === Manifest ===
    base: str | None = None
    query: str | None = None

    # === Reference resolution ===
    resolve_references: bool = True
    fetch_timeout: float = 30.0
    fetch_concurrency: int = 8

    # === Logging ===
    verbose: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 5

    # --- Validators ---

    @field_validator("fetch_timeout")
    @classmethod
    def validate_fetch_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("fetch_timeout must be > 0")
        return v

    @field_validator("fetch_concurrency")
    @classmethod
    def validate_fetch_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError("fetch_concurrency must be >= 1")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Check rules that span more than one field."""
        errors: list[str] = []

        if self.log_file is not None and not _SIZE_RE.match(self.log_rotation.strip()):
            errors.append(
                f"LOG_ROTATION {self.log_rotation!r} is not a size like '10MB'"
            )

        if self.query is not None and not self.query.strip():
            errors.append("QUERY must not be blank")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def effective_log_level(self) -> str:
        """Verbose runs always show status messages."""
        if self.verbose and self.log_level in ("WARNING", "ERROR"):
            return "INFO"
        return self.log_level

    def manifest_query(self) -> str:
        """Return the manifest extraction query.

        The ``query`` option holds either the query text itself or the path of
        a file containing it. Without it, the built-in query is used.
        """
        if self.query is None:
            return MANIFEST_QUERY
        candidate = Path(self.query).expanduser()
        if "\n" not in self.query and candidate.is_file():
            return candidate.read_text(encoding="utf-8")
        return self.query


def load_settings(**overrides: object) -> Settings:
    """Load settings from the environment with optional overrides.

    Args:
        **overrides: Field-level overrides (CLI options, tests).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
