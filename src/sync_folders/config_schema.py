"""Unified configuration schema for sync_folders.

Defines Pydantic models for the YAML config structure with dedicated
sections for sync options and logging.

Usage:
    from sync_folders.config_schema import UnifiedConfig, build_config

    raw = read_settings_files()
    unified = build_config(raw)
    fallbacks = yaml_fallbacks(unified)
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class SyncSettings(BaseModel):
    """Sync run options.

    Roots are never read from config files: they are always given on the
    command line.  ``None`` means "not set here", so env vars and
    built-in defaults still apply.
    """

    progress: Literal["bar", "percent", "none"] | None = Field(
        default=None, description="Progress display mode"
    )
    dry_run: bool | None = Field(
        default=None, description="Classify only, change nothing"
    )
    debug: bool | None = Field(
        default=None, description="Enable debug logging"
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: ``text`` or ``json``.
    """

    level: str | None = Field(default=None, description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: Literal["text", "json"] = Field(
        default="text", description="Log line format"
    )

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Aggregates all config sections. Every section has sensible defaults,
    so ``UnifiedConfig()`` (zero-config) is always valid.
    """

    sync: SyncSettings = Field(default_factory=SyncSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Factory functions
# ---------------------------------------------------------------------------


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``read_settings_files()``.

    Handles missing sections gracefully - anything absent gets defaults.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.

    Raises:
        pydantic.ValidationError: If a section has invalid values.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)


def yaml_fallbacks(unified: UnifiedConfig) -> dict:
    """Return the ``sync`` section values that were actually set.

    The result is passed to ``load_config(yaml_fallbacks=...)``.
    """
    return {
        k: v for k, v in unified.sync.model_dump().items() if v is not None
    }
