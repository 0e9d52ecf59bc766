"""Run configuration for sync-folders.

Captures the source and destination roots plus run options once at
startup, from CLI args, environment variables, .env files, and YAML
config file fallbacks.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    SYNC_FOLDERS_PROGRESS: Progress display, one of bar/percent/none (optional, default: bar)
    SYNC_FOLDERS_DRY_RUN: Classify only, change nothing (optional, default: false)
    SYNC_FOLDERS_DEBUG: Enable debug logging (optional, default: false)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

PROGRESS_MODES = ("bar", "percent", "none")


@dataclass(frozen=True)
class Config:
    source_root: Path
    dest_root: Path
    dry_run: bool = False
    progress: str = "bar"
    debug: bool = False


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Args:
        config: Config instance to validate.

    Raises:
        ValueError: If a root is not absolute or the progress mode is unknown.
    """
    for label, root in (
        ("Source", config.source_root),
        ("Destination", config.dest_root),
    ):
        if not root.is_absolute():
            raise ValueError(f"{label} root must be an absolute path: {root}")

    if config.progress not in PROGRESS_MODES:
        raise ValueError(
            f"Invalid progress mode '{config.progress}': must be one of "
            f"{', '.join(PROGRESS_MODES)}"
        )

    if config.source_root == config.dest_root:
        logger.warning(
            "Source and destination are the same directory: %s",
            config.source_root,
        )


def _resolve_root(raw: str | os.PathLike, label: str) -> Path:
    if not str(raw).strip():
        raise ValueError(f"{label} directory cannot be empty.")
    return Path(raw).expanduser().resolve()


def load_config(
    source: str | os.PathLike,
    dest: str | os.PathLike,
    dry_run: bool = False,
    progress: str | None = None,
    debug: bool = False,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each option (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        source: Source directory (resolved to an absolute path).
        dest: Destination directory (resolved to an absolute path).
        dry_run: Classify only (CLI flag).
        progress: Progress display mode (CLI option).
        debug: Enable debug logging (CLI flag).
        yaml_fallbacks: Dict of values from the YAML config file ``sync``
            section.  Used as fallback when CLI arg and env var are both unset.

    Returns:
        Validated, immutable Config instance.

    Raises:
        ValueError: If a root is empty or an option value is invalid.
    """
    fb = yaml_fallbacks or {}

    source_root = _resolve_root(source, "Source")
    dest_root = _resolve_root(dest, "Destination")

    # --- String fields: CLI > env > YAML > default ---

    final_progress = (
        progress
        or os.getenv("SYNC_FOLDERS_PROGRESS")
        or fb.get("progress")
        or "bar"
    )
    final_progress = final_progress.strip().lower()

    # --- Boolean fields: CLI > env > YAML > default ---

    def get_bool_env(key: str) -> bool | None:
        """Return True/False from env var, or None if unset."""
        val = os.getenv(key)
        if val is None:
            return None
        return val.lower() in ("true", "1", "yes", "on")

    def resolve_flag(cli_value: bool, env_key: str, yaml_key: str) -> bool:
        if cli_value:
            return True
        env_value = get_bool_env(env_key)
        if env_value is not None:
            return env_value
        return bool(fb.get(yaml_key, False))

    config = Config(
        source_root=source_root,
        dest_root=dest_root,
        dry_run=resolve_flag(dry_run, "SYNC_FOLDERS_DRY_RUN", "dry_run"),
        progress=final_progress,
        debug=resolve_flag(debug, "SYNC_FOLDERS_DEBUG", "debug"),
    )

    validate_config(config)

    return config
