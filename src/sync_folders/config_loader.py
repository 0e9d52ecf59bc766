"""
Settings-file discovery for sync-folders.

Settings files are optional YAML mappings with ``sync`` and ``logging``
sections.  They are read lowest precedence first:

1. ``~/.config/sync_folders/config.yml`` (per user)
2. ``.sync_folders/config.yml`` or ``config.yaml`` in the working directory
3. the file named by ``SYNC_FOLDERS_CONFIG``

A section in a later file replaces the whole section from an earlier one.
``${VAR}`` and ``${VAR:-default}`` in string values are expanded from the
environment after merging.

Usage:
    from sync_folders.config_loader import read_settings_files

    raw = read_settings_files()
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SYNC_FOLDERS_CONFIG"

_ENV_REF = re.compile(r"\$\{(?P<name>[^}:]+?)(?::-(?P<default>.*?))?\}")


def expand_env(value: str) -> str:
    """Expand ``${VAR}`` and ``${VAR:-default}`` references in *value*.

    An unset or empty variable yields its default, or ``""`` without one.
    An unterminated ``${`` is kept as written.
    """
    return _ENV_REF.sub(
        lambda m: os.environ.get(m["name"]) or m["default"] or "", value
    )


def _expand_tree(node: Any) -> Any:
    if isinstance(node, str):
        return expand_env(node)
    if isinstance(node, dict):
        return {key: _expand_tree(val) for key, val in node.items()}
    if isinstance(node, list):
        return [_expand_tree(item) for item in node]
    return node


def settings_file_candidates() -> list[Path]:
    """Return the settings files that exist, lowest precedence first.

    Raises:
        FileNotFoundError: If ``SYNC_FOLDERS_CONFIG`` names a missing file.
    """
    project_dir = Path.cwd() / ".sync_folders"
    found = [
        path
        for path in (
            Path.home() / ".config" / "sync_folders" / "config.yml",
            project_dir / "config.yml",
            project_dir / "config.yaml",
        )
        if path.is_file()
    ]

    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit).expanduser().resolve()
        if not path.is_file():
            raise FileNotFoundError(
                f"{CONFIG_ENV_VAR} points to a missing file: {path}"
            )
        found.append(path)
    return found


def read_settings_file(path: Path) -> dict[str, Any]:
    """Parse one YAML settings file.

    Empty files and files whose top level is not a mapping give ``{}``.

    Raises:
        yaml.YAMLError: If the file is not valid YAML.
    """
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "Ignoring %s: expected a mapping, got %s",
            path,
            type(data).__name__,
        )
        return {}
    return data


def read_settings_files() -> dict[str, Any]:
    """Merge every discovered settings file into one raw mapping.

    Returns ``{}`` when no file exists.
    """
    merged: dict[str, Any] = {}
    for path in settings_file_candidates():
        logger.debug("Reading settings from %s", path)
        merged.update(read_settings_file(path))
    return _expand_tree(merged)
