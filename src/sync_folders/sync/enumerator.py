"""Tree enumerator: list every regular file under a root directory.

Paths are returned relative to the root with forward slashes so the
same file has the same key on both sides of a sync.

Rules:

1. **Directories** are descended depth-first; sibling order is whatever
   the filesystem returns.
2. **Regular files** are recorded.  Entry types are checked without
   following symlinks, so symlinks, sockets, FIFOs and devices are
   skipped.
3. **Missing directories** (including the root itself) contribute no
   files.  Any other ``OSError`` propagates: a partial listing would
   make the engine delete files it simply failed to see.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from sync_folders.core.async_utils import run_sync

logger = logging.getLogger(__name__)


def _scan_dir(directory: Path) -> tuple[list[str], list[str]]:
    """Read one directory and split its entries into ``(dirs, files)``.

    Raises:
        FileNotFoundError: If *directory* does not exist.
        OSError: For any other failure reading *directory*.
    """
    dirs: list[str] = []
    files: list[str] = []
    with os.scandir(directory) as it:
        for entry in it:
            if entry.is_dir(follow_symlinks=False):
                dirs.append(entry.name)
            elif entry.is_file(follow_symlinks=False):
                files.append(entry.name)
    return dirs, files


async def list_files(root: Path) -> set[str]:
    """Return the relative paths of all regular files under *root*.

    Args:
        root: Directory to enumerate.  It need not exist.

    Returns:
        Set of POSIX-style relative paths.  Never contains directories.

    Raises:
        OSError: If a directory under *root* exists but cannot be read.
    """
    files: set[str] = set()
    await _walk(Path(root), "", files)
    logger.debug("Enumerated %d files under %s", len(files), root)
    return files


async def _walk(directory: Path, prefix: str, out: set[str]) -> None:
    try:
        dirs, files = await run_sync(_scan_dir, directory)
    except FileNotFoundError:
        logger.debug("Directory not found, treating as empty: %s", directory)
        return

    for name in files:
        out.add(prefix + name)
    for name in dirs:
        await _walk(directory / name, f"{prefix}{name}/", out)
