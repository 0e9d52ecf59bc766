"""Core sync engine that makes a destination tree mirror a source tree.

The ``SyncEngine`` ties together the enumerator and the progress sink
into a complete one-way sync run.  It:

1. Lists the regular files under both roots.
2. Copy/update pass: for every source path, compares size and
   modification time against the destination and copies the file
   (creating parent directories, then restoring the source timestamps)
   when it is new or changed.
3. Delete pass: removes destination files whose path is not in the
   source listing.
4. Builds and returns a ``SyncReport``.

Error handling is per-file: a stat, copy or delete failure is logged and
recorded, and the run moves on.  Only enumeration errors abort a run.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from datetime import datetime, timezone
from pathlib import Path

from sync_folders.config import Config
from sync_folders.core.async_utils import run_sync
from sync_folders.sync.enumerator import list_files
from sync_folders.sync.models import (
    FileSnapshot,
    SyncAction,
    SyncReport,
    SyncResult,
)
from sync_folders.sync.progress import NullProgress, ProgressReporter

logger = logging.getLogger(__name__)


def classify(
    source: FileSnapshot, dest: FileSnapshot | None
) -> SyncAction:
    """Decide what the copy/update pass does with one source file.

    Args:
        source: Snapshot of the source file.
        dest: Snapshot of the destination file, or ``None`` if it is missing.

    Returns:
        ``COPY_NEW``, ``COPY_CHANGED`` or ``UNCHANGED``.
    """
    if dest is None:
        return SyncAction.COPY_NEW
    if source.differs_from(dest):
        return SyncAction.COPY_CHANGED
    return SyncAction.UNCHANGED


def _read_snapshot(path: Path, rel_path: str) -> FileSnapshot:
    return FileSnapshot.from_stat(rel_path, os.stat(path))


def _symlinked_parent(root: Path, rel_path: str) -> Path | None:
    """Return the first directory of *rel_path* under *root* that is a symlink."""
    current = root
    for part in Path(rel_path).parts[:-1]:
        current = current / part
        if current.is_symlink():
            return current
    return None


def _read_dest_stat(dest_root: Path, rel_path: str) -> os.stat_result | None:
    """``lstat`` a destination path without following links.

    Returns ``None`` when the path does not exist.  When one of its parent
    directories is a symlink, the link's own ``lstat`` is returned.
    """
    link = _symlinked_parent(dest_root, rel_path)
    if link is not None:
        return os.lstat(link)
    try:
        return os.lstat(dest_root / rel_path)
    except FileNotFoundError:
        return None


def _copy_file(src: Path, dest_root: Path, rel_path: str) -> None:
    """Copy *src* to ``dest_root / rel_path`` with the source timestamps.

    Symlinks and special files on the destination side are unlinked
    first, so the copy never writes through a link.
    """
    link = _symlinked_parent(dest_root, rel_path)
    if link is not None:
        link.unlink()

    dest = dest_root / rel_path
    dest.parent.mkdir(parents=True, exist_ok=True)
    try:
        mode = os.lstat(dest).st_mode
    except FileNotFoundError:
        pass
    else:
        if not stat.S_ISREG(mode) and not stat.S_ISDIR(mode):
            dest.unlink()

    shutil.copyfile(src, dest)
    st = os.stat(src)
    os.utime(dest, ns=(st.st_atime_ns, st.st_mtime_ns))


class SyncEngine:
    """Run a one-way sync from ``config.source_root`` to ``config.dest_root``.

    Args:
        config: Immutable run configuration.
        progress: Progress sink for the copy/update pass.  Defaults to
            a ``NullProgress`` so the engine works without one.
    """

    def __init__(
        self,
        config: Config,
        progress: ProgressReporter | None = None,
    ) -> None:
        self.config = config
        self.source_root = config.source_root
        self.dest_root = config.dest_root
        self.progress: ProgressReporter = progress or NullProgress()

    # ------------------------------------------------------------------
    # Main entry point
    # ------------------------------------------------------------------

    async def run(self, dry_run: bool | None = None) -> SyncReport:
        """Enumerate both trees and reconcile them.

        Args:
            dry_run: If ``True``, classify but do not change anything.
                Defaults to ``config.dry_run``.

        Returns:
            A ``SyncReport`` summarising what was (or would be) done.

        Raises:
            OSError: If either tree cannot be fully enumerated.
        """
        if dry_run is None:
            dry_run = self.config.dry_run

        source_files = await list_files(self.source_root)
        dest_files = await list_files(self.dest_root)
        logger.debug(
            "Source has %d files, destination has %d files",
            len(source_files),
            len(dest_files),
        )
        return await self.reconcile(source_files, dest_files, dry_run=dry_run)

    async def reconcile(
        self,
        source_files: set[str],
        dest_files: set[str],
        dry_run: bool = False,
    ) -> SyncReport:
        """Apply the copy/update pass, then the delete pass.

        Args:
            source_files: Relative paths of regular files under the source.
            dest_files: Relative paths of regular files under the destination.
            dry_run: If ``True``, classify but do not change anything.

        Returns:
            A ``SyncReport`` with exactly one result per distinct path.
        """
        started_at = datetime.now(timezone.utc).isoformat()
        results: list[SyncResult] = []

        total = len(source_files)
        self.progress.start(total)
        try:
            for processed, rel_path in enumerate(sorted(source_files), 1):
                results.append(await self._sync_path(rel_path, dry_run))
                self.progress.update(processed)

            # Deletions start only after every copy has been attempted
            for rel_path in sorted(dest_files - source_files):
                results.append(await self._delete_path(rel_path, dry_run))
        finally:
            self.progress.stop()

        logger.info("Sync complete.")

        return SyncReport(
            source_root=str(self.source_root),
            dest_root=str(self.dest_root),
            dry_run=dry_run,
            results=results,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )

    # ------------------------------------------------------------------
    # Per-path operations
    # ------------------------------------------------------------------

    async def _sync_path(self, rel_path: str, dry_run: bool) -> SyncResult:
        """Classify one source path and copy it if needed."""
        src_path = self.source_root / rel_path
        dest_path = self.dest_root / rel_path

        try:
            source = await run_sync(_read_snapshot, src_path, rel_path)
        except OSError as exc:
            logger.error("Failed to stat %s: %s", src_path, exc)
            return SyncResult(
                path=rel_path,
                action=SyncAction.SKIP,
                success=False,
                error=str(exc),
            )

        try:
            dest_st = await run_sync(_read_dest_stat, self.dest_root, rel_path)
        except OSError as exc:
            # Treated as missing; the copy reports any real failure
            logger.debug("Failed to stat %s: %s", dest_path, exc)
            dest_st = None

        if dest_st is not None and not stat.S_ISREG(dest_st.st_mode):
            # Symlink, directory or special file; never followed
            action = SyncAction.COPY_CHANGED
        else:
            dest = (
                FileSnapshot.from_stat(rel_path, dest_st)
                if dest_st is not None
                else None
            )
            action = classify(source, dest)

        if action == SyncAction.UNCHANGED:
            return SyncResult(path=rel_path, action=action)

        if dry_run:
            logger.debug("Would copy (%s): %s", action.value, rel_path)
            return SyncResult(path=rel_path, action=action)

        try:
            await run_sync(_copy_file, src_path, self.dest_root, rel_path)
        except OSError as exc:
            logger.error("Failed to copy %s: %s", rel_path, exc)
            return SyncResult(
                path=rel_path, action=action, success=False, error=str(exc)
            )

        logger.debug("Copied (%s): %s", action.value, rel_path)
        return SyncResult(path=rel_path, action=action)

    async def _delete_path(self, rel_path: str, dry_run: bool) -> SyncResult:
        """Remove one destination file that has no source counterpart."""
        if dry_run:
            logger.info("Would delete: %s", rel_path)
            return SyncResult(path=rel_path, action=SyncAction.DELETE)

        try:
            await run_sync(os.unlink, self.dest_root / rel_path)
        except OSError as exc:
            logger.error("Failed to delete %s: %s", rel_path, exc)
            return SyncResult(
                path=rel_path,
                action=SyncAction.DELETE,
                success=False,
                error=str(exc),
            )

        logger.info("Deleted: %s", rel_path)
        return SyncResult(path=rel_path, action=SyncAction.DELETE)
