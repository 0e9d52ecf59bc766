"""Pydantic models for the one-way tree sync engine.

Defines the core data contracts used across all sync modules:

- ``SyncAction``: Enum of possible per-path outcomes.
- ``FileSnapshot``: Size and timestamps of one file at stat time.
- ``SyncResult``: Outcome of syncing one path.
- ``SyncReport``: Aggregate results for a full sync run.

All models are frozen.
"""

from __future__ import annotations

import os
from enum import Enum

from pydantic import BaseModel


class SyncAction(str, Enum):
    """Classification of a relative path during a sync run."""

    COPY_NEW = "copy_new"
    COPY_CHANGED = "copy_changed"
    UNCHANGED = "unchanged"
    DELETE = "delete"
    SKIP = "skip"


class FileSnapshot(BaseModel):
    """Size and timestamps of a single file, taken by one ``stat`` call.

    Timestamps are kept as integer nanoseconds so that comparisons are
    exact: the copy step writes the source's nanosecond values onto the
    destination, which makes a second run see identical snapshots.

    Attributes:
        path: Path relative to the tree root (forward slashes).
        size: File size in bytes.
        mtime_ns: Last-modified time in nanoseconds since the epoch.
        atime_ns: Last-access time in nanoseconds since the epoch.
    """

    path: str
    size: int
    mtime_ns: int
    atime_ns: int

    model_config = {"frozen": True}

    @classmethod
    def from_stat(cls, path: str, st: os.stat_result) -> FileSnapshot:
        """Build a snapshot for *path* from an ``os.stat`` result."""
        return cls(
            path=path,
            size=st.st_size,
            mtime_ns=st.st_mtime_ns,
            atime_ns=st.st_atime_ns,
        )

    def differs_from(self, other: FileSnapshot) -> bool:
        """``True`` if size or modification time differ from *other*."""
        return self.size != other.size or self.mtime_ns != other.mtime_ns


class SyncResult(BaseModel):
    """Result of syncing one relative path.

    Attributes:
        path: Path relative to the tree roots.
        action: Classification that was applied (or would be, in a dry run).
        success: Whether the action completed.
        error: Error message if the action failed.
    """

    path: str
    action: SyncAction
    success: bool = True
    error: str | None = None

    model_config = {"frozen": True}


class SyncReport(BaseModel):
    """Aggregate report for a full sync run.

    Attributes:
        source_root: Absolute source directory.
        dest_root: Absolute destination directory.
        dry_run: Whether this was a dry-run (no changes applied).
        results: One result per distinct relative path.
        started_at: ISO 8601 timestamp when sync started.
        completed_at: ISO 8601 timestamp when sync completed.
    """

    source_root: str
    dest_root: str
    dry_run: bool = False
    results: list[SyncResult] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    def _with_action(self, action: SyncAction) -> list[SyncResult]:
        return [r for r in self.results if r.action == action]

    @property
    def copied_new(self) -> list[SyncResult]:
        """Results where action is COPY_NEW."""
        return self._with_action(SyncAction.COPY_NEW)

    @property
    def copied_changed(self) -> list[SyncResult]:
        """Results where action is COPY_CHANGED."""
        return self._with_action(SyncAction.COPY_CHANGED)

    @property
    def unchanged(self) -> list[SyncResult]:
        """Results where action is UNCHANGED."""
        return self._with_action(SyncAction.UNCHANGED)

    @property
    def deleted(self) -> list[SyncResult]:
        """Results where action is DELETE."""
        return self._with_action(SyncAction.DELETE)

    @property
    def skipped(self) -> list[SyncResult]:
        """Results where action is SKIP."""
        return self._with_action(SyncAction.SKIP)

    @property
    def errors(self) -> list[SyncResult]:
        """Results where success is False."""
        return [r for r in self.results if not r.success]

    @property
    def in_sync(self) -> bool:
        """``True`` if every path was already unchanged."""
        return all(r.action == SyncAction.UNCHANGED for r in self.results)
