"""One-way directory tree sync engine.

Public API for making a destination directory mirror a source
directory.

Architecture
------------
Both trees are listed as sets of root-relative file paths.  Each source
path is classified by comparing size and nanosecond modification time
with its destination counterpart; new and changed files are copied and
stamped with the source timestamps, which makes a repeated run a no-op.
Destination paths missing from the source are deleted once every copy
has been attempted.

Modules:

- ``engine``     -- ``SyncEngine``: runs the copy/update and delete passes.
- ``enumerator`` -- ``list_files``: recursive regular-file listing.
- ``models``     -- ``SyncAction``, ``FileSnapshot``, ``SyncResult``,
  ``SyncReport``: core data contracts.
- ``progress``   -- ``ProgressReporter`` sinks (tqdm bar, percent line, none).
- ``reporter``   -- Human-readable and JSON report formatting.

Usage example
-------------
::

    import asyncio
    from sync_folders.config import load_config
    from sync_folders.sync import SyncEngine, TqdmProgress, format_sync_report

    config = load_config("photos", "/mnt/backup/photos")
    engine = SyncEngine(config, progress=TqdmProgress())

    # Dry-run first to preview changes
    preview = asyncio.run(engine.run(dry_run=True))

    report = asyncio.run(engine.run())
    print(format_sync_report(report))
"""

from .engine import SyncEngine, classify
from .enumerator import list_files
from .models import (
    FileSnapshot,
    SyncAction,
    SyncReport,
    SyncResult,
)
from .progress import (
    NullProgress,
    PercentProgress,
    ProgressReporter,
    TqdmProgress,
    create_progress,
)
from .reporter import (
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)

__all__ = [
    "FileSnapshot",
    "NullProgress",
    "PercentProgress",
    "ProgressReporter",
    "SyncAction",
    "SyncEngine",
    "SyncReport",
    "SyncResult",
    "TqdmProgress",
    "classify",
    "create_progress",
    "format_dry_run_preview",
    "format_sync_report",
    "list_files",
    "report_to_json",
]
