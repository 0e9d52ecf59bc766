"""Sync report formatting functions.

Provides human-readable and machine-readable output for sync runs:

- ``format_sync_report`` -- full post-sync summary.
- ``format_dry_run_preview`` -- dry-run preview grouped by action.
- ``report_to_json`` -- structured dict for ``--json`` output.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import SyncReport

from .models import SyncAction

# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def format_sync_report(report: SyncReport) -> str:
    """Format a complete sync report as human-readable text.

    Sections are only included when they contain at least one result.
    Unchanged paths are summarised by count only to avoid excessive output.

    Args:
        report: The completed sync report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    header = f"Sync report for '{report.source_root}' -> '{report.dest_root}'"
    if report.dry_run:
        header += " (DRY RUN)"
    lines.append(header)
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    copied = len(report.copied_new) + len(report.copied_changed)
    lines.append(
        f"Processed {len(report.results)} files: "
        f"{copied} copied, {len(report.deleted)} deleted, "
        f"{len(report.unchanged)} unchanged, {len(report.errors)} errors"
    )
    lines.append("")

    sections = [
        ("Copied (new):", SyncAction.COPY_NEW),
        ("Copied (changed):", SyncAction.COPY_CHANGED),
        ("Deleted:", SyncAction.DELETE),
    ]
    for title, action in sections:
        done = [r for r in report.results if r.action == action and r.success]
        if done:
            lines.append(title)
            for r in done:
                lines.append(f"  {r.path}")
            lines.append("")

    if report.errors:
        lines.append("Errors:")
        for r in report.errors:
            lines.append(f"  {r.path} ({r.action.value}): {r.error}")
        lines.append("")

    if report.unchanged:
        lines.append(f"Unchanged: {len(report.unchanged)} files")
        lines.append("")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# Dry-run preview
# ------------------------------------------------------------------


def format_dry_run_preview(report: SyncReport) -> str:
    """Format a dry-run preview grouped by action type.

    Each proposed action is shown as ``[ACTION]`` followed by its paths.

    Args:
        report: A dry-run sync report (``dry_run=True``).

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []
    lines.append("DRY RUN -- No changes will be made")
    lines.append(f"Source: {report.source_root}")
    lines.append(f"Destination: {report.dest_root}")
    lines.append("")

    groups: dict[SyncAction, list[str]] = defaultdict(list)
    for r in report.results:
        groups[r.action].append(r.path)

    display_order = [
        SyncAction.COPY_NEW,
        SyncAction.COPY_CHANGED,
        SyncAction.DELETE,
        SyncAction.SKIP,
    ]

    for action in display_order:
        if action not in groups:
            continue
        label = action.value.upper().replace("_", " ")
        lines.append(f"[{label}]")
        for path in groups[action]:
            lines.append(f"  {path}")
        lines.append("")

    unchanged_count = len(groups.get(SyncAction.UNCHANGED, []))
    if unchanged_count > 0:
        lines.append(f"Unchanged: {unchanged_count} files")
        lines.append("")

    if not any(a != SyncAction.UNCHANGED for a in groups):
        lines.append("No changes needed.")
        lines.append("")

    return "\n".join(lines).rstrip()


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def report_to_json(report: SyncReport) -> dict:
    """Convert a sync report to a structured dict for JSON serialisation.

    Args:
        report: The sync report.

    Returns:
        Dict with roots, counts, and per-result details.
    """
    results_list = []
    for r in report.results:
        entry: dict = {
            "path": r.path,
            "action": r.action.value,
            "success": r.success,
        }
        if r.error:
            entry["error"] = r.error
        results_list.append(entry)

    return {
        "source_root": report.source_root,
        "dest_root": report.dest_root,
        "dry_run": report.dry_run,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {
            "total": len(report.results),
            "copied_new": len(report.copied_new),
            "copied_changed": len(report.copied_changed),
            "unchanged": len(report.unchanged),
            "deleted": len(report.deleted),
            "skipped": len(report.skipped),
            "errors": len(report.errors),
        },
        "results": results_list,
    }
