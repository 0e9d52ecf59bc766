"""Command-line entry point for sync-folders.

Parses arguments, builds the immutable run ``Config``, configures
logging and the progress sink, then runs one sync and prints its report
to stdout.  Log lines and the progress bar go to stderr.
"""

import argparse
import asyncio
import contextlib
import json
import logging
import sys

import yaml
from dotenv import load_dotenv
from tqdm.contrib.logging import logging_redirect_tqdm

from . import __version__
from .config import PROGRESS_MODES, Config, load_config
from .config_loader import read_settings_files
from .config_schema import build_config, yaml_fallbacks
from .logger import setup_logging
from .sync import (
    ProgressReporter,
    SyncEngine,
    SyncReport,
    create_progress,
    format_dry_run_preview,
    format_sync_report,
    report_to_json,
)

logger = logging.getLogger(__name__)


async def main(
    config: Config, progress: ProgressReporter | None = None
) -> SyncReport:
    """Run one sync for *config*.

    While a tqdm bar is active, console log records are routed through
    ``tqdm.write`` so they print above the bar instead of through it.

    Raises:
        OSError: If either tree cannot be enumerated.
    """
    engine = SyncEngine(config, progress=progress)
    redirect = (
        logging_redirect_tqdm()
        if config.progress == "bar"
        else contextlib.nullcontext()
    )
    with redirect:
        return await engine.run()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sync-folders",
        description="Make DEST an exact mirror of SOURCE: copy new and changed "
        "files, create missing folders, delete files absent from SOURCE.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Mirror a folder onto a backup drive
  sync-folders ~/photos /mnt/backup/photos

  # Preview what would change
  sync-folders ~/photos /mnt/backup/photos --dry-run

  # Plain percentage instead of a progress bar, JSON report on stdout
  sync-folders ./src ./dest --progress percent --json

Files are compared by size and modification time only.  Copied files
receive the source's access and modification times, so running the
same sync twice copies nothing the second time.
        """,
    )

    parser.add_argument("source", help="Source directory (read only)")
    parser.add_argument("dest", help="Destination directory (mirrored)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be copied and deleted without changing anything",
    )
    parser.add_argument(
        "--progress",
        choices=PROGRESS_MODES,
        help="Progress display (default: bar, or SYNC_FOLDERS_PROGRESS)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the final report as JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        help="Also append log lines to this file",
    )
    parser.add_argument(
        "--debug-format",
        choices=("text", "json"),
        help="Log line format (default: text)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"sync-folders version {__version__}",
    )
    return parser


def run(argv: list[str] | None = None) -> None:
    """Entry point that handles errors gracefully and parses CLI arguments."""
    args = _build_parser().parse_args(argv)

    # CLI args > env vars (.env loaded first) > YAML config > defaults
    load_dotenv()
    try:
        unified = build_config(read_settings_files())
        config = load_config(
            args.source,
            args.dest,
            dry_run=args.dry_run,
            progress=args.progress,
            debug=args.debug,
            yaml_fallbacks=yaml_fallbacks(unified),
        )
    except (ValueError, OSError, yaml.YAMLError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(
        debug=config.debug,
        log_file=args.log_file or unified.logging.file,
        debug_format=args.debug_format or unified.logging.format,
        level=unified.logging.level,
    )
    logger.debug("Running with %s", config)

    try:
        report = asyncio.run(
            main(config, progress=create_progress(config.progress))
        )
    except OSError as e:
        logger.error("Failed to enumerate directory tree: %s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)

    if args.json:
        print(json.dumps(report_to_json(report), indent=2))
    elif report.dry_run:
        print(format_dry_run_preview(report))
    else:
        print(format_sync_report(report))


if __name__ == "__main__":
    run()
