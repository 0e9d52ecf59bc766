"""Progress sinks for the copy/update pass.

The engine reports ``(processed, total)`` through a ``ProgressReporter``
and never depends on how (or whether) it is rendered:

- ``TqdmProgress`` -- a ``tqdm`` bar on stderr, cleared when done.
- ``PercentProgress`` -- a plain ``Progress: N%`` line.
- ``NullProgress`` -- discards everything.
"""

from __future__ import annotations

import sys
from typing import Protocol, TextIO

from tqdm import tqdm

from sync_folders.config import PROGRESS_MODES


class ProgressReporter(Protocol):
    """Receives progress events from the sync engine."""

    def start(self, total: int) -> None: ...

    def update(self, count: int) -> None: ...

    def stop(self) -> None: ...


class NullProgress:
    """Progress sink that does nothing."""

    def start(self, total: int) -> None:
        pass

    def update(self, count: int) -> None:
        pass

    def stop(self) -> None:
        pass


class PercentProgress:
    """Write ``\\rProgress: N%`` to *stream* on every update.

    Args:
        stream: Output stream, ``sys.stderr`` by default.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stderr
        self._total = 0
        self._started = False

    def start(self, total: int) -> None:
        self._total = total
        self._started = True

    def update(self, count: int) -> None:
        percent = 100 if self._total == 0 else count * 100 // self._total
        self._stream.write(f"\rProgress: {percent}%")
        self._stream.flush()

    def stop(self) -> None:
        if self._started:
            self._stream.write("\n")
            self._stream.flush()
            self._started = False


class TqdmProgress:
    """Render progress as a ``tqdm`` bar.

    Args:
        stream: Output stream, ``sys.stderr`` by default.
        desc: Label shown before the bar.
    """

    def __init__(
        self, stream: TextIO | None = None, desc: str = "Syncing"
    ) -> None:
        self._stream = stream
        self._desc = desc
        self._bar: tqdm | None = None

    def start(self, total: int) -> None:
        self._bar = tqdm(
            total=total,
            desc=self._desc,
            unit="file",
            leave=False,
            file=self._stream or sys.stderr,
        )

    def update(self, count: int) -> None:
        if self._bar is None:
            return
        self._bar.update(count - self._bar.n)

    def stop(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


def create_progress(mode: str) -> ProgressReporter:
    """Return the progress sink for *mode* (``bar``, ``percent`` or ``none``).

    Raises:
        ValueError: If *mode* is not a known progress mode.
    """
    if mode == "bar":
        return TqdmProgress()
    if mode == "percent":
        return PercentProgress()
    if mode == "none":
        return NullProgress()
    raise ValueError(
        f"Unknown progress mode '{mode}': must be one of {', '.join(PROGRESS_MODES)}"
    )
