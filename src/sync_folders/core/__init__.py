"""Core helpers shared by the enumerator and the sync engine."""

from .async_utils import run_sync

__all__ = ["run_sync"]
