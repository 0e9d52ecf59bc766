"""Async utilities for running blocking filesystem calls off the event loop."""

import asyncio
from typing import Any, Callable, TypeVar

T = TypeVar("T")


async def run_sync(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    """Run a synchronous function in a thread pool without blocking the event loop.

    Every directory read, stat, copy, timestamp update and unlink made
    during a sync run goes through this helper, so those calls are the
    only suspension points of the run.

    Args:
        func: Synchronous function to call
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Result of func(*args, **kwargs)

    Example:
        st = await run_sync(os.stat, path)
    """
    return await asyncio.to_thread(func, *args, **kwargs)
