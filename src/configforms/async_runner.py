"""Drive submit coroutines from sync callers such as the CLI."""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any, TypeVar

from configforms.exceptions import AsyncExecutionError

if TYPE_CHECKING:
    from collections.abc import Coroutine

T = TypeVar("T")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion from sync or async contexts.

    Without a running loop the coroutine runs on a fresh loop in this thread.
    Inside a running loop it runs on its own loop in a worker thread, since the
    caller's loop cannot be re-entered.

    Args:
        coro: The coroutine to run.

    Raises:
        AsyncExecutionError: If the coroutine fails while run off-thread.

    Returns:
        The result of the coroutine.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="configforms-async") as executor:
        future = executor.submit(asyncio.run, coro)
        try:
            return future.result()
        except Exception as exc:
            raise AsyncExecutionError(result=exc) from exc
