"""Bridge from synchronous Celery tasks to the async report service."""

import asyncio
from typing import Any, Coroutine, Optional, TypeVar

T = TypeVar("T")


def run_async(coro: Coroutine[Any, Any, T], timeout: Optional[float] = None) -> T:
    """Run ``coro`` to completion from a Celery task.

    Inside a worker the coroutine is scheduled on the process-wide loop
    started in ``signals.py`` so pooled database connections stay on the
    loop that opened them. Elsewhere (tests, eager mode) a throwaway loop
    is used.

    Args:
        coro: Coroutine to execute
        timeout: Seconds to wait on the worker loop, defaults to the
            configured Celery task timeout
    """
    from src.tasks.signals import get_worker_loop

    loop = get_worker_loop()
    if loop is None:
        tmp_loop = asyncio.new_event_loop()
        asyncio.set_event_loop(tmp_loop)
        try:
            return tmp_loop.run_until_complete(coro)
        finally:
            tmp_loop.close()

    if timeout is None:
        from src.config import get_settings

        timeout = get_settings().celery_task_timeout
    return asyncio.run_coroutine_threadsafe(coro, loop).result(timeout=timeout)
