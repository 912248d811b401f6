"""Celery signals: one event loop per worker process and task log context."""

import asyncio
import threading
from typing import Optional

from celery.signals import task_failure, task_prerun, worker_process_init, worker_process_shutdown

from src.utils.logger import clear_request_context, get_logger, set_request_id

log = get_logger(__name__)


class WorkerLoop:
    """
    Event loop running on a daemon thread for the life of a worker process.

    Pooled asyncpg connections belong to the loop that opened them, so every
    report task in the process is scheduled onto this loop.
    """

    def __init__(self) -> None:
        self.loop: Optional[asyncio.AbstractEventLoop] = None
        self.thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self.loop is not None and not self.loop.is_closed()

    def start(self) -> None:
        if self.running:
            return
        loop = asyncio.new_event_loop()

        def _serve() -> None:
            asyncio.set_event_loop(loop)
            loop.run_forever()

        self.loop = loop
        self.thread = threading.Thread(target=_serve, name="report-worker-loop", daemon=True)
        self.thread.start()
        log.info("worker event loop started")

    def stop(self, timeout: float = 5.0) -> None:
        if self.running:
            self.loop.call_soon_threadsafe(self.loop.stop)
            if self.thread is not None:
                self.thread.join(timeout=timeout)
            self.loop.close()
            log.info("worker event loop closed")
        self.loop = None
        self.thread = None


worker_loop = WorkerLoop()


def get_worker_loop() -> Optional[asyncio.AbstractEventLoop]:
    """The running worker loop, or None outside a worker process."""
    return worker_loop.loop if worker_loop.running else None


@worker_process_init.connect
def _on_worker_process_init(**kwargs) -> None:
    worker_loop.start()


@worker_process_shutdown.connect
def _on_worker_process_shutdown(**kwargs) -> None:
    worker_loop.stop()


@task_prerun.connect
def _on_task_prerun(task_id, task, **kwargs) -> None:
    """Use the Celery task id as the request id so task logs correlate."""
    clear_request_context()
    set_request_id(task_id)
    log.debug("task started", task_name=task.name)


@task_failure.connect
def _on_task_failure(task_id, exception, sender=None, **kwargs) -> None:
    log.error(
        "task failed",
        task_id=task_id,
        task_name=getattr(sender, "name", None),
        error=str(exception),
        error_type=type(exception).__name__,
    )
