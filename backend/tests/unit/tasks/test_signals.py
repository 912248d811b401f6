"""Unit tests for Celery signals."""

import asyncio
import pytest
from unittest.mock import Mock, patch

from src.tasks.signals import WorkerLoop


@pytest.fixture
def loop_holder():
    holder = WorkerLoop()
    yield holder
    holder.stop()


class TestWorkerLoop:
    """Tests for the per-process worker event loop."""

    def test_start_runs_loop_on_daemon_thread(self, loop_holder):
        loop_holder.start()

        assert loop_holder.running
        assert loop_holder.thread.daemon
        assert loop_holder.thread.is_alive()

    def test_start_is_idempotent(self, loop_holder):
        loop_holder.start()
        first = loop_holder.loop

        loop_holder.start()

        assert loop_holder.loop is first

    def test_stop_closes_loop(self, loop_holder):
        loop_holder.start()
        loop = loop_holder.loop

        loop_holder.stop()

        assert loop.is_closed()
        assert loop_holder.loop is None
        assert loop_holder.thread is None
        assert not loop_holder.running

    def test_runs_coroutines_submitted_from_other_threads(self, loop_holder):
        loop_holder.start()

        async def double(x):
            return x * 2

        future = asyncio.run_coroutine_threadsafe(double(21), loop_holder.loop)

        assert future.result(timeout=5) == 42

    def test_closed_loop_is_not_running(self, loop_holder):
        loop = asyncio.new_event_loop()
        loop.close()
        loop_holder.loop = loop

        assert not loop_holder.running


class TestWorkerLifecycleSignals:
    def test_get_worker_loop_none_outside_worker(self):
        from src.tasks.signals import get_worker_loop

        with patch("src.tasks.signals.worker_loop", WorkerLoop()):
            assert get_worker_loop() is None

    def test_process_init_and_shutdown_drive_module_loop(self):
        from src.tasks import signals

        holder = WorkerLoop()
        with patch("src.tasks.signals.worker_loop", holder):
            signals._on_worker_process_init()
            assert signals.get_worker_loop() is holder.loop

            signals._on_worker_process_shutdown()
            assert signals.get_worker_loop() is None


class TestTaskLogSignals:
    """Tests for task prerun/failure logging."""

    def test_prerun_binds_task_id_as_request_id(self):
        from src.tasks.signals import _on_task_prerun
        from src.utils.logger import get_request_id, set_request_id

        set_request_id("stale-http-request")
        task = Mock()
        task.name = "src.tasks.report_tasks.generate_report_task"

        _on_task_prerun(task_id="task-123", task=task)

        assert get_request_id() == "task-123"

    def test_failure_is_logged(self):
        from src.tasks.signals import _on_task_failure

        sender = Mock()
        sender.name = "src.tasks.report_tasks.refresh_scheduled_reports_task"

        with patch("src.tasks.signals.log") as mock_log:
            _on_task_failure(task_id="task-789", exception=ValueError("boom"), sender=sender)

        mock_log.error.assert_called_once()
        kwargs = mock_log.error.call_args.kwargs
        assert kwargs["task_id"] == "task-789"
        assert kwargs["error_type"] == "ValueError"
