"""Report generation background tasks."""

from typing import Any
from uuid import UUID

from src.celery_app import celery_app
from src.database import session_scope
from src.factories.service_factories import get_report_service
from src.schemas.report_data import ReportStatus
from src.tasks.utils import run_async
from src.utils.logger import get_logger

log = get_logger(__name__)


@celery_app.task(name="src.tasks.report_tasks.generate_report_task")
def generate_report_task(report_id: str) -> dict[str, Any]:
    """Drive a queued report to ``completed`` or ``failed``.

    Generator failures are recorded on the report, so the task itself
    only fails on infrastructure errors. Not retried.

    Args:
        report_id: ID of a report in ``pending`` state

    Returns:
        Dictionary with the report's final status
    """
    log.info("report_task_started", report_id=report_id)

    async def _run() -> dict[str, Any]:
        async with session_scope() as session:
            service = get_report_service(session)
            report = await service.report_repo.get_by_id(UUID(report_id))
            if report is None:
                log.warning("report_task_report_missing", report_id=report_id)
                return {"report_id": report_id, "status": "missing"}

            if report.status != ReportStatus.PENDING.value:
                log.warning("report_task_skipped", report_id=report_id, status=report.status)
                return {"report_id": report_id, "status": report.status}

            report = await service.run_generation(report)
            return {
                "report_id": report_id,
                "status": report.status,
                "error_message": report.error_message,
            }

    result = run_async(_run())
    log.info("report_task_completed", **result)
    return result


@celery_app.task(name="src.tasks.report_tasks.refresh_scheduled_reports_task")
def refresh_scheduled_reports_task() -> dict[str, Any]:
    """Regenerate every scheduled report whose frequency threshold has elapsed.

    Each report is regenerated in its own transaction, so one failure
    leaves the original in place and does not stop the others.

    Returns:
        Dictionary with regenerated and failed report IDs
    """
    log.info("scheduled_refresh_started")

    async def _due_ids() -> list[UUID]:
        async with session_scope() as session:
            return [r.id for r in await get_report_service(session).list_due()]

    async def _regenerate(report_id: UUID) -> str:
        async with session_scope() as session:
            report = await get_report_service(session).regenerate(report_id)
            return str(report.id)

    async def _run() -> dict[str, Any]:
        regenerated: list[dict[str, str]] = []
        failed: list[dict[str, str]] = []
        for report_id in await _due_ids():
            try:
                new_id = await _regenerate(report_id)
                regenerated.append({"old_report_id": str(report_id), "new_report_id": new_id})
            except Exception as e:
                log.error(
                    "scheduled_regeneration_failed",
                    report_id=str(report_id),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                failed.append({"report_id": str(report_id), "error": str(e)})

        return {"status": "completed", "regenerated": regenerated, "failed": failed}

    result = run_async(_run())
    log.info(
        "scheduled_refresh_completed",
        regenerated=len(result["regenerated"]),
        failed=len(result["failed"]),
    )
    return result
