"""Celery application for detached report generation and scheduled refreshes."""

from celery import Celery
from celery.schedules import crontab

from src.config import get_settings

settings = get_settings()

CRON_FIELDS = ("minute", "hour", "day_of_month", "month_of_year", "day_of_week")


def parse_cron(cron_expr: str) -> dict:
    """Split a five-field cron expression into ``crontab`` keyword arguments.

    Example: "0 * * * *" -> minute="0", every other field "*".
    """
    parts = cron_expr.split()
    if len(parts) != len(CRON_FIELDS):
        raise ValueError(f"Invalid cron expression: {cron_expr!r} (expected 5 fields)")
    return dict(zip(CRON_FIELDS, parts))


celery_app = Celery(
    "ecotrip_reports",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["src.tasks.report_tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=settings.celery_task_timeout,
    worker_prefetch_multiplier=1,
    result_expires=86400,
    beat_schedule={
        # Each scheduled report decides on its own whether it is due
        "refresh-scheduled-reports": {
            "task": "src.tasks.report_tasks.refresh_scheduled_reports_task",
            "schedule": crontab(**parse_cron(settings.report_refresh_schedule_cron)),
        },
    },
)
