"""Repository for Report model operations."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.report import Report
from src.schemas.report_data import ReportStatus
from src.utils.logger import get_logger

log = get_logger(__name__)

# Allowed lifecycle transitions
_TRANSITIONS: dict[ReportStatus, set[ReportStatus]] = {
    ReportStatus.PENDING: {ReportStatus.GENERATING},
    ReportStatus.GENERATING: {ReportStatus.COMPLETED, ReportStatus.FAILED},
    ReportStatus.COMPLETED: set(),
    ReportStatus.FAILED: set(),
}


class InvalidStatusTransition(ValueError):
    pass


class ReportRepository:
    """Repository for Report CRUD and lifecycle updates.

    Caller is responsible for committing the transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        owner_uid: str,
        title: str,
        report_type: str,
        filters: dict[str, Any],
        tags: Optional[list[str]] = None,
        is_scheduled: bool = False,
        schedule_frequency: Optional[str] = None,
        selected_fields: Optional[list[str]] = None,
    ) -> Report:
        """Create a new report record in ``pending`` state."""
        report = Report(
            owner_uid=owner_uid,
            title=title,
            report_type=report_type,
            filters=filters,
            data={},
            status=ReportStatus.PENDING.value,
            tags=tags or [],
            is_scheduled=is_scheduled,
            schedule_frequency=schedule_frequency,
            selected_fields=selected_fields,
        )
        self.session.add(report)
        await self.session.flush()
        await self.session.refresh(report)
        log.debug("report_created", report_type=report_type, owner_uid=owner_uid, report_id=str(report.id))
        return report

    async def get_by_id(self, report_id: UUID, owner_uid: Optional[str] = None) -> Optional[Report]:
        """Get report by ID, optionally scoped to its owner."""
        stmt = select(Report).where(Report.id == report_id)
        if owner_uid is not None:
            stmt = stmt.where(Report.owner_uid == owner_uid)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_reports(
        self,
        owner_uid: str,
        report_type: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        limit: int = 50,
    ) -> list[Report]:
        """List an owner's reports newest first, filtered by type and generation date."""
        stmt = select(Report).where(Report.owner_uid == owner_uid)
        if report_type:
            stmt = stmt.where(Report.report_type == report_type)
        if from_date is not None:
            stmt = stmt.where(
                Report.generated_at >= datetime.combine(from_date, time.min, tzinfo=timezone.utc)
            )
        if to_date is not None:
            stmt = stmt.where(
                Report.generated_at
                < datetime.combine(to_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
            )
        stmt = stmt.order_by(
            Report.generated_at.desc().nulls_last(), Report.created_at.desc()
        ).limit(limit)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_by_type(self, owner_uid: str) -> dict[str, int]:
        result = await self.session.execute(
            select(Report.report_type, func.count())
            .where(Report.owner_uid == owner_uid)
            .group_by(Report.report_type)
        )
        return {report_type: count for report_type, count in result.all()}

    async def get_last_generated_at(self, owner_uid: str) -> Optional[datetime]:
        result = await self.session.execute(
            select(func.max(Report.generated_at)).where(Report.owner_uid == owner_uid)
        )
        return result.scalar_one_or_none()

    async def list_scheduled(self) -> list[Report]:
        """All scheduled reports that are not currently in flight."""
        result = await self.session.execute(
            select(Report)
            .where(
                Report.is_scheduled.is_(True),
                Report.status.in_([ReportStatus.COMPLETED.value, ReportStatus.FAILED.value]),
            )
            .order_by(Report.created_at.asc())
        )
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _transition(self, report: Report, target: ReportStatus) -> None:
        current = ReportStatus(report.status)
        if target not in _TRANSITIONS[current]:
            raise InvalidStatusTransition(f"Cannot move report from {current} to {target}")
        report.status = target.value

    async def mark_generating(self, report: Report) -> Report:
        self._transition(report, ReportStatus.GENERATING)
        report.error_message = None
        await self.session.flush()
        return report

    async def mark_completed(
        self,
        report: Report,
        data: dict[str, Any],
        generated_at: datetime,
    ) -> Report:
        """Persist generated data; ``generated_at`` is always set alongside ``completed``."""
        self._transition(report, ReportStatus.COMPLETED)
        report.data = data
        report.generated_at = generated_at
        if report.is_scheduled:
            report.last_generated = generated_at
        await self.session.flush()
        await self.session.refresh(report)
        log.debug("report_completed", report_id=str(report.id))
        return report

    async def mark_failed(self, report: Report, error_message: str) -> Report:
        self._transition(report, ReportStatus.FAILED)
        report.error_message = error_message[:2000]
        await self.session.flush()
        log.debug("report_failed", report_id=str(report.id))
        return report

    async def delete(self, report: Report) -> None:
        await self.session.delete(report)
        await self.session.flush()
        log.debug("report_deleted", report_id=str(report.id))

    async def commit(self) -> None:
        await self.session.commit()
