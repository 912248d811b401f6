"""Report lifecycle: validation, generation, persistence and regeneration."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Optional
from uuid import UUID

from src.exceptions import (
    ForbiddenError,
    ReportGenerationError,
    ResourceNotFoundError,
    ValidationError,
)
from src.models.report import Report
from src.models.user import User
from src.repositories.report_repository import ReportRepository
from src.schemas.report_data import (
    ReportFilters,
    ReportStatus,
    ReportType,
    ScheduleFrequency,
)
from src.schemas.reports import GenerateReportRequest
from src.services.field_config import FieldConfigRegistry
from src.services.field_pruner import FieldSelection, prune, resolve_allowed_paths
from src.services.generators import GenerationContext, GeneratorRegistry
from src.utils.logger import get_logger

log = get_logger(__name__)

REGENERATION_THRESHOLDS: dict[ScheduleFrequency, timedelta] = {
    ScheduleFrequency.DAILY: timedelta(hours=24),
    ScheduleFrequency.WEEKLY: timedelta(days=7),
    ScheduleFrequency.MONTHLY: timedelta(days=30),
    ScheduleFrequency.QUARTERLY: timedelta(days=90),
}

RECENT_OVERVIEW_REPORTS = 5

TYPE_TAGS: dict[ReportType, tuple[str, ...]] = {
    ReportType.TRIP_ANALYTICS: ("trips",),
    ReportType.PACKING_STATISTICS: ("packing",),
    ReportType.USER_ACTIVITY: ("activity", "community"),
    ReportType.ECO_IMPACT: ("eco", "sustainability"),
    ReportType.BUDGET_ANALYSIS: ("budget", "finance"),
    ReportType.DESTINATION_TRENDS: ("destinations", "travel"),
    ReportType.ECO_INVENTORY: ("eco", "products"),
    ReportType.NEWS_SECTION: ("news",),
}


def needs_regeneration(report: Report, now: datetime) -> bool:
    """
    Check whether a scheduled report is due for regeneration.

    Always false for unscheduled reports. A scheduled report that never
    completed is due only once its last attempt has failed.
    """
    if not report.is_scheduled or not report.schedule_frequency:
        return False

    threshold = REGENERATION_THRESHOLDS[ScheduleFrequency(report.schedule_frequency)]
    stamps = [s for s in (report.last_generated, report.generated_at) if s is not None]
    if not stamps:
        return report.status == ReportStatus.FAILED.value
    return now - max(stamps) > threshold


def default_title(report_type: ReportType, filters: ReportFilters, now: datetime) -> str:
    label = report_type.label
    date_range = filters.date_range
    if date_range is None:
        return f"{label} - {now:%B %Y}"
    start, end = date_range.start, date_range.end
    if (start.year, start.month) == (end.year, end.month):
        return f"{label} - {start:%B %Y}"
    return f"{label} - {start:%b %d, %Y} to {end:%b %d, %Y}"


def build_tags(report_type: ReportType, filters: ReportFilters, extra: Optional[list[str]] = None) -> list[str]:
    tags = ["analytics", *TYPE_TAGS.get(report_type, ())]
    if filters.date_range is not None:
        days = (filters.date_range.end - filters.date_range.start).days + 1
        if days <= 7:
            tags.append("weekly")
        elif days <= 31:
            tags.append("monthly")
        elif days <= 92:
            tags.append("quarterly")
        else:
            tags.append("annual")
    if filters.category:
        tags.append(filters.category.lower())
    if filters.destination:
        tags.append(filters.destination.lower())
    tags.extend(t.strip().lower() for t in (extra or []) if t.strip())
    return list(dict.fromkeys(tags))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ReportOverview:
    total_reports: int
    reports_by_type: dict[str, int]
    recent_reports: list[Report]
    last_generated: Optional[datetime]


class ReportService:
    """
    Orchestrates report generation on top of the generator registry,
    the field registry and the report repository.

    Generation runs ``pending -> generating -> completed | failed``;
    a failure is always recorded on the report before it propagates.
    """

    def __init__(
        self,
        report_repo: ReportRepository,
        generators: GeneratorRegistry,
        field_registry: FieldConfigRegistry,
        top_n: int = 10,
        recent_limit: int = 10,
        default_page_size: int = 50,
        max_page_size: int = 100,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.report_repo = report_repo
        self.generators = generators
        self.field_registry = field_registry
        self.top_n = top_n
        self.recent_limit = recent_limit
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self.clock = clock

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate_request(self, request: GenerateReportRequest) -> tuple[ReportType, list[str]]:
        """Resolve the report type and allowed field paths, or raise ValidationError."""
        if not request.type:
            raise ValidationError("Report type is required")
        try:
            report_type = ReportType(request.type)
        except ValueError:
            raise ValidationError(
                f"Invalid report type: {request.type}",
                details={"valid_types": [t.value for t in ReportType]},
            )

        if request.is_scheduled and request.schedule_frequency is None:
            raise ValidationError("schedule_frequency is required for scheduled reports")

        selection = FieldSelection(
            include_optional_fields=request.include_optional_fields,
            specific_fields=tuple(request.specific_fields) if request.specific_fields else None,
            lightweight=request.lightweight,
        )
        allowed = resolve_allowed_paths(self.field_registry, report_type, selection)
        return report_type, allowed

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    async def create_pending(self, owner_uid: str, request: GenerateReportRequest) -> Report:
        """Validate the request and persist a ``pending`` report."""
        report_type, allowed = self._validate_request(request)
        filters = request.filters
        report = await self.report_repo.create(
            owner_uid=owner_uid,
            title=request.title or default_title(report_type, filters, self.clock()),
            report_type=report_type.value,
            filters=filters.to_storage(),
            tags=build_tags(report_type, filters, request.tags),
            is_scheduled=request.is_scheduled,
            schedule_frequency=request.schedule_frequency.value if request.schedule_frequency else None,
            selected_fields=allowed,
        )
        log.info(
            "report queued",
            report_id=str(report.id),
            report_type=report_type.value,
            owner_uid=owner_uid,
        )
        return report

    async def _generate_tree(self, report: Report, now: datetime) -> dict[str, Any]:
        report_type = ReportType(report.report_type)
        ctx = GenerationContext(
            owner_uid=report.owner_uid,
            filters=ReportFilters.model_validate(report.filters or {}),
            now=now,
            top_n=self.top_n,
            recent_limit=self.recent_limit,
        )
        data = await self.generators.generate(report_type, ctx)
        allowed = report.selected_fields or self.field_registry.all_fields(report_type)
        return prune(data.to_tree(), allowed)

    async def _run(self, report: Report) -> tuple[Report, Optional[Exception]]:
        await self.report_repo.mark_generating(report)
        try:
            tree = await self._generate_tree(report, self.clock())
        except Exception as e:
            cause = e.cause if isinstance(e, ReportGenerationError) and e.cause else e
            log.error(
                "report generation recorded as failed",
                report_id=str(report.id),
                report_type=report.report_type,
                error=str(cause),
            )
            report = await self.report_repo.mark_failed(report, str(cause) or type(cause).__name__)
            return report, e

        report = await self.report_repo.mark_completed(report, tree, generated_at=self.clock())
        log.info("report completed", report_id=str(report.id), report_type=report.report_type)
        return report, None

    async def run_generation(self, report: Report) -> Report:
        """
        Drive a pending report to ``completed`` or ``failed``.

        Never raises for generator failures; the outcome is on the report.
        """
        report, _ = await self._run(report)
        return report

    async def fail_enqueue(self, report: Report, error: Exception) -> Report:
        """Resolve a pending report whose generation task never reached the broker."""
        await self.report_repo.mark_generating(report)
        report = await self.report_repo.mark_failed(
            report, f"Failed to enqueue generation: {str(error) or type(error).__name__}"
        )
        await self.report_repo.commit()
        log.error("report enqueue failed", report_id=str(report.id), error=str(error))
        return report

    async def generate(self, owner_uid: str, request: GenerateReportRequest) -> Report:
        """
        Synchronous generation path.

        Raises:
            ValidationError: If the request is invalid
            ReportGenerationError: If the generator failed (the failed
                report is committed before raising)
        """
        report = await self.create_pending(owner_uid, request)
        report, error = await self._run(report)
        if error is not None:
            await self.report_repo.commit()
            if isinstance(error, ReportGenerationError):
                raise error
            raise ReportGenerationError(report.report_type, error) from error
        return report

    async def regenerate(self, report_id: UUID, owner_uid: Optional[str] = None) -> Report:
        """
        Re-run a report's generator with its stored filters.

        The replacement is generated first and the original is deleted only
        once it succeeded, all inside the caller's transaction.
        """
        original = await self.get(report_id, owner_uid)
        replacement = await self.report_repo.create(
            owner_uid=original.owner_uid,
            title=original.title,
            report_type=original.report_type,
            filters=dict(original.filters or {}),
            tags=list(original.tags or []),
            is_scheduled=original.is_scheduled,
            schedule_frequency=original.schedule_frequency,
            selected_fields=original.selected_fields,
        )
        await self.report_repo.mark_generating(replacement)
        try:
            tree = await self._generate_tree(replacement, self.clock())
        except Exception:
            await self.report_repo.delete(replacement)
            log.warning("report regeneration failed", report_id=str(report_id))
            raise

        replacement = await self.report_repo.mark_completed(
            replacement, tree, generated_at=self.clock()
        )
        await self.report_repo.delete(original)
        log.info(
            "report regenerated",
            old_report_id=str(report_id),
            new_report_id=str(replacement.id),
        )
        return replacement

    async def list_due(self) -> list[Report]:
        """Scheduled reports whose regeneration threshold has elapsed."""
        now = self.clock()
        return [r for r in await self.report_repo.list_scheduled() if needs_regeneration(r, now)]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get(self, report_id: UUID, owner_uid: Optional[str] = None) -> Report:
        report = await self.report_repo.get_by_id(report_id, owner_uid=owner_uid)
        if report is None:
            raise ResourceNotFoundError("Report", str(report_id))
        return report

    async def list(
        self,
        owner_uid: str,
        report_type: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[Report]:
        if report_type is not None and report_type not in {t.value for t in ReportType}:
            raise ValidationError(f"Invalid report type: {report_type}")
        if from_date and to_date and from_date > to_date:
            raise ValidationError("from_date must not be after to_date")
        page_size = min(limit or self.default_page_size, self.max_page_size)
        return await self.report_repo.list_reports(
            owner_uid,
            report_type=report_type,
            from_date=from_date,
            to_date=to_date,
            limit=page_size,
        )

    async def overview(self, owner_uid: str) -> ReportOverview:
        by_type = await self.report_repo.count_by_type(owner_uid)
        recent = await self.report_repo.list_reports(owner_uid, limit=RECENT_OVERVIEW_REPORTS)
        return ReportOverview(
            total_reports=sum(by_type.values()),
            reports_by_type=by_type,
            recent_reports=recent,
            last_generated=await self.report_repo.get_last_generated_at(owner_uid),
        )

    async def delete(self, report_id: UUID, user: User) -> None:
        """Delete a report; allowed for its owner or an administrator."""
        report = await self.get(report_id)
        if report.owner_uid != user.uid and not user.is_admin:
            raise ForbiddenError("Only the report owner or an administrator can delete it")
        await self.report_repo.delete(report)
        log.info("report deleted", report_id=str(report_id), deleted_by=user.uid)
