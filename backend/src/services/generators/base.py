"""Base class and context for report generators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import ClassVar, Optional

from pydantic import BaseModel

from src.exceptions import ReportGenerationError
from src.models.trip import Trip
from src.repositories.source_repository import SourceQuery, SourceRepository
from src.schemas.report_data import Chart, ReportData, ReportFilters, ReportType
from src.utils.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class GenerationContext:
    """Inputs of one generation run; ``now`` anchors every "recent" window."""

    owner_uid: str
    filters: ReportFilters
    now: datetime
    top_n: int = 10
    recent_limit: int = 10


class ReportGenerator(ABC):
    """
    One aggregation algorithm per report type.

    Subclasses implement ``build`` and return their typed summary, their
    charts and their typed details. ``generate`` turns any failure into a
    ``ReportGenerationError`` so partial data never escapes.
    """

    report_type: ClassVar[ReportType]
    summary_model: ClassVar[type[BaseModel]]
    details_model: ClassVar[type[BaseModel]]

    def __init__(self, sources: SourceRepository):
        self.sources = sources

    async def generate(self, ctx: GenerationContext) -> ReportData:
        log.info(
            "report generation started",
            report_type=self.report_type.value,
            owner_uid=ctx.owner_uid,
        )
        try:
            summary, charts, details = await self.build(ctx)
            data = ReportData(
                summary=summary.model_dump(mode="json"),
                charts=charts,
                details=details.model_dump(mode="json"),
            )
        except Exception as e:
            log.error(
                "report generation failed",
                report_type=self.report_type.value,
                owner_uid=ctx.owner_uid,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise ReportGenerationError(self.report_type.value, e) from e

        log.info(
            "report generation completed",
            report_type=self.report_type.value,
            owner_uid=ctx.owner_uid,
            charts=len(data.charts),
        )
        return data

    @abstractmethod
    async def build(self, ctx: GenerationContext) -> tuple[BaseModel, list[Chart], BaseModel]:
        """Fetch sources and compute ``(summary, charts, details)``."""


def trip_query(ctx: GenerationContext) -> SourceQuery:
    """Trip source query shared by the trip-based reports."""
    return SourceQuery.from_filters(
        ctx.filters,
        owner_uid=ctx.owner_uid,
        date_field="start_date",
        category_field="trip_type",
        numeric_field="budget",
        text_field="destination",
    )


def trip_duration(trip: Trip) -> float:
    """Stored duration, falling back to the date span (at least one day)."""
    if trip.duration_days:
        return float(trip.duration_days)
    if trip.start_date and trip.end_date:
        span: timedelta = trip.end_date - trip.start_date
        return float(max(span.days, 1))
    return 0.0


def trip_budget(trip: Trip) -> float:
    return float(trip.budget or 0)


def is_eco_tagged(tags: Optional[list[str]]) -> bool:
    """Post/news tag heuristic for sustainability content."""
    return any(
        "eco" in tag.lower() or "sustainab" in tag.lower() or "green" in tag.lower()
        for tag in (tags or [])
    )
