"""Core report data types shared by generators, pruning and exports."""

from datetime import date
from enum import StrEnum
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ReportType(StrEnum):
    TRIP_ANALYTICS = "trip_analytics"
    PACKING_STATISTICS = "packing_statistics"
    USER_ACTIVITY = "user_activity"
    ECO_IMPACT = "eco_impact"
    BUDGET_ANALYSIS = "budget_analysis"
    DESTINATION_TRENDS = "destination_trends"
    ECO_INVENTORY = "eco_inventory"
    NEWS_SECTION = "news_section"

    @property
    def label(self) -> str:
        return REPORT_TYPE_INFO[self][0]

    @property
    def description(self) -> str:
        return REPORT_TYPE_INFO[self][1]


REPORT_TYPE_INFO: dict[ReportType, tuple[str, str]] = {
    ReportType.TRIP_ANALYTICS: (
        "Trip Analytics",
        "Trip counts, budgets, durations, destinations and carbon impact",
    ),
    ReportType.PACKING_STATISTICS: (
        "Packing Statistics",
        "Packing list completion, eco items and AI-suggested items",
    ),
    ReportType.USER_ACTIVITY: (
        "User Activity",
        "Activity across trips, packing lists and community posts",
    ),
    ReportType.ECO_IMPACT: (
        "Eco Impact",
        "Cross-module sustainability score and carbon savings",
    ),
    ReportType.BUDGET_ANALYSIS: (
        "Budget Analysis",
        "Spending trends by month, trip type, season and destination",
    ),
    ReportType.DESTINATION_TRENDS: (
        "Destination Trends",
        "Favourite, emerging and seasonal destinations",
    ),
    ReportType.ECO_INVENTORY: (
        "Eco Inventory",
        "Eco product catalogue ratings, brands, prices and availability",
    ),
    ReportType.NEWS_SECTION: (
        "News Section",
        "Travel news volume, sources and trending topics",
    ),
}


class ReportStatus(StrEnum):
    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


class ScheduleFrequency(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class ChartKind(StrEnum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    DOUGHNUT = "doughnut"


# ============================================================================
# Filters
# ============================================================================


class DateRange(BaseModel):
    """Inclusive calendar date range."""

    start: date = Field(..., description="First day included")
    end: date = Field(..., description="Last day included")

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError("date_range.start must not be after date_range.end")
        return self


class NumericRange(BaseModel):
    """Inclusive numeric bounds (budget or price depending on report type)."""

    min: float = Field(0, ge=0, description="Lower bound, must be >= 0")
    max: Optional[float] = Field(None, description="Upper bound, unbounded when omitted")

    @model_validator(mode="after")
    def _check_order(self) -> "NumericRange":
        if self.max is not None and self.min > self.max:
            raise ValueError("numeric_range.min must not exceed numeric_range.max")
        return self


class ReportFilters(BaseModel):
    """Optional filters applied to the report's source query."""

    model_config = ConfigDict(extra="ignore")

    date_range: Optional[DateRange] = None
    category: Optional[str] = Field(None, max_length=100)
    numeric_range: Optional[NumericRange] = None
    destination: Optional[str] = Field(None, max_length=255)

    def to_storage(self) -> dict[str, Any]:
        """Serialize for the report's JSONB ``filters`` column."""
        return self.model_dump(mode="json", exclude_none=True)


# ============================================================================
# Report tree
# ============================================================================


class Chart(BaseModel):
    """A single chart; ``data`` and ``labels`` are parallel sequences."""

    kind: ChartKind
    title: str
    data: list[float]
    labels: list[str]

    @model_validator(mode="after")
    def _check_lengths(self) -> "Chart":
        if len(self.data) != len(self.labels):
            raise ValueError(
                f"chart '{self.title}' has {len(self.data)} values but {len(self.labels)} labels"
            )
        return self

    @classmethod
    def from_pairs(
        cls, kind: ChartKind, title: str, pairs: Iterable[tuple[str, float]]
    ) -> "Chart":
        """Build a chart from ordered (label, value) pairs."""
        labels: list[str] = []
        data: list[float] = []
        for label, value in pairs:
            labels.append(str(label))
            data.append(value)
        return cls(kind=kind, title=title, data=data, labels=labels)


class ReportData(BaseModel):
    """Generated report tree: ``{summary, charts, details}``."""

    summary: dict[str, Any] = Field(default_factory=dict)
    charts: list[Chart] = Field(default_factory=list, max_length=4)
    details: dict[str, Any] = Field(default_factory=dict)

    def to_tree(self) -> dict[str, Any]:
        """Plain JSON-compatible tree, as persisted and pruned."""
        return self.model_dump(mode="json")
