"""Per-type export projection: the summary fields and charts worth exporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from src.models.report import Report
from src.schemas.report_data import ReportType

MAX_EXPORT_CHARTS = 3

EXPORT_SUMMARY_FIELDS: dict[ReportType, tuple[str, ...]] = {
    ReportType.TRIP_ANALYTICS: (
        "total_trips",
        "avg_trip_duration",
        "eco_friendly_percentage",
        "favorite_destination",
        "carbon_saved",
    ),
    ReportType.PACKING_STATISTICS: (
        "total_packing_lists",
        "completion_rate",
        "eco_percentage",
        "ai_usage_percentage",
    ),
    ReportType.USER_ACTIVITY: (
        "total_posts",
        "total_comments",
        "total_likes",
        "avg_likes_per_post",
        "eco_posts_shared",
    ),
    ReportType.ECO_IMPACT: (
        "eco_score",
        "total_carbon_saved",
        "eco_friendly_percentage",
        "carbon_footprint",
    ),
    ReportType.BUDGET_ANALYSIS: (
        "total_budget",
        "avg_budget",
        "max_budget",
        "min_budget",
        "budget_range",
    ),
    ReportType.DESTINATION_TRENDS: (
        "top_destinations",
        "total_destinations",
        "favorite_destination",
        "avg_stay_duration",
    ),
    ReportType.ECO_INVENTORY: (
        "total_products",
        "trending_products",
        "avg_eco_rating",
        "sustainability_score",
    ),
    ReportType.NEWS_SECTION: (
        "total_news",
        "top_source",
        "total_sources",
        "avg_articles_per_day",
    ),
}

# Flat detail maps exported as labelled sub-tables next to the summary metrics
EXPORT_DETAIL_TABLES: dict[ReportType, tuple[str, ...]] = {
    ReportType.ECO_IMPACT: ("impact_metrics",),
    ReportType.BUDGET_ANALYSIS: ("cost_savings",),
    ReportType.ECO_INVENTORY: ("price_analysis",),
}

RELEVANT_CHARTS: dict[ReportType, tuple[str, ...]] = {
    ReportType.TRIP_ANALYTICS: ("Trips Per Month", "Trip Types", "Top Destinations"),
    ReportType.PACKING_STATISTICS: ("Items by Category", "Completion Rate", "Eco vs Standard"),
    ReportType.USER_ACTIVITY: ("Monthly Activity", "Content Distribution", "Engagement"),
    ReportType.ECO_IMPACT: ("Carbon Impact by Module", "Eco Activities", "Sustainability Score"),
    ReportType.BUDGET_ANALYSIS: ("Monthly Spending", "Budget by Trip Type", "Budget Distribution"),
    ReportType.DESTINATION_TRENDS: ("Top Destinations", "Seasonal Travel", "Trip Types"),
    ReportType.ECO_INVENTORY: ("Category Distribution", "Eco Rating", "Availability"),
    ReportType.NEWS_SECTION: ("Articles Per Month", "Source Distribution", "Trending Topics"),
}


@dataclass
class ExportProjection:
    """Format-neutral view of a report, shared by every renderer."""

    title: str
    report_type: str
    generated_at: Optional[datetime]
    filters: dict[str, Any]
    summary: dict[str, Any] = field(default_factory=dict)
    charts: list[dict[str, Any]] = field(default_factory=list)

    def metadata(self) -> dict[str, str]:
        return {
            "Title": self.title,
            "Report Type": self.report_type,
            "Generated At": self.generated_at.isoformat() if self.generated_at else "",
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "report_type": self.report_type,
            "generated_at": self.generated_at.isoformat() if self.generated_at else None,
            "filters": self.filters,
            "summary": self.summary,
            "charts": self.charts,
        }


def _is_relevant(title: str, patterns: tuple[str, ...]) -> bool:
    lowered = title.lower()
    return any(p.lower() in lowered or lowered in p.lower() for p in patterns)


def select_charts(report_type: ReportType, charts: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep up to three charts whose titles fuzzily match the type's relevance list."""
    patterns = RELEVANT_CHARTS.get(report_type, ())
    return [c for c in charts if _is_relevant(c.get("title", ""), patterns)][:MAX_EXPORT_CHARTS]


def project_report(report: Report) -> ExportProjection:
    report_type = ReportType(report.report_type)
    data = report.data or {}
    summary = data.get("summary") or {}
    details = data.get("details") or {}

    exported = {
        name: summary[name] for name in EXPORT_SUMMARY_FIELDS.get(report_type, ()) if name in summary
    }
    for name in EXPORT_DETAIL_TABLES.get(report_type, ()):
        if isinstance(details.get(name), dict):
            exported[name] = details[name]

    return ExportProjection(
        title=report.title,
        report_type=report_type.value,
        generated_at=report.generated_at,
        filters=dict(report.filters or {}),
        summary=exported,
        charts=select_charts(report_type, data.get("charts") or []),
    )
