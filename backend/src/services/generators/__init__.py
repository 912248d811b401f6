"""Report generators and the per-type dispatch registry."""

from typing import Mapping

from src.exceptions import UnknownReportTypeError
from src.repositories.source_repository import SourceRepository
from src.schemas.report_data import ReportData, ReportType
from src.services.generators.base import GenerationContext, ReportGenerator
from src.services.generators.budget_analysis import BudgetAnalysisGenerator
from src.services.generators.destination_trends import DestinationTrendsGenerator
from src.services.generators.eco_impact import EcoImpactGenerator
from src.services.generators.eco_inventory import EcoInventoryGenerator
from src.services.generators.news_section import NewsSectionGenerator
from src.services.generators.packing_statistics import PackingStatisticsGenerator
from src.services.generators.trip_analytics import TripAnalyticsGenerator
from src.services.generators.user_activity import UserActivityGenerator

GENERATOR_CLASSES: dict[ReportType, type[ReportGenerator]] = {
    cls.report_type: cls
    for cls in (
        TripAnalyticsGenerator,
        PackingStatisticsGenerator,
        UserActivityGenerator,
        EcoImpactGenerator,
        BudgetAnalysisGenerator,
        DestinationTrendsGenerator,
        EcoInventoryGenerator,
        NewsSectionGenerator,
    )
}


class GeneratorRegistry:
    """Dispatches a report type to its generator."""

    def __init__(
        self,
        sources: SourceRepository,
        classes: Mapping[ReportType, type[ReportGenerator]] = GENERATOR_CLASSES,
    ):
        self._generators = {report_type: cls(sources) for report_type, cls in classes.items()}

    def get(self, report_type: ReportType | str) -> ReportGenerator:
        try:
            return self._generators[ReportType(report_type)]
        except (KeyError, ValueError):
            raise UnknownReportTypeError(str(report_type))

    async def generate(self, report_type: ReportType | str, ctx: GenerationContext) -> ReportData:
        return await self.get(report_type).generate(ctx)


__all__ = [
    "GENERATOR_CLASSES",
    "GenerationContext",
    "GeneratorRegistry",
    "ReportGenerator",
]
