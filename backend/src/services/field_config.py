"""Field configuration registry for customizable reports.

Every report type declares which dot-paths of its ``{summary, charts,
details}`` tree are mandatory (always kept) and which are optional (kept on
request). The registry is immutable and built once at start-up.
"""

import types
import typing
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel

from src.exceptions import UnknownReportTypeError
from src.schemas.report_data import ReportType
from src.schemas.report_payloads import REPORT_PAYLOAD_MODELS
from src.utils.logger import get_logger

log = get_logger(__name__)

CHARTS_PATH = "charts"


class FieldConfigError(ValueError):
    """Field configuration does not match the typed report shapes."""


@dataclass(frozen=True)
class FieldConfig:
    mandatory: tuple[str, ...]
    optional: tuple[str, ...] = ()

    @property
    def all_fields(self) -> tuple[str, ...]:
        return self.mandatory + tuple(p for p in self.optional if p not in self.mandatory)


@dataclass(frozen=True)
class FieldValidation:
    invalid_fields: list[str] = field(default_factory=list)
    missing_mandatory: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.invalid_fields


DEFAULT_FIELD_CONFIGS: dict[ReportType, FieldConfig] = {
    ReportType.TRIP_ANALYTICS: FieldConfig(
        mandatory=(
            "summary.total_trips",
            "summary.total_budget",
            "summary.avg_trip_duration",
            "summary.avg_budget",
            "summary.max_budget",
            "summary.min_budget",
            "summary.estimated_carbon_footprint",
            "summary.unique_destinations",
            "summary.favorite_destination",
            "summary.avg_stay_duration",
            CHARTS_PATH,
        ),
        optional=(
            "summary.return_visits",
            "summary.eco_friendly_percentage",
            "summary.carbon_saved",
            "details.top_destinations",
            "details.monthly_breakdown",
            "details.eco_impact_breakdown",
            "details.recommendations",
            "details.recent_trips",
        ),
    ),
    ReportType.PACKING_STATISTICS: FieldConfig(
        mandatory=(
            "summary.total_packing_lists",
            "summary.completion_rate",
            "summary.total_items",
            CHARTS_PATH,
        ),
        optional=(
            "summary.checked_items",
            "summary.eco_items",
            "summary.eco_percentage",
            "summary.ai_generated_items",
            "summary.ai_usage_percentage",
            "summary.avg_items_per_list",
            "details.top_items",
            "details.top_eco_items",
            "details.category_breakdown",
            "details.completion_trends",
            "details.recommendations",
            "details.recent_lists",
        ),
    ),
    ReportType.USER_ACTIVITY: FieldConfig(
        mandatory=(
            "summary.total_trips",
            "summary.total_packing_lists",
            "summary.total_posts",
            "summary.total_likes",
            "summary.avg_likes_per_post",
            CHARTS_PATH,
        ),
        optional=(
            "summary.total_comments",
            "summary.eco_posts_shared",
            "summary.ai_usage_percentage",
            "details.recent_activity",
            "details.engagement_rate",
            "details.member_since",
            "details.top_tags",
            "details.recommendations",
        ),
    ),
    ReportType.ECO_IMPACT: FieldConfig(
        mandatory=(
            "summary.total_carbon_saved",
            "summary.eco_score",
            "summary.sustainability_rating",
            CHARTS_PATH,
        ),
        optional=(
            "summary.carbon_footprint",
            "summary.eco_friendly_percentage",
            "summary.eco_choices_count",
            "summary.eco_products_available",
            "details.module_breakdown",
            "details.impact_metrics",
            "details.recommendations",
            "details.eco_alternatives",
        ),
    ),
    ReportType.BUDGET_ANALYSIS: FieldConfig(
        mandatory=(
            "summary.total_budget",
            "summary.avg_budget",
            "summary.budget_range",
            CHARTS_PATH,
        ),
        optional=(
            "summary.total_trips",
            "summary.max_budget",
            "summary.min_budget",
            "details.budget_breakdown",
            "details.expensive_trips",
            "details.destination_costs",
            "details.seasonal_trends",
            "details.cost_savings",
            "details.recommendations",
        ),
    ),
    ReportType.DESTINATION_TRENDS: FieldConfig(
        mandatory=(
            "summary.top_destinations",
            "summary.emerging_destinations",
            "summary.total_destinations",
            CHARTS_PATH,
        ),
        optional=(
            "summary.favorite_destination",
            "summary.return_visits",
            "summary.avg_stay_duration",
            "summary.popular_season",
            "summary.destination_diversity",
            "details.destination_analysis",
            "details.seasonal_trends",
            "details.travel_patterns",
            "details.recommendations",
        ),
    ),
    ReportType.ECO_INVENTORY: FieldConfig(
        mandatory=(
            "summary.total_products",
            "summary.trending_products",
            "summary.avg_eco_rating",
            CHARTS_PATH,
        ),
        optional=(
            "summary.eco_products",
            "summary.total_brands",
            "summary.total_categories",
            "summary.sustainability_score",
            "summary.in_stock_products",
            "details.category_breakdown",
            "details.top_brands",
            "details.price_analysis",
            "details.eco_impact",
            "details.top_rated_products",
            "details.recommendations",
        ),
    ),
    ReportType.NEWS_SECTION: FieldConfig(
        mandatory=(
            "summary.total_news",
            "summary.active_sources",
            "summary.avg_articles_per_day",
            CHARTS_PATH,
        ),
        optional=(
            "summary.total_sources",
            "summary.recent_articles",
            "summary.latest_update",
            "summary.top_source",
            "details.top_categories",
            "details.trending_topics",
            "details.source_breakdown",
            "details.timeline_analysis",
            "details.content_insights",
            "details.recommendations",
        ),
    ),
}


def _nested_model(annotation) -> Optional[type[BaseModel]]:
    """Return the BaseModel class behind a field annotation, unwrapping Optional."""
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return annotation
    origin = typing.get_origin(annotation)
    if origin in (typing.Union, types.UnionType):
        models = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(models) == 1:
            return _nested_model(models[0])
    return None


def _path_exists(path: str, summary_model: type[BaseModel], details_model: type[BaseModel]) -> bool:
    head, *rest = path.split(".")
    if head == CHARTS_PATH:
        return not rest
    model = {"summary": summary_model, "details": details_model}.get(head)
    if model is None or not rest:
        return False

    for i, segment in enumerate(rest):
        if model is None or segment not in model.model_fields:
            return False
        is_last = i == len(rest) - 1
        if not is_last:
            model = _nested_model(model.model_fields[segment].annotation)
    return True


def _is_covered(path: str, configured: Iterable[str]) -> bool:
    for candidate in configured:
        if candidate == path or candidate.startswith(path + ".") or path.startswith(candidate + "."):
            return True
    return False


class FieldConfigRegistry:
    """Immutable per-report-type table of mandatory and optional field paths."""

    def __init__(
        self,
        configs: Mapping[ReportType, FieldConfig],
        payload_models: Mapping[ReportType, tuple[type[BaseModel], type[BaseModel]]] = REPORT_PAYLOAD_MODELS,
    ):
        self._configs = MappingProxyType(dict(configs))
        self._check(payload_models)

    def _check(self, payload_models) -> None:
        """Verify every type is configured and paths match the typed shapes both ways."""
        errors: list[str] = []
        for report_type in ReportType:
            config = self._configs.get(report_type)
            if config is None:
                errors.append(f"{report_type}: no field configuration")
                continue
            if CHARTS_PATH not in config.mandatory:
                errors.append(f"{report_type}: '{CHARTS_PATH}' must be mandatory")

            summary_model, details_model = payload_models[report_type]
            for path in config.all_fields:
                if not _path_exists(path, summary_model, details_model):
                    errors.append(f"{report_type}: unknown path '{path}'")

            expected = [f"summary.{name}" for name in summary_model.model_fields]
            expected += [f"details.{name}" for name in details_model.model_fields]
            for path in expected:
                if not _is_covered(path, config.all_fields):
                    errors.append(f"{report_type}: field '{path}' not covered by configuration")

        if errors:
            raise FieldConfigError("; ".join(errors))
        log.debug("field registry verified", report_types=len(self._configs))

    @property
    def report_types(self) -> list[ReportType]:
        return list(self._configs)

    def config_for(self, report_type: ReportType | str) -> FieldConfig:
        try:
            return self._configs[ReportType(report_type)]
        except (KeyError, ValueError):
            raise UnknownReportTypeError(str(report_type))

    def all_fields(self, report_type: ReportType | str) -> list[str]:
        return list(self.config_for(report_type).all_fields)

    def validate(self, report_type: ReportType | str, fields: Iterable[str]) -> FieldValidation:
        """Split ``fields`` into unknown paths and the mandatory paths it omits."""
        config = self.config_for(report_type)
        requested = list(dict.fromkeys(fields))
        known = set(config.all_fields)
        return FieldValidation(
            invalid_fields=[f for f in requested if f not in known],
            missing_mandatory=[m for m in config.mandatory if m not in requested],
        )
