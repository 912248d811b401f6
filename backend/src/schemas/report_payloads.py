"""Typed summary and details shapes for every report type.

Generators build these models and dump them into the report tree; the
field registry checks its dot-paths against them at start-up.
"""

from typing import Optional

from pydantic import BaseModel, Field

from src.schemas.report_data import ReportType


class RankedEntry(BaseModel):
    """A name with its occurrence count, used by all top-N lists."""

    name: str
    count: int


# ============================================================================
# Trip analytics
# ============================================================================


class TripAnalyticsSummary(BaseModel):
    total_trips: int
    total_budget: float
    avg_budget: float
    max_budget: float
    min_budget: float
    avg_trip_duration: float
    avg_stay_duration: float
    unique_destinations: int
    favorite_destination: Optional[str]
    return_visits: int
    eco_friendly_percentage: float
    estimated_carbon_footprint: float
    carbon_saved: float


class MonthlyTripEntry(BaseModel):
    month: str
    trips: int
    budget: float


class EcoImpactBreakdown(BaseModel):
    eco_friendly_trips: int
    standard_trips: int
    avg_eco_score: float
    carbon_saved: float
    carbon_footprint: float


class TripSnapshot(BaseModel):
    title: str
    destination: str
    trip_type: str
    start_date: Optional[str]
    budget: float
    is_eco_friendly: bool


class TripAnalyticsDetails(BaseModel):
    top_destinations: list[RankedEntry]
    monthly_breakdown: list[MonthlyTripEntry]
    eco_impact_breakdown: EcoImpactBreakdown
    recommendations: list[str]
    recent_trips: list[TripSnapshot]


# ============================================================================
# Packing statistics
# ============================================================================


class PackingStatisticsSummary(BaseModel):
    total_packing_lists: int
    total_items: int
    checked_items: int
    completion_rate: float
    eco_items: int
    eco_percentage: float
    ai_generated_items: int
    ai_usage_percentage: float
    avg_items_per_list: float


class PackingCategoryStats(BaseModel):
    category: str
    total_items: int
    checked_items: int
    eco_items: int
    completion_rate: float


class CompletionTrendEntry(BaseModel):
    month: str
    lists: int
    completion_rate: float


class PackingListSnapshot(BaseModel):
    title: str
    total_items: int
    completion_rate: float
    is_ai_generated: bool
    created_at: Optional[str]


class PackingStatisticsDetails(BaseModel):
    top_items: list[RankedEntry]
    top_eco_items: list[RankedEntry]
    category_breakdown: list[PackingCategoryStats]
    completion_trends: list[CompletionTrendEntry]
    recommendations: list[str]
    recent_lists: list[PackingListSnapshot]


# ============================================================================
# User activity
# ============================================================================


class UserActivitySummary(BaseModel):
    total_trips: int
    total_packing_lists: int
    total_posts: int
    total_likes: int
    total_comments: int
    avg_likes_per_post: float
    eco_posts_shared: int
    ai_usage_percentage: float


class ActivityEntry(BaseModel):
    kind: str = Field(..., description="trip, packing_list or post")
    title: str
    created_at: Optional[str]


class UserActivityDetails(BaseModel):
    recent_activity: list[ActivityEntry]
    engagement_rate: float
    member_since: Optional[str]
    top_tags: list[RankedEntry]
    recommendations: list[str]


# ============================================================================
# Eco impact
# ============================================================================


class EcoImpactSummary(BaseModel):
    eco_score: float
    sustainability_rating: str
    total_carbon_saved: float
    carbon_footprint: float
    eco_friendly_percentage: float
    eco_choices_count: int
    eco_products_available: int


class ModuleImpact(BaseModel):
    eco_count: int
    total: int
    score: float
    carbon_saved: float


class EcoModuleBreakdown(BaseModel):
    trips: ModuleImpact
    packing: ModuleImpact
    posts: ModuleImpact


class ImpactMetrics(BaseModel):
    trees_equivalent: float
    water_saved_liters: float
    waste_reduced_kg: float


class EcoAlternative(BaseModel):
    name: str
    category: str
    eco_rating: int
    price: float


class EcoImpactDetails(BaseModel):
    module_breakdown: EcoModuleBreakdown
    impact_metrics: ImpactMetrics
    recommendations: list[str]
    eco_alternatives: list[EcoAlternative]


# ============================================================================
# Budget analysis
# ============================================================================


class BudgetAnalysisSummary(BaseModel):
    total_trips: int
    total_budget: float
    avg_budget: float
    max_budget: float
    min_budget: float
    budget_range: float


class BudgetBucket(BaseModel):
    bucket: str
    trips: int
    total: float


class ExpensiveTrip(BaseModel):
    title: str
    destination: str
    budget: float


class DestinationCost(BaseModel):
    destination: str
    trips: int
    total_budget: float
    avg_budget: float


class SeasonalSpend(BaseModel):
    season: str
    trips: int
    total_budget: float
    avg_budget: float


class CostSavings(BaseModel):
    eco_trip_avg_budget: float
    standard_trip_avg_budget: float
    potential_savings: float


class BudgetAnalysisDetails(BaseModel):
    budget_breakdown: list[BudgetBucket]
    expensive_trips: list[ExpensiveTrip]
    destination_costs: list[DestinationCost]
    seasonal_trends: list[SeasonalSpend]
    cost_savings: CostSavings
    recommendations: list[str]


# ============================================================================
# Destination trends
# ============================================================================


class DestinationTrendsSummary(BaseModel):
    total_destinations: int
    top_destinations: list[str]
    emerging_destinations: list[str]
    favorite_destination: Optional[str]
    return_visits: int
    avg_stay_duration: float
    popular_season: Optional[str]
    destination_diversity: float


class DestinationProfile(BaseModel):
    destination: str
    visits: int
    avg_budget: float
    avg_duration: float
    eco_trips: int
    last_visit: Optional[str]


class SeasonCount(BaseModel):
    season: str
    trips: int


class TravelPatterns(BaseModel):
    most_common_trip_type: Optional[str]
    avg_trip_duration: float
    avg_trips_per_month: float
    repeat_destination_rate: float


class DestinationTrendsDetails(BaseModel):
    destination_analysis: list[DestinationProfile]
    seasonal_trends: list[SeasonCount]
    travel_patterns: TravelPatterns
    recommendations: list[str]


# ============================================================================
# Eco inventory
# ============================================================================


class EcoInventorySummary(BaseModel):
    total_products: int
    eco_products: int
    trending_products: int
    avg_eco_rating: float
    total_brands: int
    total_categories: int
    sustainability_score: float
    in_stock_products: int


class ProductCategoryStats(BaseModel):
    category: str
    products: int
    eco_products: int
    avg_rating: float
    avg_price: float


class PriceAnalysis(BaseModel):
    avg_price: float
    min_price: float
    max_price: float
    eco_avg_price: float
    standard_avg_price: float


class InventoryEcoImpact(BaseModel):
    eco_products: int
    eco_share: float
    high_impact_categories: list[str]


class ProductSnapshot(BaseModel):
    name: str
    brand: Optional[str]
    category: str
    eco_rating: int
    price: float


class EcoInventoryDetails(BaseModel):
    category_breakdown: list[ProductCategoryStats]
    top_brands: list[RankedEntry]
    price_analysis: PriceAnalysis
    eco_impact: InventoryEcoImpact
    top_rated_products: list[ProductSnapshot]
    recommendations: list[str]


# ============================================================================
# News section
# ============================================================================


class NewsSectionSummary(BaseModel):
    total_news: int
    total_sources: int
    active_sources: int
    avg_articles_per_day: float
    recent_articles: int
    top_source: Optional[str]
    latest_update: Optional[str]


class SourceShare(BaseModel):
    source: str
    articles: int
    share: float


class MonthlyCount(BaseModel):
    month: str
    articles: int


class ContentInsights(BaseModel):
    avg_title_length: float
    avg_description_length: float
    with_images: int
    with_full_content: int


class NewsSectionDetails(BaseModel):
    top_categories: list[RankedEntry]
    trending_topics: list[RankedEntry]
    source_breakdown: list[SourceShare]
    timeline_analysis: list[MonthlyCount]
    content_insights: ContentInsights
    recommendations: list[str]


REPORT_PAYLOAD_MODELS: dict[ReportType, tuple[type[BaseModel], type[BaseModel]]] = {
    ReportType.TRIP_ANALYTICS: (TripAnalyticsSummary, TripAnalyticsDetails),
    ReportType.PACKING_STATISTICS: (PackingStatisticsSummary, PackingStatisticsDetails),
    ReportType.USER_ACTIVITY: (UserActivitySummary, UserActivityDetails),
    ReportType.ECO_IMPACT: (EcoImpactSummary, EcoImpactDetails),
    ReportType.BUDGET_ANALYSIS: (BudgetAnalysisSummary, BudgetAnalysisDetails),
    ReportType.DESTINATION_TRENDS: (DestinationTrendsSummary, DestinationTrendsDetails),
    ReportType.ECO_INVENTORY: (EcoInventorySummary, EcoInventoryDetails),
    ReportType.NEWS_SECTION: (NewsSectionSummary, NewsSectionDetails),
}
