"""Trip analytics report: counts, budgets, durations, destinations, carbon."""

from src.schemas.report_data import Chart, ChartKind, ReportType
from src.schemas.report_payloads import (
    EcoImpactBreakdown,
    MonthlyTripEntry,
    RankedEntry,
    TripAnalyticsDetails,
    TripAnalyticsSummary,
    TripSnapshot,
)
from src.services.generators.base import (
    GenerationContext,
    ReportGenerator,
    trip_budget,
    trip_duration,
    trip_query,
)
from src.services.generators.metrics import (
    BUDGET_BUCKETS,
    budget_bucket,
    frequency,
    group_by_month,
    iso,
    return_visits,
    safe_average,
    safe_max,
    safe_min,
    safe_percentage,
    safe_sum,
    top_n,
)

TRIP_TYPES = ("Solo", "Couple", "Family", "Group")


class TripAnalyticsGenerator(ReportGenerator):
    report_type = ReportType.TRIP_ANALYTICS
    summary_model = TripAnalyticsSummary
    details_model = TripAnalyticsDetails

    async def build(self, ctx: GenerationContext):
        trips = list(await self.sources.list_trips(trip_query(ctx)))

        budgets = [trip_budget(t) for t in trips]
        durations = [trip_duration(t) for t in trips]
        destinations = frequency(t.destination for t in trips)
        ranked = top_n(destinations, ctx.top_n)
        eco_trips = [t for t in trips if t.is_eco_friendly]

        summary = TripAnalyticsSummary(
            total_trips=len(trips),
            total_budget=safe_sum(budgets),
            avg_budget=safe_average(budgets),
            max_budget=safe_max(budgets),
            min_budget=safe_min(budgets),
            avg_trip_duration=safe_average(durations),
            # Total days spent per distinct destination
            avg_stay_duration=(
                round(sum(durations) / len(destinations), 2) if destinations else 0
            ),
            unique_destinations=len(destinations),
            favorite_destination=ranked[0][0] if ranked else None,
            return_visits=return_visits(destinations),
            eco_friendly_percentage=safe_percentage(len(eco_trips), len(trips)),
            estimated_carbon_footprint=safe_sum(t.carbon_footprint for t in trips),
            carbon_saved=safe_sum(t.carbon_saved for t in trips),
        )

        by_month = group_by_month(trips, lambda t: t.start_date)
        type_counts = frequency(t.trip_type for t in trips)
        bucket_counts = frequency(budget_bucket(b) for b in budgets)

        charts = [
            Chart.from_pairs(
                ChartKind.BAR,
                "Trips Per Month",
                ((month, len(items)) for month, items in by_month.items()),
            ),
            Chart.from_pairs(
                ChartKind.PIE,
                "Trip Types Distribution",
                ((trip_type, type_counts.get(trip_type, 0)) for trip_type in TRIP_TYPES),
            ),
            Chart.from_pairs(ChartKind.BAR, "Top Destinations", ranked),
            Chart.from_pairs(
                ChartKind.DOUGHNUT,
                "Budget Distribution",
                ((label, bucket_counts.get(label, 0)) for label, _, _ in BUDGET_BUCKETS),
            ),
        ]

        recent = sorted(trips, key=lambda t: t.start_date, reverse=True)[: ctx.recent_limit]
        details = TripAnalyticsDetails(
            top_destinations=[RankedEntry(name=name, count=count) for name, count in ranked],
            monthly_breakdown=[
                MonthlyTripEntry(
                    month=month,
                    trips=len(items),
                    budget=safe_sum(trip_budget(t) for t in items),
                )
                for month, items in by_month.items()
            ],
            eco_impact_breakdown=EcoImpactBreakdown(
                eco_friendly_trips=len(eco_trips),
                standard_trips=len(trips) - len(eco_trips),
                avg_eco_score=safe_average(t.eco_score for t in trips),
                carbon_saved=summary.carbon_saved,
                carbon_footprint=summary.estimated_carbon_footprint,
            ),
            recommendations=self._recommendations(trips, summary),
            recent_trips=[
                TripSnapshot(
                    title=t.title,
                    destination=t.destination,
                    trip_type=t.trip_type,
                    start_date=iso(t.start_date),
                    budget=trip_budget(t),
                    is_eco_friendly=bool(t.is_eco_friendly),
                )
                for t in recent
            ],
        )
        return summary, charts, details

    @staticmethod
    def _recommendations(trips, summary: TripAnalyticsSummary) -> list[str]:
        if not trips:
            return ["Start planning your first trip to unlock personalised travel insights"]

        tips: list[str] = []
        if summary.eco_friendly_percentage < 50:
            tips.append(
                "Consider eco-friendly accommodation options to improve your sustainability score"
            )
        if safe_average(t.eco_score for t in trips) < 70:
            tips.append("Choose trains or buses over short flights to raise your eco score")

        favorite = summary.favorite_destination
        favorite_trips = [t for t in trips if t.destination == favorite]
        if favorite and favorite_trips and all(t.is_eco_friendly for t in favorite_trips):
            tips.append(
                f"Your {favorite} trips show excellent eco-performance - continue this pattern"
            )
        if summary.total_trips >= 5:
            tips.append("You're an active traveler! Consider offsetting your carbon footprint")
        if summary.eco_friendly_percentage >= 75:
            tips.append(
                "Great eco-conscious travel choices! Share your experiences to inspire others"
            )
        return tips
