"""Budget analysis report: spending by month, trip type, season and destination."""

from src.schemas.report_data import Chart, ChartKind, ReportType
from src.schemas.report_payloads import (
    BudgetAnalysisDetails,
    BudgetAnalysisSummary,
    BudgetBucket,
    CostSavings,
    DestinationCost,
    ExpensiveTrip,
    SeasonalSpend,
)
from src.services.generators.base import (
    GenerationContext,
    ReportGenerator,
    trip_budget,
    trip_query,
)
from src.services.generators.metrics import (
    BUDGET_BUCKETS,
    SEASONS,
    budget_bucket,
    group_by_month,
    round2,
    safe_average,
    safe_max,
    safe_min,
    safe_sum,
    season_of,
)


class BudgetAnalysisGenerator(ReportGenerator):
    report_type = ReportType.BUDGET_ANALYSIS
    summary_model = BudgetAnalysisSummary
    details_model = BudgetAnalysisDetails

    async def build(self, ctx: GenerationContext):
        trips = list(await self.sources.list_trips(trip_query(ctx)))
        # Trips without a positive budget don't contribute to money aggregates
        funded = [t for t in trips if trip_budget(t) > 0]
        budgets = [trip_budget(t) for t in funded]

        max_budget = safe_max(budgets)
        min_budget = safe_min(budgets)
        summary = BudgetAnalysisSummary(
            total_trips=len(funded),
            total_budget=safe_sum(budgets),
            avg_budget=safe_average(budgets),
            max_budget=max_budget,
            min_budget=min_budget,
            budget_range=round2(max_budget - min_budget),
        )

        by_month = group_by_month(funded, lambda t: t.start_date)

        by_type: dict[str, list[float]] = {}
        by_destination: dict[str, list[float]] = {}
        by_bucket: dict[str, list[float]] = {label: [] for label, _, _ in BUDGET_BUCKETS}
        by_season: dict[str, list[float]] = {season: [] for season in SEASONS}
        for trip in funded:
            amount = trip_budget(trip)
            by_type.setdefault(trip.trip_type, []).append(amount)
            by_destination.setdefault(trip.destination, []).append(amount)
            by_bucket[budget_bucket(amount)].append(amount)
            if trip.start_date is not None:
                by_season[season_of(trip.start_date)].append(amount)

        destination_costs = sorted(
            by_destination.items(), key=lambda kv: sum(kv[1]), reverse=True
        )

        charts = [
            Chart.from_pairs(
                ChartKind.LINE,
                "Monthly Spending Trends",
                ((month, safe_sum(trip_budget(t) for t in items)) for month, items in by_month.items()),
            ),
            Chart.from_pairs(
                ChartKind.BAR,
                "Average Budget by Trip Type",
                ((trip_type, safe_average(amounts)) for trip_type, amounts in by_type.items()),
            ),
            Chart.from_pairs(
                ChartKind.DOUGHNUT,
                "Budget Distribution",
                ((label, len(amounts)) for label, amounts in by_bucket.items()),
            ),
            Chart.from_pairs(
                ChartKind.BAR,
                "Top Destinations by Spend",
                ((name, safe_sum(amounts)) for name, amounts in destination_costs[: ctx.top_n]),
            ),
        ]

        eco_avg = safe_average(trip_budget(t) for t in funded if t.is_eco_friendly)
        standard_avg = safe_average(trip_budget(t) for t in funded if not t.is_eco_friendly)
        expensive = sorted(funded, key=trip_budget, reverse=True)[:5]

        details = BudgetAnalysisDetails(
            budget_breakdown=[
                BudgetBucket(bucket=label, trips=len(amounts), total=safe_sum(amounts))
                for label, amounts in by_bucket.items()
            ],
            expensive_trips=[
                ExpensiveTrip(title=t.title, destination=t.destination, budget=trip_budget(t))
                for t in expensive
            ],
            destination_costs=[
                DestinationCost(
                    destination=name,
                    trips=len(amounts),
                    total_budget=safe_sum(amounts),
                    avg_budget=safe_average(amounts),
                )
                for name, amounts in destination_costs[: ctx.top_n]
            ],
            seasonal_trends=[
                SeasonalSpend(
                    season=season,
                    trips=len(amounts),
                    total_budget=safe_sum(amounts),
                    avg_budget=safe_average(amounts),
                )
                for season, amounts in by_season.items()
            ],
            cost_savings=CostSavings(
                eco_trip_avg_budget=eco_avg,
                standard_trip_avg_budget=standard_avg,
                potential_savings=round2(max(standard_avg - eco_avg, 0)) if eco_avg else 0,
            ),
            recommendations=self._recommendations(summary, by_season),
        )
        return summary, charts, details

    @staticmethod
    def _recommendations(
        summary: BudgetAnalysisSummary, by_season: dict[str, list[float]]
    ) -> list[str]:
        if summary.total_trips == 0:
            return ["Add budgets to your trips to unlock spending insights"]

        tips: list[str] = []
        if summary.avg_budget > 2000:
            tips.append("Consider shorter or closer trips to bring your average spend down")
        if summary.budget_range > summary.avg_budget * 2:
            tips.append("Your trip budgets vary widely - set a target budget before booking")

        priced = {s: safe_average(a) for s, a in by_season.items() if a}
        if len(priced) > 1:
            cheapest = min(priced, key=priced.get)
            tips.append(f"{cheapest} has been your most affordable season to travel")
        if not tips:
            tips.append("Your spending is consistent - keep tracking budgets for every trip")
        return tips
