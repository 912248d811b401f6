"""Destination trends report: favourite, emerging and seasonal destinations."""

from src.schemas.report_data import Chart, ChartKind, ReportType
from src.schemas.report_payloads import (
    DestinationProfile,
    DestinationTrendsDetails,
    DestinationTrendsSummary,
    SeasonCount,
    TravelPatterns,
)
from src.services.generators.base import (
    GenerationContext,
    ReportGenerator,
    trip_budget,
    trip_duration,
    trip_query,
)
from src.services.generators.metrics import (
    SEASONS,
    frequency,
    group_by_month,
    iso,
    most_frequent,
    return_visits,
    safe_average,
    safe_percentage,
    season_of,
    top_n,
    within_days,
)

EMERGING_WINDOW_DAYS = 90
SUMMARY_TOP_DESTINATIONS = 5


class DestinationTrendsGenerator(ReportGenerator):
    report_type = ReportType.DESTINATION_TRENDS
    summary_model = DestinationTrendsSummary
    details_model = DestinationTrendsDetails

    async def build(self, ctx: GenerationContext):
        trips = list(await self.sources.list_trips(trip_query(ctx)))

        visits = frequency(t.destination for t in trips)
        ranked = top_n(visits, ctx.top_n)

        # Trips arrive ordered by start date, so the first one seen is the first visit
        first_visit = {}
        for trip in trips:
            first_visit.setdefault(trip.destination, trip.start_date)
        emerging = [
            name
            for name, first in first_visit.items()
            if within_days(first, ctx.now, EMERGING_WINDOW_DAYS)
        ]

        seasons = frequency(season_of(t.start_date) for t in trips if t.start_date is not None)

        summary = DestinationTrendsSummary(
            total_destinations=len(visits),
            top_destinations=[name for name, _ in ranked[:SUMMARY_TOP_DESTINATIONS]],
            emerging_destinations=emerging,
            favorite_destination=ranked[0][0] if ranked else None,
            return_visits=return_visits(visits),
            avg_stay_duration=safe_average(trip_duration(t) for t in trips),
            popular_season=top_n(seasons, 1)[0][0] if seasons else None,
            destination_diversity=safe_percentage(len(visits), len(trips)),
        )

        type_counts = frequency(t.trip_type for t in trips)
        by_month = group_by_month(trips, lambda t: t.start_date)

        charts = [
            Chart.from_pairs(ChartKind.BAR, "Top Destinations", ranked),
            Chart.from_pairs(
                ChartKind.BAR,
                "Seasonal Travel",
                ((season, seasons.get(season, 0)) for season in SEASONS),
            ),
            Chart.from_pairs(ChartKind.PIE, "Trip Types Distribution", type_counts.items()),
            Chart.from_pairs(
                ChartKind.LINE,
                "Destination Visits Over Time",
                ((month, len({t.destination for t in items})) for month, items in by_month.items()),
            ),
        ]

        profiles = []
        for name, count in ranked:
            visits_to = [t for t in trips if t.destination == name]
            profiles.append(
                DestinationProfile(
                    destination=name,
                    visits=count,
                    avg_budget=safe_average(trip_budget(t) for t in visits_to),
                    avg_duration=safe_average(trip_duration(t) for t in visits_to),
                    eco_trips=sum(1 for t in visits_to if t.is_eco_friendly),
                    last_visit=iso(max((t.start_date for t in visits_to), default=None)),
                )
            )

        details = DestinationTrendsDetails(
            destination_analysis=profiles,
            seasonal_trends=[
                SeasonCount(season=season, trips=seasons.get(season, 0)) for season in SEASONS
            ],
            travel_patterns=TravelPatterns(
                most_common_trip_type=most_frequent(t.trip_type for t in trips),
                avg_trip_duration=summary.avg_stay_duration,
                avg_trips_per_month=safe_average(len(items) for items in by_month.values()),
                repeat_destination_rate=safe_percentage(summary.return_visits, len(visits)),
            ),
            recommendations=self._recommendations(summary),
        )
        return summary, charts, details

    @staticmethod
    def _recommendations(summary: DestinationTrendsSummary) -> list[str]:
        if summary.total_destinations == 0:
            return ["Log your trips to discover your destination trends"]

        tips: list[str] = []
        if summary.destination_diversity < 50:
            tips.append("You often return to the same places - try a new destination next time")
        if summary.popular_season:
            off_season = [s for s in SEASONS if s != summary.popular_season]
            tips.append(
                f"Most of your travel happens in {summary.popular_season}; "
                f"{off_season[0]} trips are often quieter and cheaper"
            )
        if summary.emerging_destinations:
            tips.append(
                f"New on your map: {', '.join(summary.emerging_destinations[:3])}"
            )
        return tips
