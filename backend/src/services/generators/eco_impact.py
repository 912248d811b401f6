"""Eco impact report: cross-module sustainability score and carbon savings."""

import asyncio

from src.repositories.source_repository import SourceQuery
from src.schemas.report_data import Chart, ChartKind, ReportType
from src.schemas.report_payloads import (
    EcoAlternative,
    EcoImpactDetails,
    EcoImpactSummary,
    EcoModuleBreakdown,
    ImpactMetrics,
    ModuleImpact,
)
from src.services.generators.base import GenerationContext, ReportGenerator, is_eco_tagged
from src.services.generators.metrics import (
    group_by_month,
    round2,
    safe_percentage,
    safe_sum,
)

ECO_PRODUCT_MIN_RATING = 4

# Module weights of the sustainability score
TRIP_WEIGHT = 0.4
PACKING_WEIGHT = 0.3
POST_WEIGHT = 0.3

# Conversion factors applied to kg of CO2 saved
KG_CO2_PER_TREE = 22
WATER_LITERS_PER_KG_CO2 = 10
WASTE_KG_PER_KG_CO2 = 0.05

# Rough per-item saving for eco packing choices (kg CO2)
ECO_ITEM_CARBON_SAVING = 0.5


def sustainability_rating(score: float) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Fair"
    return "Needs Improvement"


class EcoImpactGenerator(ReportGenerator):
    report_type = ReportType.ECO_IMPACT
    summary_model = EcoImpactSummary
    details_model = EcoImpactDetails

    async def build(self, ctx: GenerationContext):
        owned = SourceQuery.from_filters(
            ctx.filters, owner_uid=ctx.owner_uid, date_field="created_at"
        )
        catalogue = SourceQuery(numeric_field="eco_rating", numeric_min=ECO_PRODUCT_MIN_RATING)

        trips, packing_lists, posts, eco_products = await asyncio.gather(
            self.sources.list_trips(owned),
            self.sources.list_packing_lists(owned),
            self.sources.list_posts(owned),
            self.sources.list_products(catalogue),
        )

        items = [item for pl in packing_lists for _, item in pl.iter_items()]
        eco_trips = [t for t in trips if t.is_eco_friendly]
        eco_items = [item for item in items if item.get("eco")]
        eco_posts = [p for p in posts if is_eco_tagged(p.tags)]

        trip_score = safe_percentage(len(eco_trips), len(trips))
        packing_score = safe_percentage(len(eco_items), len(items))
        post_score = safe_percentage(len(eco_posts), len(posts))
        eco_score = round2(
            trip_score * TRIP_WEIGHT + packing_score * PACKING_WEIGHT + post_score * POST_WEIGHT
        )

        trip_carbon_saved = safe_sum(t.carbon_saved for t in trips)
        packing_carbon_saved = round2(len(eco_items) * ECO_ITEM_CARBON_SAVING)
        total_carbon_saved = round2(trip_carbon_saved + packing_carbon_saved)
        eco_choices = len(eco_trips) + len(eco_items) + len(eco_posts)

        summary = EcoImpactSummary(
            eco_score=eco_score,
            sustainability_rating=sustainability_rating(eco_score),
            total_carbon_saved=total_carbon_saved,
            carbon_footprint=safe_sum(t.carbon_footprint for t in trips),
            eco_friendly_percentage=safe_percentage(
                eco_choices, len(trips) + len(items) + len(posts)
            ),
            eco_choices_count=eco_choices,
            eco_products_available=sum(1 for p in eco_products if p.is_available),
        )

        trips_by_month = group_by_month(trips, lambda t: t.created_at)

        charts = [
            Chart.from_pairs(
                ChartKind.BAR,
                "Carbon Impact by Module",
                (("Trips", trip_carbon_saved), ("Packing", packing_carbon_saved), ("Community", 0)),
            ),
            Chart.from_pairs(
                ChartKind.PIE,
                "Eco Activities",
                (
                    ("Eco Trips", len(eco_trips)),
                    ("Eco Items", len(eco_items)),
                    ("Eco Posts", len(eco_posts)),
                ),
            ),
            Chart.from_pairs(
                ChartKind.LINE,
                "Carbon Impact Over Time",
                (
                    (month, safe_sum(t.carbon_saved for t in month_trips))
                    for month, month_trips in trips_by_month.items()
                ),
            ),
            Chart.from_pairs(
                ChartKind.DOUGHNUT,
                "Sustainability Score Breakdown",
                (("Trips", trip_score), ("Packing", packing_score), ("Community", post_score)),
            ),
        ]

        alternatives = sorted(eco_products, key=lambda p: p.eco_rating, reverse=True)
        details = EcoImpactDetails(
            module_breakdown=EcoModuleBreakdown(
                trips=ModuleImpact(
                    eco_count=len(eco_trips),
                    total=len(trips),
                    score=trip_score,
                    carbon_saved=trip_carbon_saved,
                ),
                packing=ModuleImpact(
                    eco_count=len(eco_items),
                    total=len(items),
                    score=packing_score,
                    carbon_saved=packing_carbon_saved,
                ),
                posts=ModuleImpact(
                    eco_count=len(eco_posts),
                    total=len(posts),
                    score=post_score,
                    carbon_saved=0,
                ),
            ),
            impact_metrics=ImpactMetrics(
                trees_equivalent=round2(total_carbon_saved / KG_CO2_PER_TREE),
                water_saved_liters=round2(total_carbon_saved * WATER_LITERS_PER_KG_CO2),
                waste_reduced_kg=round2(total_carbon_saved * WASTE_KG_PER_KG_CO2),
            ),
            recommendations=self._recommendations(trip_score, packing_score, post_score),
            eco_alternatives=[
                EcoAlternative(
                    name=p.name,
                    category=p.category,
                    eco_rating=p.eco_rating,
                    price=round2(p.price or 0),
                )
                for p in alternatives
                if p.is_available
            ][:5],
        )
        return summary, charts, details

    @staticmethod
    def _recommendations(trip_score: float, packing_score: float, post_score: float) -> list[str]:
        tips: list[str] = []
        if trip_score < 50:
            tips.append("Choose eco-friendly transport and stays for more of your trips")
        if packing_score < 50:
            tips.append("Pack reusable bottles, bags and toiletries to cut single-use waste")
        if post_score < 25:
            tips.append("Share sustainable travel tips with the community")
        if not tips:
            tips.append("Outstanding sustainability record - you're leading by example")
        return tips
