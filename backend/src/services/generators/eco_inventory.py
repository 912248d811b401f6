"""Eco inventory report over the product catalogue."""

from src.repositories.source_repository import SourceQuery
from src.schemas.report_data import Chart, ChartKind, ReportType
from src.schemas.report_payloads import (
    EcoInventoryDetails,
    EcoInventorySummary,
    InventoryEcoImpact,
    PriceAnalysis,
    ProductCategoryStats,
    ProductSnapshot,
    RankedEntry,
)
from src.services.generators.base import GenerationContext, ReportGenerator
from src.services.generators.metrics import (
    frequency,
    round2,
    safe_average,
    safe_max,
    safe_min,
    safe_percentage,
    top_n,
)

ECO_MIN_RATING = 4
TRENDING_RATING = 5
RATING_SCALE = (1, 2, 3, 4, 5)


class EcoInventoryGenerator(ReportGenerator):
    report_type = ReportType.ECO_INVENTORY
    summary_model = EcoInventorySummary
    details_model = EcoInventoryDetails

    async def build(self, ctx: GenerationContext):
        # Catalogue-wide: not scoped to the requesting user
        query = SourceQuery.from_filters(
            ctx.filters,
            date_field="created_at",
            category_field="category",
            numeric_field="price",
            text_field="name",
        )
        products = list(await self.sources.list_products(query))

        eco = [p for p in products if (p.eco_rating or 0) >= ECO_MIN_RATING]
        trending = [
            p for p in products if p.is_available and (p.eco_rating or 0) >= TRENDING_RATING
        ]
        in_stock = [p for p in products if p.is_available]
        brands = frequency(p.brand for p in products)
        categories: dict[str, list] = {}
        for product in products:
            categories.setdefault(product.category or "Other", []).append(product)

        summary = EcoInventorySummary(
            total_products=len(products),
            eco_products=len(eco),
            trending_products=len(trending),
            avg_eco_rating=safe_average(p.eco_rating for p in products),
            total_brands=len(brands),
            total_categories=len(categories),
            sustainability_score=safe_percentage(len(eco), len(products)),
            in_stock_products=len(in_stock),
        )

        ratings = frequency(p.eco_rating for p in products)
        charts = [
            Chart.from_pairs(
                ChartKind.PIE,
                "Product Category Distribution",
                ((name, len(items)) for name, items in categories.items()),
            ),
            Chart.from_pairs(
                ChartKind.BAR,
                "Eco Rating Distribution",
                ((f"{r} Star", ratings.get(r, 0)) for r in RATING_SCALE),
            ),
            Chart.from_pairs(
                ChartKind.DOUGHNUT,
                "Product Availability",
                (("In Stock", len(in_stock)), ("Out of Stock", len(products) - len(in_stock))),
            ),
            Chart.from_pairs(
                ChartKind.BAR,
                "Average Price by Category",
                ((name, safe_average(p.price for p in items)) for name, items in categories.items()),
            ),
        ]

        prices = [float(p.price or 0) for p in products]
        category_stats = [
            ProductCategoryStats(
                category=name,
                products=len(items),
                eco_products=sum(1 for p in items if (p.eco_rating or 0) >= ECO_MIN_RATING),
                avg_rating=safe_average(p.eco_rating for p in items),
                avg_price=safe_average(p.price for p in items),
            )
            for name, items in categories.items()
        ]
        top_rated = sorted(products, key=lambda p: p.eco_rating or 0, reverse=True)

        details = EcoInventoryDetails(
            category_breakdown=category_stats,
            top_brands=[RankedEntry(name=n, count=c) for n, c in top_n(brands, ctx.top_n)],
            price_analysis=PriceAnalysis(
                avg_price=safe_average(prices),
                min_price=safe_min(prices),
                max_price=safe_max(prices),
                eco_avg_price=safe_average(p.price for p in eco),
                standard_avg_price=safe_average(
                    p.price for p in products if (p.eco_rating or 0) < ECO_MIN_RATING
                ),
            ),
            eco_impact=InventoryEcoImpact(
                eco_products=len(eco),
                eco_share=summary.sustainability_score,
                high_impact_categories=[
                    stats.category
                    for stats in category_stats
                    if safe_percentage(stats.eco_products, stats.products) >= 50
                ],
            ),
            top_rated_products=[
                ProductSnapshot(
                    name=p.name,
                    brand=p.brand,
                    category=p.category,
                    eco_rating=p.eco_rating,
                    price=round2(p.price or 0),
                )
                for p in top_rated[:5]
            ],
            recommendations=self._recommendations(summary),
        )
        return summary, charts, details

    @staticmethod
    def _recommendations(summary: EcoInventorySummary) -> list[str]:
        if summary.total_products == 0:
            return ["No products match these filters - widen the price range or category"]

        tips: list[str] = []
        if summary.sustainability_score < 50:
            tips.append("Expand the catalogue with more products rated 4 stars or higher")
        if summary.in_stock_products < summary.total_products * 0.8:
            tips.append("Restock popular eco products to keep availability above 80%")
        if summary.total_brands < 5:
            tips.append("Partner with more sustainable brands to diversify the range")
        if not tips:
            tips.append("The eco inventory is healthy and well stocked")
        return tips
