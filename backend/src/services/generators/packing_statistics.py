"""Packing statistics report: completion, eco items and AI suggestions."""

from collections import Counter

from src.repositories.source_repository import SourceQuery
from src.schemas.report_data import Chart, ChartKind, ReportType
from src.schemas.report_payloads import (
    CompletionTrendEntry,
    PackingCategoryStats,
    PackingListSnapshot,
    PackingStatisticsDetails,
    PackingStatisticsSummary,
    RankedEntry,
)
from src.services.generators.base import GenerationContext, ReportGenerator
from src.services.generators.metrics import (
    group_by_month,
    iso,
    safe_average,
    safe_percentage,
    top_n,
)


def _item_name(item: dict) -> str:
    return (item.get("name") or "").strip()


class PackingStatisticsGenerator(ReportGenerator):
    report_type = ReportType.PACKING_STATISTICS
    summary_model = PackingStatisticsSummary
    details_model = PackingStatisticsDetails

    async def build(self, ctx: GenerationContext):
        query = SourceQuery.from_filters(
            ctx.filters,
            owner_uid=ctx.owner_uid,
            date_field="created_at",
            text_field="title",
        )
        lists = list(await self.sources.list_packing_lists(query))

        category_filter = (ctx.filters.category or "").lower()

        def items_of(packing_list):
            return [
                (category, item)
                for category, item in packing_list.iter_items()
                if not category_filter or category.lower() == category_filter
            ]

        per_list = [(pl, items_of(pl)) for pl in lists]
        all_items = [pair for _, pairs in per_list for pair in pairs]

        total_items = len(all_items)
        checked = sum(1 for _, item in all_items if item.get("checked"))
        eco = sum(1 for _, item in all_items if item.get("eco"))
        ai_items = sum(1 for _, item in all_items if item.get("suggested_by_ai"))

        summary = PackingStatisticsSummary(
            total_packing_lists=len(lists),
            total_items=total_items,
            checked_items=checked,
            completion_rate=safe_percentage(checked, total_items),
            eco_items=eco,
            eco_percentage=safe_percentage(eco, total_items),
            ai_generated_items=ai_items,
            ai_usage_percentage=safe_percentage(ai_items, total_items),
            avg_items_per_list=safe_average(len(pairs) for _, pairs in per_list),
        )

        # Per category: [total, checked, eco], insertion order = first occurrence
        categories: dict[str, list[int]] = {}
        for category, item in all_items:
            stats = categories.setdefault(category, [0, 0, 0])
            stats[0] += 1
            stats[1] += 1 if item.get("checked") else 0
            stats[2] += 1 if item.get("eco") else 0

        item_counts = Counter(_item_name(i) for _, i in all_items if _item_name(i))
        eco_counts = Counter(
            _item_name(i) for _, i in all_items if i.get("eco") and _item_name(i)
        )
        ranked_items = top_n(item_counts, ctx.top_n)

        charts = [
            Chart.from_pairs(
                ChartKind.BAR,
                "Items by Category",
                ((name, stats[0]) for name, stats in categories.items()),
            ),
            Chart.from_pairs(
                ChartKind.BAR,
                "Completion Rate by Category",
                ((name, safe_percentage(stats[1], stats[0])) for name, stats in categories.items()),
            ),
            Chart.from_pairs(
                ChartKind.PIE,
                "Eco vs Standard Items",
                (("Eco-Friendly", eco), ("Standard", total_items - eco)),
            ),
            Chart.from_pairs(ChartKind.BAR, "Most Common Items", ranked_items),
        ]

        by_month = group_by_month(per_list, lambda entry: entry[0].created_at)
        trends = []
        for month, entries in by_month.items():
            month_items = [item for _, pairs in entries for _, item in pairs]
            month_checked = sum(1 for item in month_items if item.get("checked"))
            trends.append(
                CompletionTrendEntry(
                    month=month,
                    lists=len(entries),
                    completion_rate=safe_percentage(month_checked, len(month_items)),
                )
            )

        recent = sorted(per_list, key=lambda entry: entry[0].created_at, reverse=True)
        details = PackingStatisticsDetails(
            top_items=[RankedEntry(name=n, count=c) for n, c in ranked_items],
            top_eco_items=[RankedEntry(name=n, count=c) for n, c in top_n(eco_counts, ctx.top_n)],
            category_breakdown=[
                PackingCategoryStats(
                    category=name,
                    total_items=stats[0],
                    checked_items=stats[1],
                    eco_items=stats[2],
                    completion_rate=safe_percentage(stats[1], stats[0]),
                )
                for name, stats in categories.items()
            ],
            completion_trends=trends,
            recommendations=self._recommendations(summary),
            recent_lists=[
                PackingListSnapshot(
                    title=pl.title,
                    total_items=len(pairs),
                    completion_rate=safe_percentage(
                        sum(1 for _, item in pairs if item.get("checked")), len(pairs)
                    ),
                    is_ai_generated=bool(pl.is_ai_generated),
                    created_at=iso(pl.created_at),
                )
                for pl, pairs in recent[: ctx.recent_limit]
            ],
        )
        return summary, charts, details

    @staticmethod
    def _recommendations(summary: PackingStatisticsSummary) -> list[str]:
        if summary.total_packing_lists == 0:
            return ["Create a packing list for your next trip to start tracking your packing habits"]

        tips: list[str] = []
        if summary.completion_rate < 60:
            tips.append("Check items off as you pack so nothing gets left behind")
        if summary.eco_percentage < 30:
            tips.append("Swap single-use items for reusable alternatives to raise your eco share")
        if summary.ai_usage_percentage < 20:
            tips.append("Try AI packing suggestions tailored to your destination and weather")
        if summary.avg_items_per_list > 40:
            tips.append("Your lists are long - consider packing lighter to cut travel emissions")
        if not tips:
            tips.append("Great packing discipline! Keep your lists complete and eco-conscious")
        return tips
