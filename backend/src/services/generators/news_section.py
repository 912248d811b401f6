"""News section report: article volume, sources and trending topics."""

from src.repositories.source_repository import SourceQuery
from src.schemas.report_data import Chart, ChartKind, ReportType
from src.schemas.report_payloads import (
    ContentInsights,
    MonthlyCount,
    NewsSectionDetails,
    NewsSectionSummary,
    RankedEntry,
    SourceShare,
)
from src.services.generators.base import GenerationContext, ReportGenerator
from src.services.generators.metrics import (
    frequency,
    group_by_month,
    iso,
    round2,
    safe_average,
    safe_percentage,
    top_n,
    within_days,
)

RECENT_DAYS = 7
TRENDING_DAYS = 30


class NewsSectionGenerator(ReportGenerator):
    report_type = ReportType.NEWS_SECTION
    summary_model = NewsSectionSummary
    details_model = NewsSectionDetails

    async def build(self, ctx: GenerationContext):
        query = SourceQuery.from_filters(
            ctx.filters,
            date_field="published_at",
            category_field="source_id",
            text_field="title",
        )
        articles = list(await self.sources.list_news(query))

        sources = frequency(a.source_id for a in articles)
        recent = [a for a in articles if within_days(a.published_at, ctx.now, RECENT_DAYS)]
        active_sources = {a.source_id for a in recent}
        ranked_sources = top_n(sources, ctx.top_n)

        published = [a.published_at for a in articles if a.published_at is not None]
        if ctx.filters.date_range is not None:
            span_days = (ctx.filters.date_range.end - ctx.filters.date_range.start).days + 1
        elif published:
            span_days = (max(published).date() - min(published).date()).days + 1
        else:
            span_days = 0

        summary = NewsSectionSummary(
            total_news=len(articles),
            total_sources=len(sources),
            active_sources=len(active_sources),
            avg_articles_per_day=round2(len(articles) / span_days) if span_days else 0,
            recent_articles=len(recent),
            top_source=ranked_sources[0][0] if ranked_sources else None,
            latest_update=iso(max(published)) if published else None,
        )

        tags = frequency(tag.lower() for a in articles for tag in (a.tags or []))
        trending = frequency(
            tag.lower()
            for a in articles
            if within_days(a.published_at, ctx.now, TRENDING_DAYS)
            for tag in (a.tags or [])
        )
        by_month = group_by_month(articles, lambda a: a.published_at)

        charts = [
            Chart.from_pairs(
                ChartKind.LINE,
                "Articles Per Month",
                ((month, len(items)) for month, items in by_month.items()),
            ),
            Chart.from_pairs(ChartKind.PIE, "Source Distribution", ranked_sources),
            Chart.from_pairs(ChartKind.BAR, "Trending Topics", top_n(trending, ctx.top_n)),
        ]

        details = NewsSectionDetails(
            top_categories=[RankedEntry(name=n, count=c) for n, c in top_n(tags, ctx.top_n)],
            trending_topics=[
                RankedEntry(name=n, count=c) for n, c in top_n(trending, ctx.top_n)
            ],
            source_breakdown=[
                SourceShare(
                    source=name,
                    articles=count,
                    share=safe_percentage(count, len(articles)),
                )
                for name, count in ranked_sources
            ],
            timeline_analysis=[
                MonthlyCount(month=month, articles=len(items)) for month, items in by_month.items()
            ],
            content_insights=ContentInsights(
                avg_title_length=safe_average(len(a.title or "") for a in articles),
                avg_description_length=safe_average(len(a.description or "") for a in articles),
                with_images=sum(1 for a in articles if a.image),
                with_full_content=sum(1 for a in articles if a.content),
            ),
            recommendations=self._recommendations(summary),
        )
        return summary, charts, details

    @staticmethod
    def _recommendations(summary: NewsSectionSummary) -> list[str]:
        if summary.total_news == 0:
            return ["No articles in this period - refresh news sources or widen the date range"]

        tips: list[str] = []
        if summary.recent_articles == 0:
            tips.append("No articles this week - check that news ingestion is running")
        if summary.total_sources < 3:
            tips.append("Add more news sources for broader travel coverage")
        if summary.active_sources < summary.total_sources:
            tips.append("Some sources have gone quiet - review inactive feeds")
        if not tips:
            tips.append("News coverage is fresh and well diversified")
        return tips
