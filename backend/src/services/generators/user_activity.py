"""User activity report across trips, packing lists and posts."""

import asyncio

from src.repositories.source_repository import SourceQuery
from src.schemas.report_data import Chart, ChartKind, ReportType
from src.schemas.report_payloads import (
    ActivityEntry,
    RankedEntry,
    UserActivityDetails,
    UserActivitySummary,
)
from src.services.generators.base import GenerationContext, ReportGenerator, is_eco_tagged
from src.services.generators.metrics import (
    frequency,
    group_by_month,
    iso,
    month_label,
    safe_average,
    safe_percentage,
    sort_by_month,
    top_n,
)


class UserActivityGenerator(ReportGenerator):
    report_type = ReportType.USER_ACTIVITY
    summary_model = UserActivitySummary
    details_model = UserActivityDetails

    async def build(self, ctx: GenerationContext):
        query = SourceQuery.from_filters(
            ctx.filters, owner_uid=ctx.owner_uid, date_field="created_at"
        )
        trips, packing_lists, posts, user = await asyncio.gather(
            self.sources.list_trips(query),
            self.sources.list_packing_lists(query),
            self.sources.list_posts(query),
            self.sources.get_user(ctx.owner_uid),
        )

        likes = [p.like_count or 0 for p in posts]
        total_comments = sum(len(p.comments or []) for p in posts)
        ai_lists = sum(1 for pl in packing_lists if pl.is_ai_generated)

        summary = UserActivitySummary(
            total_trips=len(trips),
            total_packing_lists=len(packing_lists),
            total_posts=len(posts),
            total_likes=sum(likes),
            total_comments=total_comments,
            avg_likes_per_post=safe_average(likes),
            eco_posts_shared=sum(1 for p in posts if is_eco_tagged(p.tags)),
            ai_usage_percentage=safe_percentage(ai_lists, len(packing_lists)),
        )

        # Month -> [trips, lists, posts]
        activity: dict[str, list[int]] = {}
        for index, records in enumerate((trips, packing_lists, posts)):
            for record in records:
                if record.created_at is None:
                    continue
                activity.setdefault(month_label(record.created_at), [0, 0, 0])[index] += 1
        activity = sort_by_month(activity)

        posts_by_month = group_by_month(posts, lambda p: p.created_at)

        charts = [
            Chart.from_pairs(
                ChartKind.LINE,
                "Monthly Activity",
                ((month, sum(counts)) for month, counts in activity.items()),
            ),
            Chart.from_pairs(
                ChartKind.PIE,
                "Content Distribution",
                (
                    ("Trips", len(trips)),
                    ("Packing Lists", len(packing_lists)),
                    ("Posts", len(posts)),
                ),
            ),
            Chart.from_pairs(
                ChartKind.LINE,
                "Post Engagement Trend",
                (
                    (
                        month,
                        sum((p.like_count or 0) + len(p.comments or []) for p in month_posts),
                    )
                    for month, month_posts in posts_by_month.items()
                ),
            ),
        ]

        timeline = [("trip", t.title, t.created_at) for t in trips]
        timeline += [("packing_list", pl.title, pl.created_at) for pl in packing_lists]
        timeline += [("post", p.title, p.created_at) for p in posts]
        timeline = [entry for entry in timeline if entry[2] is not None]
        timeline.sort(key=lambda entry: entry[2], reverse=True)

        tag_counts = frequency(tag.lower() for p in posts for tag in (p.tags or []))

        details = UserActivityDetails(
            recent_activity=[
                ActivityEntry(kind=kind, title=title, created_at=iso(created_at))
                for kind, title, created_at in timeline[: ctx.recent_limit]
            ],
            engagement_rate=round(
                (summary.total_likes + total_comments) / len(posts), 2
            ) if posts else 0,
            member_since=iso(user.created_at) if user is not None else None,
            top_tags=[RankedEntry(name=n, count=c) for n, c in top_n(tag_counts, ctx.top_n)],
            recommendations=self._recommendations(summary),
        )
        return summary, charts, details

    @staticmethod
    def _recommendations(summary: UserActivitySummary) -> list[str]:
        tips: list[str] = []
        if summary.total_trips == 0:
            tips.append("Plan a trip to start building your travel history")
        if summary.total_packing_lists < summary.total_trips:
            tips.append("Create packing lists for your upcoming trips to stay organised")
        if summary.total_posts == 0:
            tips.append("Share your travel stories with the community")
        elif summary.avg_likes_per_post < 5:
            tips.append("Add photos and tags to your posts to boost engagement")
        if summary.total_posts and summary.eco_posts_shared == 0:
            tips.append("Share your eco-friendly travel tips to inspire others")
        if not tips:
            tips.append("You're a highly engaged member - keep exploring and sharing!")
        return tips
