"""Read-only access to the collections reports aggregate over."""

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.models.news import News
from src.models.packing_list import PackingList
from src.models.post import Post
from src.models.product import Product
from src.models.trip import Trip
from src.models.user import User
from src.schemas.report_data import ReportFilters
from src.utils.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class SourceQuery:
    """
    Column-level predicate set for one source read.

    Each filter only applies when its target column is named; ``end`` is
    exclusive so a calendar date range maps to ``[start, end + 1 day)``.
    """

    owner_uid: Optional[str] = None
    date_field: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    category_field: Optional[str] = None
    category: Optional[str] = None
    numeric_field: Optional[str] = None
    numeric_min: Optional[float] = None
    numeric_max: Optional[float] = None
    text_field: Optional[str] = None
    text: Optional[str] = None

    @classmethod
    def from_filters(
        cls,
        filters: ReportFilters,
        *,
        owner_uid: Optional[str] = None,
        date_field: Optional[str] = None,
        category_field: Optional[str] = None,
        numeric_field: Optional[str] = None,
        text_field: Optional[str] = None,
    ) -> "SourceQuery":
        start = end = None
        if filters.date_range is not None and date_field:
            start = datetime.combine(filters.date_range.start, time.min, tzinfo=timezone.utc)
            end = datetime.combine(
                filters.date_range.end + timedelta(days=1), time.min, tzinfo=timezone.utc
            )

        numeric_min = numeric_max = None
        if filters.numeric_range is not None and numeric_field:
            numeric_min = filters.numeric_range.min
            numeric_max = filters.numeric_range.max

        return cls(
            owner_uid=owner_uid,
            date_field=date_field if start is not None else None,
            start=start,
            end=end,
            category_field=category_field if filters.category else None,
            category=filters.category if category_field else None,
            numeric_field=numeric_field if filters.numeric_range is not None else None,
            numeric_min=numeric_min,
            numeric_max=numeric_max,
            text_field=text_field if filters.destination else None,
            text=filters.destination if text_field else None,
        )


class SourceRepository:
    """
    Fetches trips, packing lists, posts, products, news and users.

    Every read opens its own session so independent reads can be awaited
    concurrently with ``asyncio.gather``.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @staticmethod
    def _apply(stmt, model, query: SourceQuery):
        if query.owner_uid is not None:
            stmt = stmt.where(model.owner_uid == query.owner_uid)
        if query.date_field:
            column = getattr(model, query.date_field)
            stmt = stmt.where(column >= query.start, column < query.end)
        if query.category_field and query.category is not None:
            stmt = stmt.where(getattr(model, query.category_field) == query.category)
        if query.numeric_field:
            column = getattr(model, query.numeric_field)
            if query.numeric_min is not None:
                stmt = stmt.where(column >= query.numeric_min)
            if query.numeric_max is not None:
                stmt = stmt.where(column <= query.numeric_max)
        if query.text_field and query.text:
            # Literal substring: % and _ in user input are escaped
            column = getattr(model, query.text_field)
            stmt = stmt.where(column.icontains(query.text, autoescape=True))
        return stmt

    async def _fetch(self, model, query: SourceQuery, order_by: str) -> list:
        stmt = self._apply(select(model), model, query)
        stmt = stmt.order_by(getattr(model, order_by).asc(), model.id.asc())
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = list(result.scalars().all())
        log.debug("source query", model=model.__tablename__, count=len(rows))
        return rows

    async def list_trips(self, query: SourceQuery) -> Sequence[Trip]:
        return await self._fetch(Trip, query, order_by="start_date")

    async def list_packing_lists(self, query: SourceQuery) -> Sequence[PackingList]:
        return await self._fetch(PackingList, query, order_by="created_at")

    async def list_posts(self, query: SourceQuery) -> Sequence[Post]:
        return await self._fetch(Post, query, order_by="created_at")

    async def list_products(self, query: SourceQuery) -> Sequence[Product]:
        return await self._fetch(Product, query, order_by="created_at")

    async def list_news(self, query: SourceQuery) -> Sequence[News]:
        return await self._fetch(News, query, order_by="published_at")

    async def get_user(self, uid: str) -> Optional[User]:
        async with self._session_factory() as session:
            result = await session.execute(select(User).where(User.uid == uid))
            return result.scalar_one_or_none()
