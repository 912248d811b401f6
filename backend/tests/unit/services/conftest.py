"""Fixtures for service unit tests: source records and a mocked source repository."""

import pytest
from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

from src.models.packing_list import PackingList
from src.schemas.report_data import ReportFilters
from src.services.generators import GenerationContext

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def _dt(year, month, day):
    return datetime(year, month, day, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_trip():
    def _make(
        destination="Lisbon",
        budget=100.0,
        start=_dt(2025, 1, 10),
        end=None,
        duration_days=3,
        trip_type="Solo",
        is_eco_friendly=False,
        eco_score=50.0,
        carbon_footprint=10.0,
        carbon_saved=2.0,
        title=None,
    ):
        return SimpleNamespace(
            title=title or f"Trip to {destination}",
            destination=destination,
            trip_type=trip_type,
            start_date=start,
            end_date=end or start,
            duration_days=duration_days,
            budget=budget,
            is_eco_friendly=is_eco_friendly,
            eco_score=eco_score,
            carbon_footprint=carbon_footprint,
            carbon_saved=carbon_saved,
            created_at=start,
        )

    return _make


@pytest.fixture
def make_packing_list():
    def _make(title="Beach", categories=None, is_ai_generated=False, created_at=_dt(2025, 1, 5)):
        return PackingList(
            title=title,
            categories=categories or [],
            is_ai_generated=is_ai_generated,
            created_at=created_at,
        )

    return _make


@pytest.fixture
def make_post():
    def _make(title="Post", tags=None, like_count=0, comments=None, created_at=_dt(2025, 1, 20)):
        return SimpleNamespace(
            title=title,
            tags=tags or [],
            like_count=like_count,
            comments=comments or [],
            created_at=created_at,
        )

    return _make


@pytest.fixture
def make_product():
    def _make(
        name="Bottle",
        category="Hydration",
        brand="GreenCo",
        eco_rating=5,
        price=20.0,
        is_available=True,
    ):
        return SimpleNamespace(
            name=name,
            category=category,
            brand=brand,
            eco_rating=eco_rating,
            price=price,
            is_available=is_available,
            created_at=_dt(2025, 1, 1),
        )

    return _make


@pytest.fixture
def make_news():
    def _make(
        title="Rail travel booms",
        source_id="bbc",
        tags=None,
        published_at=_dt(2025, 6, 10),
        description="desc",
        image=None,
        content=None,
    ):
        return SimpleNamespace(
            title=title,
            source_id=source_id,
            tags=tags or [],
            published_at=published_at,
            description=description,
            image=image,
            content=content,
        )

    return _make


@pytest.fixture
def mock_sources():
    """SourceRepository double returning empty collections by default."""
    sources = AsyncMock()
    sources.list_trips = AsyncMock(return_value=[])
    sources.list_packing_lists = AsyncMock(return_value=[])
    sources.list_posts = AsyncMock(return_value=[])
    sources.list_products = AsyncMock(return_value=[])
    sources.list_news = AsyncMock(return_value=[])
    sources.get_user = AsyncMock(return_value=None)
    return sources


@pytest.fixture
def make_ctx(now):
    def _make(filters=None, top_n=10, recent_limit=10):
        return GenerationContext(
            owner_uid="user_1",
            filters=filters or ReportFilters(),
            now=now,
            top_n=top_n,
            recent_limit=recent_limit,
        )

    return _make
