"""Shared pytest fixtures."""

# Clear settings cache before any imports to prevent stale values with coverage
from src.config import get_settings

get_settings.cache_clear()

import pytest
import uuid
from unittest.mock import AsyncMock, Mock
from datetime import datetime, timezone
from types import SimpleNamespace


# Database mocking fixtures


@pytest.fixture
def mock_async_session():
    """Create a mock AsyncSession for repository tests."""
    session = AsyncMock()

    # Mock result object for execute
    mock_result = Mock()
    mock_result.scalar_one_or_none = Mock(return_value=None)
    mock_result.scalar_one = Mock(return_value=0)
    mock_result.scalars = Mock(return_value=Mock(all=Mock(return_value=[])))
    mock_result.all = Mock(return_value=[])

    session.execute = AsyncMock(return_value=mock_result)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = Mock()
    session.delete = AsyncMock()

    return session


@pytest.fixture
def sample_uuid():
    """Return a sample UUID string."""
    return str(uuid.uuid4())


@pytest.fixture
def make_report():
    """Factory for report-shaped objects as the repository returns them."""

    def _make(
        report_type="trip_analytics",
        status="completed",
        owner_uid="user_1",
        title="Trip Analytics - January 2025",
        data=None,
        filters=None,
        is_scheduled=False,
        schedule_frequency=None,
        generated_at=datetime(2025, 2, 1, 12, 0, tzinfo=timezone.utc),
        last_generated=None,
        selected_fields=None,
    ):
        now = datetime(2025, 2, 1, 12, 0, tzinfo=timezone.utc)
        return SimpleNamespace(
            id=uuid.uuid4(),
            owner_uid=owner_uid,
            title=title,
            report_type=report_type,
            filters=filters if filters is not None else {},
            selected_fields=selected_fields,
            data=data if data is not None else {},
            status=status,
            error_message=None,
            generated_at=generated_at if status == "completed" else None,
            is_scheduled=is_scheduled,
            schedule_frequency=schedule_frequency,
            last_generated=last_generated,
            tags=["analytics"],
            created_at=now,
            updated_at=now,
        )

    return _make
