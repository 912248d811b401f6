"""Shared pytest fixtures for router integration tests."""

import pytest
import uuid
from contextlib import ExitStack
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import AsyncGenerator
from unittest.mock import AsyncMock, Mock, patch

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession


# Mock database before importing app to avoid connection issues
@pytest.fixture(autouse=True)
def mock_database_init():
    """Mock database initialization for all router tests."""
    with ExitStack() as stack:
        stack.enter_context(patch("src.main.init_db", new_callable=AsyncMock))
        mock_engine = stack.enter_context(patch("src.main.engine"))
        mock_engine.dispose = AsyncMock()
        yield


@pytest.fixture
def mock_db_session():
    """Create a mock AsyncSession for router tests."""
    session = AsyncMock(spec=AsyncSession)

    mock_result = Mock()
    mock_result.scalar_one_or_none = Mock(return_value=None)
    mock_result.scalars = Mock(return_value=Mock(all=Mock(return_value=[])))

    session.execute = AsyncMock(return_value=mock_result)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.add = Mock()
    session.delete = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def mock_report_service():
    """Create a mock ReportService."""
    service = AsyncMock()
    service.default_page_size = 50
    service.max_page_size = 100
    service.list = AsyncMock(return_value=[])
    service.delete = AsyncMock(return_value=None)
    return service


@pytest.fixture
def mock_user():
    """Create a mock User object for authentication."""
    from src.models.user import User

    user = Mock(spec=User)
    user.uid = "user_test123"
    user.email = "test@example.com"
    user.display_name = "Test User"
    user.role = "user"
    user.is_admin = False
    user.created_at = datetime.now(timezone.utc)
    user.last_login_at = datetime.now(timezone.utc)
    return user


@pytest.fixture
def mock_user_repo():
    """Create a mock UserRepository."""
    repo = AsyncMock()
    repo.get_or_create = AsyncMock(return_value=(Mock(), False))
    return repo


def _create_test_client(
    mock_db_session,
    mock_report_service,
    mock_user_repo,
    *,
    mock_user=None,
):
    """Build a TestClient with infra dependencies overridden.

    When mock_user is provided, token verification is bypassed (fully
    authenticated client). When omitted, auth runs normally so tests can
    assert 401 behaviour. The field registry is never overridden.
    """
    from src.main import app
    from src.database import get_db
    from src.dependencies import (
        get_current_user_required,
        get_report_service_dep,
        get_user_repository,
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield mock_db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_report_service_dep] = lambda: mock_report_service
    app.dependency_overrides[get_user_repository] = lambda: mock_user_repo

    if mock_user is not None:
        app.dependency_overrides[get_current_user_required] = lambda: mock_user

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def client(mock_db_session, mock_report_service, mock_user_repo, mock_user):
    """Create TestClient with all dependencies overridden including auth."""
    yield from _create_test_client(
        mock_db_session, mock_report_service, mock_user_repo, mock_user=mock_user
    )


@pytest.fixture
def unauthenticated_client(mock_db_session, mock_report_service, mock_user_repo):
    """Create TestClient WITHOUT auth override to test 401 responses."""
    yield from _create_test_client(mock_db_session, mock_report_service, mock_user_repo)


# Sample data fixtures


@pytest.fixture
def make_report(mock_user):
    """Factory fixture for report records as the service returns them."""

    def _make(**overrides):
        now = datetime(2025, 2, 1, 9, 30, tzinfo=timezone.utc)
        values = dict(
            id=uuid.uuid4(),
            owner_uid=mock_user.uid,
            title="Trip Analytics - January 2025",
            report_type="trip_analytics",
            filters={},
            data={
                "summary": {"total_trips": 3, "favorite_destination": "Lisbon", "total_budget": 600.0},
                "charts": [
                    {
                        "kind": "bar",
                        "title": "Trip Types",
                        "data": [2, 1],
                        "labels": ["Solo", "Family"],
                    }
                ],
            },
            status="completed",
            error_message=None,
            generated_at=now,
            is_scheduled=False,
            schedule_frequency=None,
            last_generated=None,
            tags=["trip_analytics", "analytics"],
            selected_fields=None,
            created_at=now,
            updated_at=now,
        )
        values.update(overrides)
        return SimpleNamespace(**values)

    return _make
