"""Shared pytest fixtures for task unit tests."""

import pytest
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock


@pytest.fixture
def mock_session_scope():
    """Replacement for ``session_scope`` recording every opened session."""
    sessions = []

    @asynccontextmanager
    async def scope():
        session = AsyncMock()
        sessions.append(session)
        yield session

    return scope, sessions


@pytest.fixture
def mock_report_service():
    service = AsyncMock()
    service.report_repo = AsyncMock()
    service.report_repo.get_by_id = AsyncMock(return_value=None)
    service.list_due = AsyncMock(return_value=[])
    return service
