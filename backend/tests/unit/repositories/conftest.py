"""Shared pytest fixtures for repository tests."""

import pytest
from unittest.mock import AsyncMock, Mock
from contextlib import asynccontextmanager


@pytest.fixture
def mock_async_session():
    """Create a mock AsyncSession for repository tests."""
    session = AsyncMock()

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
def mock_session_factory(mock_async_session):
    """async_sessionmaker double yielding the shared mock session."""

    @asynccontextmanager
    async def factory():
        yield mock_async_session

    return factory
