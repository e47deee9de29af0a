"""
Unit Test Fixtures.

Fixtures for unit tests - external dependencies are mocked.
Unit tests should be fast and isolated, never touching a real database.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = TagService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    session.info = {}
    return session


@pytest.fixture
def user() -> SimpleNamespace:
    return SimpleNamespace(id="user-1")


@pytest.fixture
def other_user() -> SimpleNamespace:
    return SimpleNamespace(id="user-2")
