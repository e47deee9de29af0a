"""
Unit Tests for Health Check functions.

The database probe is exercised with a mocked session factory.
"""

from unittest.mock import AsyncMock, MagicMock, patch

from sqlalchemy.exc import OperationalError

from studynotes.api.health import check_database, health_check


def _session_factory(session):
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=session)
    context.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=context)


class TestHealthCheck:

    async def test_health_returns_healthy(self):
        result = await health_check()

        assert result["status"] == "healthy"
        assert "timestamp" in result


class TestCheckDatabase:

    async def test_healthy_on_round_trip(self):
        session = AsyncMock()

        with patch(
            "studynotes.api.health.get_session_factory",
            return_value=_session_factory(session),
        ):
            result = await check_database()

        assert result["status"] == "healthy"
        assert result["latency_ms"] >= 0
        session.execute.assert_awaited_once()

    async def test_unhealthy_on_database_error(self):
        session = AsyncMock()
        session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("refused"))

        with patch(
            "studynotes.api.health.get_session_factory",
            return_value=_session_factory(session),
        ):
            result = await check_database()

        assert result["status"] == "unhealthy"
        assert "refused" in result["error"]

    async def test_unhealthy_when_connection_fails(self):
        with patch(
            "studynotes.api.health.get_session_factory",
            return_value=MagicMock(side_effect=OSError("connection refused")),
        ):
            result = await check_database()

        assert result == {"status": "unhealthy", "error": "connection refused"}
