"""
Integration Test Fixtures.

Fixtures for integration tests - real database, real files, real HTTP stack.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studynotes.core.database import get_db_session
from studynotes.core.dependencies import get_file_storage
from studynotes.core.storage import FileStorage

API = "/api/v1"


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session_factory: async_sessionmaker[AsyncSession],
    storage: FileStorage,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client bound to the test database and upload directory.

    Each request gets its own session that commits on success and rolls
    back on error, exactly like get_db_session.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    from studynotes.main import create_app

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_file_storage] = lambda: storage

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Authentication Fixtures
# =============================================================================


@dataclass
class Account:
    """A registered user and the headers that authenticate as them."""

    id: str
    email: str
    name: str
    token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


@pytest.fixture
def register(client: AsyncClient) -> Callable[..., Awaitable[Account]]:
    """
    Register an account through the API.

    Usage:
        async def test_profile(client, register):
            u1 = await register("U1")
            response = await client.get("/api/v1/users/me", headers=u1.headers)
    """

    async def _register(name: str = "Student", password: str = "secret1") -> Account:
        email = f"{name.lower().replace(' ', '.')}.{uuid4().hex[:6]}@stud.ase.ro"
        response = await client.post(
            f"{API}/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return Account(id=data["user"]["id"], email=email, name=name, token=data["token"])

    return _register


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is a malformed-request validation error (400)."""
        data = ApiAssertions.assert_error(response, 400, "VAL_VALIDATION_ERROR")

        if field:
            errors = data["error"].get("details", {}).get("fields", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data

    @staticmethod
    def assert_field_error(response: Any, field: str) -> dict[str, Any]:
        """Assert a business-rule validation error (400) naming a field."""
        data = ApiAssertions.assert_error(response, 400, "VAL_VALIDATION_ERROR")
        fields = [f["field"] for f in data["error"]["details"]["fields"]]
        assert field in fields, f"Expected violation on '{field}', got: {fields}"
        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
