"""
Unit Tests for AuthService.

Password hashing stays off the event loop, including the unknown-email path.
"""

from unittest.mock import AsyncMock

import pytest

from studynotes.core.exceptions import AuthenticationError
from studynotes.core.security import hash_password, verify_password
from studynotes.services import auth as auth_module
from studynotes.services.auth import AuthService


@pytest.fixture
def blocking_calls(monkeypatch):
    """Replace the thread-pool hop and record what was sent through it."""
    calls = []

    async def fake_run_blocking(fn, *args):
        calls.append(fn)
        return "$2b$12$stand-in" if fn is hash_password else False

    monkeypatch.setattr(auth_module, "run_blocking", fake_run_blocking)
    monkeypatch.setattr(auth_module, "_DUMMY_HASH", None)
    return calls


@pytest.fixture
def auth_service(mock_db_session):
    service = AuthService(mock_db_session)
    service.users.get_by_email = AsyncMock(return_value=None)
    return service


class TestUnknownEmail:

    async def test_equalizer_hash_runs_in_thread_pool(self, auth_service, blocking_calls):
        with pytest.raises(AuthenticationError):
            await auth_service.verify_credentials("nobody@stud.ase.ro", "secret1")

        assert blocking_calls == [hash_password, verify_password]

    async def test_equalizer_hash_is_computed_once(self, auth_service, blocking_calls):
        for _ in range(2):
            with pytest.raises(AuthenticationError):
                await auth_service.verify_credentials("nobody@stud.ase.ro", "secret1")

        assert blocking_calls.count(hash_password) == 1
        assert auth_module._DUMMY_HASH == "$2b$12$stand-in"
