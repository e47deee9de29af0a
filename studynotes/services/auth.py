"""
Auth Service.

Registration, credential verification and session resolution.
"""

import re

from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.core.concurrency import run_blocking
from studynotes.core.config import get_app_config
from studynotes.core.exceptions import (
    AccountDeactivatedError,
    AuthenticationError,
    ConflictError,
)
from studynotes.core.security import hash_password, resolve_session, verify_password
from studynotes.models.user import User
from studynotes.repositories.user import UserRepository
from studynotes.services.base import BaseService, FieldViolations

EMAIL_PATTERN = re.compile(r"^[^@\s]+@([^@\s]+\.[^@\s]+)$")

# bcrypt only looks at the first 72 bytes
PASSWORD_MAX_BYTES = 72

# Verified against when the email is unknown, so both paths cost one bcrypt check
_DUMMY_HASH: str | None = None


async def _dummy_hash() -> str:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = await run_blocking(hash_password, "studynotes-timing-equalizer")
    return _DUMMY_HASH


class AuthService(BaseService):
    """Service for identity: accounts and session tokens."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.users = UserRepository(session)

    def _validate_registration(self, email: str, password: str, name: str) -> None:
        registration = get_app_config().security.registration
        violations = FieldViolations()

        match = EMAIL_PATTERN.match(email or "")
        if not match:
            violations.add("email", "Invalid email address")
        else:
            domain = match.group(1).lower()
            allowed = [d.lower() for d in registration.allowed_email_domains]
            if allowed and domain not in allowed:
                violations.add(
                    "email",
                    f"Email domain must be one of: {', '.join(allowed)}",
                )

        if not password or len(password) < registration.password_min_length:
            violations.add(
                "password",
                f"Minimum length is {registration.password_min_length}",
            )
        elif len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
            violations.add("password", f"Maximum length is {PASSWORD_MAX_BYTES} bytes")

        violations.check_length("name", name, min_length=1, max_length=100)
        violations.raise_if_any("Registration data is invalid")

    async def register(self, email: str, password: str, name: str) -> User:
        """
        Create an account.

        Args:
            email: Address in an allowed domain, stored lower-cased
            password: Plain password, stored as a bcrypt hash
            name: Display name

        Returns:
            The new user

        Raises:
            ValidationError: If any field is invalid
            ConflictError: If the email is already registered
        """
        self._validate_registration(email, password, name)
        email = email.strip().lower()

        if await self.users.email_exists(email):
            raise ConflictError("Email already registered")

        self._log_operation("Registering user", email=email)
        hashed = await run_blocking(hash_password, password)

        # A concurrent registration of the same email surfaces here as a conflict
        user = await self._execute_db_operation(
            "register_user",
            self.users.create(email=email, hashed_password=hashed, name=name.strip()),
            conflict_message="Email already registered",
        )
        self._log_debug("User registered", user_id=user.id)
        return user

    async def verify_credentials(self, email: str, password: str) -> User:
        """
        Check an email/password pair.

        Raises:
            AuthenticationError: If the email is unknown or the password wrong
            AccountDeactivatedError: If the credentials are valid but the
                account is deactivated
        """
        user = await self.users.get_by_email((email or "").strip())

        hashed = user.hashed_password if user is not None else await _dummy_hash()
        password_ok = await run_blocking(verify_password, password or "", hashed)

        if user is None or not password_ok:
            self._logger.warning("Login failed", extra={"email": email})
            raise AuthenticationError("Invalid credentials")

        if not user.is_active:
            self._logger.warning("Login to deactivated account", extra={"user_id": user.id})
            raise AccountDeactivatedError()

        self._log_operation("User logged in", user_id=user.id)
        return user

    async def resolve_user(self, token: str) -> User:
        """
        Resolve a bearer token to an active user.

        Raises:
            AuthenticationError: If the token is invalid or the user no
                longer exists
            AccountDeactivatedError: If the account is deactivated
        """
        user_id = resolve_session(token)
        user = await self.users.get_by_id_or_none(user_id)
        if user is None:
            raise AuthenticationError("Invalid or expired token")
        if not user.is_active:
            raise AccountDeactivatedError()
        return user
