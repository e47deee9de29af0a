"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate repositories, consult the access-control predicates,
and implement business rules. They flush but never commit; the request's
session commits or rolls back as a unit.

Usage:
    from studynotes.services.base import BaseService

    class TagService(BaseService):
        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)
            self.repo = TagRepository(session)

        async def create_tag(self, owner: User, name: str) -> Tag:
            violations = FieldViolations()
            violations.check_length("name", name, min_length=1, max_length=50)
            violations.raise_if_any()
            return await self._execute_db_operation(
                "create_tag",
                self.repo.create(name=name, user_id=owner.id),
            )
"""

from collections.abc import Awaitable
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from studynotes.core.exceptions import (
    ConflictError,
    DatabaseError,
    ValidationError,
)
from studynotes.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class FieldViolations:
    """
    Collects field-level validation failures.

    All checks run before raising, so the caller sees every problem at once:

        details = {"fields": [{"field": "email", "message": "..."}]}
    """

    def __init__(self) -> None:
        self.fields: list[dict[str, str]] = []

    def add(self, field: str, message: str) -> None:
        self.fields.append({"field": field, "message": message})

    def check_required(self, field: str, value: Any) -> bool:
        if value is None or (isinstance(value, str) and not value.strip()):
            self.add(field, "This field is required")
            return False
        return True

    def check_length(
        self,
        field: str,
        value: str | None,
        min_length: int | None = None,
        max_length: int | None = None,
    ) -> None:
        """Length bounds on a trimmed string. None is reported as required."""
        if min_length and not self.check_required(field, value):
            return
        if value is None:
            return
        length = len(value.strip())
        if min_length is not None and length < min_length:
            self.add(field, f"Minimum length is {min_length}")
        elif max_length is not None and length > max_length:
            self.add(field, f"Maximum length is {max_length}")

    def __bool__(self) -> bool:
        return bool(self.fields)

    def raise_if_any(self, message: str = "Validation failed") -> None:
        """
        Raises:
            ValidationError: If any violation was recorded
        """
        if self.fields:
            raise ValidationError(message, details={"fields": list(self.fields)})


class BaseService:
    """
    Base class for all services.

    Provides:
    - Database session management
    - Logging context
    - Error wrapping for database operations

    Subclasses should:
    - Call super().__init__(session) in their __init__
    - Initialize repositories in __init__
    - Implement business logic methods
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize the service with a database session.

        Args:
            session: SQLAlchemy async session for database operations
        """
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Awaitable[T],
        conflict_message: str = "Resource already exists",
    ) -> T:
        """
        Execute a database operation with error handling.

        Wraps database operations to convert SQLAlchemy exceptions
        to application-specific exceptions.

        Args:
            operation: Description of the operation for logging
            coro: Coroutine to execute
            conflict_message: Message used when a uniqueness rule is hit

        Returns:
            Result of the coroutine

        Raises:
            ConflictError: For unique constraint violations
            DatabaseError: For other database errors
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e.orig)},
            )
            error_str = str(e).lower()
            if "unique" in error_str or "duplicate" in error_str:
                raise ConflictError(conflict_message) from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
