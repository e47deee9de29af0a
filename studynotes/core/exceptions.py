"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Every failure surfaced to a caller is one of these kinds.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found or is hidden from the caller."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class AuthenticationError(ApplicationError):
    """Raised when authentication fails."""

    def __init__(
        self,
        message: str = "Authentication required",
        code: str = "AUTH_UNAUTHORIZED",
    ) -> None:
        super().__init__(message, code=code)


class AccountDeactivatedError(AuthenticationError):
    """Raised when valid credentials belong to a deactivated account."""

    def __init__(self, message: str = "Account deactivated") -> None:
        super().__init__(message, code="AUTH_ACCOUNT_DEACTIVATED")


class AuthorizationError(ApplicationError):
    """Raised when an authenticated user may not act on a visible resource."""

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(message, code="AUTHZ_FORBIDDEN")


class ConflictError(ApplicationError):
    """Raised when there is a state conflict."""

    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message, code="RES_CONFLICT")


class StorageError(ApplicationError):
    """Raised when a file store operation fails. Safe to retry."""

    def __init__(self, message: str = "File storage error") -> None:
        super().__init__(message, code="SYS_STORAGE_ERROR")


class DatabaseError(ApplicationError):
    """Raised when a database operation fails."""

    def __init__(self, message: str = "Database error") -> None:
        super().__init__(message, code="SYS_DATABASE_ERROR")
