"""
Configuration Management.

Loads secrets from config/.env and settings from config/settings/*.yaml.
No hardcoded values in code; all configuration comes from these sources.

Secrets (.env or environment):
    DB_PASSWORD, JWT_SECRET, DATABASE_URL (optional override)

Settings (YAML):
    application.yaml   - App identity, server, cors, timeouts
    database.yaml      - Database connection settings
    logging.yaml       - Logging configuration
    security.yaml      - JWT and registration policy
    storage.yaml       - Attachment upload directory and size limit
    observability.yaml - Health check configuration
    concurrency.yaml   - Thread pool size, shutdown timing
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from studynotes.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    DatabaseSchema,
    LoggingSchema,
    ObservabilitySchema,
    SecuritySchema,
    StorageSchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env. Only passwords, tokens, and keys."""

    db_password: str = ""
    jwt_secret: str
    database_url: str | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._database = _load_validated(DatabaseSchema, "database.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._security = _load_validated(SecuritySchema, "security.yaml")
        self._storage = _load_validated(StorageSchema, "storage.yaml")
        self._observability = _load_validated(ObservabilitySchema, "observability.yaml")
        self._concurrency = _load_validated(ConcurrencySchema, "concurrency.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def database(self) -> DatabaseSchema:
        """Database settings."""
        return self._database

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def security(self) -> SecuritySchema:
        """Security settings (JWT, registration policy)."""
        return self._security

    @property
    def storage(self) -> StorageSchema:
        """Attachment storage settings."""
        return self._storage

    @property
    def observability(self) -> ObservabilitySchema:
        """Observability settings (health checks)."""
        return self._observability

    @property
    def concurrency(self) -> ConcurrencySchema:
        """Concurrency settings (thread pool, shutdown)."""
        return self._concurrency


@lru_cache
def get_settings() -> Settings:
    """Get cached secrets instance. Resolves .env path from project root."""
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_database_url(async_driver: bool = True) -> str:
    """
    Construct database URL from YAML config and secrets.

    DATABASE_URL, when set, takes precedence over the YAML parts.

    Args:
        async_driver: Use the async driver (asyncpg) if True.

    Returns:
        Database connection URL string.
    """
    settings = get_settings()
    if settings.database_url:
        return settings.database_url

    db = get_app_config().database
    driver = f"{db.driver}+asyncpg" if async_driver else db.driver
    return f"{driver}://{db.user}:{settings.db_password}@{db.host}:{db.port}/{db.name}"


def get_upload_dir() -> Path:
    """
    Resolve the attachment upload directory.

    Relative paths in storage.yaml are resolved against the project root.
    """
    configured = Path(get_app_config().storage.upload_dir)
    if configured.is_absolute():
        return configured
    return find_project_root() / configured
