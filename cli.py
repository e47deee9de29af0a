#!/usr/bin/env python3
"""
Study Notes CLI.

Primary entry point for all application operations.
Use --service to select what to run, --action to control the server lifecycle.

Usage:
    python cli.py --help
    python cli.py --service server --verbose
    python cli.py --service server --action stop
    python cli.py --service health --debug
    python cli.py --service config
    python cli.py --service migrate --migrate-action upgrade
    python cli.py --service test --test-type unit
"""

import os
import signal
import subprocess
import sys
import time
from pathlib import Path

import click
import structlog

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from studynotes.core.logging import get_logger, setup_logging

ALEMBIC_INI = PROJECT_ROOT / "studynotes" / "migrations" / "alembic.ini"


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


def _fail(logger, message: str, error: Exception | None = None) -> None:
    if error is not None:
        logger.error(message, extra={"error": str(error)})
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _find_process_on_port(port: int) -> list[int]:
    """Find PIDs listening on a port."""
    result = subprocess.run(
        ["lsof", "-ti", f":{port}"],
        capture_output=True, text=True,
    )
    return [int(p) for p in result.stdout.split() if p.strip()]


def _server_stop(logger, port: int) -> None:
    """Stop a running server by signalling the process holding its port."""
    pids = _find_process_on_port(port)
    if not pids:
        click.echo(f"No server running on port {port}.")
        return

    for pid in pids:
        os.kill(pid, signal.SIGINT)
        logger.info("Sent SIGINT", extra={"pid": pid, "port": port})

    click.echo(f"Server on port {port} stopped (PID: {', '.join(str(p) for p in pids)}).")


def _server_status(port: int) -> None:
    pids = _find_process_on_port(port)
    if pids:
        click.echo(f"Server is running on port {port} (PID: {', '.join(str(p) for p in pids)}).")
    else:
        click.echo(f"Server is not running on port {port}.")


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["server", "health", "config", "test", "info", "migrate"]),
    default="info",
    help="Service or command to run.",
)
@click.option(
    "--action", "-a",
    type=click.Choice(["start", "stop", "restart", "status"]),
    default="start",
    help="Lifecycle action for the server.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.option("--host", default=None, help="Server host.")
@click.option("--port", default=None, type=int, help="Server port.")
@click.option("--reload", is_flag=True, help="Enable auto-reload (server only).")
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Test type to run.",
)
@click.option("--coverage", is_flag=True, help="Run tests with coverage.")
@click.option(
    "--migrate-action",
    type=click.Choice(["upgrade", "downgrade", "current", "history", "autogenerate"]),
    default="current",
    help="Migration action.",
)
@click.option("--revision", default="head", help="Target revision for upgrade/downgrade.")
@click.option("-m", "--message", default=None, help="Migration message (for autogenerate).")
def main(
    service: str,
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    test_type: str,
    coverage: bool,
    migrate_action: str,
    revision: str,
    message: str | None,
) -> None:
    """
    Study Notes CLI.

    \b
    Examples:
        python cli.py --service server --reload --verbose
        python cli.py --service server --action restart --port 8099
        python cli.py --service health --debug
        python cli.py --service config
        python cli.py --service test --test-type unit --coverage
        python cli.py --service migrate --migrate-action upgrade
        python cli.py --service migrate --migrate-action autogenerate -m "add note pins"
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    structlog.contextvars.bind_contextvars(source="cli")
    logger = get_logger(__name__)

    logger.debug("CLI invoked", extra={"service": service, "action": action, "log_level": log_level})

    if service == "server" and action != "start":
        from studynotes.core.config import get_app_config

        server_port = port or get_app_config().application.server.port
        if action == "status":
            _server_status(server_port)
            return
        _server_stop(logger, server_port)
        if action == "stop":
            return
        time.sleep(2)

    if service == "server":
        run_server(logger, host, port, reload)
    elif service == "health":
        check_health(logger)
    elif service == "config":
        show_config(logger)
    elif service == "test":
        run_tests(logger, test_type, coverage)
    elif service == "info":
        show_info(logger)
    elif service == "migrate":
        run_migrations(logger, migrate_action, revision, message)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the API server under uvicorn."""
    from studynotes.core.config import get_app_config

    try:
        app_config = get_app_config()
    except (FileNotFoundError, ValueError) as e:
        _fail(logger, "Could not load config/settings.", e)

    server_config = app_config.application.server
    server_host = host or server_config.host
    server_port = port or server_config.port
    drain_seconds = app_config.concurrency.shutdown.drain_seconds

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "studynotes.main:app",
        "--host", server_host,
        "--port", str(server_port),
        "--timeout-graceful-shutdown", str(drain_seconds),
    ]
    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True, cwd=PROJECT_ROOT)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def check_health(logger) -> None:
    """Check that configuration, secrets and the application load."""
    click.echo("Checking application health...\n")

    checks: list[tuple[str, bool, str | None]] = []

    try:
        from studynotes.core.config import get_app_config

        app_config = get_app_config()
        checks.append(("YAML configuration", True, f"App: {app_config.application.name}"))
    except (FileNotFoundError, ValueError) as e:
        checks.append(("YAML configuration", False, str(e)))
        logger.error("Configuration failed", extra={"error": str(e)})

    try:
        from pydantic import ValidationError

        from studynotes.core.config import get_settings

        get_settings()
        checks.append(("Secrets (config/.env)", True, None))
    except ValidationError as e:
        checks.append(("Secrets (config/.env)", False, "JWT_SECRET is not set"))
        logger.warning("Secrets not configured", extra={"error": str(e)})

    try:
        from studynotes.core.config import get_upload_dir

        upload_dir = get_upload_dir()
        writable = upload_dir.exists() and os.access(upload_dir, os.W_OK)
        checks.append(("Upload directory", writable, str(upload_dir)))
    except (FileNotFoundError, ValueError) as e:
        checks.append(("Upload directory", False, str(e)))

    try:
        from studynotes.main import get_app

        app = get_app()
        checks.append(("FastAPI application", True, f"Title: {app.title}"))
        logger.debug("FastAPI app loaded", extra={"title": app.title})
    except Exception as e:
        checks.append(("FastAPI application", False, str(e)))
        logger.error("FastAPI app failed", extra={"error": str(e)})

    click.echo("Health Check Results:")
    click.echo("-" * 50)

    all_passed = True
    for name, passed, detail in checks:
        status = click.style("✓ PASS", fg="green") if passed else click.style("✗ FAIL", fg="red")
        detail_str = f" ({detail})" if detail else ""
        click.echo(f"  {status}  {name}{detail_str}")
        all_passed = all_passed and passed

    click.echo("-" * 50)

    if all_passed:
        click.echo(click.style("\nAll checks passed!", fg="green"))
    else:
        click.echo(click.style("\nSome checks failed. See details above.", fg="yellow"))
        click.echo("The upload directory is created on first server start.")
        sys.exit(1)


def _echo_section(title: str, values: dict, indent: int = 2) -> None:
    if title:
        click.echo(f"\n{title}:")
        click.echo("-" * 40)
    pad = " " * indent
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{pad}{key}:")
            _echo_section("", value, indent + 2)
        else:
            click.echo(f"{pad}{key}: {value}")


def show_config(logger) -> None:
    """Display loaded configuration. Secrets are never printed."""
    click.echo("Application Configuration:")

    from studynotes.core.config import get_app_config

    try:
        app_config = get_app_config()
    except (FileNotFoundError, ValueError) as e:
        _fail(logger, f"Error loading configuration: {e}", e)

    _echo_section("Application (application.yaml)", app_config.application.model_dump())
    _echo_section("Database (database.yaml)", app_config.database.model_dump())
    _echo_section("Logging (logging.yaml)", app_config.logging.model_dump())
    _echo_section("Security (security.yaml)", app_config.security.model_dump())
    _echo_section("Storage (storage.yaml)", app_config.storage.model_dump())
    _echo_section("Concurrency (concurrency.yaml)", app_config.concurrency.model_dump())

    logger.info("Configuration displayed successfully")


def run_tests(logger, test_type: str, coverage: bool) -> None:
    """Run the test suite."""
    logger.info("Running tests", extra={"type": test_type, "coverage": coverage})

    cmd = [sys.executable, "-m", "pytest"]
    if test_type == "unit":
        cmd.append("tests/unit")
    elif test_type == "integration":
        cmd.append("tests/integration")
    else:
        cmd.append("tests/")
    cmd.append("-v")

    if coverage:
        cmd.extend(["--cov=studynotes", "--cov-report=term-missing"])

    click.echo(f"Running: {' '.join(cmd)}\n")

    try:
        result = subprocess.run(cmd, cwd=PROJECT_ROOT)
        sys.exit(result.returncode)
    except FileNotFoundError:
        logger.error("pytest not found. Install with: pip install -e '.[test]'")
        sys.exit(1)


def run_migrations(
    logger,
    migrate_action: str,
    revision: str,
    message: str | None,
) -> None:
    """Run database migrations using Alembic."""
    logger.info(
        "Running migrations",
        extra={"action": migrate_action, "revision": revision},
    )

    if not ALEMBIC_INI.exists():
        _fail(logger, "studynotes/migrations/alembic.ini not found.")

    cmd = [sys.executable, "-m", "alembic", "-c", str(ALEMBIC_INI)]

    if migrate_action == "upgrade":
        cmd.extend(["upgrade", revision])
        click.echo(f"Upgrading database to revision: {revision}")
    elif migrate_action == "downgrade":
        cmd.extend(["downgrade", revision])
        click.echo(f"Downgrading database to revision: {revision}")
    elif migrate_action == "current":
        cmd.append("current")
        click.echo("Showing current database revision...")
    elif migrate_action == "history":
        cmd.extend(["history", "--verbose"])
        click.echo("Showing migration history...")
    elif migrate_action == "autogenerate":
        if not message:
            _fail(logger, "--message/-m required for autogenerate.")
        cmd.extend(["revision", "--autogenerate", "-m", message])
        click.echo(f"Generating migration: {message}")

    click.echo()

    try:
        result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    except FileNotFoundError:
        logger.error("alembic not found. Install with: pip install -e .")
        sys.exit(1)

    if result.returncode != 0:
        logger.error("Migration failed", extra={"exit_code": result.returncode})
        sys.exit(result.returncode)
    logger.info("Migration completed successfully")


def show_info(logger) -> None:
    """Display application information."""
    from studynotes.core.config import get_app_config

    try:
        application = get_app_config().application
    except (FileNotFoundError, ValueError) as e:
        _fail(logger, "Could not load application.yaml configuration.", e)

    click.echo(application.name)
    click.echo("=" * 40)
    click.echo(f"Version: {application.version}")
    click.echo(f"Description: {application.description}")
    click.echo(f"API prefix: {application.api_prefix}")

    click.echo()
    click.echo("Services (--service):")
    click.echo("  server         API server (uvicorn)")
    click.echo("  health         Check configuration and application load")
    click.echo("  config         Display configuration")
    click.echo("  test           Run test suite")
    click.echo("  migrate        Database migrations")
    click.echo("  info           Show this information")
    click.echo()
    click.echo("Server actions (--action):")
    click.echo("  start          Start the server (default)")
    click.echo("  stop           Stop a running server")
    click.echo("  restart        Stop then start")
    click.echo("  status         Check if running")
    click.echo()
    click.echo("Options:")
    click.echo("  --verbose, -v  Enable INFO level logging")
    click.echo("  --debug, -d    Enable DEBUG level logging")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
