# src/fxsync/app.py
"""
Application Entry Point - Wiring and Startup

This module serves as the composition root for fxsync. It validates the
configuration (a missing FIXER_API_KEY stops the process here), sets up
logging, takes the single-instance lock, prepares the rate store and runs
the Telegram bot with the rate sync scheduled on its JobQueue.

Files that USE this module:
- python -m fxsync (module entry point)
- the ``fxsync`` console script

Files that this module USES:
- fxsync.config (settings)
- fxsync.shared.logging_conf (setup_logging)
- fxsync.adapters.providers.fixer (FixerProvider)
- fxsync.adapters.persistence.rate_store (RateStore)
- fxsync.application (QueryService, SyncScheduler)
- fxsync.adapters.telegram.bot (build_application)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import atexit  # Register cleanup functions to run when program exits
import logging  # Standard library for logging messages and errors
import os  # Process id and liveness checks for the PID file
import sys  # Exit codes
from dataclasses import dataclass  # Container for the wired components
from pathlib import Path  # Object-oriented filesystem paths

from pydantic import ValidationError  # Raised when settings are missing or invalid

from fxsync.adapters.persistence.rate_store import RateStore
from fxsync.adapters.providers.fixer import FixerProvider
from fxsync.application.query_service import QueryService
from fxsync.application.sync_scheduler import SyncScheduler
from fxsync.config import Settings, get_settings
from fxsync.domain.errors import ConfigurationError
from fxsync.shared.logging_conf import setup_logging

logger = logging.getLogger(__name__)


@dataclass
class Components:
    provider: FixerProvider
    store: RateStore
    query_service: QueryService
    scheduler: SyncScheduler


def load_settings() -> Settings:
    """
    Load settings, turning validation failures into one fatal error.

    Raises:
        ConfigurationError: If FIXER_API_KEY is missing or any value is invalid
    """
    try:
        return get_settings()
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ConfigurationError(f"Invalid or missing configuration: {', '.join(missing)}") from e


def build_components(settings: Settings) -> Components:
    """Wire provider, store, query service and scheduler from settings."""
    provider = FixerProvider(
        api_key=settings.fixer_api_key,
        base_url=settings.fixer_base_url,
        timeout=settings.http_timeout_seconds,
    )
    store = RateStore.from_url(settings.database_url)
    store.create_schema()
    return Components(
        provider=provider,
        store=store,
        query_service=QueryService(provider, store),
        scheduler=SyncScheduler(
            provider,
            store,
            interval=settings.sync_interval,
            run_on_start=settings.sync_on_startup,
        ),
    )


def _check_existing_instance(pid_file: Path) -> None:
    """
    Refuse to start if another instance owns the PID file.

    Only one process may run the sync scheduler against a data directory.

    Raises:
        RuntimeError: If the PID file names a running process
    """
    if not pid_file.exists():
        return
    try:
        old_pid = int(pid_file.read_text().strip())
    except (ValueError, OSError):
        # Invalid PID file, remove it
        pid_file.unlink(missing_ok=True)
        return

    try:
        os.kill(old_pid, 0)  # Signal 0 doesn't kill, just checks if process exists
    except ProcessLookupError:
        # Stale PID file
        pid_file.unlink(missing_ok=True)
        return
    except PermissionError:
        pass
    raise RuntimeError(
        f"Another fxsync instance is already running (PID: {old_pid}).\n"
        f"Stop it first with: kill {old_pid}"
    )


def _create_pid_file(pid_file: Path) -> None:
    pid_file.parent.mkdir(parents=True, exist_ok=True)
    pid_file.write_text(str(os.getpid()))


def _remove_pid_file(pid_file: Path) -> None:
    try:
        pid_file.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove PID file %s: %s", pid_file, e)


def main() -> None:
    """
    Start fxsync.

    1. Loads and validates configuration (fatal without FIXER_API_KEY)
    2. Sets up logging
    3. Acquires the single-instance lock
    4. Creates the rate store schema and wires the services
    5. Runs the Telegram bot; the rate sync runs as JobQueue jobs
    """
    try:
        settings = load_settings()
    except ConfigurationError as e:
        setup_logging()
        logger.critical("%s", e)
        sys.exit(1)

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )
    logger.info("Working directory: %s", os.getcwd())

    if not settings.bot_token:
        logger.critical("BOT_TOKEN missing")
        sys.exit(1)

    pid_file = settings.pid_file
    try:
        _check_existing_instance(pid_file)
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)
    _create_pid_file(pid_file)
    atexit.register(_remove_pid_file, pid_file)
    logger.info("Instance lock acquired (PID: %d, file: %s)", os.getpid(), pid_file)

    # Imported here so configuration errors surface before telegram is loaded
    from fxsync.adapters.telegram.bot import build_application

    components = build_components(settings)
    app = build_application(settings.bot_token, components.query_service, components.scheduler)

    logger.info(
        "Starting bot polling… sync cadence=%s, sync on startup=%s",
        settings.sync_interval or "daily at 00:00 UTC",
        settings.sync_on_startup,
    )
    try:
        app.run_polling(drop_pending_updates=False)
    except KeyboardInterrupt:
        logger.info("Stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception("Unexpected error during bot operation: %s (type: %s)", e, type(e).__name__)
        raise
    finally:
        components.store.dispose()
        _remove_pid_file(pid_file)


if __name__ == "__main__":
    main()
