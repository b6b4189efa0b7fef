"""Logging configuration for flexconf.

Provides configurable logging with:
- File-based logging with rotation
- Console output
- Performance timing decorators for enumeration and update checks

Environment Variables:
    FLEXCONF_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    FLEXCONF_LOG_FILE: Path to log file (default: ~/.flexconf/flexconf.log)
    FLEXCONF_LOG_MAX_SIZE: Max log file size in MB (default: 5)
    FLEXCONF_LOG_BACKUPS: Number of backup files to keep (default: 3)

Usage:
    from flexconf.utils.logging_config import setup_logging, timed

    setup_logging()  # Call once at startup

    @timed("enumerate")
    async def fetch(backend):
        ...
"""
import asyncio
import functools
import logging
import os
import time
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Callable, Any

# Performance logger - separate from main logger for easy filtering
perf_logger = logging.getLogger("flexconf.perf")
main_logger = logging.getLogger("flexconf")

_FORMAT = "%(asctime)s.%(msecs)03d | %(name)-28s | %(levelname)-7s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def get_log_level() -> int:
    """Get log level from environment."""
    level_str = os.environ.get("FLEXCONF_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_str, logging.INFO)


def get_log_file() -> Path:
    """Get log file path from environment."""
    default_path = Path.home() / ".flexconf" / "flexconf.log"
    path_str = os.environ.get("FLEXCONF_LOG_FILE", str(default_path))
    return Path(path_str)


def setup_logging(level: Optional[int] = None, log_to_file: bool = True) -> None:
    """Configure logging for the application.

    Sets up:
    - Console handler (respects FLEXCONF_LOG_LEVEL unless ``level`` is given)
    - File handler with rotation (DEBUG level) when ``log_to_file`` is set
    - Performance logger for timing metrics

    Calling it again replaces the handlers installed by the previous call.
    """
    log_level = level if level is not None else get_log_level()
    main_format = logging.Formatter(_FORMAT, datefmt=_DATEFMT)

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(main_format)
    handlers.append(console_handler)

    log_file = None
    if log_to_file:
        log_file = get_log_file()
        max_size_mb = int(os.environ.get("FLEXCONF_LOG_MAX_SIZE", "5"))
        backup_count = int(os.environ.get("FLEXCONF_LOG_BACKUPS", "3"))

        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(main_format)
        handlers.append(file_handler)

    clear_handlers()

    # perf_logger propagates to main_logger, so it needs no handlers of its own
    main_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    for handler in handlers:
        main_logger.addHandler(handler)
    perf_logger.setLevel(logging.DEBUG)

    main_logger.debug(
        f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_file or '-'}"
    )


def clear_handlers() -> None:
    """Detach and close the handlers installed by setup_logging."""
    for handler in list(main_logger.handlers):
        main_logger.removeHandler(handler)
        handler.close()
    main_logger.setLevel(logging.NOTSET)


def _perf_line(operation: str, subject: Optional[str], elapsed_ms: float, outcome: str) -> str:
    return f"{operation:20s} | {subject or 'N/A':18s} | {elapsed_ms:8.2f}ms | {outcome}"


def timed(operation: str, subject: Optional[str] = None):
    """Decorator to log execution time of sync/async functions.

    Args:
        operation: Name of the operation (e.g., "enumerate", "check_update")
        subject: Optional subject to tag the line with; when omitted the
            first positional string argument (e.g. the backend name) is used

    Usage:
        @timed("enumerate")
        async def fetch_raw_devices(enumerate_devices, backend):
            ...
    """
    def _subject(args) -> Optional[str]:
        if subject is not None:
            return subject
        for arg in args:
            if isinstance(arg, str):
                return arg
        return None

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs) -> Any:
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.info(_perf_line(operation, _subject(args), elapsed, "OK"))
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.warning(_perf_line(operation, _subject(args), elapsed, f"FAIL: {e}"))
                raise

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs) -> Any:
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.info(_perf_line(operation, _subject(args), elapsed, "OK"))
                return result
            except Exception as e:
                elapsed = (time.perf_counter() - start) * 1000
                perf_logger.warning(_perf_line(operation, _subject(args), elapsed, f"FAIL: {e}"))
                raise

        if asyncio.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator


@contextmanager
def timed_section_sync(operation: str, subject: Optional[str] = None, **extra):
    """Sync context manager for timing code sections.

    Usage:
        with timed_section_sync("label", subject="MME", count=12):
            entries = label_devices(raw, "MME", Direction.INPUT)
    """
    start = time.perf_counter()
    extra_str = " | ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""

    try:
        yield
        elapsed = (time.perf_counter() - start) * 1000
        msg = _perf_line(operation, subject, elapsed, "OK")
        if extra_str:
            msg += f" | {extra_str}"
        perf_logger.info(msg)
    except Exception as e:
        elapsed = (time.perf_counter() - start) * 1000
        msg = _perf_line(operation, subject, elapsed, f"FAIL: {e}")
        if extra_str:
            msg += f" | {extra_str}"
        perf_logger.warning(msg)
        raise
