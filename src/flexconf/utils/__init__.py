"""Utility modules for logging, retries, colors and host-system values."""
from .color import ColorFormatError, adjust_brightness, format_color, parse_color
from .connection import RetryPolicy, retry_with_policy, with_retry
from .logging_config import (
    clear_handlers,
    setup_logging,
    timed,
    timed_section_sync,
    perf_logger,
)
from .system import compare_versions, is_windows_11

__all__ = [
    "ColorFormatError",
    "adjust_brightness",
    "format_color",
    "parse_color",
    "with_retry",
    "RetryPolicy",
    "retry_with_policy",
    "clear_handlers",
    "setup_logging",
    "timed",
    "timed_section_sync",
    "perf_logger",
    "compare_versions",
    "is_windows_11",
]
