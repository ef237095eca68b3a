"""Logging utilities.

All log output goes to stderr to keep stdout clean for machine-readable
results (JSON/JSONL).
"""

import json
import sys
from datetime import UTC, datetime
from typing import Any, Literal

LogLevel = Literal["debug", "info", "warning", "error"]

_verbose = False
_quiet = False
_log_format: Literal["text", "json"] = "text"


def set_verbose(verbose: bool) -> None:
    """Set verbose mode."""
    global _verbose
    _verbose = verbose


def configure_logging(
    log_format: Literal["text", "json"] = "text",
    quiet: bool = False,
) -> None:
    """Configure logging settings.

    Args:
        log_format: Output format for log messages
        quiet: Suppress debug and info output
    """
    global _log_format, _quiet
    _log_format = log_format
    _quiet = quiet


def log(message: str, level: LogLevel = "info", **context: Any) -> None:
    """Log a message to stderr.

    Args:
        message: Log message
        level: Log level
        **context: Additional context to include
    """
    if _quiet and level in ("debug", "info"):
        return

    if level == "debug" and not _verbose:
        return

    if _log_format == "json":
        entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": level,
            "message": message,
            **context,
        }
        print(json.dumps(entry, default=str), file=sys.stderr)
        return

    line = message if level == "info" else f"[{level.upper()}] {message}"
    if context and _verbose:
        line += " " + " ".join(f"{k}={v}" for k, v in context.items())
    print(line, file=sys.stderr)


def debug(message: str, **context: Any) -> None:
    """Log a debug message."""
    log(message, level="debug", **context)


def info(message: str, **context: Any) -> None:
    """Log an info message."""
    log(message, level="info", **context)


def warning(message: str, **context: Any) -> None:
    """Log a warning message."""
    log(message, level="warning", **context)


def error(message: str, **context: Any) -> None:
    """Log an error message."""
    log(message, level="error", **context)
