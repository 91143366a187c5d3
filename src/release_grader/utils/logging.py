"""Logging utilities for release grading.

Inside GitHub Actions, records are written as workflow commands so the
runner can colour warnings and errors, fold groups, and mask secrets.
"""

import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

MASK = "***"

_secrets: set[str] = set()
_open_groups: list[str] = []


def in_actions() -> bool:
    """Check if we are running on a GitHub Actions runner."""
    return os.getenv("GITHUB_ACTIONS", "").lower() == "true"


def escape_data(value: str) -> str:
    """Escape a workflow command payload."""
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def issue_command(command: str, message: str = "") -> None:
    """Write a ``::command::message`` workflow command to stdout."""
    sys.stdout.write(f"::{command}::{escape_data(message)}\n")
    sys.stdout.flush()


def redact(text: str) -> str:
    """Replace every registered secret in ``text``."""
    # Longest first so a secret containing another is fully hidden
    for secret in sorted(_secrets, key=len, reverse=True):
        text = text.replace(secret, MASK)
    return text


class SecretFilter(logging.Filter):
    """Masks registered secrets in every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if _secrets:
            record.msg = redact(record.getMessage())
            record.args = None
        return True


class ActionsFormatter(logging.Formatter):
    """Formats records as GitHub Actions workflow commands."""

    PREFIXES = {
        logging.DEBUG: "debug",
        logging.WARNING: "warning",
        logging.ERROR: "error",
        logging.CRITICAL: "error",
    }

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = self.PREFIXES.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{escape_data(message)}"


def mask_secret(value: str | None) -> None:
    """Register a value that must never appear in log output.

    Call before anything can log the value.
    """
    if not value:
        return
    _secrets.add(value)
    if in_actions():
        issue_command("add-mask", value)


def clear_secrets() -> None:
    """Forget all registered secrets."""
    _secrets.clear()


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
    format_string: str | None = None,
    actions: bool | None = None,
) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (e.g., logging.INFO, logging.DEBUG)
        log_file: Optional path to log file
        format_string: Custom format string for log messages
        actions: Force workflow command output on or off. Detected from
            the environment when not given
    """
    if actions is None:
        actions = in_actions()

    if format_string is None:
        if actions:
            format_string = "%(message)s"
        else:
            format_string = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

    console = logging.StreamHandler(sys.stdout)
    if actions:
        # The runner only forwards ::debug:: lines when step debugging is on
        console.setFormatter(ActionsFormatter(format_string))
        level = min(level, logging.DEBUG)
    else:
        console.setFormatter(logging.Formatter(format_string))

    handlers: list[logging.Handler] = [console]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(format_string))
        handlers.append(file_handler)

    for handler in handlers:
        handler.addFilter(SecretFilter())

    logging.basicConfig(
        level=level,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def start_group(title: str) -> None:
    """Open a collapsible log group."""
    _open_groups.append(title)
    if in_actions():
        issue_command("group", title)
    else:
        get_logger(__name__).info(f"--- {title}")


def end_group() -> None:
    """Close the innermost log group. Does nothing when none is open."""
    if not _open_groups:
        return
    _open_groups.pop()
    if in_actions():
        issue_command("endgroup")


@contextmanager
def log_group(title: str) -> Iterator[None]:
    """Run a block inside a log group, closing it even on failure."""
    start_group(title)
    try:
        yield
    finally:
        end_group()


def show_error(message: str) -> None:
    """Log an error outside of any collapsed group so it stays visible."""
    while _open_groups:
        end_group()
    get_logger(__name__).error(message)
