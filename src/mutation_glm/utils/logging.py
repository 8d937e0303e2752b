"""Logging configuration for report and survival commands.

Configures structlog on top of the standard library so module loggers
(``structlog.get_logger()``) write human-readable console output at INFO
level and, optionally, JSON lines at DEBUG level to a file.
"""

import logging
import sys
from pathlib import Path

import structlog


def setup_logging(
    verbose: bool = False,
    log_file: Path | str | None = None,
) -> None:
    """Configure structlog for a command run.

    Sets up structured logging with two output handlers:
    1. Console: Human-readable colored output at INFO level (DEBUG if verbose)
    2. File (optional): JSON-formatted DEBUG output for analysis

    Args:
        verbose: If True, console shows DEBUG level.
        log_file: Optional path to JSON log file. If provided, all DEBUG
            messages are written in JSON format.

    Example:
        >>> setup_logging()
        >>> setup_logging(verbose=True, log_file="reports/run.log.json")

    Note:
        This function reconfigures the root logger and structlog globally.
        Call it once at the command entry point, before any logging calls.
    """
    root = logging.getLogger()
    root.handlers.clear()

    # Root captures everything; handlers filter by level
    root.setLevel(logging.DEBUG)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=shared_processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console_level = logging.DEBUG if verbose else logging.INFO
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        )
    )
    root.addHandler(console_handler)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
            )
        )
        root.addHandler(file_handler)
