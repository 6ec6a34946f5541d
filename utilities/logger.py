"""
Logging system using structlog.
Application events and the server's own stdlib loggers share one renderer,
so uvicorn's startup and access lines come out in the same JSON or console format.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Union
import structlog
from structlog.stdlib import LoggerFactory, ProcessorFormatter

# Loggers uvicorn configures with handlers of its own
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

STDOUT_HANDLER_NAME = "books_api.stdout"
FILE_HANDLER_NAME = "books_api.file"


def _shared_processors(debug: bool) -> List:
    """Processors applied to structlog events and foreign stdlib records alike."""
    processors = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    return processors


def _build_formatter(log_format: str, shared_processors: List, colors: bool) -> ProcessorFormatter:
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)

    return ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[ProcessorFormatter.remove_processors_meta, renderer],
    )


def _replace_handler(root_logger: logging.Logger, handler: logging.Handler) -> None:
    """Install a named handler on the root logger, dropping an earlier one of the same name."""
    for existing in list(root_logger.handlers):
        if existing.get_name() == handler.get_name():
            root_logger.removeHandler(existing)
            existing.close()
    root_logger.addHandler(handler)


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging with configurable output formats.
    Safe to call more than once; handlers from an earlier call are replaced.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Add call site information to every event
    """
    level = getattr(logging, log_level.upper())
    shared_processors = _shared_processors(debug)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.set_name(STDOUT_HANDLER_NAME)
    stdout_handler.setFormatter(_build_formatter(log_format, shared_processors, colors=True))
    _replace_handler(root_logger, stdout_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.set_name(FILE_HANDLER_NAME)
        file_handler.setLevel(level)
        file_handler.setFormatter(_build_formatter(log_format, shared_processors, colors=False))
        _replace_handler(root_logger, file_handler)

    # Server records bubble up to the root handlers instead of uvicorn's own
    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = []
        server_logger.propagate = True
        server_logger.setLevel(level)

    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *shared_processors, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        # module-level loggers must pick up a reconfiguration
        cache_logger_on_first_use=False,
    )

    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
