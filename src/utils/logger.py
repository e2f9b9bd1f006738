import logging
import sys
from typing import Any, Optional, TextIO

import structlog

LEVEL_MAP = {
    "debug": "debug",
    "info": "info",
    "warn": "warning",
    "warning": "warning",
    "error": "error",
}

HANDLER_NAME = "cloud_arch.stderr"


def _remove_handler(root: logging.Logger) -> None:
    for h in list(root.handlers):
        if h.get_name() == HANDLER_NAME:
            root.removeHandler(h)
            h.close()


def configure_logging(level: str = "INFO", fmt: str = "console", stream: Optional[TextIO] = None) -> None:
    """
    Route structlog through the stdlib logging module to stderr.

    stdout belongs to the stdio transport, so nothing but protocol frames may
    ever be written there. Write failures on the log stream are absorbed by
    the logging handler and never reach a caller.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    _remove_handler(root)
    root.addHandler(handler)
    root.setLevel(numeric_level)
    # a dead stderr must not turn into tracebacks on a dead stderr
    logging.raiseExceptions = False

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if fmt == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def reset_logging() -> None:
    """Undo configure_logging."""
    _remove_handler(logging.getLogger())
    logging.raiseExceptions = True
    structlog.reset_defaults()


def log_event(
    level: str,
    message: str,
    *,
    session_id: Optional[str] = None,
    **meta: Any,
) -> None:
    lvl = LEVEL_MAP.get(level.lower(), "info")
    logger = structlog.get_logger("cloud_arch")
    if session_id is not None:
        meta["session_id"] = session_id
    getattr(logger, lvl)(message, **meta)
