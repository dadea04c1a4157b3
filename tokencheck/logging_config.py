"""
Structured logging configuration using structlog.

Engine modules log through stdlib ``logging``. ``setup_logging`` sends
those records through structlog's ``ProcessorFormatter`` so that every
line carries the request context bound by the validation service
(``address``, ``network``). Lines are JSON unless the level is DEBUG, in
which case the console renderer is used. Logs go to stderr; stdout is
reserved for CLI output.
"""

import logging
import sys
from typing import IO, Optional

import structlog

from .config import settings

QUIET_LOGGERS = ("httpcore", "httpx")


def _renderer(debug: bool) -> structlog.types.Processor:
    if debug:
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer()


def setup_logging(log_level: Optional[str] = None, stream: Optional[IO[str]] = None) -> None:
    """Route engine logs through structlog.

    Args:
        log_level: Override log level (default: from settings.log_level)
        stream: Destination for log lines (default: stderr)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    debug = level == logging.DEBUG

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if not debug:
        pre_chain.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer(debug)],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
