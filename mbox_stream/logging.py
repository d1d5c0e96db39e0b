"""structlog wiring for the command line tool.

Events are routed through the stdlib root logger, so an application that
embeds the parser and configures ``logging`` itself still receives them.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

from .config import MboxConfig


def setup_logging(config: MboxConfig | None = None, *, stream: TextIO | None = None) -> None:
    """Send structlog events to *stream* (stderr by default).

    Level and renderer come from ``config.log_level`` and ``config.log_json``.
    Stdout is left alone because the CLI writes message data there.
    """
    config = config if config is not None else MboxConfig()
    if config.log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            # Per-message debug events are dropped before the event dict is built.
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(config.log_level.upper())
