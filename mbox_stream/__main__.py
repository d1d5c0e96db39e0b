"""Command line entry point.

Usage::

    python -m mbox_stream summary PATH        # one JSON line per message
    python -m mbox_stream body PATH INDEX     # write body of message INDEX to stdout

Settings come from ``MBOX_*`` and ``RETRY_*`` environment variables.
"""

from __future__ import annotations

import sys

import structlog

from .config import MboxConfig
from .errors import MboxError
from .logging import setup_logging
from .models import MessageSummary
from .retry import with_retry
from .stream import MessageStream, open_path

logger = structlog.get_logger()

USAGE = "Usage: python -m mbox_stream <summary PATH | body PATH INDEX>"


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv

    if len(args) == 2 and args[0] == "summary":
        index = None
    elif len(args) == 3 and args[0] == "body" and args[2].isdigit() and int(args[2]) > 0:
        index = int(args[2])
    else:
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    config = MboxConfig()
    setup_logging(config)
    path = args[1]
    opener = with_retry(config.retry)(open_path)

    try:
        with opener(path, strict=config.strict) as stream:
            if index is None:
                _summary(stream)
            else:
                _body(stream, index, config.chunk_size)
    except MboxError as exc:
        logger.error("mbox_parse_failed", path=path, line=exc.line_number, error=str(exc))
        sys.exit(1)
    except OSError as exc:
        logger.error("mbox_open_failed", path=path, error=str(exc))
        sys.exit(1)


def _summary(stream: MessageStream) -> None:
    for index, message in enumerate(stream, start=1):
        size = message.body_reader().drain()
        summary = MessageSummary.from_message(index, message, body_bytes=size)
        print(summary.model_dump_json())


def _body(stream: MessageStream, index: int, chunk_size: int) -> None:
    for position, message in enumerate(stream.messages(drain=True), start=1):
        if position != index:
            continue
        reader = message.body_reader()
        out = sys.stdout.buffer
        while chunk := reader.read(chunk_size):
            out.write(chunk)
        out.flush()
        return

    logger.error("mbox_message_not_found", index=index, messages=stream.messages_read)
    sys.exit(1)


if __name__ == "__main__":
    main()
