"""Sequential mbox parser.

A :class:`MessageStream` owns a single :class:`LineCursor`.  Parsing a
message leaves the cursor on the first body line; the message's
:class:`BodyReader` then borrows the cursor until it reaches the next
envelope line or end of input.  Only after that may the stream parse the
next message, otherwise :class:`BodyNotDrained` is raised.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from typing import Any, BinaryIO

import structlog

from .cursor import LineCursor
from .envelope import extract_sender, is_envelope_line, parse_header_block
from .errors import BodyNotDrained, EndOfArchive, FormatError, MalformedEnvelope
from .message import Message

logger = structlog.get_logger()


class MessageStream:
    """Hands out the messages of an mbox archive one at a time.

    Use :func:`open_mbox` or :func:`open_path` rather than constructing
    this directly; they validate the leading envelope line.
    """

    def __init__(
        self,
        cursor: LineCursor,
        *,
        strict: bool = False,
        owned: BinaryIO | None = None,
    ) -> None:
        self._cursor = cursor
        self._strict = strict
        self._owned = owned
        self._current: Message | None = None
        self._count = 0

    @property
    def line_number(self) -> int:
        return self._cursor.line_number

    @property
    def messages_read(self) -> int:
        return self._count

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def read_message(self) -> Message:
        """Parse the next envelope and header block.

        Raises :class:`EndOfArchive` when no envelope line follows.
        """
        self._check_drained()
        self._current = None
        cursor = self._cursor

        if cursor.exhausted:
            logger.debug("mbox_end_of_archive", line=cursor.line_number, messages=self._count)
            raise EndOfArchive(line_number=cursor.line_number)

        line = cursor.current_line
        if not is_envelope_line(line):
            if self._strict:
                raise MalformedEnvelope(
                    "expected a 'From ' envelope line", line_number=cursor.line_number
                )
            logger.debug(
                "mbox_end_of_archive",
                line=cursor.line_number,
                messages=self._count,
                trailing=True,
            )
            raise EndOfArchive(line_number=cursor.line_number, trailing_line=line)

        sender = extract_sender(line)
        if not sender:
            raise MalformedEnvelope(
                "sender address cannot be empty", line_number=cursor.line_number
            )
        envelope_line = cursor.line_number
        cursor.advance()

        headers = parse_header_block(cursor)

        message = Message(sender, headers, line_number=envelope_line, stream=self)
        self._current = message
        self._count += 1
        logger.debug(
            "mbox_message_parsed",
            line=envelope_line,
            sender=sender,
            headers=len(headers),
        )
        return message

    def _check_drained(self) -> None:
        message = self._current
        if message is None:
            return
        reader = message._reader
        if reader is not None:
            if reader._failure is not None:
                raise reader._failure
            if reader.closed and not reader._at_boundary():
                skipped = reader._skip()
                logger.debug("mbox_body_skipped", message_line=message.line_number, bytes=skipped)
            drained = reader._at_boundary()
        else:
            cursor = self._cursor
            drained = cursor.exhausted or is_envelope_line(cursor.current_line)
        if not drained:
            logger.warning(
                "mbox_body_not_drained",
                line=self._cursor.line_number,
                message_line=message.line_number,
            )
            raise BodyNotDrained(
                f"body of the message at line {message.line_number} has not been read",
                line_number=self._cursor.line_number,
            )
        if reader is not None:
            reader._finished = True

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def messages(self, *, drain: bool = False) -> Iterator[Message]:
        """Yield messages until the end of the archive.

        With *drain* set, whatever the caller left unread of each body is
        discarded before the next message is parsed.
        """
        while True:
            if drain and self._current is not None:
                self._current._open_reader()._skip()
            try:
                message = self.read_message()
            except EndOfArchive:
                return
            yield message

    def __iter__(self) -> Iterator[Message]:
        return self.messages()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the underlying file if this stream opened it."""
        if self._owned is not None:
            self._owned.close()
            self._owned = None

    def __enter__(self) -> MessageStream:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def open_mbox(source: object, *, strict: bool = False) -> MessageStream:
    """Wrap *source* in a :class:`MessageStream`.

    *source* is a binary file object or a ``bytes`` value.  The first line
    must be a ``From `` envelope with a non-blank sender, else
    :class:`FormatError` is raised.  Passing the check does not mean the
    rest of the archive is well formed.
    """
    stream = _validated_stream(source, strict)
    logger.debug("mbox_opened", strict=strict)
    return stream


def open_path(path: str | os.PathLike[str], *, strict: bool = False) -> MessageStream:
    """Open the archive at *path*; the returned stream owns the file."""
    fp = open(path, "rb")
    try:
        stream = _validated_stream(fp, strict)
    except BaseException:
        fp.close()
        raise
    stream._owned = fp
    logger.info("mbox_opened", path=os.fspath(path), strict=strict)
    return stream


def _validated_stream(source: object, strict: bool) -> MessageStream:
    cursor = LineCursor(source)
    if not cursor.advance():
        raise FormatError("archive is empty", line_number=1)

    line = cursor.current_line
    if not is_envelope_line(line):
        raise FormatError("archive does not start with 'From '", line_number=1)
    if not extract_sender(line):
        raise FormatError("sender address cannot be empty", line_number=1)
    return MessageStream(cursor, strict=strict)
