"""Parsed messages and the reader that streams their bodies."""

from __future__ import annotations

import io
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from .envelope import is_envelope_line
from .errors import BodyReaderIssued, IoFailure

if TYPE_CHECKING:
    from .stream import MessageStream


class Message:
    """A message whose envelope and headers have been parsed.

    ``headers`` is a read-only mapping from key to a tuple of value lines,
    in order of first appearance.  The body is not read until the caller
    asks for a :meth:`body_reader`.
    """

    __slots__ = ("_sender", "_headers", "_line_number", "_stream", "_reader")

    def __init__(
        self,
        sender: str,
        headers: Mapping[str, list[str]],
        *,
        line_number: int,
        stream: MessageStream,
    ) -> None:
        self._sender = sender
        self._headers = MappingProxyType({k: tuple(v) for k, v in headers.items()})
        self._line_number = line_number
        self._stream = stream
        self._reader: BodyReader | None = None

    @property
    def sender(self) -> str:
        return self._sender

    @property
    def headers(self) -> Mapping[str, tuple[str, ...]]:
        return self._headers

    @property
    def line_number(self) -> int:
        """Line of the envelope that introduced this message."""
        return self._line_number

    def get(self, key: str) -> str | None:
        """First value of header *key*, or ``None``."""
        values = self._headers.get(key)
        return values[0] if values else None

    def body_reader(self) -> BodyReader:
        """Return the reader for this message's body.  Callable once."""
        if self._reader is not None:
            raise BodyReaderIssued(
                "body reader already issued for this message", line_number=self._line_number
            )
        return self._open_reader()

    def read_body(self) -> bytes:
        """Read the whole body into memory."""
        return self.body_reader().readall()

    def _open_reader(self) -> BodyReader:
        if self._reader is None:
            self._reader = BodyReader(self)
        return self._reader

    def __repr__(self) -> str:
        return f"Message(sender={self._sender!r}, line_number={self._line_number})"


class BodyReader(io.RawIOBase):
    """Lazy, forward-only reader over one message body.

    The reader borrows the stream's cursor.  It stops, without consuming
    it, at the first line that starts with the ``From `` marker, or at end
    of input.  End of body follows the usual Python convention:
    :meth:`readinto` returns ``0`` and ``read()`` returns ``b""``, for every
    call from then on.

    Closing the reader gives the body up: the next ``read_message()``
    skips whatever is left of it.
    """

    def __init__(self, message: Message) -> None:
        super().__init__()
        self._message = message
        self._offset = 0
        self._finished = False
        self._failure: IoFailure | None = None

    def readable(self) -> bool:
        return True

    @property
    def message(self) -> Message:
        return self._message

    @property
    def exhausted(self) -> bool:
        """True once the reader has reached end of body."""
        return self._finished

    def readinto(self, buffer) -> int:  # type: ignore[override]
        """Copy body bytes from the current line into *buffer*.

        An empty *buffer* gets ``0`` without moving the cursor; check
        :attr:`exhausted` rather than relying on ``0`` in that case.
        """
        if self.closed:
            raise ValueError("I/O operation on closed body reader")
        return self._copy(memoryview(buffer).cast("B"))

    def drain(self) -> int:
        """Discard the rest of the body; return the number of bytes skipped."""
        if self.closed:
            raise ValueError("I/O operation on closed body reader")
        return self._skip()

    def _copy(self, view: memoryview) -> int:
        if self._failure is not None:
            raise self._failure
        if self._finished:
            return 0
        if not len(view):
            return 0

        stream = self._message._stream
        if stream._current is not self._message:
            # The stream has moved on to another message.
            self._finished = True
            return 0

        cursor = stream._cursor
        line = cursor.current_line
        if cursor.exhausted or (self._offset == 0 and is_envelope_line(line)):
            self._finished = True
            return 0

        count = min(len(view), len(line) - self._offset)
        view[:count] = line[self._offset:self._offset + count]
        self._offset += count

        if self._offset >= len(line):
            self._offset = 0
            try:
                cursor.advance()
            except IoFailure as exc:
                # Deliver what was copied; the failure surfaces on the next read.
                self._failure = exc
        return count

    def _skip(self) -> int:
        # Works on a closed reader too; the stream uses it to move past
        # a body the caller gave up on.
        skipped = 0
        view = memoryview(bytearray(io.DEFAULT_BUFFER_SIZE))
        while True:
            count = self._copy(view)
            if not count:
                return skipped
            skipped += count

    def _at_boundary(self) -> bool:
        """True when no body bytes remain, even if end of body was never read."""
        if self._finished:
            return True
        if self._failure is not None:
            return False
        cursor = self._message._stream._cursor
        return self._offset == 0 and (
            cursor.exhausted or is_envelope_line(cursor.current_line)
        )
