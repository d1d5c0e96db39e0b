"""Exceptions raised while reading an mbox archive.

Every failure derives from :class:`MboxError` and carries the 1-based line
number on which it was detected.  :class:`EndOfArchive` is deliberately
*not* an ``MboxError``: it is the normal way a stream reports that no more
messages follow.
"""

from __future__ import annotations


class MboxError(Exception):
    """Base class for mbox parsing failures."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"{line_number}: {message}"
        super().__init__(message)


class FormatError(MboxError):
    """The source does not start with a ``From `` envelope line."""


class MalformedEnvelope(MboxError):
    """An envelope line carries no sender address."""


class MalformedHeader(MboxError):
    """The header block of a message cannot be parsed."""


class BodyNotDrained(MboxError):
    """The previous message still has unread body bytes."""


class BodyReaderIssued(MboxError):
    """``Message.body_reader()`` was called more than once."""


class IoFailure(MboxError):
    """The underlying byte source failed; the cause is chained."""


class EndOfArchive(Exception):
    """No envelope line where the next message was expected.

    ``trailing_line`` is ``None`` when the input really ended.  Otherwise it
    holds the line found in place of an envelope, which usually means the
    archive is corrupt rather than finished.
    """

    def __init__(self, *, line_number: int, trailing_line: bytes | None = None) -> None:
        self.line_number = line_number
        self.trailing_line = trailing_line
        super().__init__("end of archive")

    @property
    def clean(self) -> bool:
        """True when the archive ended at end of input."""
        return self.trailing_line is None
