"""Envelope and header parsing over a :class:`LineCursor`.

These routines keep no state of their own; they look at the cursor's
current line and advance it as lines are consumed.  Header bytes are
decoded as UTF-8 with ``surrogateescape`` so that no byte is lost and no
transcoding happens.
"""

from __future__ import annotations

from .cursor import LineCursor
from .errors import MalformedHeader

MARKER = b"From "


def decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="surrogateescape")


def is_envelope_line(line: bytes) -> bool:
    """True for a line starting with the ``From `` marker."""
    return line.startswith(MARKER)


def extract_sender(line: bytes) -> str:
    """Return the trimmed sender of an envelope line (may be empty)."""
    return decode(line[len(MARKER):]).strip()


def is_blank(line: bytes) -> bool:
    return line == b"\n"


def is_continuation(line: bytes) -> bool:
    """Continuation lines start with whitespace or a control byte."""
    return len(line) >= 2 and line[0] <= 0x20


def split_header(line: bytes) -> tuple[str, str] | None:
    """Split a ``key: value`` line, or return ``None`` if it is not one."""
    if len(line) < 2 or line[0] <= 0x20:
        return None
    colon = line.find(b":")
    if colon < 1:
        return None
    return decode(line[:colon]), decode(line[colon + 1:]).strip()


def parse_header_block(cursor: LineCursor) -> dict[str, list[str]]:
    """Consume a header block and its blank separator line.

    On return the cursor sits on the first body line (or the next envelope,
    or end of input).  Keys keep the order of their first appearance; a
    repeated key appends to its existing values.
    """
    headers: dict[str, list[str]] = {}

    while True:
        if cursor.exhausted:
            raise MalformedHeader(
                "headers end without a blank line", line_number=cursor.line_number
            )
        line = cursor.current_line
        if is_blank(line):
            break
        if is_continuation(line):
            raise MalformedHeader(
                "continuation line before any header", line_number=cursor.line_number
            )
        parsed = split_header(line)
        if parsed is None:
            raise MalformedHeader(
                "expected a 'key: value' header line", line_number=cursor.line_number
            )

        key, value = parsed
        values = headers.setdefault(key, [])
        values.append(value)
        cursor.advance()

        # Folded lines keep their leading whitespace.
        while not cursor.exhausted and is_continuation(cursor.current_line):
            values.append(decode(cursor.current_line.rstrip()))
            cursor.advance()

    if not headers:
        raise MalformedHeader("message has no headers", line_number=cursor.line_number)

    cursor.advance()
    return headers
