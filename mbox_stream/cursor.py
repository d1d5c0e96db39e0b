"""One-line lookahead over a binary byte source."""

from __future__ import annotations

import io
from typing import BinaryIO

from .errors import IoFailure


def as_binary_source(source: object) -> BinaryIO:
    """Return *source* as something with a binary ``readline()``.

    Raw ``bytes``-like values are wrapped in :class:`io.BytesIO`; file
    objects (``open(path, "rb")``, sockets' ``makefile("rb")``) pass through.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(source))
    if hasattr(source, "readline"):
        return source  # type: ignore[return-value]
    raise TypeError(f"expected a binary file object or bytes, got {type(source).__name__}")


class LineCursor:
    """Forward-only cursor holding the most recently read line.

    ``current_line`` keeps its trailing newline (the last line of a source
    may lack one).  ``line_number`` counts successful reads, so it is the
    1-based number of ``current_line``.
    """

    def __init__(self, source: object) -> None:
        self._source = as_binary_source(source)
        self.current_line: bytes = b""
        self.line_number: int = 0
        self.exhausted: bool = False

    def advance(self) -> bool:
        """Read the next line; return ``False`` once the input is exhausted."""
        if self.exhausted:
            return False
        try:
            line = self._source.readline()
        except OSError as exc:
            raise IoFailure(f"read failed: {exc}", line_number=self.line_number + 1) from exc

        if not isinstance(line, (bytes, bytearray)):
            raise TypeError("mbox sources must be opened in binary mode")
        if not line:
            self.exhausted = True
            self.current_line = b""
            return False

        self.current_line = bytes(line)
        self.line_number += 1
        return True
