"""Streaming reader for legacy mbox archives.

Public API re-exported here for convenience::

    from mbox_stream import open_mbox, EndOfArchive
"""

from .config import MboxConfig, RetryConfig
from .cursor import LineCursor
from .errors import (
    BodyNotDrained,
    BodyReaderIssued,
    EndOfArchive,
    FormatError,
    IoFailure,
    MalformedEnvelope,
    MalformedHeader,
    MboxError,
)
from .logging import setup_logging
from .message import BodyReader, Message
from .models import MessageSummary
from .retry import with_retry
from .stream import MessageStream, open_mbox, open_path

__all__ = [
    "BodyNotDrained",
    "BodyReader",
    "BodyReaderIssued",
    "EndOfArchive",
    "FormatError",
    "IoFailure",
    "LineCursor",
    "MalformedEnvelope",
    "MalformedHeader",
    "MboxConfig",
    "MboxError",
    "Message",
    "MessageStream",
    "MessageSummary",
    "RetryConfig",
    "open_mbox",
    "open_path",
    "setup_logging",
    "with_retry",
]
