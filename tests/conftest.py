"""Shared archives and fixtures for the mbox_stream test suite."""

from __future__ import annotations

import io
import logging

import pytest
import structlog

from mbox_stream import MessageStream, open_mbox

MBOX_ONE_MESSAGE = b"""From foo@bar.com
Subject: Hello world

Test message
"""

MBOX_NO_HEADERS = b"""From foo@bar.com

Test message
"""

MBOX_NO_ATTRIBUTE = b"""From foo@bar.com
 continuation-line

Test message
"""

MBOX_KEY_MISSING = b"""From foo@bar.com
: value-line

Test message
"""

MBOX_CONTINUATION = b"""From foo@bar.com
Subject: Hello
 world

Test message
"""

MBOX_THREE_HEADERS = b"""From foo@bar.com
From: foo@bar.com
To: user1@bar.com
 user2@bar.com
 user3@bar.com
 user4@bar.com
 user5@bar.com
Subject: Hello world

Greetings and hallucinations!
"""

MBOX_THREE_MESSAGES = b"""From alice@example.com
Subject: one

Body one
more
From bob@example.com
Subject: two

Body two
From carol@example.com
Subject: three

Body three
"""


def build_archive(*messages: tuple[str, dict[str, str], str]) -> bytes:
    """Build an archive from ``(sender, headers, body)`` triples."""
    out = io.BytesIO()
    for sender, headers, body in messages:
        out.write(f"From {sender}\n".encode())
        for key, value in headers.items():
            out.write(f"{key}: {value}\n".encode())
        out.write(b"\n")
        out.write(body.encode())
    return out.getvalue()


class FailingSource:
    """Binary source that raises ``OSError`` after a number of lines."""

    def __init__(self, data: bytes, *, fail_after: int) -> None:
        self._data = io.BytesIO(data)
        self._left = fail_after

    def readline(self) -> bytes:
        if self._left == 0:
            raise OSError("device not ready")
        self._left -= 1
        return self._data.readline()


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def one_message_stream() -> MessageStream:
    return open_mbox(MBOX_ONE_MESSAGE)


@pytest.fixture
def three_message_stream() -> MessageStream:
    return open_mbox(MBOX_THREE_MESSAGES)


@pytest.fixture
def archive_path(tmp_path):
    path = tmp_path / "archive.mbox"
    path.write_bytes(MBOX_THREE_MESSAGES)
    return path
