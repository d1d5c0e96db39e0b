"""Serializable views of parsed messages."""

from __future__ import annotations

from pydantic import BaseModel, Field

from .message import Message


class MessageSummary(BaseModel):
    """One message of an archive, without its body."""

    index: int = Field(description="1-based position of the message in the archive")
    line_number: int = Field(description="Line of the message's envelope")
    sender: str = Field(description="Sender taken from the envelope line")
    headers: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Header values in order of first appearance",
    )
    body_bytes: int = Field(default=0, description="Size of the body in bytes")

    @classmethod
    def from_message(cls, index: int, message: Message, *, body_bytes: int = 0) -> MessageSummary:
        return cls(
            index=index,
            line_number=message.line_number,
            sender=message.sender,
            headers={key: list(values) for key, values in message.headers.items()},
            body_bytes=body_bytes,
        )
