"""Typed client-to-server messages for the background WebSocket."""

from __future__ import annotations

import json
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter

_MAX_WS_MESSAGE_SIZE = 4096


class ViewportMessage(BaseModel):
    type: Literal["viewport"]
    width: int = Field(ge=0)


class PingMessage(BaseModel):
    type: Literal["ping"]


BackgroundClientMessage = Annotated[ViewportMessage | PingMessage, Field(discriminator="type")]

_message_adapter: TypeAdapter[BackgroundClientMessage] = TypeAdapter(BackgroundClientMessage)


def parse_background_message(raw: str) -> ViewportMessage | PingMessage:
    """Parse and validate a raw JSON string from the browser."""
    byte_len = len(raw.encode("utf-8"))
    if byte_len > _MAX_WS_MESSAGE_SIZE:
        raise ValueError(f"Message too large ({byte_len} bytes, max {_MAX_WS_MESSAGE_SIZE})")
    try:
        data = json.loads(raw)
    except RecursionError:
        raise ValueError("Message nested too deeply") from None
    return _message_adapter.validate_python(data)
