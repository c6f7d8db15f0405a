"""Pytest configuration and shared fixtures."""

import io
import json
from collections.abc import Callable
from typing import Any

import pytest

from mcp_lite.protocol.transport import FramedTransport


def frame(message: dict[str, Any] | bytes) -> bytes:
    """Frame a message (dict or raw body) with a Content-Length header."""
    body = message if isinstance(message, bytes) else json.dumps(message).encode()
    return f"Content-Length: {len(body)}\r\n\r\n".encode() + body


@pytest.fixture
def scripted_transport() -> Callable[..., tuple[FramedTransport, io.BytesIO]]:
    """Build a transport whose reader replays the given messages.

    Returns a factory; each call yields the transport and the BytesIO its
    writes land in.
    """

    def factory(*messages: dict[str, Any] | bytes) -> tuple[FramedTransport, io.BytesIO]:
        writer = io.BytesIO()
        reader = io.BytesIO(b"".join(frame(m) for m in messages))
        return FramedTransport(reader=reader, writer=writer, stderr=io.StringIO()), writer

    return factory


@pytest.fixture
def written_messages() -> Callable[[io.BytesIO], list[dict[str, Any]]]:
    """Decode every frame written to a BytesIO."""

    def decode(writer: io.BytesIO) -> list[dict[str, Any]]:
        transport = FramedTransport(
            reader=io.BytesIO(writer.getvalue()), writer=io.BytesIO(), stderr=io.StringIO()
        )
        messages = []
        while (body := transport.read_frame()) is not None:
            messages.append(json.loads(body))
        return messages

    return decode
