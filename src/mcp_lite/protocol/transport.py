"""Framed STDIO transport layer for MCP communication.

Reads and writes length-prefixed messages over a pair of byte streams:

    Content-Length: <byte count>\\r\\n
    \\r\\n
    <body>

The transport knows nothing about the JSON carried in a frame body.
"""

from __future__ import annotations

import sys
from typing import BinaryIO, TextIO

from mcp_lite.errors import FramingError, TransportError

CONTENT_LENGTH = "content-length"

# Maximum frame body size (1 MB)
MAX_FRAME_SIZE = 1_048_576


class FramedTransport:
    """Framed transport for MCP communication.

    Reads frames from a binary input stream and writes frames to a binary
    output stream. Logging goes to a separate text stream to avoid
    corrupting the protocol stream.
    """

    def __init__(
        self,
        reader: BinaryIO | None = None,
        writer: BinaryIO | None = None,
        stderr: TextIO | None = None,
        max_frame_size: int = MAX_FRAME_SIZE,
    ) -> None:
        """Initialize the transport.

        Args:
            reader: Input byte stream (defaults to sys.stdin.buffer).
            writer: Output byte stream (defaults to sys.stdout.buffer).
            stderr: Log stream (defaults to sys.stderr).
            max_frame_size: Largest body length accepted from a header.
        """
        self._reader = reader or sys.stdin.buffer
        self._writer = writer or sys.stdout.buffer
        self._stderr = stderr or sys.stderr
        self._max_frame_size = max_frame_size

    def read_frame(self) -> bytes | None:
        """Read one frame body.

        Returns:
            The frame body, or None if the stream ended before any header
            byte was read.

        Raises:
            FramingError: If the header block or body is malformed or
                truncated.
            TransportError: If the underlying stream fails.
        """
        headers = self._read_headers()
        if headers is None:
            return None

        raw_length = headers.get(CONTENT_LENGTH)
        if raw_length is None:
            raise FramingError("Missing Content-Length header")
        if not raw_length.isdigit():
            raise FramingError(f"Invalid Content-Length: {raw_length!r}")

        length = int(raw_length)
        if length > self._max_frame_size:
            raise FramingError(
                f"Frame too large: {length} bytes exceeds {self._max_frame_size} limit"
            )

        body = self._read_exact(length)
        if len(body) != length:
            raise FramingError(
                f"Stream ended mid-body: expected {length} bytes, got {len(body)}"
            )
        return body

    def _read_headers(self) -> dict[str, str] | None:
        """Read header lines up to and including the blank separator line."""
        headers: dict[str, str] = {}
        first = True
        while True:
            line = self._readline()
            if not line:
                if first:
                    return None  # Clean disconnect
                raise FramingError("Stream ended inside frame header")
            first = False

            text = line.decode("ascii", errors="replace").strip()
            if not text:
                return headers

            key, sep, value = text.partition(":")
            if sep:
                headers[key.strip().lower()] = value.strip()

    def _readline(self) -> bytes:
        try:
            return self._reader.readline()
        except OSError as e:
            raise TransportError(f"Failed to read from stream: {e}") from e

    def _read_exact(self, length: int) -> bytes:
        chunks: list[bytes] = []
        remaining = length
        while remaining > 0:
            try:
                chunk = self._reader.read(remaining)
            except OSError as e:
                raise TransportError(f"Failed to read from stream: {e}") from e
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def write_frame(self, body: bytes) -> None:
        """Write one frame and flush.

        Args:
            body: Encoded message body.

        Raises:
            TransportError: If the underlying stream fails.
        """
        header = f"Content-Length: {len(body)}\r\n\r\n".encode("ascii")
        try:
            self._writer.write(header + body)
            self._writer.flush()
        except OSError as e:
            raise TransportError(f"Failed to write to stream: {e}") from e

    def log(self, message: str) -> None:
        """Write a log message to stderr.

        Args:
            message: Log message.
        """
        self._stderr.write(f"[MCP] {message}\n")
        self._stderr.flush()
