"""Byte-level reading and writing of fast-export/fast-import streams.

Tokens are newline-terminated, but a ``data <N>`` token is followed by
exactly N raw bytes that may contain newlines of their own. The reader
serves both kinds of read from one cursor so they can be interleaved.
"""

from __future__ import annotations

from typing import BinaryIO, Iterator

from .errors import ShortReadError

ENCODING = "utf-8"
# Paths and messages that are not valid UTF-8 must survive unchanged.
ERRORS = "surrogateescape"


def decode(raw: bytes) -> str:
    return raw.decode(ENCODING, ERRORS)


def encode(text: str) -> bytes:
    return text.encode(ENCODING, ERRORS)


def byte_length(text: str) -> int:
    """Length of ``text`` once written to the output stream."""
    return len(encode(text))


class BlockReader:
    """Reads newline-terminated tokens and fixed-length payloads."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def read_token(self) -> str | None:
        """Read the next token, without its newline. Returns None at end of stream."""
        line = self._stream.readline()
        if not line:
            return None
        if line.endswith(b"\n"):
            line = line[:-1]
        return decode(line)

    def read_bytes(self, size: int) -> bytes:
        """Read exactly ``size`` bytes, newlines included."""
        if size <= 0:
            return b""
        chunks = []
        remaining = size
        while remaining > 0:
            chunk = self._stream.read(remaining)
            if not chunk:
                raise ShortReadError(size, size - remaining)
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def iter_chunks(self, size: int, block_size: int) -> Iterator[bytes]:
        """Yield the next ``size`` bytes in pieces of at most ``block_size``."""
        remaining = size
        while remaining > 0:
            chunk = self.read_bytes(min(block_size, remaining))
            remaining -= len(chunk)
            yield chunk


class BlockWriter:
    """Writes fast-import lines and raw payloads to a binary sink."""

    def __init__(self, stream: BinaryIO, newline: str = "\n"):
        self._stream = stream
        self._newline = encode(newline)

    def write_line(self, text: str = "") -> None:
        self._stream.write(encode(text))
        self._stream.write(self._newline)

    def write(self, raw: bytes) -> None:
        self._stream.write(raw)

    def flush(self) -> None:
        self._stream.flush()
