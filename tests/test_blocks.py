"""Tests for the block reader and writer."""

import io

import pytest

from fastexport_rewriter.blocks import BlockReader, BlockWriter
from fastexport_rewriter.errors import ShortReadError


class TrickleStream(io.BytesIO):
    """Returns at most two bytes per read, like a slow pipe."""

    def read(self, size=-1):
        if size is None or size < 0:
            return super().read(size)
        return super().read(min(size, 2))


class TestBlockReader:
    def test_reads_tokens_until_end(self):
        reader = BlockReader(io.BytesIO(b"commit refs/heads/master\nmark :1\n"))
        assert reader.read_token() == "commit refs/heads/master"
        assert reader.read_token() == "mark :1"
        assert reader.read_token() is None

    def test_empty_line_is_a_token(self):
        reader = BlockReader(io.BytesIO(b"\nfrom :1\n"))
        assert reader.read_token() == ""
        assert reader.read_token() == "from :1"

    def test_last_line_without_newline(self):
        reader = BlockReader(io.BytesIO(b"from :3"))
        assert reader.read_token() == "from :3"
        assert reader.read_token() is None

    def test_payload_with_newlines_keeps_sync(self):
        reader = BlockReader(io.BytesIO(b"data 12\nhello\nworld\nnext\n"))
        assert reader.read_token() == "data 12"
        assert reader.read_bytes(12) == b"hello\nworld\n"
        assert reader.read_token() == "next"

    def test_payload_that_looks_like_tokens(self):
        reader = BlockReader(io.BytesIO(b"data 8\nmark :9\nfrom :1\n"))
        reader.read_token()
        assert reader.read_bytes(8) == b"mark :9\n"
        assert reader.read_token() == "from :1"

    def test_read_zero_bytes(self):
        reader = BlockReader(io.BytesIO(b"x\n"))
        assert reader.read_bytes(0) == b""
        assert reader.read_token() == "x"

    def test_short_read(self):
        reader = BlockReader(io.BytesIO(b"abc"))
        with pytest.raises(ShortReadError, match="expected 5 bytes, got 3") as exc_info:
            reader.read_bytes(5)
        assert exc_info.value.expected == 5
        assert exc_info.value.received == 3

    def test_partial_reads_are_completed(self):
        reader = BlockReader(TrickleStream(b"0123456789"))
        assert reader.read_bytes(7) == b"0123456"

    def test_iter_chunks_bounded(self):
        reader = BlockReader(io.BytesIO(b"x" * 2500 + b"tail\n"))
        sizes = [len(chunk) for chunk in reader.iter_chunks(2500, 1024)]
        assert sizes == [1024, 1024, 452]
        assert reader.read_token() == "tail"

    def test_iter_chunks_short_read(self):
        reader = BlockReader(io.BytesIO(b"x" * 10))
        with pytest.raises(ShortReadError):
            list(reader.iter_chunks(20, 4))

    def test_invalid_utf8_survives(self):
        raw = b"M 644 inline caf\xe9.txt"
        reader = BlockReader(io.BytesIO(raw + b"\n"))
        out = io.BytesIO()
        BlockWriter(out).write_line(reader.read_token())
        assert out.getvalue() == raw + b"\n"


class TestBlockWriter:
    def test_write_line_uses_newline(self):
        out = io.BytesIO()
        writer = BlockWriter(out, newline="\r\n")
        writer.write_line("from :1")
        writer.write_line()
        assert out.getvalue() == b"from :1\r\n\r\n"

    def test_write_raw(self):
        out = io.BytesIO()
        writer = BlockWriter(out)
        writer.write(b"\x00\xff")
        writer.write_line("é")
        assert out.getvalue() == b"\x00\xff\xc3\xa9\n"
