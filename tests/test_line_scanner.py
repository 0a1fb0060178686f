"""
Tests for line_scanner.py.

Exercises the terminator automaton for every LineEnding, with and without
stripping, including carriage returns that land on a chunk boundary.
"""

import io
from typing import List, Tuple

import pytest

from byte_source import ByteSource
from config import CR, LF, LineEnding
from line_scanner import LineScanner


def scan_lines(
    data: bytes,
    mode: LineEnding,
    strip: bool = False,
    chunk_size: int = 4096,
) -> List[Tuple[bytes, bool]]:
    """Scan ``data`` to exhaustion, returning (line, ended_on_terminator) pairs."""
    scanner = LineScanner(ByteSource(io.BytesIO(data), chunk_size), mode, strip)
    results = []
    while True:
        line = bytearray()
        ended = scanner.scan(line)
        if not ended and not line:
            return results
        results.append((bytes(line), ended))
        if not ended:
            return results


class TestTerminatorConstants:
    """The terminator names match their ASCII characters."""

    def test_values(self):
        assert LF == ord("\n") == 0x0A
        assert CR == ord("\r") == 0x0D


class TestOnlyLineFeed:
    """Test LineEnding.ONLY_LF."""

    def test_line_feed_ends_line(self):
        assert scan_lines(b"a\nb\n", LineEnding.ONLY_LF) == [
            (b"a\n", True),
            (b"b\n", True),
        ]

    def test_carriage_return_is_data(self):
        assert scan_lines(b"a\r\nb", LineEnding.ONLY_LF, strip=True) == [
            (b"a\r", True),
            (b"b", False),
        ]

    def test_empty_line(self):
        assert scan_lines(b"\n", LineEnding.ONLY_LF, strip=True) == [(b"", True)]


class TestOnlyCarriageReturn:
    """Test LineEnding.ONLY_CR."""

    def test_carriage_return_ends_line(self):
        assert scan_lines(b"a\rb\nc", LineEnding.ONLY_CR, strip=True) == [
            (b"a", True),
            (b"b\nc", False),
        ]

    def test_kept_terminator(self):
        assert scan_lines(b"a\r", LineEnding.ONLY_CR) == [(b"a\r", True)]


class TestRequireCRLF:
    """Test LineEnding.CRLF."""

    def test_crlf_ends_line(self):
        assert scan_lines(b"a\r\nb", LineEnding.CRLF) == [
            (b"a\r\n", True),
            (b"b", False),
        ]

    def test_crlf_stripped(self):
        assert scan_lines(b"a\r\nb", LineEnding.CRLF, strip=True) == [
            (b"a", True),
            (b"b", False),
        ]

    def test_lone_carriage_return_is_data(self):
        assert scan_lines(b"a\rb", LineEnding.CRLF) == [(b"a\rb", False)]

    def test_lone_line_feed_is_data(self):
        assert scan_lines(b"a\nb", LineEnding.CRLF) == [(b"a\nb", False)]

    def test_carriage_return_at_end_of_data_is_data(self):
        assert scan_lines(b"a\r", LineEnding.CRLF, strip=True) == [(b"a\r", False)]

    def test_lf_cr_is_not_a_terminator(self):
        assert scan_lines(b"a\n\rb", LineEnding.CRLF) == [(b"a\n\rb", False)]

    def test_repeated_carriage_returns(self):
        assert scan_lines(b"a\r\r\nb", LineEnding.CRLF, strip=True) == [
            (b"a\r", True),
            (b"b", False),
        ]


class TestAuto:
    """Test LineEnding.AUTO."""

    def test_crlf_kept(self):
        assert scan_lines(b"a\r\nb", LineEnding.AUTO) == [
            (b"a\r\n", True),
            (b"b", False),
        ]

    def test_crlf_stripped(self):
        assert scan_lines(b"a\r\nb", LineEnding.AUTO, strip=True) == [
            (b"a", True),
            (b"b", False),
        ]

    def test_lone_carriage_return_ends_line(self):
        assert scan_lines(b"a\rb", LineEnding.AUTO) == [
            (b"a\r", True),
            (b"b", False),
        ]

    def test_carriage_return_at_end_of_data_ends_line(self):
        assert scan_lines(b"a\r", LineEnding.AUTO, strip=True) == [(b"a", True)]

    def test_lone_line_feed_is_data(self):
        assert scan_lines(b"a\nb", LineEnding.AUTO, strip=True) == [(b"a\nb", False)]

    def test_empty_crlf_line(self):
        assert scan_lines(b"\r\n", LineEnding.AUTO, strip=True) == [(b"", True)]


class TestChunkBoundaries:
    """Terminator handling is independent of where chunks split."""

    @pytest.mark.parametrize("chunk_size", [1, 2, 3, 4096])
    def test_crlf_split_across_chunks(self, chunk_size):
        assert scan_lines(b"ab\r\ncd\r\n", LineEnding.AUTO, True, chunk_size) == [
            (b"ab", True),
            (b"cd", True),
        ]

    @pytest.mark.parametrize("chunk_size", [1, 5, 4096])
    def test_long_line(self, chunk_size):
        data = bytes(range(32, 127)) * 3 + b"\n"
        assert scan_lines(data, LineEnding.ONLY_LF, False, chunk_size) == [(data, True)]


class TestHandleTerminator:
    """Test LineScanner.handle_terminator() directly."""

    def test_mismatched_byte_appended_as_data(self):
        scanner = LineScanner(ByteSource(io.BytesIO(b"")), LineEnding.ONLY_CR)
        line = bytearray(b"x")
        assert scanner.handle_terminator(LF, line) is False
        assert line == bytearray(b"x\n")

    def test_auto_consumes_line_feed_after_carriage_return(self):
        source = ByteSource(io.BytesIO(b"\nrest"))
        scanner = LineScanner(source, LineEnding.AUTO, strip_line_ends=True)
        line = bytearray()
        assert scanner.handle_terminator(CR, line) is True
        assert line == bytearray()
        assert source.consumed == 1
        assert source.peek() == ord("r")

    def test_auto_peek_does_not_consume_other_byte(self):
        source = ByteSource(io.BytesIO(b"rest"))
        scanner = LineScanner(source, LineEnding.AUTO)
        line = bytearray()
        assert scanner.handle_terminator(CR, line) is True
        assert line == bytearray(b"\r")
        assert source.consumed == 0
