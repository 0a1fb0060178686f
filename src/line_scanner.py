# Copyright (c) 2025 Stephen Clau

# This file is part of File Tailer.

# File Tailer is dual-licensed:

# 1. GNU Affero General Public License v3.0 (AGPL-3.0)
#    See LICENSE file for full terms

# 2. Commercial License
#    For proprietary use without AGPL requirements
#    Contact: licensing@laudiversified.com

# SPDX-License-Identifier: AGPL-3.0-only OR Commercial

"""
Line terminator recognition.

LineScanner pulls bytes from a ByteSource into the line being built and
decides, per configured LineEnding, whether a CR or LF byte ends the line:

    ONLY_LF   LF ends the line, CR is data
    ONLY_CR   CR ends the line, LF is data
    CRLF      CR LF ends the line; a lone CR or LF is data
    AUTO      CR LF or a lone CR ends the line; a lone LF is data

CRLF and AUTO are anchored on the carriage return and peek one byte ahead
without consuming it.
"""

try:
    from .byte_source import ByteSource
    from .config import CR, LF, LineEnding
except ImportError:
    from byte_source import ByteSource
    from config import CR, LF, LineEnding


class LineScanner:
    """Terminator automaton bound to one ByteSource."""

    def __init__(
        self,
        source: ByteSource,
        line_ending: LineEnding = LineEnding.AUTO,
        strip_line_ends: bool = False,
    ):
        self.source = source
        self.line_ending = line_ending
        self.strip_line_ends = strip_line_ends

    def scan(self, line: bytearray) -> bool:
        """
        Append bytes to ``line`` until a terminator is matched or the source
        has nothing more to give.

        Returns:
            True if the line ended on a terminator, False on exhaustion
        """
        source = self.source
        while True:
            run = source.read_run()
            if run:
                line += run

            byte = source.next()
            if byte is None:
                return False

            if byte == LF or byte == CR:
                if self.handle_terminator(byte, line):
                    return True
            else:
                line.append(byte)

    def handle_terminator(self, byte: int, line: bytearray) -> bool:
        """
        Decide whether an already consumed CR or LF ends the line.

        A byte that does not end the line is appended as data. A byte that
        does is appended only when terminators are kept.

        Returns:
            True if the line ends here
        """
        mode = self.line_ending

        if mode is LineEnding.ONLY_LF or mode is LineEnding.ONLY_CR:
            wanted = LF if mode is LineEnding.ONLY_LF else CR
            if byte == wanted:
                self._terminate(line, bytes((byte,)))
                return True
            line.append(byte)
            return False

        # CRLF / AUTO: only a carriage return can start a terminator
        if byte != CR:
            line.append(byte)
            return False

        if self.source.peek() == LF:
            self.source.next()
            self._terminate(line, b"\r\n")
            return True

        if mode is LineEnding.AUTO:
            self._terminate(line, b"\r")
            return True

        line.append(byte)
        return False

    def _terminate(self, line: bytearray, terminator: bytes) -> None:
        if not self.strip_line_ends:
            line += terminator
