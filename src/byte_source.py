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
Chunked byte access to an open binary file.

ByteSource hands bytes to the line scanner one at a time (or as runs of
non-terminator bytes) and refills its chunk from the file whenever the
current one is used up. An empty refill only means "no bytes right now";
the next request tries the file again.
"""

import re
from typing import BinaryIO, Optional

_TERMINATOR_RE = re.compile(rb"[\r\n]")


class ByteSource:
    """
    Buffered reader over a binary file handle.

    ``consumed`` counts every byte handed out with consume=True since the
    last reset_consumed(); peeking never changes it.
    """

    def __init__(self, handle: BinaryIO, chunk_size: int = 4096):
        self.handle = handle
        self.chunk_size = chunk_size
        self._buffer = b""
        self._cursor = 0
        self.consumed = 0

    @property
    def buffered(self) -> int:
        """Bytes fetched from the file but not yet consumed."""
        return len(self._buffer) - self._cursor

    def refill(self) -> bool:
        """
        Replace the buffer with the next chunk of the file.

        Returns:
            True if the new chunk holds at least one byte
        """
        self._buffer = self.handle.read(self.chunk_size) or b""
        self._cursor = 0
        return len(self._buffer) != 0

    def next(self, consume: bool = True) -> Optional[int]:
        """
        Return the next byte, or None when the file has nothing more right now.

        Args:
            consume: Advance past the byte (False peeks)
        """
        if self._cursor >= len(self._buffer):
            if not self.refill():
                return None

        byte = self._buffer[self._cursor]
        if consume:
            self._cursor += 1
            self.consumed += 1
        return byte

    def peek(self) -> Optional[int]:
        return self.next(consume=False)

    def read_run(self) -> bytes:
        """
        Consume the bytes from the cursor up to (not including) the next CR or
        LF in the current buffer, or to the end of the buffer.

        Never refills; returns b"" when the next byte is a terminator candidate
        or the buffer is exhausted.
        """
        match = _TERMINATOR_RE.search(self._buffer, self._cursor)
        end = match.start() if match else len(self._buffer)
        run = self._buffer[self._cursor:end]
        self._cursor = end
        self.consumed += len(run)
        return run

    def reset_consumed(self) -> int:
        """Zero the consumed counter and return its previous value."""
        consumed, self.consumed = self.consumed, 0
        return consumed
