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
Line-at-a-time file reader with optional tailing.

FileTailer composes the pieces of the reading engine:
- ByteSource      chunked byte access to the open file
- LineScanner     terminator recognition per LineEnding
- decode_line     ordered encoding fallback
- TailController  end-of-file policy (return, poll, follow rename)

Example:
    config = TailerConfig(tail=True, follow_rename=True, strip_line_ends=True)
    with FileTailer("/var/log/app.log", config) as tailer:
        for line in tailer:
            handle(line)

Another thread may call request_stop() to end a blocked read within one
poll interval. Reads themselves are not reentrant.
"""

from __future__ import annotations

import os
import threading
from typing import BinaryIO, Iterator, Optional, Union

import structlog

try:
    from .byte_source import ByteSource
    from .config import TailerConfig
    from .decoder import decode_line
    from .errors import ReopenError, TailerOpenError
    from .line_scanner import LineScanner
    from .tail_controller import TailController
except ImportError:
    from byte_source import ByteSource
    from config import TailerConfig
    from decoder import decode_line
    from errors import ReopenError, TailerOpenError
    from line_scanner import LineScanner
    from tail_controller import TailController

logger = structlog.get_logger()

PathLike = Union[str, "os.PathLike[str]"]


class FileTailer:
    """Reads discrete lines from a growing or static file."""

    def __init__(
        self,
        path: PathLike,
        config: Optional[TailerConfig] = None,
        *,
        stop_event: Optional[threading.Event] = None,
    ):
        """
        Open ``path`` for reading.

        Args:
            path: File to read
            config: Reader configuration (defaults to TailerConfig())
            stop_event: Optional shared event used as the stop signal

        Raises:
            TailerOpenError: If the path cannot be opened for reading
        """
        self._config = config if config is not None else TailerConfig()
        self._controller = TailController(self._config, stop_event)

        self._path: str = os.fspath(path)
        self._handle: Optional[BinaryIO] = None
        self._source: Optional[ByteSource] = None
        self._scanner: Optional[LineScanner] = None

        self._original_length = 0
        self._last_line_file_offset = 0
        self._last_line_number = 0
        self.last_line_bytes: Optional[bytes] = None

        self.open(path)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def config(self) -> TailerConfig:
        return self._config

    @property
    def path(self) -> str:
        return self._path

    @property
    def handle(self) -> Optional[BinaryIO]:
        return self._handle

    @property
    def original_length(self) -> int:
        """File length captured when the file was opened."""
        return self._original_length

    @property
    def last_line_number(self) -> int:
        """1-based count of read attempts since open, including "no line" results."""
        return self._last_line_number

    @property
    def last_line_file_offset(self) -> int:
        """Byte offset in the file where the last returned line began."""
        return self._last_line_file_offset

    @property
    def pending_length(self) -> int:
        """Bytes consumed since the last completed line, terminators included."""
        return self._source.consumed if self._source is not None else 0

    @property
    def closed(self) -> bool:
        return self._handle is None

    @property
    def stop_requested(self) -> bool:
        return self._controller.stop_requested

    # ------------------------------------------------------------------
    # Opening and closing
    # ------------------------------------------------------------------

    def open(self, path: PathLike) -> None:
        """
        Bind the reader to ``path``, closing any file already open.

        Raises:
            TailerOpenError: If the path cannot be opened for reading
        """
        self.close()
        path = os.fspath(path)
        self._path = path

        try:
            handle = open(path, "rb")
        except OSError as e:
            raise TailerOpenError(path, underlying=e) from e

        try:
            self._bind(handle)
        except OSError as e:
            handle.close()
            raise TailerOpenError(path, underlying=e) from e

    def reopen(self) -> None:
        """
        Reacquire the file now at the bound path and release the old handle.

        The new file is opened before the old handle is closed, so a failure
        leaves the reader bound to the old file.

        Raises:
            ReopenError: If the path cannot be opened
        """
        try:
            handle = open(self._path, "rb")
        except OSError as e:
            raise ReopenError(self._path, underlying=e) from e

        old_handle = self._handle
        try:
            self._bind(handle)
        except OSError as e:
            handle.close()
            raise ReopenError(self._path, underlying=e) from e

        if old_handle is not None:
            old_handle.close()

        logger.info("file_reopened", path=self._path, size=self._original_length)

    def _bind(self, handle: BinaryIO) -> None:
        original_length = handle.seek(0, os.SEEK_END)
        handle.seek(0, os.SEEK_SET)

        self._handle = handle
        self._original_length = original_length
        self._source = ByteSource(handle, self._config.buffer_size)
        self._scanner = LineScanner(
            self._source,
            self._config.line_ending,
            self._config.strip_line_ends,
        )
        self._last_line_file_offset = 0
        self._last_line_number = 0

        logger.debug(
            "file_opened",
            path=self._path,
            inode=os.fstat(handle.fileno()).st_ino,
            size=original_length,
        )

    def close(self) -> None:
        """Release the file handle. Safe to call more than once."""
        if self._handle is not None:
            self._handle.close()
        self._handle = None
        self._source = None
        self._scanner = None

    def __enter__(self) -> "FileTailer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def request_stop(self) -> None:
        """Ask a blocked read to return. Callable from any thread."""
        logger.debug("tail_stop_requested", path=self._path)
        self._controller.request_stop()

    def read_line_bytes(self) -> Optional[bytes]:
        """
        Read the next line as raw bytes.

        Returns None when not a single byte (not even a terminator) could be
        consumed: end of file when not tailing, or a stop request when tailing.
        An empty line whose terminator was stripped is returned as b"".

        Raises:
            ValueError: If the reader is closed
        """
        if self._source is None:
            raise ValueError("I/O operation on closed tailer")

        # the previous line's offset has been observable long enough
        self._last_line_file_offset += self._source.reset_consumed()

        line = bytearray()
        while True:
            if self._scanner.scan(line):
                break
            if not self._controller.on_exhausted(self):
                break

        self._last_line_number += 1

        if self.pending_length == 0:
            self.last_line_bytes = None
            return None

        self.last_line_bytes = bytes(line)
        return self.last_line_bytes

    def read_line(self) -> Optional[str]:
        """
        Read the next line decoded with the configured encodings.

        Returns:
            Decoded line, or None when there is no line

        Raises:
            LineDecodeError: If no encoding accepts the line's bytes
        """
        raw = self.read_line_bytes()
        if raw is None:
            return None
        return decode_line(raw, self._config.encodings)

    def iter_bytes(self) -> Iterator[bytes]:
        """Yield raw lines until there is no line."""
        while True:
            raw = self.read_line_bytes()
            if raw is None:
                return
            yield raw

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.read_line()
            if line is None:
                return
            yield line
