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
End-of-file policy for tailing.

TailController is consulted each time the byte source runs dry. It decides
whether the current read attempt ends, waits one poll interval, or reacquires
a file that was renamed away from the bound path.
"""

from __future__ import annotations

import os
import threading
from typing import TYPE_CHECKING, BinaryIO, Optional

import structlog

try:
    from .config import TailerConfig
    from .errors import ReopenError
except ImportError:
    from config import TailerConfig
    from errors import ReopenError

if TYPE_CHECKING:
    try:
        from .file_tailer import FileTailer
    except ImportError:
        from file_tailer import FileTailer

logger = structlog.get_logger()


def file_identity(st: os.stat_result) -> tuple[int, int]:
    """Inode-equivalent identity of a stat result."""
    return (st.st_dev, st.st_ino)


def is_renamed(path: str, handle: BinaryIO) -> bool:
    """
    Check whether ``path`` now names a different file than ``handle``.

    A path that cannot be stat'ed (the rotation gap before the new file is
    created) is reported as not renamed.
    """
    try:
        current = os.stat(path)
    except OSError:
        return False

    bound = os.fstat(handle.fileno())
    return file_identity(current) != file_identity(bound)


class TailController:
    """
    Exhaustion handling for a FileTailer.

    The stop flag is a threading.Event so request_stop() may be called from
    any thread; waits use Event.wait() and end early once stop is requested.
    """

    def __init__(self, config: TailerConfig, stop_event: Optional[threading.Event] = None):
        self.config = config
        self._stop = stop_event if stop_event is not None else threading.Event()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    def request_stop(self) -> None:
        self._stop.set()

    def wait(self) -> bool:
        """Sleep one poll interval. Returns True if woken by a stop request."""
        return self._stop.wait(self.config.poll_interval)

    def on_exhausted(self, tailer: FileTailer) -> bool:
        """
        Handle an empty byte source.

        Args:
            tailer: Reader whose source ran dry

        Returns:
            True to keep scanning, False to end the current read attempt
        """
        if not self.config.tail:
            return False

        if self._stop.is_set():
            return False

        if not self.config.follow_rename:
            self.wait()
            return True

        if not is_renamed(tailer.path, tailer.handle):
            self.wait()
            return True

        if tailer.pending_length != 0:
            # hand back the partial line first; the rename is acted on next call
            logger.info(
                "file_rename_deferred",
                path=tailer.path,
                pending_bytes=tailer.pending_length,
            )
            return False

        logger.info("file_rename_detected", path=tailer.path)
        try:
            tailer.reopen()
        except ReopenError as e:
            logger.warning("file_reopen_failed", path=tailer.path, error=str(e))
            self.wait()
        return True
