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
Asynchronous callback front end for FileTailer.

Runs the blocking reader in a worker thread and awaits a callback with
each decoded line, following file rotation.
"""

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

import structlog

try:
    from .config import LineEnding, TailerConfig
    from .errors import LineDecodeError
    from .file_tailer import FileTailer
except ImportError:
    from config import LineEnding, TailerConfig
    from errors import LineDecodeError
    from file_tailer import FileTailer

logger = structlog.get_logger()


class LogTailer:
    """
    Asynchronous tailer that delivers new lines of a file to a callback.

    Tailing is always enabled; other reader behaviour comes from ``config``.
    """

    def __init__(
        self,
        log_path: Union[str, Path],
        line_callback: Callable[[str], Awaitable[None]],
        config: Optional[TailerConfig] = None,
    ):
        """
        Initialize log tailer.

        Args:
            log_path: Path to the file to monitor
            line_callback: Async function to call with each new line
            config: Reader configuration; tail is forced on
        """
        self.log_path = Path(log_path)
        self.line_callback = line_callback
        self.config = (config or TailerConfig()).with_changes(tail=True)
        self._running = False
        self._task: Optional[asyncio.Task] = None
        self._reader: Optional[FileTailer] = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """
        Open the file and start tailing it.

        Raises:
            TailerOpenError: If the file cannot be opened
        """
        if self._task is not None:
            logger.warning("log_tailer_already_running", path=str(self.log_path))
            return

        self._reader = FileTailer(self.log_path, self.config)
        self._running = True
        self._task = asyncio.create_task(self._tail_loop(self._reader))
        logger.info("log_tailer_started", path=str(self.log_path))

    async def stop(self) -> None:
        """Stop tailing and close the file."""
        if self._task is None:
            return

        task, reader = self._task, self._reader
        self._task = None
        self._reader = None
        self._running = False

        if reader is not None:
            reader.request_stop()
            # close only once the loop, and with it the worker thread, is done
            task.add_done_callback(lambda _: reader.close())

        try:
            # the worker thread notices the stop within one poll interval;
            # shielded so cancelling stop() leaves the loop to finish
            await asyncio.shield(task)
        finally:
            logger.info("log_tailer_stopped", path=str(self.log_path))

    async def _tail_loop(self, reader: FileTailer) -> None:
        """Main tailing loop."""
        try:
            while self._running:
                try:
                    line = await asyncio.to_thread(reader.read_line)
                except LineDecodeError as e:
                    logger.warning(
                        "line_decode_failed",
                        path=str(self.log_path),
                        line_number=reader.last_line_number,
                        size=len(e.raw),
                        encodings=list(e.encodings),
                    )
                    continue

                if line is None:
                    # only returned once stop was requested
                    break

                try:
                    await self.line_callback(line)
                except Exception as e:
                    logger.error(
                        "line_callback_failed",
                        line=line[:100],
                        error=str(e),
                        exc_info=True,
                    )
        except Exception as e:
            logger.error("tail_loop_error", error=str(e), exc_info=True)
            raise
        finally:
            self._running = False


class LogTailerFactory:
    """Factory for creating log tailers with common configurations."""

    @staticmethod
    def create(
        log_path: Union[str, Path],
        line_callback: Callable[[str], Awaitable[None]],
        poll_interval: float = 0.1,
    ) -> LogTailer:
        """
        Create a log tailer suited to rotated log files.

        Lines end on LF and are stripped of it; rotation is followed.
        """
        return LogTailer(
            log_path=log_path,
            line_callback=line_callback,
            config=TailerConfig(
                line_ending=LineEnding.ONLY_LF,
                strip_line_ends=True,
                follow_rename=True,
                poll_interval=poll_interval,
            ),
        )
