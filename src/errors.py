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
Exception hierarchy for File Tailer.

Every error raised on purpose by the reader derives from TailerError so
callers can catch the whole family in one place.
"""

from typing import Optional, Sequence


class TailerError(Exception):
    """Base exception for File Tailer."""

    def __init__(self, message: str, *, underlying: Optional[BaseException] = None):
        super().__init__(message)
        self.underlying = underlying

    def __str__(self) -> str:
        if self.underlying:
            return f"{self.args[0]} (caused by {self.underlying})"
        return self.args[0]


class ConfigError(TailerError, ValueError):
    """Raised when a configuration value is missing or invalid."""


class TailerOpenError(TailerError):
    """Raised when the file cannot be opened for reading."""

    def __init__(self, path: str, *, underlying: Optional[BaseException] = None):
        super().__init__(f"Cannot open file for reading: {path}", underlying=underlying)
        self.path = path


class ReopenError(TailerError):
    """Raised when a renamed file cannot be reacquired at its original path."""

    def __init__(self, path: str, *, underlying: Optional[BaseException] = None):
        super().__init__(f"Cannot reopen renamed file: {path}", underlying=underlying)
        self.path = path


class LineDecodeError(TailerError):
    """
    Raised when a line exists but none of the configured encodings can decode it.

    The undecodable bytes stay available on ``raw``.
    """

    def __init__(self, raw: bytes, encodings: Sequence[str]):
        super().__init__(
            f"Line of {len(raw)} bytes could not be decoded with any of: "
            f"{', '.join(encodings)}"
        )
        self.raw = raw
        self.encodings = tuple(encodings)
