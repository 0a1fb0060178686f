# Copyright (c) 2025 Stephen Clau

# This file is part of File Tailer.

# File Tailer is dual-licensed:

# 1. GNU Affero General Public License v3.0 (AGPL-3.0)
#    See LICENSE file for full terms

# 2. Commercial License
#    For proprietary use without AGPL requirements
#    Contact: licensing@laudiversified.com

# SPDX-License-Identifier: AGPL-3.0-only OR Commercial

"""Decoding of raw line bytes against an ordered list of encodings."""

from typing import Sequence

try:
    from .errors import LineDecodeError
except ImportError:
    from errors import LineDecodeError


def decode_line(raw: bytes, encodings: Sequence[str]) -> str:
    """
    Decode ``raw`` with the first encoding in ``encodings`` that accepts it.

    Encodings are tried strictly, in order; no detection is attempted.
    A name that is not a text encoding counts as a failed attempt.

    Raises:
        LineDecodeError: If every encoding rejects the bytes
    """
    for encoding in encodings:
        try:
            return raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue
    raise LineDecodeError(raw, encodings)
