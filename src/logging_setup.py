# Copyright (c) 2025 Stephen Clau

# This file is part of File Tailer.

# File Tailer is dual-licensed:

# 1. GNU Affero General Public License v3.0 (AGPL-3.0)
#    See LICENSE file for full terms

# 2. Commercial License
#    For proprietary use without AGPL requirements
#    Contact: licensing@laudiversified.com

# SPDX-License-Identifier: AGPL-3.0-only OR Commercial

"""Structured logging setup for File Tailer."""

from __future__ import annotations

import logging
from typing import Any

import structlog

try:
    from .errors import ConfigError
except ImportError:
    from errors import ConfigError

logger = structlog.get_logger()

LEVEL_MAP: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def setup_logging(log_level: str = "info", log_format: str = "console") -> None:
    """
    Configure structured logging.

    Args:
        log_level: Logging level (debug, info, warning, error, critical).
            Unknown levels fall back to info.
        log_format: Output format ("json" or "console")

    Raises:
        ConfigError: If log_format is not recognised
    """
    min_level = LEVEL_MAP.get(log_level.lower(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    fmt = log_format.lower()
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    elif fmt == "console":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        raise ConfigError(
            f"Invalid log_format '{log_format}'. Must be one of: console, json"
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logger.info("logging_configured", log_level=log_level, format=fmt)
