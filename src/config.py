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
Configuration module for File Tailer.

A TailerConfig is immutable once built:
- Reader behaviour is fixed for the lifetime of a FileTailer
- Values can come from keyword arguments, a YAML file or FILE_TAILER_* env vars
- Every value is validated in __post_init__
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Tuple, Union
import codecs
import os

import yaml
import structlog

try:
    from .errors import ConfigError
except ImportError:
    from errors import ConfigError

logger = structlog.get_logger()

# Terminator bytes, named after the ASCII characters they hold.
LF = 0x0A
CR = 0x0D

ENV_PREFIX = "FILE_TAILER_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class LineEnding(Enum):
    """How the end of a line is recognised."""

    ONLY_LF = "lf"
    """A line feed (0x0A) ends the line; a carriage return is data."""

    ONLY_CR = "cr"
    """A carriage return (0x0D) ends the line; a line feed is data."""

    CRLF = "crlf"
    """Only a carriage return followed by a line feed ends the line."""

    AUTO = "auto"
    """CR LF or a lone CR ends the line."""

    @classmethod
    def parse(cls, value: Union["LineEnding", str]) -> "LineEnding":
        """
        Resolve an enum member from a member, its value or its name.

        Raises:
            ConfigError: If the value names no line ending
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            text = value.strip().lower()
            for member in cls:
                if text in (member.value, member.name.lower()):
                    return member

        raise ConfigError(
            f"Invalid line_ending '{value}'. Must be one of: "
            f"{', '.join(m.value for m in cls)}"
        )


def get_config_value(
    env_var: str,
    required: bool = False,
    default: Optional[str] = None,
) -> Optional[str]:
    """
    Get a configuration value from the environment.

    Args:
        env_var: Environment variable name (e.g., 'FILE_TAILER_POLL_INTERVAL')
        required: If True, raises ConfigError when value not found
        default: Default value if not set in the environment

    Returns:
        Configuration value from env var or default

    Raises:
        ConfigError: If required=True and value not found
    """
    env_value = os.getenv(env_var)
    if env_value is not None:
        logger.debug("config_value_loaded_from_env", source="environment", var=env_var)
        return env_value

    if default is not None:
        return default

    if required:
        raise ConfigError(f"Required configuration value not found for '{env_var}'")

    return None


def _safe_int(value: Any, field_name: str, default: int) -> int:
    """
    Safely convert value to int with proper type checking.

    Raises:
        ConfigError: If conversion fails
    """
    if value is None:
        return default

    if isinstance(value, bool):
        raise ConfigError(f"Cannot convert {field_name} to int: bool")

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ConfigError(f"Invalid integer for {field_name}: {value}")

    raise ConfigError(f"Cannot convert {field_name} to int: {type(value).__name__}")


def _safe_float(value: Any, field_name: str, default: float) -> float:
    """
    Safely convert value to float with proper type checking.

    Raises:
        ConfigError: If conversion fails
    """
    if value is None:
        return default

    if isinstance(value, bool):
        raise ConfigError(f"Cannot convert {field_name} to float: bool")

    if isinstance(value, (int, float)):
        return float(value)

    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            raise ConfigError(f"Invalid float for {field_name}: {value}")

    raise ConfigError(f"Cannot convert {field_name} to float: {type(value).__name__}")


def _safe_bool(value: Any, field_name: str, default: bool) -> bool:
    """Convert YAML/env style booleans ("yes", "0", True, ...) to bool."""
    if value is None:
        return default

    if isinstance(value, bool):
        return value

    if isinstance(value, int):
        return value != 0

    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_VALUES:
            return True
        if text in _FALSE_VALUES:
            return False

    raise ConfigError(f"Invalid boolean for {field_name}: {value!r}")


def _split_encodings(value: Any) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str):
        return tuple(part.strip() for part in value.split(",") if part.strip())
    if isinstance(value, (list, tuple)):
        return tuple(str(part) for part in value)
    raise ConfigError(f"encodings must be a list or comma separated string, got {type(value).__name__}")


@dataclass(frozen=True)
class TailerConfig:
    """Reader configuration. Immutable; use with_changes() to derive a new one."""

    buffer_size: int = 4096
    """Bytes fetched from the file per refill. Default: 4096"""

    line_ending: LineEnding = LineEnding.AUTO
    """Line terminator recognition mode. Default: AUTO"""

    strip_line_ends: bool = False
    """Drop terminator bytes from returned lines. Default: False"""

    encodings: Tuple[str, ...] = field(default_factory=lambda: ("utf-8",))
    """Encodings tried in order when decoding a line. Default: utf-8 only"""

    tail: bool = False
    """Block and poll at end of file instead of returning. Default: False"""

    poll_interval: float = 1.0
    """Seconds between end-of-file polls while tailing. Default: 1.0"""

    follow_rename: bool = False
    """Reopen the path when the file is renamed away (tailing only). Default: False"""

    def __post_init__(self) -> None:
        """Validate and normalise configuration after initialization."""
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "line_ending", LineEnding.parse(self.line_ending))

        encodings = _split_encodings(self.encodings)
        object.__setattr__(self, "encodings", encodings)

        for flag in ("strip_line_ends", "tail", "follow_rename"):
            object.__setattr__(self, flag, _safe_bool(getattr(self, flag), flag, False))

        if isinstance(self.buffer_size, bool) or not isinstance(self.buffer_size, int):
            raise ConfigError(f"buffer_size must be an int, got {type(self.buffer_size).__name__}")

        if self.buffer_size < 1:
            raise ConfigError(f"Invalid buffer_size: {self.buffer_size}. Must be >= 1")

        if isinstance(self.poll_interval, bool) or not isinstance(self.poll_interval, (int, float)):
            raise ConfigError(f"poll_interval must be a number, got {type(self.poll_interval).__name__}")

        if not self.poll_interval > 0:
            raise ConfigError(f"Invalid poll_interval: {self.poll_interval}. Must be > 0")

        if not encodings:
            raise ConfigError("encodings must contain at least one encoding")

        for name in encodings:
            try:
                info = codecs.lookup(name)
            except LookupError:
                raise ConfigError(f"Unknown encoding '{name}'")
            # bytes-to-bytes codecs (base64, zlib, ...) cannot decode to text
            if not getattr(info, "_is_text_encoding", True):
                raise ConfigError(f"'{name}' is not a text encoding")

    def with_changes(self, **changes: Any) -> "TailerConfig":
        """Return a validated copy with the given fields replaced."""
        return replace(self, **changes)


def _read_yaml(path: Path) -> dict:
    if not path.exists():
        raise FileNotFoundError(f"Tailer config not found at {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(data).__name__}")

    section = data.get("tailer", data)
    if not isinstance(section, dict):
        raise ConfigError(f"'tailer' section in {path} must be a mapping")

    return section


def load_config(path: Optional[Union[str, Path]] = None) -> TailerConfig:
    """
    Load reader configuration from an optional YAML file and the environment.

    Priority order for each value:
    1. FILE_TAILER_* environment variable
    2. YAML file (a top-level 'tailer' mapping, or a flat mapping)
    3. TailerConfig defaults

    Args:
        path: Optional YAML file path

    Returns:
        Validated TailerConfig

    Raises:
        FileNotFoundError: If path is given but does not exist
        ConfigError: If any value is invalid
        yaml.YAMLError: If the file is not valid YAML
    """
    file_values = _read_yaml(Path(path)) if path is not None else {}
    defaults = TailerConfig()

    def pick(key: str) -> Any:
        env_value = get_config_value(ENV_PREFIX + key.upper())
        return env_value if env_value is not None else file_values.get(key)

    line_ending = pick("line_ending")
    encodings = _split_encodings(pick("encodings"))

    config = TailerConfig(
        buffer_size=_safe_int(pick("buffer_size"), "buffer_size", defaults.buffer_size),
        line_ending=line_ending if line_ending is not None else defaults.line_ending,
        strip_line_ends=_safe_bool(pick("strip_line_ends"), "strip_line_ends", defaults.strip_line_ends),
        encodings=encodings if encodings is not None else defaults.encodings,
        tail=_safe_bool(pick("tail"), "tail", defaults.tail),
        poll_interval=_safe_float(pick("poll_interval"), "poll_interval", defaults.poll_interval),
        follow_rename=_safe_bool(pick("follow_rename"), "follow_rename", defaults.follow_rename),
    )

    logger.debug(
        "tailer_config_loaded",
        source=str(path) if path is not None else "environment",
        line_ending=config.line_ending.value,
        tail=config.tail,
        follow_rename=config.follow_rename,
    )
    return config
