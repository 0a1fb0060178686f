from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("file-tailer")
except PackageNotFoundError:
    # Package not installed, fallback for development
    __version__ = "dev"

from .config import CR, LF, LineEnding, TailerConfig, load_config
from .decoder import decode_line
from .errors import (
    ConfigError,
    LineDecodeError,
    ReopenError,
    TailerError,
    TailerOpenError,
)
from .file_tailer import FileTailer
from .log_tailer import LogTailer, LogTailerFactory
from .logging_setup import setup_logging

__all__ = [
    "CR",
    "LF",
    "ConfigError",
    "FileTailer",
    "LineDecodeError",
    "LineEnding",
    "LogTailer",
    "LogTailerFactory",
    "ReopenError",
    "TailerConfig",
    "TailerError",
    "TailerOpenError",
    "__version__",
    "decode_line",
    "load_config",
    "setup_logging",
]
