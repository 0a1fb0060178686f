"""pytest configuration for File Tailer tests.

Puts src/ on sys.path so tests import modules directly (``from file_tailer
import FileTailer``), and provides shared file fixtures.
"""

from pathlib import Path
from typing import Callable
import sys

import pytest

# Add src/ to Python path for absolute imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """Path of an empty log file."""
    path = tmp_path / "app.log"
    path.write_bytes(b"")
    return path


@pytest.fixture
def make_file(tmp_path: Path) -> Callable[[bytes], Path]:
    """Factory writing ``data`` to a fresh file and returning its path."""
    counter = {"n": 0}

    def _make(data: bytes, name: str = "") -> Path:
        counter["n"] += 1
        path = tmp_path / (name or f"input-{counter['n']}.log")
        path.write_bytes(data)
        return path

    return _make
