"""
redup — find duplicate files by hashing their contents.

Core features:
- Recursive directory walk or a path list piped on stdin
- Streaming xxHash64 hashing in 8 KiB chunks (memory use independent of file size)
- Bounded concurrent hashing on asyncio + aiofiles
- Reports as plain text, CSV or a SQLite database
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("redup")
except Exception:
    import tomllib
    from pathlib import Path

    _pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    try:
        with open(_pyproject, "rb") as f:
            __version__ = tomllib.load(f)["project"]["version"]
    except (OSError, KeyError, tomllib.TOMLDecodeError):
        __version__ = "unknown"

# Public API: only what users should import directly
from redup.commands import DuplicateSearchCommand
from redup.core import (
    SearchParams, OutputFormat, Verbosity, DuplicateGroup, HashResult, ScanStats,
    InputError, SinkError, HashError)
from redup.services import create_sink

__all__ = [
    "DuplicateSearchCommand",
    "SearchParams",
    "OutputFormat",
    "Verbosity",
    "DuplicateGroup",
    "HashResult",
    "ScanStats",
    "InputError",
    "SinkError",
    "HashError",
    "create_sink",
    "__version__",
]
