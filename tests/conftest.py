"""
Shared fixtures for duplicate search tests.
Creates isolated temporary directories with controlled test files.
"""
import os
import tempfile
from pathlib import Path
from typing import Dict

import pytest

from redup.core.hasher import StreamingHasherImpl


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for duplicate scenarios:
    - a.txt / b.txt with identical content "hello"
    - c.txt with unique content "world"
    - 2 empty files (zero bytes share one digest)
    - a large file spanning several 8 KiB chunks plus its copy in a subdirectory
    """
    files = {}

    files["a"] = temp_dir / "a.txt"
    files["a"].write_bytes(b"hello")
    files["b"] = temp_dir / "b.txt"
    files["b"].write_bytes(b"hello")
    files["c"] = temp_dir / "c.txt"
    files["c"].write_bytes(b"world")

    files["empty1"] = temp_dir / "empty1.dat"
    files["empty1"].write_bytes(b"")
    files["empty2"] = temp_dir / "empty2.dat"
    files["empty2"].write_bytes(b"")

    # 3 full chunks + a tail, so hashing crosses chunk boundaries
    big_content = os.urandom(3 * 8192 + 123)
    files["big"] = temp_dir / "big.bin"
    files["big"].write_bytes(big_content)

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["big_copy"] = subdir / "big_copy.bin"
    files["big_copy"].write_bytes(big_content)

    return files


def running_as_root() -> bool:
    return hasattr(os, "geteuid") and os.geteuid() == 0


class OpenFileTracker:
    """Counts files currently open through a CountingHasher."""

    def __init__(self):
        self.current = 0
        self.peak = 0
        self.total = 0

    def opened(self):
        self.current += 1
        self.total += 1
        self.peak = max(self.peak, self.current)

    def closed(self):
        self.current -= 1


class CountingFile:
    """
    Wraps an aiofiles handle so closing it is reported to the tracker.
    Exposes only read() and close(), like the handle it wraps.
    """

    def __init__(self, inner, tracker: OpenFileTracker):
        self._inner = inner
        self._tracker = tracker

    async def read(self, size=-1):
        return await self._inner.read(size)

    async def close(self):
        try:
            await self._inner.close()
        finally:
            self._tracker.closed()


class CountingHasher(StreamingHasherImpl):
    """StreamingHasherImpl that reports every open/close to an OpenFileTracker."""

    def __init__(self, tracker: OpenFileTracker, **kwargs):
        super().__init__(**kwargs)
        self.tracker = tracker

    async def _open(self, path: str):
        handle = await super()._open(path)
        self.tracker.opened()
        return CountingFile(handle, self.tracker)


@pytest.fixture
def open_tracker() -> OpenFileTracker:
    return OpenFileTracker()
