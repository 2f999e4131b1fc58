"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Candidate path sources for the hashing pipeline.
Features:
- DirectoryPathSource: lazy recursive walk yielding regular files
- PathListSource: paths supplied line by line (e.g. piped into stdin)
- discover(): validates the input mode and returns the matching source

Both sources are generators underneath, so the scheduler pulls one path at a
time and a huge tree is never held in memory as a list.
"""

import os
import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from redup.core.errors import InputError
from redup.core.interfaces import PathSource

logger = logging.getLogger(__name__)


class DirectoryPathSource(PathSource):
    """
    Walks a directory tree and yields every regular file in traversal order.

    Symlinked directories are never entered, which keeps the walk free of
    cycles. Symlinks to files are yielded like any other file.
    Directories that cannot be listed are skipped and counted in `skipped_dirs`.
    """

    def __init__(self, root_dir: str):
        self.root_dir = root_dir
        self.skipped_dirs = 0

    def __iter__(self) -> Iterator[str]:
        logger.debug(f"Scanning directory: {self.root_dir}")
        found = 0

        for root, dirs, files in os.walk(self.root_dir, onerror=self._on_walk_error, followlinks=False):
            logger.debug(f"Searching: {root}")
            for filename in files:
                path = os.path.join(root, filename)
                if not os.path.isfile(path):
                    logger.debug(f"Skipping non-regular file: {path}")
                    continue
                found += 1
                yield path

        logger.debug(f"Scan of {self.root_dir} completed. Found {found} files.")
        if self.skipped_dirs:
            logger.debug(f"Skipped {self.skipped_dirs} unreadable directories under {self.root_dir}")

    def _on_walk_error(self, error: OSError) -> None:
        self.skipped_dirs += 1
        logger.debug(f"Cannot open directory {error.filename}: {error.strerror}")


class PathListSource(PathSource):
    """
    Yields paths from an external list, one per non-empty line, in supplied order.

    Lines may be str or bytes; bytes (e.g. from sys.stdin.buffer) are decoded
    with os.fsdecode, so names that are not valid UTF-8 survive unchanged.
    Paths are not checked for existence here; the hasher reports missing files.
    A line naming a directory is expanded with a recursive walk.
    """

    def __init__(self, lines: Iterable[Union[str, bytes]]):
        self.lines = lines
        self.skipped_dirs = 0

    def __iter__(self) -> Iterator[str]:
        for line in self.lines:
            if isinstance(line, bytes):
                line = os.fsdecode(line)
            path = line.rstrip("\r\n")
            if not path.strip():
                continue

            if os.path.isdir(path):
                logger.debug(f"Searching directory: {path}")
                walker = DirectoryPathSource(path)
                yield from walker
                self.skipped_dirs += walker.skipped_dirs
                continue

            logger.debug(f"Processing file: {path}")
            yield path


def discover(root_dir: Optional[str] = None, lines: Optional[Iterable[Union[str, bytes]]] = None) -> PathSource:
    """
    Returns the path source for exactly one input mode.

    Args:
        root_dir: Directory to walk recursively
        lines: Externally supplied paths (stdin mode)

    Raises:
        InputError: both or neither mode given, or root_dir is not a usable directory
    """
    if (root_dir is None) == (lines is None):
        raise InputError("Exactly one of a directory or a path list is required")

    if lines is not None:
        return PathListSource(lines)

    root_path = Path(root_dir)
    if not root_path.exists():
        error_msg = f"Directory does not exist: {root_dir}"
        logger.debug(error_msg)
        raise InputError(error_msg)
    if not root_path.is_dir():
        error_msg = f"Not a directory: {root_dir}"
        logger.debug(error_msg)
        raise InputError(error_msg)

    return DirectoryPathSource(root_dir)
