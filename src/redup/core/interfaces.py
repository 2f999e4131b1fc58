"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the duplicate search pipeline.
These protocols use structural typing (`typing.Protocol`) so implementations and
test doubles can be swapped without inheriting from a common base.

Key Components:
---------------
- HashAlgorithm / HashState: Pluggable incremental hash functions (xxHash64 by default).
- StreamingHasher: Hashes one file with chunked, non-blocking reads.
- PathSource: Lazy source of candidate file paths.
- ResultSink: Consumer of finalized duplicate groups (text, CSV, SQLite).
"""

from typing import Protocol, Iterator, List

from redup.core.models import DuplicateGroup, ScanStats


class HashState(Protocol):
    """Running hash accumulator."""
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...


class HashAlgorithm(Protocol):
    """
    Interface for incremental hash algorithms.

    Allows plugging in different hashing functions like SHA-256 or xxHash
    without affecting the rest of the pipeline.
    """

    @staticmethod
    def new() -> HashState:
        """Returns a fresh accumulator."""
        ...


class StreamingHasher(Protocol):
    """Interface for hashing a whole file without loading it into memory."""
    async def hash(self, path: str) -> bytes:
        """
        Returns the digest of the file content.

        Raises:
            HashOpenError: the path cannot be opened as a regular file
            HashReadError: reading failed part way through
        """
        ...


class PathSource(Protocol):
    """
    Interface for producers of candidate paths.

    Attributes:
        skipped_dirs: Number of directories that could not be read.
    """
    skipped_dirs: int

    def __iter__(self) -> Iterator[str]:
        ...


class ResultSink(Protocol):
    """Interface for rendering finalized duplicate groups."""
    def write(self, groups: List[DuplicateGroup], stats: ScanStats) -> None:
        """
        Render the groups.

        Raises:
            SinkError: the destination cannot be created or written
        """
        ...
