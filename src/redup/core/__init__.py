"""
Core duplicate search engine: path sources, streaming hasher, scheduler and grouper.

This package contains the performance-critical foundation of redup:
- DirectoryPathSource / PathListSource: lazy candidate discovery
- StreamingHasherImpl + XXHashAlgorithmImpl: chunked xxHash64 content hashing over aiofiles
- ConcurrencyScheduler: bounded, sliding-window concurrent hashing on asyncio
- DuplicateGrouper: digest-keyed grouping with first-seen group ids
- Models and errors shared by the CLI and the report sinks

Nothing here knows about argv or output formats.
"""

from .errors import RedupError, InputError, SinkError, HashError, HashOpenError, HashReadError
from .models import (
    HashResult, DuplicateGroup, ScanStats, SearchParams, OutputFormat, Verbosity)
from .scanner import DirectoryPathSource, PathListSource, discover
from .hasher import StreamingHasherImpl, XXHashAlgorithmImpl, CHUNK_SIZE
from .scheduler import ConcurrencyScheduler
from .grouper import DuplicateGrouper

__all__ = [
    "RedupError",
    "InputError",
    "SinkError",
    "HashError",
    "HashOpenError",
    "HashReadError",
    "HashResult",
    "DuplicateGroup",
    "ScanStats",
    "SearchParams",
    "OutputFormat",
    "Verbosity",
    "DirectoryPathSource",
    "PathListSource",
    "discover",
    "StreamingHasherImpl",
    "XXHashAlgorithmImpl",
    "CHUNK_SIZE",
    "ConcurrencyScheduler",
    "DuplicateGrouper",
]
