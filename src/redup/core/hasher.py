"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Streaming file hasher built on pluggable hash algorithms.

Files are read through aiofiles in fixed CHUNK_SIZE pieces and fed to a
running accumulator, so only one chunk per file is ever held in memory and
every read is a suspension point for the event loop.
"""

import asyncio
import stat
import logging

import aiofiles
import aiofiles.os
import xxhash

from redup.core.errors import HashOpenError, HashReadError
from redup.core.interfaces import HashAlgorithm, HashState, StreamingHasher

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8 * 1024


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    @staticmethod
    def new() -> HashState:
        return xxhash.xxh64()


class StreamingHasherImpl(StreamingHasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Computes the digest of a whole file with chunked non-blocking reads.
    """

    def __init__(self, algorithm: HashAlgorithm = None, chunk_size: int = CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError("Chunk size must be positive")
        self.algorithm = algorithm or XXHashAlgorithmImpl()
        self.chunk_size = chunk_size

    async def hash(self, path: str) -> bytes:
        """
        Hashes the full content of a regular file.

        Raises:
            HashOpenError: missing, not a regular file, or not readable
            HashReadError: I/O error after the file was opened
        """
        try:
            st = await aiofiles.os.stat(path)
        except OSError as e:
            raise HashOpenError(path, f"Cannot stat file ({e.strerror or e})") from e

        if not stat.S_ISREG(st.st_mode):
            raise HashOpenError(path, "Not a regular file")

        opening = asyncio.ensure_future(self._open(path))
        try:
            handle = await asyncio.shield(opening)
        except asyncio.CancelledError:
            # The open runs in a worker thread and may still succeed
            await self._discard(opening)
            raise
        except OSError as e:
            raise HashOpenError(path, f"Cannot open file ({e.strerror or e})") from e

        state = self.algorithm.new()
        # The handle is closed on every exit path, cancellation included
        try:
            while True:
                try:
                    chunk = await handle.read(self.chunk_size)
                except OSError as e:
                    raise HashReadError(path, f"Read failed ({e.strerror or e})") from e
                if not chunk:
                    break
                state.update(chunk)
        finally:
            await handle.close()

        digest = state.digest()
        logger.debug(f"Hashed {path}: {digest.hex()}")
        return digest

    async def _open(self, path: str):
        """Opens the file for binary reading; the caller owns closing it."""
        return await aiofiles.open(path, "rb")

    @staticmethod
    async def _discard(opening: asyncio.Future) -> None:
        """Waits for an abandoned open to settle and closes whatever it produced."""
        try:
            handle = await opening
        except OSError:
            return
        await handle.close()
