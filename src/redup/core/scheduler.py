"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scheduler.py
Bounded concurrent hashing with sliding-window admission.

SCHEDULING
----------
ConcurrencyScheduler keeps at most `limit` asyncio tasks in flight. Whenever a
task finishes, its result is handed to the consumer and the next candidate is
pulled from the path source. The source is therefore only advanced when a
slot is free, which is what throttles directory traversal on huge trees.

ERROR ISOLATION
---------------
A HashError raised while hashing one file is turned into a failed HashResult
at the task boundary and logged. Sibling tasks are never cancelled for it.

CANCELLATION
------------
`run()` is an async generator. Closing it (breaking out of `async for` inside
`contextlib.aclosing`) or cancelling the task that drives it cancels every
in-flight task. Abandoned tasks emit nothing, and the hasher
closes their file handles.
"""

import asyncio
import logging
from typing import AsyncIterator, Iterable, Iterator, Optional, Set

from redup.core.errors import HashError
from redup.core.hasher import StreamingHasherImpl
from redup.core.interfaces import StreamingHasher
from redup.core.models import HashResult

logger = logging.getLogger(__name__)


class ConcurrencyScheduler:
    """
    Drives a StreamingHasher over many candidates with a concurrency ceiling.

    Attributes:
        limit: Maximum number of hashing tasks (and open files) at any time
        hasher: Injected StreamingHasher, xxHash64 streaming hasher by default
        peak_in_flight: Highest number of tasks observed in flight during the last run
    """

    def __init__(self, limit: int, hasher: Optional[StreamingHasher] = None):
        if not isinstance(limit, int) or limit < 1:
            raise ValueError(f"Concurrency limit must be a positive integer, got {limit!r}")
        self.limit = limit
        self.hasher = hasher or StreamingHasherImpl()
        self.peak_in_flight = 0

    async def run(self, candidates: Iterable[str]) -> AsyncIterator[HashResult]:
        """
        Hashes every candidate and yields results in completion order.

        Args:
            candidates: Lazy iterable of paths; pulled one item per free slot

        Yields:
            HashResult for each candidate, successful or failed
        """
        pending: Iterator[str] = iter(candidates)
        in_flight: Set[asyncio.Task] = set()
        exhausted = False
        self.peak_in_flight = 0

        try:
            while True:
                # Admit until the window is full or the source runs dry
                while not exhausted and len(in_flight) < self.limit:
                    path = next(pending, None)
                    if path is None:
                        exhausted = True
                        break
                    in_flight.add(asyncio.create_task(self._hash_one(path)))
                self.peak_in_flight = max(self.peak_in_flight, len(in_flight))

                if not in_flight:
                    break

                done, in_flight = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
                try:
                    for task in done:
                        yield task.result()
                finally:
                    # Mark every finished task's outcome as seen, even when one result raised
                    for task in done:
                        if not task.cancelled():
                            task.exception()
        finally:
            if in_flight:
                logger.debug(f"Abandoning {len(in_flight)} in-flight hashing tasks")
                for task in in_flight:
                    task.cancel()
                await asyncio.gather(*in_flight, return_exceptions=True)

    async def _hash_one(self, path: str) -> HashResult:
        try:
            digest = await self.hasher.hash(path)
        except HashError as e:
            logger.warning(f"Skipping {path}: {e.reason}")
            return HashResult(path=path, error=e)
        return HashResult(path=path, digest=digest)
