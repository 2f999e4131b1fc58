"""
Unified command orchestrator for the duplicate search.
This is the SINGLE place where the core pipeline is wired together, used by the CLI and by library callers.
No argv or output-format knowledge here.
"""
import asyncio
import logging
import time
from contextlib import aclosing
from typing import Callable, Iterable, List, Optional, Tuple

from redup.core.grouper import DuplicateGrouper
from redup.core.interfaces import StreamingHasher
from redup.core.models import DuplicateGroup, ScanStats, SearchParams
from redup.core.scanner import discover
from redup.core.scheduler import ConcurrencyScheduler

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 1000  # Report progress every N results


class DuplicateSearchCommand:
    """
    Orchestrates the entire workflow:
    1. Pick the path source for the input mode (directory walk or path list)
    2. Hash candidates concurrently under the configured limit
    3. Group results by digest and finalize duplicate groups

    Usage:
        params = SearchParams(root_dir="~/Downloads")
        command = DuplicateSearchCommand()
        groups, stats = command.execute(
            params,
            progress_callback=cli_progress_printer,
            stopped_flag=signal_handler_check
        )
    """

    def __init__(self, hasher: Optional[StreamingHasher] = None):
        self._hasher = hasher

    def execute(
            self,
            params: SearchParams,
            lines: Optional[Iterable[str]] = None,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Tuple[List[DuplicateGroup], ScanStats]:
        """
        Run the search to completion on a fresh event loop.

        Args:
            params: Validated search parameters
            lines: Path list for stdin mode (required when params.read_stdin is set)
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if the run should stop)

        Returns:
            Tuple of (duplicate_groups, statistics)

        Raises:
            InputError: If the root input is unusable
        """
        return asyncio.run(self.execute_async(params, lines, progress_callback, stopped_flag))

    async def execute_async(
            self,
            params: SearchParams,
            lines: Optional[Iterable[str]] = None,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Tuple[List[DuplicateGroup], ScanStats]:
        """Coroutine form of execute() for callers that already run an event loop."""
        start_time = time.time()

        if params.read_stdin:
            source = discover(lines=lines if lines is not None else [])
        else:
            source = discover(root_dir=params.root_dir)

        scheduler = ConcurrencyScheduler(params.concurrency, hasher=self._hasher)
        grouper = DuplicateGrouper()
        logger.debug(f"Hashing with concurrency limit {params.concurrency}")

        async with aclosing(scheduler.run(source)) as results:
            async for result in results:
                grouper.add(result)

                if progress_callback and grouper.received % PROGRESS_INTERVAL == 0:
                    progress_callback("hashing", grouper.received, None)

                if stopped_flag and stopped_flag():
                    logger.debug("Search interrupted by stop request")
                    break

        if progress_callback:
            progress_callback("hashing", grouper.received, None)

        groups = grouper.groups()
        stats = ScanStats(
            files_scanned=grouper.received,
            files_failed=grouper.failed,
            groups_found=len(groups),
            duplicate_files=sum(g.duplicate_count for g in groups),
            dirs_skipped=source.skipped_dirs,
            total_time=time.time() - start_time,
        )
        logger.debug(f"Search completed: {stats.files_scanned} files, {stats.groups_found} groups")
        return groups, stats
