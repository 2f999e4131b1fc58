"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Groups hash results by digest and finalizes duplicate groups.
"""

import logging
from typing import Dict, Iterable, List

from redup.core.models import DuplicateGroup, HashResult

logger = logging.getLogger(__name__)


class DuplicateGrouper:
    """
    Accumulates HashResults into digest-keyed groups.

    Results are appended in delivery order and the first result seen for a
    digest fixes that group's position, so group ids do not depend on when
    later members complete. Only one consumer may feed a grouper.
    """

    def __init__(self):
        self._groups: Dict[bytes, List[str]] = {}
        self._failed = 0
        self._received = 0

    @property
    def failed(self) -> int:
        """Number of failed results seen so far."""
        return self._failed

    @property
    def received(self) -> int:
        """Number of results seen so far, failed ones included."""
        return self._received

    def add(self, result: HashResult) -> None:
        """Absorbs one result: append-on-match, create-on-first-sight."""
        self._received += 1
        if not result.ok:
            self._failed += 1
            return
        self._groups.setdefault(result.digest, []).append(result.path)

    def consume(self, results: Iterable[HashResult]) -> Dict[bytes, DuplicateGroup]:
        """Adds every result and returns the finalized groups keyed by digest."""
        for result in results:
            self.add(result)
        return self.finalize()

    def finalize(self) -> Dict[bytes, DuplicateGroup]:
        """
        Drops single-file groups and numbers the rest from 1 in first-seen order.
        Returns:
            Dict[digest, DuplicateGroup] in group id order
        """
        finalized: Dict[bytes, DuplicateGroup] = {}
        next_id = 1
        for digest, paths in self._groups.items():
            if len(paths) < 2:  # Avoid groups with less than 2 files
                continue
            finalized[digest] = DuplicateGroup(group_id=next_id, digest=digest, paths=list(paths))
            next_id += 1

        if self._failed:
            logger.debug(f"{self._failed} of {self._received} files could not be hashed")
        return finalized

    def groups(self) -> List[DuplicateGroup]:
        """Finalized groups as a list ordered by group id."""
        return list(self.finalize().values())
