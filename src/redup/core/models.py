"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for the duplicate search pipeline.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from redup.core.errors import HashError


# =============================
# Enums
# =============================

class OutputFormat(Enum):
    """Report format handed to the result sink."""
    TEXT = "txt"
    CSV = "csv"
    SQLITE = "sql"

    @property
    def display_name(self) -> str:
        """Human-readable name for help and log output."""
        mapping = {
            OutputFormat.TEXT: "Plain text",
            OutputFormat.CSV: "CSV",
            OutputFormat.SQLITE: "SQLite database",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


class Verbosity(Enum):
    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

@dataclass
class HashResult:
    """
    Outcome of hashing one candidate path.
    Exactly one of `digest` and `error` is set.
    """
    path: str
    digest: Optional[bytes] = None
    error: Optional[HashError] = None

    def __post_init__(self):
        if (self.digest is None) == (self.error is None):
            raise ValueError("HashResult needs either a digest or an error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def __repr__(self):
        state = self.digest.hex() if self.ok else type(self.error).__name__
        return f"<HashResult path={self.path}, {state}>"


@dataclass
class DuplicateGroup:
    """
    Files whose contents hashed to the same digest.
    Paths keep the order in which their results arrived.
    """
    group_id: int
    digest: bytes
    paths: List[str] = field(default_factory=list)

    @property
    def hex_digest(self) -> str:
        return self.digest.hex()

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.paths)

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return self.duplicate_count >= 2

    def __repr__(self):
        return f"<DuplicateGroup id={self.group_id}, hash={self.hex_digest}, count={len(self.paths)}>"


@dataclass
class ScanStats:
    """
    Summary counts collected during one pipeline run.
    """
    files_scanned: int = 0
    files_failed: int = 0
    groups_found: int = 0
    duplicate_files: int = 0
    dirs_skipped: int = 0
    total_time: float = 0.0

    @property
    def files_hashed(self) -> int:
        return self.files_scanned - self.files_failed

    def print_summary(self) -> str:
        lines = [
            "📊 Duplicate Search Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            f"Files scanned: {self.files_scanned}",
            f"Files hashed: {self.files_hashed}",
            f"Files failed: {self.files_failed}",
            f"Duplicate groups: {self.groups_found} ({self.duplicate_files} files)",
        ]
        if self.dirs_skipped:
            lines.append(f"Directories skipped: {self.dirs_skipped}")
        return "\n".join(lines)


"""
DTO for search parameters with built-in validation.
Interface-agnostic: the CLI builds it, the pipeline command consumes it.
"""

def default_concurrency() -> int:
    """Same ceiling the standard thread pool uses, since aiofiles reads run there."""
    return min(32, (os.cpu_count() or 1) + 4)


@dataclass
class SearchParams:
    """Parameters for one duplicate search run."""
    root_dir: Optional[str] = None
    read_stdin: bool = False
    concurrency: int = field(default_factory=default_concurrency)
    verbosity: Verbosity = Verbosity.NORMAL
    output_format: OutputFormat = OutputFormat.TEXT
    output_path: Optional[str] = None

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if self.read_stdin and self.root_dir:
            raise ValueError("Use either a directory or --stdin, not both")

        if not self.read_stdin and not self.root_dir:
            raise ValueError("A directory is required unless reading paths from stdin")

        if not isinstance(self.concurrency, int) or self.concurrency < 1:
            raise ValueError("Concurrency limit must be a positive integer")

        if self.output_format is OutputFormat.SQLITE and not self.output_path:
            raise ValueError("SQLite output requires an output file (--output)")

    @staticmethod
    def from_cli_values(
            root_dir: Optional[str],
            read_stdin: bool,
            format_str: str = "txt",
            output_path: Optional[str] = None,
            concurrency: Optional[int] = None,
            quiet: bool = False,
            verbose: bool = False,
    ) -> 'SearchParams':
        """
        Factory method to create params from raw command-line values.
        Format aliases are resolved through redup.aliases.
        """
        from redup.aliases import FORMAT_ALIASES

        key = format_str.strip().lower()
        if key not in FORMAT_ALIASES:
            raise ValueError(f"Invalid file format {format_str}")

        if quiet:
            verbosity = Verbosity.QUIET
        elif verbose:
            verbosity = Verbosity.VERBOSE
        else:
            verbosity = Verbosity.NORMAL

        return SearchParams(
            root_dir=root_dir,
            read_stdin=read_stdin,
            concurrency=concurrency if concurrency is not None else default_concurrency(),
            verbosity=verbosity,
            output_format=FORMAT_ALIASES[key],
            output_path=output_path,
        )
