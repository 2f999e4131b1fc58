"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/report_service.py
Result sinks that render finalized duplicate groups.

- TextReportSink: header line, then each group after a '-' delimiter line
- CsvReportSink: rows of hash,file_path,group_id
- SqliteReportSink: 'groups' and 'files' tables in a SQLite database file

Every failure to create or write the destination is raised as SinkError.
"""
import csv
import os
import sqlite3
import sys
from contextlib import contextmanager
from typing import Iterator, List, Optional, TextIO

from redup.core.errors import SinkError
from redup.core.interfaces import ResultSink
from redup.core.models import DuplicateGroup, OutputFormat, ScanStats

GROUP_DELIMITER = "-"
CSV_FIELDNAMES = ["hash", "file_path", "group_id"]

SQLITE_SCHEMA = """
CREATE TABLE IF NOT EXISTS "groups" (
    id   INTEGER PRIMARY KEY,
    hash TEXT NOT NULL UNIQUE
);
CREATE TABLE IF NOT EXISTS files (
    group_id INTEGER NOT NULL REFERENCES "groups"(id),
    path     TEXT NOT NULL,
    PRIMARY KEY (group_id, path)
);
"""


def _lossy_text(path: str) -> str:
    """Path as valid UTF-8 text; undecodable bytes become U+FFFD."""
    return os.fsencode(path).decode("utf-8", "replace")


@contextmanager
def _open_text_output(output_path: Optional[str]) -> Iterator[TextIO]:
    """Yields stdout when no path is given, otherwise a newly created file."""
    if output_path is None:
        try:
            yield sys.stdout
        except (OSError, UnicodeEncodeError) as e:
            raise SinkError(f"Cannot write to standard output: {e}") from e
        return

    # surrogateescape writes undecodable filename bytes back out unchanged
    try:
        handle = open(output_path, "x", encoding="utf-8", errors="surrogateescape", newline="")
    except OSError as e:
        raise SinkError(f"Cannot create output file {output_path}: {e.strerror or e}") from e

    with handle:
        try:
            yield handle
        except OSError as e:
            raise SinkError(f"Cannot write output file {output_path}: {e.strerror or e}") from e


class TextReportSink(ResultSink):
    """Plain-text report, readable by people and by line-oriented tools."""

    def __init__(self, output_path: Optional[str] = None, quiet: bool = False):
        self.output_path = output_path
        self.quiet = quiet

    def write(self, groups: List[DuplicateGroup], stats: ScanStats) -> None:
        with _open_text_output(self.output_path) as out:
            if not self.quiet:
                out.write("DUPLICATES FOUND!\n" if groups else "No Duplicates Found!\n")

            for group in groups:
                out.write(f"{GROUP_DELIMITER}\n")
                for path in group.paths:
                    out.write(f"{path}\n")
            out.flush()


class CsvReportSink(ResultSink):
    """One CSV row per file in a duplicate group."""

    def __init__(self, output_path: Optional[str] = None):
        self.output_path = output_path

    def write(self, groups: List[DuplicateGroup], stats: ScanStats) -> None:
        with _open_text_output(self.output_path) as out:
            writer = csv.DictWriter(out, fieldnames=CSV_FIELDNAMES, lineterminator="\n")
            writer.writeheader()
            for group in groups:
                for path in group.paths:
                    writer.writerow({
                        "hash": group.hex_digest,
                        "file_path": path,
                        "group_id": group.group_id,
                    })
            out.flush()


class SqliteReportSink(ResultSink):
    """
    Persists groups in two related tables:
        groups(id, hash) and files(group_id, path)
    The database file must not exist yet. Paths are stored as UTF-8 text, so
    bytes that do not decode are replaced and names differing only in such
    bytes share one row.
    """

    def __init__(self, output_path: str):
        if not output_path:
            raise SinkError("SQLite output requires a file path")
        self.output_path = output_path

    def write(self, groups: List[DuplicateGroup], stats: ScanStats) -> None:
        if os.path.exists(self.output_path):
            raise SinkError(f"{self.output_path} already exists")

        try:
            conn = sqlite3.connect(self.output_path)
        except sqlite3.Error as e:
            raise SinkError(f"Cannot create database {self.output_path}: {e}") from e

        try:
            with conn:
                conn.executescript(SQLITE_SCHEMA)
                conn.executemany(
                    'INSERT INTO "groups" (id, hash) VALUES (?, ?)',
                    [(g.group_id, g.hex_digest) for g in groups]
                )
                conn.executemany(
                    "INSERT OR IGNORE INTO files (group_id, path) VALUES (?, ?)",
                    [(g.group_id, _lossy_text(path)) for g in groups for path in g.paths]
                )
        except sqlite3.Error as e:
            raise SinkError(f"Cannot write database {self.output_path}: {e}") from e
        finally:
            conn.close()


def create_sink(output_format: OutputFormat, output_path: Optional[str] = None, quiet: bool = False) -> ResultSink:
    """Returns the sink that renders the given format."""
    if output_format is OutputFormat.CSV:
        return CsvReportSink(output_path)
    if output_format is OutputFormat.SQLITE:
        return SqliteReportSink(output_path)
    return TextReportSink(output_path, quiet=quiet)
