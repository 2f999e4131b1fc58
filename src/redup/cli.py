#!/usr/bin/env python3
"""
redup CLI — command line interface for finding duplicate files by content.
Parses arguments, configures logging, runs the core pipeline and hands the
groups to the selected report sink. Owns the process exit codes.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from pathlib import Path
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

try:
    import aiofiles
except ImportError:
    _MISSING_DEPS.append("aiofiles")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    print("\nOr install the package with its dependencies:", file=sys.stderr)
    print("   pip install .", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from redup import __version__
from redup.core.errors import InputError, SinkError
from redup.core.models import DuplicateGroup, OutputFormat, ScanStats, SearchParams, Verbosity
from redup.commands import DuplicateSearchCommand
from redup.services.report_service import create_sink
from redup.aliases import FORMAT_CHOICES, FORMAT_HELP_TEXT, JOBS_HELP_TEXT, EPILOG_TEXT

LOG_LEVELS = {
    Verbosity.QUIET: logging.ERROR,
    Verbosity.NORMAL: logging.WARNING,
    Verbosity.VERBOSE: logging.DEBUG,
}


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError.
        # Paths with undecodable bytes go to stdout as their original bytes.
        for stream, errors in ((sys.stdout, "surrogateescape"), (sys.stderr, "backslashreplace")):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8', errors=errors)

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        argv = list(sys.argv[1:] if args is None else args)
        # A trailing bare '--' is shorthand for --stdin
        if argv and argv[-1] == "--":
            argv[-1] = "--stdin"

        parser = argparse.ArgumentParser(
            prog="redup",
            description="redup — find duplicate files by hashing their contents",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Input
        parser.add_argument(
            "directory",
            nargs="?",
            default=None,
            metavar="DIR",
            help="Directory to recursively search"
        )
        parser.add_argument(
            "--stdin",
            action="store_true",
            dest="read_stdin",
            help="Read file paths from standard input, one per line (pipe ls/find output).\n"
                 "A trailing '--' does the same."
        )

        # Hashing options
        parser.add_argument(
            "--jobs", "-j",
            default=None,
            type=int,
            metavar="N",
            help=JOBS_HELP_TEXT
        )

        # Output options
        parser.add_argument(
            "--output", "-o",
            default=None,
            type=str,
            metavar="PATH",
            help="The filepath of output (Default: print to stdout)"
        )
        parser.add_argument(
            "--format", "-f",
            choices=FORMAT_CHOICES,
            default="txt",
            type=str.lower,
            dest="output_format",
            help=FORMAT_HELP_TEXT
        )

        verbosity = parser.add_mutually_exclusive_group()
        verbosity.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress output messages"
        )
        verbosity.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed progress and statistics"
        )
        parser.add_argument(
            "--version", "-V",
            action="version",
            version=f"%(prog)s {__version__}"
        )

        return parser.parse_args(argv)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.read_stdin and args.directory:
            self.error_exit("Use either a directory or --stdin, not both")

        if not args.read_stdin:
            if not args.directory:
                self.error_exit("No directory given (use --stdin to read paths from standard input)")

            root_path = Path(args.directory)
            if not root_path.exists():
                self.error_exit(f"Directory not found: {args.directory}")
            if not root_path.is_dir():
                self.error_exit(f"Path is not a directory: {args.directory}")

        if args.jobs is not None and args.jobs < 1:
            self.error_exit("--jobs must be a positive integer")

        if args.output is not None:
            if Path(args.output).exists():
                self.error_exit(f"{args.output} already exists")
            parent = Path(args.output).resolve().parent
            if not parent.is_dir():
                self.error_exit(f"Output directory not found: {parent}")

    def create_params(self, args: argparse.Namespace) -> SearchParams:
        """Create SearchParams from CLI arguments."""
        try:
            return SearchParams.from_cli_values(
                root_dir=args.directory,
                read_stdin=args.read_stdin,
                format_str=args.output_format,
                output_path=args.output,
                concurrency=args.jobs,
                quiet=args.quiet,
                verbose=args.verbose,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    @staticmethod
    def configure_logging(verbosity: Verbosity) -> None:
        """Route per-file diagnostics according to the verbosity level."""
        logging.getLogger().setLevel(LOG_LEVELS[verbosity])

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def run_search(self, params: SearchParams) -> tuple[List[DuplicateGroup], ScanStats]:
        """Execute the duplicate search workflow."""
        command = DuplicateSearchCommand()
        if self.verbose:
            print(f"Finding duplicates (concurrency: {params.concurrency})...", file=sys.stderr)

        try:
            groups, stats = command.execute(
                params,
                lines=sys.stdin.buffer if params.read_stdin else None,
                progress_callback=self.progress_callback if self.verbose else None,
            )
        except InputError as e:
            self.error_exit(str(e))

        if self.verbose:
            sys.stderr.write("\n")
            print(stats.print_summary(), file=sys.stderr)

        if stats.files_failed:
            self.warning(f"{stats.files_failed} file(s) could not be read and were skipped")

        return groups, stats

    def output_results(self, groups: List[DuplicateGroup], stats: ScanStats, params: SearchParams) -> None:
        """Hand the finalized groups to the sink for the selected format."""
        try:
            sink = create_sink(params.output_format, params.output_path, quiet=self.quiet)
            sink.write(groups, stats)
        except SinkError as e:
            self.error_exit(str(e))

        if params.output_path and not self.quiet and params.output_format is not OutputFormat.TEXT:
            print(f"Wrote {len(groups)} duplicate groups to {params.output_path}", file=sys.stderr)

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, args: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        parsed = self.parse_args(args)
        self.verbose = parsed.verbose
        self.quiet = parsed.quiet

        self.validate_args(parsed)
        params = self.create_params(parsed)
        self.configure_logging(params.verbosity)

        if self.verbose:
            source = "standard input" if params.read_stdin else params.root_dir
            print(f"Scanning: {source}", file=sys.stderr)

        groups, stats = self.run_search(params)
        self.output_results(groups, stats, params)

        # Show completion time
        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds", file=sys.stderr)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
