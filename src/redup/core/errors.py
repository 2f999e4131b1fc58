"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception hierarchy for the duplicate search pipeline.

InputError and SinkError are fatal and reach the CLI.
HashError (and its Open/Read flavours) is per-file: the scheduler turns it
into a failed HashResult and the run goes on.
"""


class RedupError(Exception):
    """Base class for all redup errors."""


class InputError(RedupError):
    """Root input is unusable (missing, not a directory, or no input mode selected)."""


class SinkError(RedupError):
    """Output destination cannot be created or written."""


class HashError(RedupError):
    """Hashing a single file failed."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path
        self.reason = message


class HashOpenError(HashError):
    """File does not exist, is not a regular file, or cannot be opened."""


class HashReadError(HashError):
    """I/O error while reading an already opened file."""
