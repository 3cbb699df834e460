"""
errors.py

Exception hierarchy for exif-rename.

SetupError aborts a run before any file is touched. ExtractionError and
MoveError describe a single file and are captured by the pipeline workers,
never raised past them.
"""

from __future__ import annotations

from pathlib import Path


class RenameError(Exception):
    """Base class for all exif-rename errors."""


class SetupError(RenameError):
    """Invalid run configuration (bad input directory, nested output directory, ...)."""


class ExtractionError(RenameError):
    """A capture timestamp could not be read from a file."""

    kind = "extraction"

    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ExtractionIoError(ExtractionError):
    """The file could not be opened or read."""

    kind = "io"


class DecodeError(ExtractionError):
    """The EXIF decoder rejected the buffer."""

    kind = "decode"


class TagNotFoundError(ExtractionError):
    """Decoding succeeded but no DateTimeOriginal tag is present."""

    kind = "tag_not_found"


class MoveError(RenameError):
    """A planned move could not be performed."""

    def __init__(self, source: Path, destination: Path, reason: str):
        super().__init__(f"{source} -> {destination}: {reason}")
        self.source = source
        self.destination = destination
        self.reason = reason


class CrossDeviceMoveError(MoveError):
    """Source and destination live on different filesystems."""
