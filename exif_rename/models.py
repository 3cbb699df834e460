"""
models.py

Dataclasses passed between the stages of the rename pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import ExtractionError

# Default number of worker threads for extraction and moves
MAX_WORKERS = 8


class Stage(Enum):
    """Pipeline phase a failure was recorded in."""
    EXTRACTION = "extraction"
    MOVE = "move"


@dataclass(frozen=True)
class Candidate:
    """An enumerated input file eligible for renaming."""
    path: Path


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of reading the capture timestamp of one candidate.

    Exactly one of ``timestamp`` and ``error`` is set.
    """
    candidate: Candidate
    timestamp: Optional[str] = None
    error: Optional[ExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class PlannedMove:
    """A committed (source, destination) pairing produced before any file is touched."""
    source: Path
    destination: Path
    timestamp: str


@dataclass(frozen=True)
class FailureRecord:
    """A per-file failure surfaced at the end of the run."""
    source: Path
    stage: Stage
    reason: str


@dataclass
class RenameConfig:  # pylint: disable=too-many-instance-attributes
    """Options for one rename run."""
    input_dir: Path
    output_dir: Path
    full_scan: bool = False
    workers: int = MAX_WORKERS
    dry_run: bool = False
    verbose: bool = False
    show_progress: bool = True
    log_dir: Optional[Path] = None


@dataclass
class RunReport:
    """Everything a finished run produced."""
    candidates: list[Candidate] = field(default_factory=list)
    planned: list[PlannedMove] = field(default_factory=list)
    moved: list[PlannedMove] = field(default_factory=list)
    failures: list[FailureRecord] = field(default_factory=list)
    dry_run: bool = False
    elapsed: timedelta = field(default_factory=timedelta)
