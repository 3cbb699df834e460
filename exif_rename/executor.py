"""
executor.py

Phase 3 of a run: perform the planned moves in parallel.

Each move is independent. A failed move is recorded and never rolls back or
blocks any other move.
"""

from __future__ import annotations

import errno
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from tqdm import tqdm

from .errors import CrossDeviceMoveError, MoveError
from .failures import FailureCollector
from .models import MAX_WORKERS, FailureRecord, PlannedMove, Stage


def move_file(source: Path, destination: Path) -> None:
    """Rename ``source`` to ``destination`` without overwriting anything.

    Raises:
        MoveError: The destination exists or the rename failed.
        CrossDeviceMoveError: Source and destination are on different filesystems.
    """
    try:
        # os.rename silently replaces an existing file on POSIX
        if destination.exists() or destination.is_symlink():
            raise MoveError(source, destination, "destination already exists")
        source.rename(destination)
    except OSError as e:
        if e.errno == errno.EXDEV:
            raise CrossDeviceMoveError(
                source, destination,
                "source and destination are on different filesystems") from e
        raise MoveError(source, destination, e.strerror or str(e)) from e


def _move_single(move: PlannedMove,
                 failures: FailureCollector,
                 logger: logging.Logger) -> bool:
    """Move one file. Used by parallel executor."""
    try:
        move_file(move.source, move.destination)
    except MoveError as e:
        logger.warning("Failed to rename %s: %s", move.source, e.reason)
        failures.record(move.source, Stage.MOVE, e.reason)
        return False
    logger.info("Moved %s -> %s", move.source.name, move.destination.name)
    return True


def execute_moves(moves: list[PlannedMove],
                  failures: FailureCollector,
                  logger: logging.Logger,
                  workers: int = MAX_WORKERS,
                  show_progress: bool = False) -> list[FailureRecord]:
    """Perform all planned moves in parallel.

    Args:
        moves (list[PlannedMove]): Output of the planning phase.
        failures (FailureCollector): Shared sink for per-file failures.
        logger (logging.Logger): Logger instance.
        workers (int): Thread pool size.
        show_progress (bool): Display a progress bar on stderr.

    Returns:
        list[FailureRecord]: Move-stage failure records.
    """
    with ThreadPoolExecutor(max_workers=workers) as executor, \
            tqdm(total=len(moves), desc="Moving files", unit="file",
                 disable=not show_progress) as progress:
        futures = [executor.submit(_move_single, m, failures, logger) for m in moves]
        for future in as_completed(futures):
            future.result()
            progress.update(1)

    return failures.by_stage(Stage.MOVE)
