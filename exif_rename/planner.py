"""
planner.py

Phases 1 and 2 of a run: parallel timestamp extraction followed by a single
sequential naming pass.

Naming depends on the set of names claimed so far, so it runs on the calling
thread in enumeration order. That makes the outcome reproducible however the
extraction workers were scheduled.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .extractor import extract_candidate
from .failures import FailureCollector
from .models import MAX_WORKERS, Candidate, ExtractionResult, FailureRecord, PlannedMove, Stage
from .namer import assign_destination, snapshot_names


def extract_all(candidates: list[Candidate],
                failures: FailureCollector,
                logger: logging.Logger,
                full_scan: bool = False,
                workers: int = MAX_WORKERS,
                show_progress: bool = False) -> list[ExtractionResult]:
    """Extract capture timestamps for all candidates in parallel.

    Returns:
        list[ExtractionResult]: One result per candidate, in enumeration order.
    """
    results: list[Optional[ExtractionResult]] = [None] * len(candidates)

    with ThreadPoolExecutor(max_workers=workers) as executor, \
            tqdm(total=len(candidates), desc="Parsing files", unit="file",
                 disable=not show_progress) as progress:
        futures = {
            executor.submit(extract_candidate, c, failures, logger, full_scan): i
            for i, c in enumerate(candidates)
        }
        for future in as_completed(futures):
            results[futures[future]] = future.result()
            progress.update(1)

    return results


def plan_moves(candidates: list[Candidate],
               dest_dir: Path,
               failures: FailureCollector,
               logger: logging.Logger,
               full_scan: bool = False,
               workers: int = MAX_WORKERS,
               show_progress: bool = False) -> tuple[list[PlannedMove], list[FailureRecord]]:
    """Assign a collision-free destination to every candidate with a timestamp.

    Extraction runs to completion before any name is assigned. Candidates
    whose extraction failed are recorded in ``failures`` and left out of the
    plan.

    Args:
        candidates (list[Candidate]): Files to plan, in enumeration order.
        dest_dir (Path): Destination directory.
        failures (FailureCollector): Shared sink for per-file failures.
        logger (logging.Logger): Logger instance.
        full_scan (bool): Decode whole files instead of the head window.
        workers (int): Extraction thread pool size.
        show_progress (bool): Display a progress bar on stderr.

    Returns:
        Tuple of (planned moves, extraction-stage failure records).
    """
    results = extract_all(candidates, failures, logger,
                          full_scan=full_scan, workers=workers,
                          show_progress=show_progress)

    existing_names = snapshot_names(dest_dir)
    claimed_names: set[str] = set()
    planned: list[PlannedMove] = []

    for result in results:
        if not result.ok:
            continue
        destination = assign_destination(result.timestamp, claimed_names,
                                         dest_dir, existing_names)
        logger.debug("Planned %s -> %s", result.candidate.path, destination.name)
        planned.append(PlannedMove(source=result.candidate.path,
                                   destination=destination,
                                   timestamp=result.timestamp))

    return planned, failures.by_stage(Stage.EXTRACTION)
