"""
failures.py

Concurrency-safe collection of per-file failures and the end-of-run error summary.
"""

from __future__ import annotations

import sys
import threading
from pathlib import Path
from typing import Iterable, Optional, TextIO

from .models import FailureRecord, Stage


class FailureCollector:
    """Append-only sink of FailureRecords shared by the worker threads of a run.

    Records are kept in insertion order. Insertion order across concurrent
    writers is whatever order the workers finished in.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: list[FailureRecord] = []

    def add(self, record: FailureRecord) -> None:
        with self._lock:
            self._records.append(record)

    def record(self, source: Path, stage: Stage, reason: str) -> FailureRecord:
        """Build a FailureRecord, append it and return it."""
        failure = FailureRecord(source=source, stage=stage, reason=reason)
        self.add(failure)
        return failure

    def by_stage(self, stage: Stage) -> list[FailureRecord]:
        with self._lock:
            return [r for r in self._records if r.stage is stage]

    def drain(self) -> list[FailureRecord]:
        """Remove and return all records collected so far."""
        with self._lock:
            records, self._records = self._records, []
        return records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


def format_failure(record: FailureRecord) -> str:
    return f"{record.source}: {record.stage.value} failed - {record.reason}"


def report_failures(records: Iterable[FailureRecord], stream: Optional[TextIO] = None) -> int:
    """Print the consolidated list of failed files.

    Args:
        records: Failure records in the order they were collected.
        stream: Where to write the summary. Defaults to sys.stderr.

    Returns:
        int: Number of failures printed.
    """
    records = list(records)
    stream = stream or sys.stderr
    if not records:
        return 0
    print("\n--- Summary of Errors ---", file=stream)
    for record in records:
        print(format_failure(record), file=stream)
    return len(records)
