"""
namer.py

Turns capture timestamps into unique destination file names.

Names sort lexically by capture time: ``2023:05:01 10:00:00`` becomes
``2023-05-01_10-00-00.jpg``, and photos sharing a second get ``_1``, ``_2``, ...
"""

from __future__ import annotations

from pathlib import Path
from typing import AbstractSet, Optional

DEST_SUFFIX = '.jpg'

# Characters that would let a malformed tag value leave the destination directory
_UNSAFE_CHARS = ('/', '\\', '\x00')


def build_base_name(timestamp: str) -> str:
    """File name stem for a timestamp, before any collision suffix or extension."""
    stem = timestamp.replace(':', '-').replace(' ', '_')
    for char in _UNSAFE_CHARS:
        stem = stem.replace(char, '-')
    return stem


def snapshot_names(dest_dir: Path) -> frozenset[str]:
    """Point-in-time set of entry names in ``dest_dir``, casefolded.

    A missing directory yields an empty snapshot.
    """
    if not dest_dir.is_dir():
        return frozenset()
    return frozenset(entry.name.casefold() for entry in dest_dir.iterdir())


def assign_destination(timestamp: str,
                       claimed_names: set[str],
                       dest_dir: Path,
                       existing_names: Optional[AbstractSet[str]] = None) -> Path:
    """Pick the first unused destination name for ``timestamp``.

    Tries ``<base>.jpg``, then ``<base>_1.jpg``, ``<base>_2.jpg`` and so on,
    skipping every name already in ``claimed_names`` (this run) or in
    ``existing_names`` (the destination directory). The winner is added to
    ``claimed_names`` before returning. Names are compared casefolded, and
    ``claimed_names`` holds casefolded names.

    Every rejected trial is a distinct name held by one of the two sets, so
    the search ends after at most ``len(claimed_names) + len(existing_names) + 1``
    trials. N photos sharing one timestamp cost O(N) trials each.

    Args:
        timestamp (str): Raw DateTimeOriginal value.
        claimed_names (set[str]): Names assigned earlier in this planning pass.
        dest_dir (Path): Destination directory.
        existing_names: Casefolded snapshot of ``dest_dir``. Taken from disk if None.

    Returns:
        Path: ``dest_dir / <chosen name>``.
    """
    if existing_names is None:
        existing_names = snapshot_names(dest_dir)

    base = build_base_name(timestamp)
    max_trials = len(claimed_names) + len(existing_names) + 1
    for counter in range(max_trials):
        name = f"{base}{DEST_SUFFIX}" if counter == 0 else f"{base}_{counter}{DEST_SUFFIX}"
        key = name.casefold()
        if key in claimed_names or key in existing_names:
            continue
        claimed_names.add(key)
        return dest_dir / name

    raise RuntimeError(f"no free name for {timestamp!r} after {max_trials} trials")  # pragma: no cover
