"""
scanner.py

Recursive enumeration of JPEG candidates under the input directory.
"""

from __future__ import annotations

from pathlib import Path

from .models import Candidate

# frozenset for O(1) lookup
JPEG_SUFFIXES = frozenset({'.jpg', '.jpeg'})


def is_candidate(path: Path) -> bool:
    """True if the file name carries a jpg/jpeg extension (case-insensitive)."""
    return path.suffix.lower() in JPEG_SUFFIXES


def find_candidates(input_dir: Path) -> list[Candidate]:
    """Collect every JPEG file below ``input_dir``.

    The walk does not follow directory symlinks. Results are sorted by path
    so that the planning order, and with it the naming outcome, is
    reproducible for identical directory contents.

    Args:
        input_dir (Path): Directory to scan recursively.

    Returns:
        list[Candidate]: Candidates with absolute paths.
    """
    root = input_dir.resolve()
    return [Candidate(path=p)
            for p in sorted(root.rglob('*'))
            if is_candidate(p) and p.is_file()]
