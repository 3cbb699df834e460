"""
main.py

Renames JPEG photos into a destination folder by their EXIF capture timestamp.

Features:
    - Recursively collects .jpg/.jpeg files (case-insensitive) from the input folder.
    - Reads EXIF DateTimeOriginal in parallel, from the file head or the whole file.
    - Names files YYYY-MM-DD_HH-MM-SS.jpg, adding _1, _2, ... on collisions with
      other photos of the run or with files already in the destination.
    - Moves files in parallel; never overwrites an existing file.
    - Failures of single files never stop the batch and are listed at the end.
    - Logs all actions to both console and a rotating log file.

Usage:
    exif-rename --in-dir <input> --out-dir <output> [--full-scan] [--dry-run]

Dependencies:
    - Pillow (EXIF decoding)
    - tqdm (progress bars)
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import timedelta
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from timeit import default_timer as timer
from typing import Optional

from . import __version__
from .errors import SetupError
from .executor import execute_moves
from .failures import FailureCollector, report_failures
from .models import MAX_WORKERS, RenameConfig, RunReport, Stage
from .planner import plan_moves
from .scanner import find_candidates

SCRIPT_NAME = 'exif-rename'


def setup_logger(script_name: str,
                 verbose: bool = False,
                 log_dir: Optional[Path] = None) -> logging.Logger:
    """Configures and returns a logger for the script.

    Args:
        script_name (str): Name of the script for log file naming.
        verbose (bool): If True, set log level to DEBUG; otherwise INFO.
        log_dir (Path, optional): Folder for the log file. Defaults to the
            current working directory.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(__name__)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )
    log_dir = Path(log_dir) if log_dir else Path('.')
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = TimedRotatingFileHandler(
        log_dir / f"{script_name}.log", when="d", backupCount=10, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return logger


def validate_directories(config: RenameConfig) -> tuple[Path, Path]:
    """Check the input/output folders and create the output folder.

    Returns:
        Tuple of (resolved input folder, resolved output folder).

    Raises:
        SetupError: The input folder is missing, the output folder is the input
            folder or lies inside it, or the output folder cannot be created.
    """
    input_dir = Path(config.input_dir).expanduser()
    if not input_dir.is_dir():
        raise SetupError(
            f"Input directory does not exist or is not a directory: {input_dir}")

    input_dir = input_dir.resolve()
    output_dir = Path(config.output_dir).expanduser().resolve()
    if output_dir == input_dir or input_dir in output_dir.parents:
        raise SetupError(
            "Output directory cannot be the input directory or a subdirectory of it: "
            f"{output_dir}")

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SetupError(f"Cannot create output directory {output_dir}: {e}") from e

    return input_dir, output_dir


def run_batch(config: RenameConfig, logger: logging.Logger) -> RunReport:
    """
    Renames every JPEG below the input folder into the output folder.

    This function performs three phases separated by barriers:
    1. Reads the capture timestamp of every candidate in parallel.
    2. Assigns collision-free destination names sequentially, in enumeration order.
    3. Moves the files in parallel (skipped with ``dry_run``).

    Args:
        config (RenameConfig): Run options.
        logger (logging.Logger): Logger instance for recording progress.

    Returns:
        RunReport: Candidates, planned and performed moves, and all failures.

    Raises:
        SetupError: Before any file is touched, if the folders are unusable.
    """
    start = timer()
    input_dir, output_dir = validate_directories(config)
    logger.info('Processing folder: %s -> %s', input_dir, output_dir)

    candidates = find_candidates(input_dir)
    logger.info('Found %d JPEG files', len(candidates))

    failures = FailureCollector()
    planned, _ = plan_moves(candidates, output_dir, failures, logger,
                            full_scan=config.full_scan,
                            workers=config.workers,
                            show_progress=config.show_progress)

    if config.dry_run:
        for move in planned:
            logger.info("Would move %s to %s", move.source, move.destination)
        moved = []
    else:
        move_failures = execute_moves(planned, failures, logger,
                                      workers=config.workers,
                                      show_progress=config.show_progress)
        failed_sources = {f.source for f in move_failures}
        moved = [m for m in planned if m.source not in failed_sources]

    return RunReport(
        candidates=candidates,
        planned=planned,
        moved=moved,
        failures=failures.drain(),
        dry_run=config.dry_run,
        elapsed=timedelta(seconds=timer() - start)
    )


def log_summary(report: RunReport, logger: logging.Logger) -> None:
    """Log processing summary statistics."""
    extraction_failures = sum(1 for f in report.failures if f.stage is Stage.EXTRACTION)
    move_failures = sum(1 for f in report.failures if f.stage is Stage.MOVE)

    logger.info("Evaluated %d JPEG files", len(report.candidates))
    logger.info("  - %d had a capture timestamp", len(report.planned))
    logger.info("  - %d could not be read", extraction_failures)

    if report.dry_run:
        logger.info("Would move %d files. Run without --dry-run to apply changes.",
                    len(report.planned))
    else:
        logger.info("Moved %d files", len(report.moved))
        logger.info("  - %d moves failed", move_failures)

    logger.info("Finished in %.2f seconds", report.elapsed.total_seconds())


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value}")
    return number


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=SCRIPT_NAME,
        description='Move JPEG photos into a folder, renamed by EXIF capture time.'
    )
    parser.add_argument(
        '-i',
        '--in-dir',
        type=Path,
        required=True,
        help='Input folder, scanned recursively for .jpg/.jpeg files'
    )
    parser.add_argument(
        '-o',
        '--out-dir',
        type=Path,
        required=True,
        help='Output folder (created if missing; must not be inside the input folder)'
    )
    parser.add_argument(
        '-f',
        '--full-scan',
        action='store_true',
        default=False,
        help='Read entire files to find EXIF data. Slower but more reliable.'
    )
    parser.add_argument(
        '-w',
        '--workers',
        type=_positive_int,
        default=MAX_WORKERS,
        help=f'Parallel workers (default {MAX_WORKERS})'
    )
    parser.add_argument(
        '-n',
        '--dry-run',
        action='store_true',
        default=False,
        help='Plan and log the renames without moving any file'
    )
    parser.add_argument(
        '-v',
        '--verbose',
        action='store_true',
        default=False,
        help='Enable verbose (DEBUG) logging'
    )
    parser.add_argument(
        '--no-progress',
        action='store_true',
        default=False,
        help='Disable progress bars'
    )
    parser.add_argument(
        '--log-dir',
        type=Path,
        default=None,
        help='Folder for the log file (default: current folder)'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'{SCRIPT_NAME} {__version__}'
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None):
    """Parses arguments, sets up logging, and runs the batch."""
    args = parse_args(argv)
    config = RenameConfig(
        input_dir=args.in_dir,
        output_dir=args.out_dir,
        full_scan=args.full_scan,
        workers=args.workers,
        dry_run=args.dry_run,
        verbose=args.verbose,
        show_progress=not args.no_progress,
        log_dir=args.log_dir,
    )

    logger = setup_logger(SCRIPT_NAME, verbose=config.verbose, log_dir=config.log_dir)
    logger.info("*** Starting %s %s ***", SCRIPT_NAME, __version__)

    try:
        report = run_batch(config, logger)
    except SetupError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    log_summary(report, logger)
    report_failures(report.failures)
    sys.exit(0)


if __name__ == '__main__':  # pragma: no cover
    main()
