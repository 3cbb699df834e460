"""exif-rename - Move JPEG photos into a folder, renamed by their EXIF capture time."""

__version__ = "1.0.0"

# Make the pipeline available at package level
from .errors import (
    CrossDeviceMoveError,
    DecodeError,
    ExtractionError,
    ExtractionIoError,
    MoveError,
    RenameError,
    SetupError,
    TagNotFoundError,
)
from .executor import execute_moves, move_file
from .extractor import HEAD_WINDOW_BYTES, extract_candidate, extract_timestamp
from .failures import FailureCollector, report_failures
from .main import run_batch
from .models import (
    MAX_WORKERS,
    Candidate,
    ExtractionResult,
    FailureRecord,
    PlannedMove,
    RenameConfig,
    RunReport,
    Stage,
)
from .namer import assign_destination, build_base_name
from .planner import extract_all, plan_moves
from .scanner import JPEG_SUFFIXES, find_candidates

__all__ = [
    "__version__",
    "CrossDeviceMoveError", "DecodeError", "ExtractionError", "ExtractionIoError",
    "MoveError", "RenameError", "SetupError", "TagNotFoundError",
    "execute_moves", "move_file",
    "HEAD_WINDOW_BYTES", "extract_candidate", "extract_timestamp",
    "FailureCollector", "report_failures",
    "run_batch",
    "MAX_WORKERS", "Candidate", "ExtractionResult", "FailureRecord", "PlannedMove",
    "RenameConfig", "RunReport", "Stage",
    "assign_destination", "build_base_name",
    "extract_all", "plan_moves",
    "JPEG_SUFFIXES", "find_candidates",
]
