"""
Unit tests for exif_rename.executor.

Run with: pytest tests/test_executor.py -v --cov=exif_rename --cov-report=term-missing
"""
# pylint: disable=redefined-outer-name,missing-function-docstring

import errno
from pathlib import Path
from unittest.mock import patch

import pytest

from exif_rename.errors import CrossDeviceMoveError, MoveError
from exif_rename.executor import execute_moves, move_file
from exif_rename.models import PlannedMove, Stage

TS = "2023:05:01 10:00:00"


# =============================================================================
# Tests for move_file
# =============================================================================

class TestMoveFile:
    """Test move_file function."""

    def test_moves_file(self, tmp_path):
        src = tmp_path / "src.jpg"
        dst = tmp_path / "dst.jpg"
        src.write_bytes(b"photo")
        move_file(src, dst)
        assert not src.exists()
        assert dst.read_bytes() == b"photo"

    def test_refuses_to_overwrite(self, tmp_path):
        src = tmp_path / "src.jpg"
        dst = tmp_path / "dst.jpg"
        src.write_bytes(b"new")
        dst.write_bytes(b"old")
        with pytest.raises(MoveError) as exc_info:
            move_file(src, dst)
        assert exc_info.value.reason == "destination already exists"
        assert src.read_bytes() == b"new"
        assert dst.read_bytes() == b"old"

    def test_missing_source(self, tmp_path):
        with pytest.raises(MoveError) as exc_info:
            move_file(tmp_path / "gone.jpg", tmp_path / "dst.jpg")
        assert exc_info.value.source == tmp_path / "gone.jpg"

    def test_cross_device_is_reported(self, tmp_path):
        src = tmp_path / "src.jpg"
        src.write_bytes(b"photo")
        with patch.object(Path, "rename",
                          side_effect=OSError(errno.EXDEV, "Invalid cross-device link")):
            with pytest.raises(CrossDeviceMoveError):
                move_file(src, tmp_path / "dst.jpg")
        assert src.exists()

    def test_destination_stat_error_is_a_move_error(self, tmp_path, mocker):
        src = tmp_path / "src.jpg"
        src.write_bytes(b"photo")
        mocker.patch.object(Path, "exists",
                            side_effect=OSError(errno.ENAMETOOLONG, "File name too long"))
        with pytest.raises(MoveError) as exc_info:
            move_file(src, tmp_path / "dst.jpg")
        assert exc_info.value.reason == "File name too long"
        assert not isinstance(exc_info.value, CrossDeviceMoveError)

    def test_overlong_destination_name(self, tmp_path):
        src = tmp_path / "src.jpg"
        src.write_bytes(b"photo")
        with pytest.raises(MoveError):
            move_file(src, tmp_path / ("X" * 300 + ".jpg"))
        assert src.read_bytes() == b"photo"

    def test_cross_device_is_a_move_error(self):
        assert issubclass(CrossDeviceMoveError, MoveError)


# =============================================================================
# Tests for execute_moves
# =============================================================================

class TestExecuteMoves:
    """Test execute_moves function."""

    def test_moves_everything(self, tmp_path, failures, mock_logger):
        out = tmp_path / "out"
        out.mkdir()
        moves = []
        for i in range(10):
            src = tmp_path / f"IMG_{i}.jpg"
            src.write_bytes(str(i).encode())
            moves.append(PlannedMove(src, out / f"dest_{i}.jpg", TS))

        result = execute_moves(moves, failures, mock_logger, workers=4)

        assert result == []
        for i in range(10):
            assert (out / f"dest_{i}.jpg").read_bytes() == str(i).encode()

    def test_failure_is_isolated(self, tmp_path, failures, mock_logger):
        out = tmp_path / "out"
        out.mkdir()
        good = tmp_path / "good.jpg"
        bad = tmp_path / "bad.jpg"
        good.write_bytes(b"good")
        bad.write_bytes(b"bad")
        # Appeared after planning
        (out / "taken.jpg").write_bytes(b"someone else")

        result = execute_moves([PlannedMove(bad, out / "taken.jpg", TS),
                                PlannedMove(good, out / "free.jpg", TS)],
                               failures, mock_logger)

        assert len(result) == 1
        assert result[0].source == bad
        assert result[0].stage is Stage.MOVE
        assert (out / "free.jpg").read_bytes() == b"good"
        assert (out / "taken.jpg").read_bytes() == b"someone else"
        assert bad.exists()
        mock_logger.warning.assert_called()

    def test_returns_only_move_stage_records(self, tmp_path, failures, mock_logger):
        failures.record(tmp_path / "x.jpg", Stage.EXTRACTION, "no tag")
        result = execute_moves([PlannedMove(tmp_path / "missing.jpg", tmp_path / "d.jpg", TS)],
                               failures, mock_logger)
        assert [r.stage for r in result] == [Stage.MOVE]
        assert len(failures) == 2

    def test_empty_plan(self, failures, mock_logger):
        assert execute_moves([], failures, mock_logger) == []
