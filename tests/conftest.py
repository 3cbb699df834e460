"""Shared fixtures for the exif_rename test suite."""
# pylint: disable=redefined-outer-name

import logging
from pathlib import Path
from typing import Optional
from unittest.mock import MagicMock

import pytest
from PIL import Image

from exif_rename.extractor import DATETIME_ORIGINAL_TAG
from exif_rename.failures import FailureCollector


def write_jpeg(path: Path, timestamp: Optional[str] = None) -> Path:
    """Write a small real JPEG, optionally carrying a DateTimeOriginal tag."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGB", (16, 16), "white")
    if timestamp is None:
        img.save(path, "JPEG")
    else:
        exif = Image.Exif()
        exif[DATETIME_ORIGINAL_TAG] = timestamp
        img.save(path, "JPEG", exif=exif)
    return path


@pytest.fixture
def make_jpeg():
    """Factory fixture around write_jpeg."""
    return write_jpeg


@pytest.fixture
def mock_logger():
    """Create a mock logger."""
    logger = MagicMock(spec=logging.Logger)
    return logger


@pytest.fixture
def failures():
    return FailureCollector()
