"""
extractor.py

Reads the EXIF DateTimeOriginal value of a JPEG file.

By default only the head of the file is handed to the decoder, which is
enough for the metadata block of virtually every camera JPEG. ``full_scan``
reads the whole file instead: slower, but it cannot miss a tag that lies
beyond the head window.
"""

from __future__ import annotations

import io
import logging
import struct
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from .errors import DecodeError, ExtractionError, ExtractionIoError, TagNotFoundError
from .failures import FailureCollector
from .models import Candidate, ExtractionResult, Stage

# Bytes read from the start of a file in the default (bounded) mode
HEAD_WINDOW_BYTES = 64 * 1024

DATETIME_ORIGINAL_TAG = 36867  # DateTimeOriginal
EXIF_IFD_POINTER = 0x8769      # ExifOffset


def read_metadata_window(path: Path, full_scan: bool = False) -> bytes:
    """Return the bytes that will be handed to the EXIF decoder.

    Args:
        path (Path): File to read.
        full_scan (bool): Read the whole file instead of the head window.

    Returns:
        bytes: At most HEAD_WINDOW_BYTES bytes, or the entire file content.
    """
    with open(path, 'rb') as fh:
        if full_scan:
            return fh.read()
        return fh.read(HEAD_WINDOW_BYTES)


def _as_text(value) -> str:
    if isinstance(value, bytes):
        value = value.decode('ascii', errors='replace')
    return str(value).rstrip('\x00')


def _find_datetime_original(exif: Image.Exif) -> Optional[str]:
    """Look up DateTimeOriginal in IFD0, then in the Exif sub-IFD."""
    for ifd in (exif, exif.get_ifd(EXIF_IFD_POINTER)):
        value = ifd.get(DATETIME_ORIGINAL_TAG)
        text = _as_text(value) if value is not None else ''
        if text:
            return text
    return None


def extract_timestamp(path: Path, full_scan: bool = False) -> str:
    """Extract the raw capture timestamp of an image.

    The value is returned verbatim, normally ``"YYYY:MM:DD HH:MM:SS"``.

    Args:
        path (Path): Path to the JPEG file.
        full_scan (bool): Decode the whole file rather than the head window.

    Returns:
        str: The DateTimeOriginal tag value.

    Raises:
        ExtractionIoError: The file could not be opened or read.
        DecodeError: The buffer is not a decodable image or its EXIF is malformed.
        TagNotFoundError: The image decoded but carries no DateTimeOriginal tag.
    """
    try:
        data = read_metadata_window(path, full_scan)
    except OSError as e:
        raise ExtractionIoError(path, f"could not read file: {e.strerror or e}") from e

    try:
        with Image.open(io.BytesIO(data)) as img:
            raw_ts = _find_datetime_original(img.getexif())
    except UnidentifiedImageError as e:
        raise DecodeError(path, "not a recognizable image (empty, truncated or corrupt)") from e
    except Image.DecompressionBombError as e:
        raise DecodeError(path, f"image rejected by decoder: {e}") from e
    except (OSError, SyntaxError, ValueError, KeyError, struct.error) as e:
        raise DecodeError(path, f"could not decode EXIF data: {e}") from e

    if raw_ts is None:
        raise TagNotFoundError(path, "could not find DateTimeOriginal EXIF tag")
    return raw_ts


def extract_candidate(candidate: Candidate,
                      failures: FailureCollector,
                      logger: logging.Logger,
                      full_scan: bool = False) -> ExtractionResult:
    """Extract the timestamp of one candidate. Used by the parallel executor.

    Per-file errors are recorded in ``failures`` and returned as a failed
    result, never raised.
    """
    try:
        timestamp = extract_timestamp(candidate.path, full_scan=full_scan)
    except ExtractionError as e:
        logger.warning("Skipping %s: could not get date taken - %s",
                       candidate.path,
                       e.reason)
        failures.record(candidate.path, Stage.EXTRACTION, e.reason)
        return ExtractionResult(candidate=candidate, error=e)

    logger.debug("%s timestamp extracted from EXIF DateTimeOriginal: %s",
                 candidate.path.name,
                 timestamp)
    return ExtractionResult(candidate=candidate, timestamp=timestamp)
