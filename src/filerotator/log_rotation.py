"""Size check that decides when a log file should be rotated."""

from __future__ import annotations

import logging
from pathlib import Path

from filerotator.rotator import FileRotator

logger = logging.getLogger(__name__)


def rotate_if_needed(log_path: Path, rotator: FileRotator) -> bool:
    """Rotate log_path if it exceeds rotator.max_file_size kilobytes.

    Returns True if rotation happened.
    """
    try:
        size = log_path.stat().st_size
    except OSError:
        return False

    if size <= rotator.max_file_size * 1024:
        return False

    logger.debug("%s is %d bytes, rotating", log_path, size)
    rotator.rotate(log_path)
    return True
