"""Filesystem probes that never raise"""
import os
from typing import Optional

from ..logging_config import get_logger

logger = get_logger(__name__)


def file_exists(path: str) -> bool:
    """Check whether path exists (file or directory)"""
    try:
        return os.path.exists(path)
    except (OSError, ValueError):
        return False


def is_directory(path: str) -> bool:
    try:
        return os.path.isdir(path)
    except (OSError, ValueError):
        return False


def read_file(path: str) -> Optional[str]:
    """Read a text file, returning None on any error"""
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    except (OSError, ValueError) as e:
        logger.debug("Could not read file", path=path, error=str(e))
        return None
