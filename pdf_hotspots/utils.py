"""Utility helpers for PDF Hotspots."""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, Union

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def configure_logging(level: int = logging.INFO) -> None:
    """Configure package-wide logging."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


@contextmanager
def time_block(logger: logging.Logger, message: str) -> Iterator[None]:
    """Context manager that logs the execution time of a code block."""
    start = datetime.now(tz=timezone.utc)
    logger.debug("Starting %s", message)
    try:
        yield
    finally:
        elapsed = (datetime.now(tz=timezone.utc) - start).total_seconds()
        logger.debug("%s completed in %.3fs", message, elapsed)


def utc_timestamp() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def resolve_output_path(path: PathLike) -> Path:
    """A bare filename lands in the system temp directory; anything else is used as given."""
    text = os.fspath(path)
    if "/" in text or "\\" in text:
        return Path(text).expanduser()
    return Path(tempfile.gettempdir()) / text


def save_bytes(path: PathLike, data: bytes) -> Optional[str]:
    """
    Persist ``data`` and return where it was written.

    Args:
        path: Full path, or a bare filename to write into the temp directory

    Returns:
        The written path as a string, or ``None`` if the write failed
    """
    destination = resolve_output_path(path)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)
    except OSError as exc:
        LOGGER.error("Failed to save %s: %s", destination, exc)
        return None
    LOGGER.info("Saved %d bytes to %s", len(data), destination)
    return str(destination)


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "500 KB")
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"


__all__ = [
    "configure_logging",
    "time_block",
    "utc_timestamp",
    "resolve_output_path",
    "save_bytes",
    "format_file_size",
]
