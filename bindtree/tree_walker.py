"""Recursive discovery of input headers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

from .logging import get_logger


def walk_files(root: Path, logger: logging.Logger | None = None) -> List[Path]:
    """Return every file below ``root``, depth-first, in sorted name order.

    Directories are expanded in place, so a directory's files appear before
    those of the next sibling. Symlinked directories are followed without a
    loop guard. An unreadable ``root`` raises; that is a setup error, not a
    per-file failure.
    """
    logger = logger or get_logger("walker")
    root_path = Path(root)
    if not root_path.exists():
        raise FileNotFoundError(f"Source root not found: {root_path}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Source root is not a directory: {root_path}")

    paths: List[Path] = []
    _walk_into(root_path, paths, logger)
    return paths


def _walk_into(directory: Path, paths: List[Path], logger: logging.Logger) -> None:
    logger.debug("Visiting directory: %s", directory)
    with os.scandir(directory) as entries:
        ordered = sorted(entries, key=lambda entry: entry.name)
    for entry in ordered:
        path = Path(entry.path)
        if entry.is_dir():
            _walk_into(path, paths, logger)
        else:
            logger.debug("Found file: %s", path)
            paths.append(path)


__all__ = ["walk_files"]
