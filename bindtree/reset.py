"""Output tree reset between runs."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable

from .logging import get_logger


def reset_output(
    root: Path,
    allow_list: Iterable[Path],
    logger: logging.Logger | None = None,
) -> None:
    """Delete every immediate child of ``root`` that is not allow-listed.

    Allow-list entries are compared by exact path and only at the top level;
    the contents of an allow-listed directory are left alone. Filesystem
    errors propagate and nothing already deleted is restored.
    """
    logger = logger or get_logger("reset")
    root = Path(root)
    protected = {Path(path) for path in allow_list}
    logger.info("Removing all contents of: %s", root)

    for child in sorted(root.iterdir()):
        if child in protected:
            logger.debug("Skipping protected path: %s", child)
            continue
        if child.is_dir() and not child.is_symlink():
            logger.debug("Deleting dir: %s", child)
            shutil.rmtree(child)
        else:
            logger.debug("Deleting file: %s", child)
            child.unlink()


def recreate_empty_file(path: Path, logger: logging.Logger | None = None) -> None:
    """Replace ``path`` with a fresh empty file via a temporary sibling and a rename."""
    logger = logger or get_logger("reset")
    path = Path(path)
    temp_path = path.with_name(f"TEMP_{path.name}")
    logger.debug("Creating blank file: %s", temp_path)
    temp_path.write_bytes(b"")
    logger.debug("Replacing %s with new blank file", path)
    os.replace(temp_path, path)


__all__ = ["recreate_empty_file", "reset_output"]
