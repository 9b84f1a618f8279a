"""Destination path derivation and module-name sanitization."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Dict, Iterable, Optional

from .models import NameCollision

_ILLEGAL_CHARS = re.compile(r"[^A-Za-z0-9_]")


class NameCollisionError(RuntimeError):
    """Raised when two sources sanitize to the same destination module."""


def sanitize_module_name(name: str, reserved: Iterable[str] = ()) -> str:
    """Return ``name`` rewritten as a legal module identifier.

    The rewrite only looks at ``name`` itself, never at its siblings, so two
    different inputs (``if-ether`` and ``if_ether``) can produce the same
    result. ``NameRegistry`` is where such collisions get noticed.
    """
    cleaned = _ILLEGAL_CHARS.sub("_", name)
    if not cleaned:
        return "_"
    if cleaned[0].isdigit():
        cleaned = f"_{cleaned}"
    if cleaned in reserved:
        cleaned = f"{cleaned}_"
    return cleaned


class PathNamer:
    """Maps a SourceRoot-relative header path onto its OutputRoot-relative module."""

    def __init__(
        self,
        module_extension: str = ".rs",
        reserved: Iterable[str] = (),
    ) -> None:
        if not module_extension.startswith("."):
            module_extension = f".{module_extension}"
        self.module_extension = module_extension
        self.reserved = frozenset(reserved)

    def derive(self, source_rel_path: PurePosixPath | str) -> PurePosixPath:
        rel = PurePosixPath(source_rel_path)
        dirs = [sanitize_module_name(part, self.reserved) for part in rel.parent.parts]
        stem = sanitize_module_name(_strip_suffix(rel.name), self.reserved)
        return PurePosixPath(*dirs, f"{stem}{self.module_extension}")


def _strip_suffix(filename: str) -> str:
    # Leading-dot names such as ".h" have no stem to strip.
    head, dot, _ = filename.rpartition(".")
    return head if dot and head else filename


class NameRegistry:
    """Remembers which source produced each module during a run.

    Modules are keyed by identity (parent directory plus sanitized name), so a
    directory module and a file module share one namespace: ``net-x/a.h``
    against ``net_x/b.h`` collides, and so does ``linux/netfilter.h`` against
    ``linux/netfilter/xt_mark.h``.
    """

    def __init__(self) -> None:
        self._owners: Dict[str, str] = {}

    def claim(
        self, dest_rel_path: PurePosixPath, source_rel_path: PurePosixPath
    ) -> Optional[NameCollision]:
        """Record ownership; return the collision if the module is already taken."""
        dest_parts = dest_rel_path.parts
        source_parts = source_rel_path.parts
        # Source and destination always have the same depth.
        for depth in range(1, len(dest_parts)):
            module = "/".join(dest_parts[:depth])
            collision = self._claim_one(
                module, f"{module}/", "/".join(source_parts[:depth]) + "/"
            )
            if collision is not None:
                return collision
        return self._claim_one(
            dest_rel_path.with_suffix("").as_posix(),
            dest_rel_path.as_posix(),
            source_rel_path.as_posix(),
        )

    def _claim_one(
        self, module: str, display: str, source_key: str
    ) -> Optional[NameCollision]:
        owner = self._owners.get(module)
        if owner is None:
            self._owners[module] = source_key
            return None
        if owner == source_key:
            return None
        return NameCollision(
            dest_rel_path=display,
            first_source=owner,
            second_source=source_key,
        )


__all__ = [
    "NameCollisionError",
    "NameRegistry",
    "PathNamer",
    "sanitize_module_name",
]
