"""Core data models shared across bindtree components."""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import List, Optional


@dataclass(frozen=True)
class ConversionTask:
    """Binds one input header to its destination module for a single run."""

    source_root: Path
    source_rel_path: PurePosixPath
    dest_root: Path
    dest_rel_path: PurePosixPath

    @property
    def include_name(self) -> str:
        """Logical name handed to the translator (`#include <...>`)."""
        return self.source_rel_path.as_posix()

    @property
    def dest_path(self) -> Path:
        return self.dest_root.joinpath(*self.dest_rel_path.parts)

    @property
    def dest_rel_dir(self) -> PurePosixPath:
        return self.dest_rel_path.parent

    @property
    def module_name(self) -> str:
        return self.dest_rel_path.stem


@dataclass
class ConversionOutcome:
    """Result of converting a single header."""

    task: ConversionTask
    ok: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class NameCollision:
    """Two distinct sources that map onto the same destination module."""

    dest_rel_path: str
    first_source: str
    second_source: str


@dataclass
class RunSummary:
    """Aggregated counts for a completed run."""

    total: int
    eligible: int
    converted: int
    failed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    collisions: List[NameCollision] = field(default_factory=list)
