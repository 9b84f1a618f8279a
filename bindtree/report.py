"""Run accounting for a sync pass."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import List

from .models import ConversionOutcome, ConversionTask, NameCollision, RunSummary


class RunReport:
    """Accumulates counts and failures; purely additive."""

    def __init__(self) -> None:
        self._total = 0
        self._eligible = 0
        self._converted = 0
        self._failed: List[str] = []
        self._skipped: List[str] = []
        self._collisions: List[NameCollision] = []

    def record(self, task: ConversionTask, outcome: ConversionOutcome) -> None:
        self._total += 1
        self._eligible += 1
        if outcome.ok:
            self._converted += 1
        else:
            self._failed.append(task.source_rel_path.as_posix())

    def record_skipped(self, source_rel_path: PurePosixPath) -> None:
        self._total += 1
        self._skipped.append(PurePosixPath(source_rel_path).as_posix())

    def record_collision(self, collision: NameCollision) -> None:
        self._collisions.append(collision)

    def summarize(self) -> RunSummary:
        return RunSummary(
            total=self._total,
            eligible=self._eligible,
            converted=self._converted,
            failed=list(self._failed),
            skipped=list(self._skipped),
            collisions=list(self._collisions),
        )


def format_summary(summary: RunSummary) -> str:
    lines = [
        f"Considered {summary.total} files, {summary.eligible} headers, "
        f"{summary.converted} converted.",
    ]
    if summary.collisions:
        lines.append(f"{len(summary.collisions)} module name collisions:")
        for collision in summary.collisions:
            lines.append(
                f"\t{collision.dest_rel_path}: {collision.first_source} / {collision.second_source}"
            )
    if summary.failed:
        lines.append(
            f"The following {len(summary.failed)} bindings failed (of {summary.total} total):"
        )
        lines.extend(f"\t{path}" for path in summary.failed)
    return "\n".join(lines)


__all__ = ["RunReport", "format_summary"]
