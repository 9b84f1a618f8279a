"""Pipeline orchestration for the plan and sync flows."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path, PurePosixPath
from typing import List

from .config import BindTreeConfig, load_config
from .logging import get_logger
from .models import ConversionTask, NameCollision, RunSummary
from .naming import NameCollisionError, NameRegistry, PathNamer
from .pipeline import ConversionPipeline
from .report import RunReport
from .reset import recreate_empty_file, reset_output
from .scaffold import ModuleScaffolder
from .translator import BindgenTranslator, Translator
from .tree_walker import walk_files


@dataclass
class SyncPlan:
    """Everything decided about a run before the output tree is touched."""

    config: BindTreeConfig
    tasks: List[ConversionTask] = field(default_factory=list)
    skipped: List[PurePosixPath] = field(default_factory=list)
    collisions: List[NameCollision] = field(default_factory=list)
    considered: int = 0


class Orchestrator:
    """Coordinates reset, discovery and conversion for one output tree."""

    def __init__(
        self,
        translator: Translator | None = None,
        config: BindTreeConfig | None = None,
    ) -> None:
        self._translator = translator
        self._config = config
        self.logger = get_logger("orchestrator")

    def load(
        self,
        path: str | Path = ".",
        *,
        source_root: str | Path | None = None,
        output_root: str | Path | None = None,
        log_file: str | Path | None = None,
        max_files: int | None = None,
    ) -> BindTreeConfig:
        """Return the effective configuration for ``path`` with CLI overrides applied."""
        config = self._config or load_config(Path(path))
        cwd = Path.cwd()
        if source_root is not None:
            config = replace(config, source_root=(cwd / Path(source_root)).resolve())
        if output_root is not None:
            config = replace(config, output_root=(cwd / Path(output_root)).resolve())
        if log_file is not None:
            config = replace(config, log_file=(cwd / Path(log_file)).resolve())
        if max_files is not None:
            config = replace(config, max_files=max_files)
        config.allow_list()
        return config

    def plan(self, config: BindTreeConfig) -> SyncPlan:
        """Walk the source tree and derive one task per header without writing anything."""
        namer = PathNamer(
            config.module_extension,
            reserved=(
                Path(config.declarations.root_file).stem,
                Path(config.declarations.module_file).stem,
            ),
        )
        registry = NameRegistry()
        plan = SyncPlan(config=config)

        files = walk_files(config.source_root, get_logger("walker"))
        self.logger.debug("Walker discovered %d files", len(files))
        for path in files:
            if config.max_files is not None and plan.considered >= config.max_files:
                self.logger.info("Stopping after %d files (max_files)", config.max_files)
                break
            plan.considered += 1
            rel_path = PurePosixPath(path.relative_to(config.source_root).as_posix())
            if not config.is_header(path):
                self.logger.debug("Skipping non-header file: %s", path)
                plan.skipped.append(rel_path)
                continue

            dest_rel_path = namer.derive(rel_path)
            collision = registry.claim(dest_rel_path, rel_path)
            if collision is not None:
                self.logger.warning(
                    "Module name collision at %s: %s and %s",
                    collision.dest_rel_path,
                    collision.first_source,
                    collision.second_source,
                )
                plan.collisions.append(collision)

            plan.tasks.append(
                ConversionTask(
                    source_root=config.source_root,
                    source_rel_path=rel_path,
                    dest_root=config.output_root,
                    dest_rel_path=dest_rel_path,
                )
            )
        return plan

    def run(self, config: BindTreeConfig) -> RunSummary:
        """Rebuild the output tree from scratch and return the run summary."""
        self.logger.info(
            "Syncing %s -> %s", config.source_root, config.output_root
        )
        plan = self.plan(config)
        if plan.collisions and config.on_collision == "error":
            first = plan.collisions[0]
            raise NameCollisionError(
                f"{len(plan.collisions)} module name collision(s); first at "
                f"{first.dest_rel_path}: {first.first_source} and {first.second_source}"
            )

        self._reset(config)

        scaffolder = ModuleScaffolder(
            config.output_root,
            root_declaration=config.declarations.root_file,
            module_declaration=config.declarations.module_file,
            template=config.declarations.template,
            logger=get_logger("scaffold"),
        )
        pipeline = ConversionPipeline(
            self._resolve_translator(config), scaffolder, get_logger("pipeline")
        )
        report = RunReport()
        for collision in plan.collisions:
            report.record_collision(collision)
        for rel_path in plan.skipped:
            report.record_skipped(rel_path)

        for task in plan.tasks:
            self.logger.debug("Processing header: %s", task.include_name)
            outcome = pipeline.convert(task)
            report.record(task, outcome)

        summary = report.summarize()
        self.logger.info(
            "The following %d bindings failed (of %d total)",
            len(summary.failed),
            summary.total,
        )
        for failed in summary.failed:
            self.logger.info("\t%s", failed)
        return summary

    def _reset(self, config: BindTreeConfig) -> None:
        config.output_root.mkdir(parents=True, exist_ok=True)
        reset_output(config.output_root, config.allow_list(), get_logger("reset"))
        recreate_empty_file(
            config.output_root / config.declarations.root_file, get_logger("reset")
        )

    def _resolve_translator(self, config: BindTreeConfig) -> Translator:
        if self._translator is not None:
            return self._translator
        settings = config.translator
        if settings.hidden_types:
            self.logger.debug("Hidden types: %s", ", ".join(settings.hidden_types))
        return BindgenTranslator(
            include_root=config.source_root,
            executable=settings.executable,
            hidden_types=list(settings.hidden_types),
            clang_args=list(settings.clang_args),
            extra_args=list(settings.extra_args),
            timeout=settings.timeout,
        )


__all__ = ["Orchestrator", "SyncPlan"]
