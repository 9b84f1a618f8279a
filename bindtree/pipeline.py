"""Per-header conversion into the output module tree."""

from __future__ import annotations

import logging

from .logging import get_logger
from .models import ConversionOutcome, ConversionTask
from .scaffold import ModuleScaffolder
from .translator import TranslationError, Translator


class ConversionPipeline:
    """Converts one header at a time into a declared module file.

    Translator failures are soft: the destination is still created, empty,
    and the leaf is still declared so the tree stays importable. Any
    filesystem error raised here propagates and ends the run.
    """

    def __init__(
        self,
        translator: Translator,
        scaffolder: ModuleScaffolder,
        logger: logging.Logger | None = None,
    ) -> None:
        self.translator = translator
        self.scaffolder = scaffolder
        self.logger = logger or get_logger("pipeline")

    def convert(self, task: ConversionTask) -> ConversionOutcome:
        parent_dir = self.scaffolder.ensure_module_path(task.dest_rel_dir)
        dest_path = task.dest_path

        self.logger.debug(
            "Attempting translation for '%s': #include <%s>", task.include_name, task.include_name
        )
        try:
            source = self.translator.translate(task.include_name)
        except TranslationError as exc:
            reason = str(exc) or exc.__class__.__name__
            self.logger.warning(
                "Failed to generate bindings for '%s': %s", task.include_name, reason
            )
            dest_path.write_bytes(b"")
            outcome = ConversionOutcome(task=task, ok=False, reason=reason)
        else:
            self.logger.debug("Writing generated code to: %s", dest_path)
            if isinstance(source, str):
                source = source.encode("utf-8")
            dest_path.write_bytes(source)
            outcome = ConversionOutcome(task=task, ok=True)

        self.scaffolder.declare(parent_dir, task.module_name)
        return outcome


__all__ = ["ConversionPipeline"]
