"""Creation of nested module directories and their declarations."""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Set, Tuple

from .logging import get_logger

DEFAULT_DECLARATION_TEMPLATE = "pub mod {name};"


class ModulePathConflictError(RuntimeError):
    """Raised when a module directory would replace an existing plain file."""


class ModuleScaffolder:
    """Ensures every directory on a destination path exists as a declared module.

    One scaffolder lives for exactly one run. It keeps two in-memory sets: the
    directories it has already ensured and the (declaration file, name) pairs
    it has already written, so repeated requests from sibling inputs never add
    a second declaration.
    """

    def __init__(
        self,
        output_root: Path,
        *,
        root_declaration: str = "lib.rs",
        module_declaration: str = "mod.rs",
        template: str = DEFAULT_DECLARATION_TEMPLATE,
        logger: logging.Logger | None = None,
    ) -> None:
        self.output_root = Path(output_root)
        self.root_declaration = root_declaration
        self.module_declaration = module_declaration
        self.template = template
        self.logger = logger or get_logger("scaffold")
        self._scaffolded: Set[Path] = set()
        self._declared: Set[Tuple[Path, str]] = set()

    @property
    def root_declaration_path(self) -> Path:
        return self.output_root / self.root_declaration

    def declaration_file_for(self, directory: Path) -> Path:
        """Return the file that lists the child modules of ``directory``."""
        if Path(directory) == self.output_root:
            return self.root_declaration_path
        return Path(directory) / self.module_declaration

    def ensure_module_path(self, dest_rel_dir: PurePosixPath) -> Path:
        """Ensure every prefix of ``dest_rel_dir`` is a declared module; return its absolute path."""
        current = self.output_root
        for component in PurePosixPath(dest_rel_dir).parts:
            current = current / component
            self.ensure_module_at(current)
        return current

    def ensure_module_at(self, dir_path: Path) -> None:
        dir_path = Path(dir_path)
        if dir_path in self._scaffolded:
            return

        if dir_path.is_file():
            raise ModulePathConflictError(
                f"Module path {dir_path} already exists as a file"
            )
        if dir_path.is_dir():
            # Only directories kept by the reset allow-list get here; their
            # declaration file still holds the previous run's statements.
            self.logger.debug("Adopting existing directory: %s", dir_path)
        else:
            self.logger.debug("Creating new directory: %s", dir_path)
            dir_path.mkdir()
        own_declaration = self.declaration_file_for(dir_path)
        self.logger.debug("Creating new file %s: %s", self.module_declaration, own_declaration)
        own_declaration.write_bytes(b"")
        self._scaffolded.add(dir_path)
        self.declare(dir_path.parent, dir_path.name)

    def declare(self, parent_dir: Path, name: str) -> bool:
        """Append a submodule statement for ``name`` to the parent's declaration file.

        Returns False when the pair was already declared during this run.
        """
        declaration_file = self.declaration_file_for(parent_dir)
        key = (declaration_file, name)
        if key in self._declared:
            self.logger.debug("Module %s already declared in %s", name, declaration_file)
            return False
        self.logger.debug("Declaring module %s in: %s", name, declaration_file)
        with declaration_file.open("a", encoding="utf-8") as handle:
            handle.write(self.template.format(name=name) + "\n\n")
        self._declared.add(key)
        return True


__all__ = ["DEFAULT_DECLARATION_TEMPLATE", "ModulePathConflictError", "ModuleScaffolder"]
