"""Helper utilities for constructing temporary header trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Dict, Iterable, List, Mapping

from bindtree.config import BindTreeConfig, load_config
from bindtree.translator import TranslationError, Translator


class HeaderTreeBuilder:
    """Writes a throwaway project with an ``include/`` source and ``src/`` output."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.source = self.root / "include"
        self.output = self.root / "src"
        self.source.mkdir(parents=True)
        self.output.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the source tree."""
        for relative, content in files.items():
            path = self.source / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")

    def write_config(self, text: str) -> None:
        (self.root / ".bindtree.yml").write_text(textwrap.dedent(text), encoding="utf-8")

    def config(self) -> BindTreeConfig:
        return load_config(self.root)

    def snapshot(self) -> Dict[str, bytes]:
        """Return every file under the output tree keyed by relative path."""
        return {
            path.relative_to(self.output).as_posix(): path.read_bytes()
            for path in sorted(self.output.rglob("*"))
            if path.is_file()
        }


class FakeTranslator(Translator):
    """Returns canned module source and fails for selected headers."""

    def __init__(self, failing: Iterable[str] = ()) -> None:
        self.failing = set(failing)
        self.calls: List[str] = []

    def translate(self, include_name: str) -> str:
        self.calls.append(include_name)
        if include_name in self.failing:
            raise TranslationError(f"unsupported construct in {include_name}")
        return f"// generated from {include_name}\npub const NAME: &str = \"{include_name}\";\n"


__all__ = ["FakeTranslator", "HeaderTreeBuilder"]
