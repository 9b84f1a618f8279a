"""Tests for bindtree.pipeline."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

import pytest

from bindtree.models import ConversionTask
from bindtree.naming import PathNamer
from bindtree.pipeline import ConversionPipeline
from bindtree.scaffold import ModuleScaffolder
from tests._fixtures.header_tree import FakeTranslator


def _task(tmp_path: Path, source_rel: str) -> ConversionTask:
    rel = PurePosixPath(source_rel)
    return ConversionTask(
        source_root=tmp_path / "include",
        source_rel_path=rel,
        dest_root=tmp_path / "src",
        dest_rel_path=PathNamer(".rs").derive(rel),
    )


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    root.mkdir()
    (root / "lib.rs").write_bytes(b"")
    return root


def test_convert_writes_translated_source_and_declares_leaf(tmp_path: Path, output_root: Path) -> None:
    translator = FakeTranslator()
    pipeline = ConversionPipeline(translator, ModuleScaffolder(output_root))

    outcome = pipeline.convert(_task(tmp_path, "linux/if-ether.h"))

    assert outcome.ok is True
    assert translator.calls == ["linux/if-ether.h"]
    generated = (output_root / "linux" / "if_ether.rs").read_text(encoding="utf-8")
    assert generated.startswith("// generated from linux/if-ether.h")
    assert (output_root / "linux" / "mod.rs").read_text(encoding="utf-8") == "pub mod if_ether;\n\n"
    assert (output_root / "lib.rs").read_text(encoding="utf-8") == "pub mod linux;\n\n"


def test_translator_failure_leaves_empty_placeholder(tmp_path: Path, output_root: Path) -> None:
    translator = FakeTranslator(failing={"asm/weird.h"})
    pipeline = ConversionPipeline(translator, ModuleScaffolder(output_root))

    outcome = pipeline.convert(_task(tmp_path, "asm/weird.h"))

    assert outcome.ok is False
    assert "unsupported construct" in (outcome.reason or "")
    assert (output_root / "asm" / "weird.rs").read_bytes() == b""
    assert (output_root / "asm" / "mod.rs").read_text(encoding="utf-8") == "pub mod weird;\n\n"


def test_top_level_header_is_declared_in_root_file(tmp_path: Path, output_root: Path) -> None:
    pipeline = ConversionPipeline(FakeTranslator(), ModuleScaffolder(output_root))

    pipeline.convert(_task(tmp_path, "stddef.h"))

    assert (output_root / "stddef.rs").exists()
    assert (output_root / "lib.rs").read_text(encoding="utf-8") == "pub mod stddef;\n\n"


def test_existing_destination_is_overwritten(tmp_path: Path, output_root: Path) -> None:
    pipeline = ConversionPipeline(FakeTranslator(), ModuleScaffolder(output_root))
    (output_root / "types.rs").write_text("stale content that is longer", encoding="utf-8")

    pipeline.convert(_task(tmp_path, "types.h"))

    assert "stale" not in (output_root / "types.rs").read_text(encoding="utf-8")


def test_filesystem_errors_propagate(tmp_path: Path) -> None:
    missing_root = tmp_path / "not-created"
    pipeline = ConversionPipeline(FakeTranslator(), ModuleScaffolder(missing_root))
    task = ConversionTask(
        source_root=tmp_path,
        source_rel_path=PurePosixPath("net/if.h"),
        dest_root=missing_root,
        dest_rel_path=PurePosixPath("net/if.rs"),
    )

    with pytest.raises(OSError):
        pipeline.convert(task)


class _BytesTranslator(FakeTranslator):
    def translate(self, include_name: str) -> bytes:
        self.calls.append(include_name)
        return b"// \xff not utf-8\r\n"


def test_bytes_source_is_written_untouched(tmp_path: Path, output_root: Path) -> None:
    pipeline = ConversionPipeline(_BytesTranslator(), ModuleScaffolder(output_root))

    outcome = pipeline.convert(_task(tmp_path, "linux/raw.h"))

    assert outcome.ok is True
    assert (output_root / "linux" / "raw.rs").read_bytes() == b"// \xff not utf-8\r\n"
