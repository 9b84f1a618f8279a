from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.header_tree import FakeTranslator, HeaderTreeBuilder


@pytest.fixture
def header_tree(tmp_path: Path) -> HeaderTreeBuilder:
    """Provide a project with empty include/ and src/ directories under tmp_path."""
    return HeaderTreeBuilder(tmp_path)


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()
