"""Tests for bindtree.translator."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from bindtree import translator as translator_module
from bindtree.translator import (
    BindgenRequest,
    BindgenTranslator,
    TranslationError,
    TranslatorUnavailableError,
    hidden_types_regex,
)


def test_hidden_types_regex() -> None:
    assert hidden_types_regex([]) is None
    assert hidden_types_regex(["atm_kptr_t"]) == "^(atm_kptr_t)$"
    assert hidden_types_regex(["a", "", "b"]) == "^(a|b)$"


def test_translate_builds_wrapper_and_arguments(tmp_path: Path) -> None:
    seen: dict[str, object] = {}

    def fake_runner(request: BindgenRequest) -> str:
        wrapper = Path(request.args[1])
        seen["wrapper"] = wrapper.read_text(encoding="utf-8")
        seen["args"] = list(request.args)
        seen["timeout"] = request.timeout
        return "pub struct ifreq;\n"

    translator = BindgenTranslator(
        include_root=tmp_path,
        hidden_types=["atm_kptr_t"],
        clang_args=["-target", "x86_64-linux-gnu"],
        extra_args=["--no-layout-tests"],
        timeout=30.0,
        runner=fake_runner,
    )

    assert translator.translate("linux/if.h") == "pub struct ifreq;\n"
    assert seen["wrapper"] == "#include <linux/if.h>\n"
    args = seen["args"]
    assert isinstance(args, list)
    assert args[0] == "bindgen"
    assert args[2:] == [
        "--no-layout-tests",
        "--blocklist-type",
        "^(atm_kptr_t)$",
        "--",
        f"-I{tmp_path}",
        "-target",
        "x86_64-linux-gnu",
    ]
    assert seen["timeout"] == 30.0


def test_runner_failures_become_translation_errors(tmp_path: Path, monkeypatch) -> None:
    def failing_run(args, **kwargs):
        raise subprocess.CalledProcessError(1, args, output=b"", stderr=b"unknown type name\n")

    monkeypatch.setattr(translator_module.subprocess, "run", failing_run)

    with pytest.raises(TranslationError) as excinfo:
        BindgenTranslator(include_root=tmp_path).translate("asm/weird.h")
    assert "exit code 1" in str(excinfo.value)
    assert "unknown type name" in str(excinfo.value)


def test_timeouts_become_translation_errors(tmp_path: Path, monkeypatch) -> None:
    def slow_run(args, **kwargs):
        raise subprocess.TimeoutExpired(args, kwargs.get("timeout"))

    monkeypatch.setattr(translator_module.subprocess, "run", slow_run)

    with pytest.raises(TranslationError):
        BindgenTranslator(include_root=tmp_path, timeout=1.0).translate("linux/slow.h")


def test_missing_executable_is_fatal(tmp_path: Path) -> None:
    translator = BindgenTranslator(
        include_root=tmp_path, executable=str(tmp_path / "no-such-bindgen")
    )
    with pytest.raises(TranslatorUnavailableError):
        translator.translate("linux/if.h")


def test_subprocess_runner_returns_stdout(tmp_path: Path, monkeypatch) -> None:
    def ok_run(args, **kwargs):
        assert kwargs["capture_output"] is True
        assert "text" not in kwargs
        return subprocess.CompletedProcess(args, 0, stdout=b"pub type __u8 = u8;\n", stderr=b"")

    monkeypatch.setattr(translator_module.subprocess, "run", ok_run)

    assert BindgenTranslator(include_root=tmp_path).translate("linux/types.h") == b"pub type __u8 = u8;\n"


def _write_script(path: Path, body: str) -> Path:
    path.write_text("#!/bin/sh\n" + body, encoding="utf-8")
    path.chmod(0o755)
    return path


def test_non_utf8_output_is_returned_as_raw_bytes(tmp_path: Path) -> None:
    script = _write_script(tmp_path / "fake-bindgen", "printf '// caf\\351\\n'\n")

    output = BindgenTranslator(include_root=tmp_path, executable=str(script)).translate("a.h")

    assert output == b"// caf\xe9\n"


def test_non_utf8_stderr_is_reported(tmp_path: Path) -> None:
    script = _write_script(tmp_path / "fake-bindgen", "printf 'bad \\377 token' >&2\nexit 3\n")

    with pytest.raises(TranslationError) as excinfo:
        BindgenTranslator(include_root=tmp_path, executable=str(script)).translate("a.h")

    assert "exit code 3" in str(excinfo.value)
