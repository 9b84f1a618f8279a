"""Adapters around the external header-to-binding translator."""

from __future__ import annotations

import subprocess
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union


class TranslationError(RuntimeError):
    """Raised when the translator cannot produce a module for one header."""


class TranslatorUnavailableError(RuntimeError):
    """Raised when the translator itself cannot be started."""


ModuleSource = Union[str, bytes]


class Translator(ABC):
    """Contract for turning one logical header name into module source."""

    @abstractmethod
    def translate(self, include_name: str) -> ModuleSource:
        """Return generated module source or raise ``TranslationError``.

        Bytes are written to disk untouched; text is encoded as UTF-8.
        """


@dataclass
class BindgenRequest:
    """Command-line invocation for a single bindgen run."""

    args: List[str]
    timeout: Optional[float] = None


def hidden_types_regex(hidden_types: Sequence[str]) -> Optional[str]:
    """Return an anchored alternation such as ``^(a|b)$``, or None when empty."""
    names = [name for name in hidden_types if name]
    if not names:
        return None
    return "^(" + "|".join(names) + ")$"


@dataclass
class BindgenTranslator(Translator):
    """Runs the ``bindgen`` CLI against a wrapper header that includes the target."""

    include_root: Path
    executable: str = "bindgen"
    hidden_types: Sequence[str] = field(default_factory=list)
    clang_args: Sequence[str] = field(default_factory=list)
    extra_args: Sequence[str] = field(default_factory=list)
    timeout: Optional[float] = None
    runner: Optional[Callable[[BindgenRequest], ModuleSource]] = None

    def translate(self, include_name: str) -> ModuleSource:
        with tempfile.TemporaryDirectory(prefix="bindtree_") as temp_dir:
            wrapper = Path(temp_dir) / "wrapper.h"
            wrapper.write_text(f"#include <{include_name}>\n", encoding="utf-8")
            request = BindgenRequest(args=self.build_args(wrapper), timeout=self.timeout)
            runner = self.runner or _subprocess_runner
            return runner(request)

    def build_args(self, wrapper: Path) -> List[str]:
        args = [self.executable, str(wrapper)]
        args.extend(self.extra_args)
        regex = hidden_types_regex(self.hidden_types)
        if regex is not None:
            args.extend(["--blocklist-type", regex])
        args.extend(["--", f"-I{self.include_root}"])
        args.extend(self.clang_args)
        return args


def _subprocess_runner(request: BindgenRequest) -> bytes:
    # bindgen copies header comments through, so stdout is not guaranteed UTF-8.
    try:
        completed = subprocess.run(
            request.args,
            check=True,
            capture_output=True,
            timeout=request.timeout,
        )
    except FileNotFoundError as exc:
        raise TranslatorUnavailableError(
            f"Unable to locate '{request.args[0]}'. Install bindgen or configure translator.executable."
        ) from exc
    except subprocess.TimeoutExpired as exc:
        raise TranslationError(f"bindgen timed out after {exc.timeout}s") from exc
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or b"").decode("utf-8", errors="replace").strip()
        raise TranslationError(
            f"bindgen failed with exit code {exc.returncode}: {detail}"
        ) from exc
    return completed.stdout


__all__ = [
    "BindgenRequest",
    "BindgenTranslator",
    "TranslationError",
    "ModuleSource",
    "Translator",
    "TranslatorUnavailableError",
    "hidden_types_regex",
]
