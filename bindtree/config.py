"""Configuration loading for bindtree (.bindtree.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".bindtree.yml"
COLLISION_POLICIES = ("warn", "error")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed or is inconsistent."""


@dataclass
class DeclarationConfig:
    """Names and format of module declaration files."""

    root_file: str = "lib.rs"
    module_file: str = "mod.rs"
    template: str = "pub mod {name};"


@dataclass
class TranslatorConfig:
    """Settings passed to the bindgen translator."""

    executable: str = "bindgen"
    hidden_types: List[str] = field(default_factory=list)
    clang_args: List[str] = field(default_factory=list)
    extra_args: List[str] = field(default_factory=list)
    timeout: Optional[float] = None


@dataclass
class BindTreeConfig:
    """Represents the settings defined in .bindtree.yml."""

    root: Path
    source_root: Path
    output_root: Path
    log_file: Optional[Path] = None
    header_extensions: List[str] = field(default_factory=lambda: [".h"])
    module_extension: str = ".rs"
    max_files: Optional[int] = None
    preserve: List[str] = field(default_factory=lambda: [".gitkeep"])
    declarations: DeclarationConfig = field(default_factory=DeclarationConfig)
    translator: TranslatorConfig = field(default_factory=TranslatorConfig)
    on_collision: str = "warn"

    def allow_list(self) -> List[Path]:
        """Absolute paths under ``output_root`` that a reset must not delete."""
        names = [self.declarations.root_file, *self.preserve]
        paths: List[Path] = []
        for name in names:
            if name in {"", ".", ".."} or Path(name).name != name:
                raise ConfigError(
                    f"Protected path {name!r} must be a direct child of {self.output_root}"
                )
            path = self.output_root / name
            if path not in paths:
                paths.append(path)
        return paths

    def is_header(self, path: Path) -> bool:
        return path.suffix.lower() in self.header_extensions


def load_config(config_path: Path) -> BindTreeConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)
        if not isinstance(data, dict):
            raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    source_root = _resolve_dir(root, _as_str(data.get("source_root")) or "include")
    output_root = _resolve_dir(root, _as_str(data.get("output_root")) or "src")
    log_file_str = _as_str(data.get("log_file"))
    log_file = root / log_file_str if log_file_str else root / "bindtree.log"

    extensions = _as_str_list(data.get("header_extensions")) or [".h"]
    module_extension = _normalise_extension(_as_str(data.get("module_extension")) or ".rs")

    declarations = DeclarationConfig()
    declaration_data = _as_dict(data.get("declarations"))
    if declaration_data:
        declarations.root_file = _as_str(declaration_data.get("root_file")) or declarations.root_file
        declarations.module_file = (
            _as_str(declaration_data.get("module_file")) or declarations.module_file
        )
        template = _as_str(declaration_data.get("template"))
        if template:
            if "{name}" not in template:
                raise ConfigError("declarations.template must contain '{name}'")
            declarations.template = template

    translator = TranslatorConfig()
    translator_data = _as_dict(data.get("translator"))
    if translator_data:
        translator.executable = _as_str(translator_data.get("executable")) or translator.executable
        translator.hidden_types = _as_str_list(translator_data.get("hidden_types"))
        translator.clang_args = _as_str_list(translator_data.get("clang_args"))
        translator.extra_args = _as_str_list(translator_data.get("extra_args"))
        translator.timeout = _as_float(translator_data.get("timeout"))

    naming_data = _as_dict(data.get("naming"))
    on_collision = (_as_str(naming_data.get("on_collision")) or "warn").lower()
    if on_collision not in COLLISION_POLICIES:
        raise ConfigError(
            f"naming.on_collision must be one of {', '.join(COLLISION_POLICIES)}"
        )

    preserve = (
        _as_str_list(data.get("preserve")) if "preserve" in data else [".gitkeep"]
    )

    config = BindTreeConfig(
        root=root,
        source_root=source_root,
        output_root=output_root,
        log_file=log_file,
        header_extensions=[_normalise_extension(ext).lower() for ext in extensions],
        module_extension=module_extension,
        max_files=_as_int(data.get("max_files")),
        preserve=preserve,
        declarations=declarations,
        translator=translator,
        on_collision=on_collision,
    )
    config.allow_list()
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_dir(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _normalise_extension(value: str) -> str:
    return value if value.startswith(".") else f".{value}"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "BindTreeConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "DeclarationConfig",
    "TranslatorConfig",
    "load_config",
]
