"""Configuration loading for compdoc (.compdoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".compdoc.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class OutputConfig:
    """Where and how generated documents are written."""

    dir: Optional[Path] = None
    json: bool = False
    index: bool = True
    lint: bool = True
    toc: bool = True


@dataclass
class GenerationConfig:
    """Pipeline settings for a generation run."""

    workers: int = 1
    group_fallback: str = "Ungrouped"
    description_fallback: str = "No description"


@dataclass
class CompDocConfig:
    """Represents the high-level settings defined in .compdoc.yml."""

    root: Path
    output: OutputConfig = field(default_factory=OutputConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)


def load_config(config_path: Path) -> CompDocConfig:
    """Load configuration from disk, returning defaults when the file is absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CompDocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    output = OutputConfig()
    output_data = _as_dict(data.get("output"))
    if output_data:
        dir_str = _as_str(output_data.get("dir"))
        output.dir = root / dir_str if dir_str else None
        output.json = _as_bool(output_data.get("json"), default=output.json)
        output.index = _as_bool(output_data.get("index"), default=output.index)
        output.lint = _as_bool(output_data.get("lint"), default=output.lint)
        output.toc = _as_bool(output_data.get("toc"), default=output.toc)

    generation = GenerationConfig()
    generation_data = _as_dict(data.get("generation"))
    if generation_data:
        workers = _as_int(generation_data.get("workers"))
        if workers is not None:
            if workers < 1:
                raise ConfigError("generation.workers must be at least 1")
            generation.workers = workers
        generation.group_fallback = (
            _as_str(generation_data.get("group_fallback")) or generation.group_fallback
        )
        generation.description_fallback = (
            _as_str(generation_data.get("description_fallback"))
            or generation.description_fallback
        )

    return CompDocConfig(root=root, output=output, generation=generation)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


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


def _as_bool(value: Any, *, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return default
