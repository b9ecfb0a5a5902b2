"""Tests for compdoc.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from compdoc.config import CompDocConfig, ConfigError, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, CompDocConfig)
    assert config.root == tmp_path.resolve()
    assert config.output.dir is None
    assert config.output.json is False
    assert config.output.index is True
    assert config.output.lint is True
    assert config.output.toc is True
    assert config.generation.workers == 1
    assert config.generation.group_fallback == "Ungrouped"
    assert config.generation.description_fallback == "No description"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".compdoc.yml"
    config_file.write_text(
        """
output:
  dir: build/docs
  json: true
  index: "no"
  lint: false
  toc: false
generation:
  workers: 4
  group_fallback: Misc
  description_fallback: Coming soon
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.output.dir == tmp_path.resolve() / "build" / "docs"
    assert config.output.json is True
    assert config.output.index is False
    assert config.output.lint is False
    assert config.output.toc is False
    assert config.generation.workers == 4
    assert config.generation.group_fallback == "Misc"
    assert config.generation.description_fallback == "Coming soon"


def test_load_config_accepts_file_path(tmp_path: Path) -> None:
    config_file = tmp_path / "custom.yml"
    config_file.write_text("generation:\n  workers: '2'\n", encoding="utf-8")

    config = load_config(config_file)

    assert config.root == tmp_path.resolve()
    assert config.generation.workers == 2


def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".compdoc.yml").write_text("\n", encoding="utf-8")
    assert load_config(tmp_path).generation.workers == 1


def test_invalid_worker_count_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".compdoc.yml").write_text("generation:\n  workers: 0\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="workers"):
        load_config(tmp_path)


def test_malformed_yaml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / ".compdoc.yml").write_text("output: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_non_mapping_root_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".compdoc.yml").write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)
