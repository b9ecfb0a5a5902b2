"""CLI parser and command tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from compdoc.cli import _build_parser, main
from tests._fixtures.dump_builder import sample_library


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "validate", "dump.json"])
    assert args.verbose is True
    assert args.command == "validate"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "dump.json", "--verbose"])
    assert args.verbose is True
    assert args.command == "generate"


def test_generate_flags_default_to_config() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "dump.json"])
    assert args.out is None
    assert args.workers is None
    assert args.write_json is None
    assert args.include_index is None


def test_generate_flags_are_parsed() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["generate", "dump.json", "-o", "out", "--workers", "3", "--json", "--no-index"]
    )
    assert args.out == "out"
    assert args.workers == 3
    assert args.write_json is True
    assert args.include_index is False


def test_workers_must_be_positive() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["generate", "dump.json", "--workers", "0"])


def test_generate_command_writes_docs(tmp_path: Path, capsys) -> None:
    dump_path = sample_library().write(tmp_path / "dump.json")
    main(["generate", str(dump_path), "--out", str(tmp_path / "out")])

    captured = capsys.readouterr()
    assert "Documented 3 components" in captured.out
    assert (tmp_path / "out" / "button.md").exists()
    assert (tmp_path / "out" / "index.md").exists()


def test_generate_command_exits_2_on_partial_failure(tmp_path: Path, capsys) -> None:
    data = sample_library().build()
    data["components"][1]["properties"] = "oops"
    dump_path = tmp_path / "dump.json"
    dump_path.write_text(json.dumps(data), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(dump_path)])

    assert excinfo.value.code == 2
    captured = capsys.readouterr()
    assert "1 components failed" in captured.out
    assert "Button (cmp-button)" in captured.out


def test_generate_command_reports_invalid_dump(tmp_path: Path, capsys) -> None:
    dump_path = tmp_path / "dump.json"
    dump_path.write_text(json.dumps({"components": []}), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(dump_path)])

    assert excinfo.value.code == 1
    assert "breakpoints: Missing or invalid 'breakpoints' field" in capsys.readouterr().err


def test_generate_command_reports_missing_dump(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(tmp_path / "nope.json")])
    assert excinfo.value.code == 1
    assert "Extractor dump not found" in capsys.readouterr().err


def test_validate_command(tmp_path: Path, capsys) -> None:
    dump_path = sample_library().write(tmp_path / "dump.json")
    main(["validate", str(dump_path)])
    assert "Dump is valid" in capsys.readouterr().out

    broken = tmp_path / "broken.json"
    broken.write_text("[]", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main(["validate", str(broken)])
    assert excinfo.value.code == 1
    assert "Input must be an object" in capsys.readouterr().err


def test_cli_accepts_quiet_and_log_file_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["validate", "dump.json", "-q", "--log-file", "logs/run.log"])
    assert args.quiet is True
    assert args.verbose is False
    assert args.log_file == Path("logs/run.log")


def test_cli_rejects_verbose_with_quiet() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["-v", "-q", "validate", "dump.json"])


def test_generate_command_writes_log_file(tmp_path: Path) -> None:
    dump_path = sample_library().write(tmp_path / "dump.json")
    log_path = tmp_path / "logs" / "run.log"
    main(["generate", str(dump_path), "--quiet", "--log-file", str(log_path)])
    assert "[Button (cmp-button)] Building docs" in log_path.read_text(encoding="utf-8")


def test_serve_without_fastapi_exits_with_install_hint(monkeypatch, capsys) -> None:
    monkeypatch.setattr("compdoc.service.app._FASTAPI_AVAILABLE", False)
    with pytest.raises(SystemExit) as excinfo:
        main(["serve"])
    assert excinfo.value.code == 1
    assert "FastAPI is required" in capsys.readouterr().err
