"""Pipeline orchestration for generate/validate flows."""

from __future__ import annotations

import json
import logging
import traceback
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Union

from .config import CompDocConfig, load_config
from .failsafe import build_failure_report
from .logging import component_logger, get_logger
from .models import ComponentDoc, ExtractorDump, GenerationFailure, RawComponent
from .parsing import ParseError, parse_dump
from .pipeline import LookupTables, build_component_doc, build_lookup_tables, populate_used_by
from .postproc import MarkdownLinter, TableOfContentsBuilder
from .render import render_component, render_index
from .validators import DumpValidationError, ValidationIssue, check_dump, validate_dump

INDEX_FILENAME = "index.md"
FAILURES_FILENAME = "failures.md"
JSON_FILENAME = "docs.json"

_Outcome = Union[ComponentDoc, GenerationFailure]


@dataclass
class GenerationResult:
    """Docs produced by one run plus the components that failed."""

    docs: List[ComponentDoc] = field(default_factory=list)
    failures: List[GenerationFailure] = field(default_factory=list)

    def markdown(self) -> Dict[str, str]:
        """Return ``slug -> markdown`` for every documented component."""
        return {doc.slug: render_component(doc) for doc in self.docs}

    def index_markdown(self) -> str:
        return render_index(self.docs)

    @property
    def stats(self) -> Dict[str, int]:
        return {
            "totalComponents": len(self.docs),
            "totalProperties": sum(doc.stats.property_count for doc in self.docs),
            "totalTokens": sum(len(doc.tokens) for doc in self.docs),
            "totalStyles": sum(doc.stats.style_count for doc in self.docs),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "docs": [doc.to_dict() for doc in self.docs],
            "failures": [failure.to_dict() for failure in self.failures],
            "stats": self.stats,
        }


@dataclass
class WriteOutcome:
    """Files written by :meth:`Orchestrator.run_generate`."""

    directory: Path
    files: List[Path]
    result: GenerationResult


class Orchestrator:
    """Coordinates the documentation passes and output writing."""

    def __init__(
        self,
        config: CompDocConfig | None = None,
        linter: MarkdownLinter | None = None,
        toc_builder: TableOfContentsBuilder | None = None,
    ) -> None:
        self.config = config
        self.linter = linter or MarkdownLinter()
        self.toc_builder = toc_builder or TableOfContentsBuilder()
        self.logger = get_logger("orchestrator")

    def generate(self, data: Any, *, workers: int | None = None) -> GenerationResult:
        """Turn a raw extractor dump into component docs.

        Raises :class:`DumpValidationError` when the top-level shape is
        unusable. Individual component failures are collected instead.
        """
        validate_dump(data)
        parse_failures: List[Tuple[int, GenerationFailure]] = []

        def _on_parse_error(position: int, raw: Any, exc: ParseError) -> None:
            failure = _failure_from_raw(raw, position, exc)
            component_logger(failure.component_name, failure.component_id).warning(
                "Skipped, could not parse: %s", exc
            )
            parse_failures.append((position, failure))

        dump = parse_dump(data, on_error=_on_parse_error)
        self.logger.info("Parsed %d components", len(dump.components))

        # Pass 1 must see every component before any doc is built.
        lookups = build_lookup_tables(dump.components)
        outcomes = self._build_docs(dump, lookups, workers or self._configured_workers())

        docs = [outcome for outcome in outcomes if isinstance(outcome, ComponentDoc)]
        build_failures = [outcome for outcome in outcomes if isinstance(outcome, GenerationFailure)]

        # Pass 3 runs after every doc has been named.
        docs = populate_used_by(docs, lookups)

        failures = [failure for _, failure in sorted(parse_failures, key=lambda item: item[0])]
        failures.extend(build_failures)
        if failures:
            self.logger.warning("%d components failed; %d documented", len(failures), len(docs))
        else:
            self.logger.info("Documented %d components", len(docs))
        return GenerationResult(docs=docs, failures=failures)

    def run_generate(
        self,
        dump_path: str | Path,
        *,
        output_dir: str | Path | None = None,
        workers: int | None = None,
        write_json: bool | None = None,
        include_index: bool | None = None,
    ) -> WriteOutcome:
        """Generate docs from ``dump_path`` and write them to disk."""
        path = Path(dump_path).expanduser().resolve()
        config = self._config_for(path)
        data = self.load_dump(path)
        result = self.generate(data, workers=workers or config.generation.workers)

        target = Path(output_dir).expanduser().resolve() if output_dir else (
            config.output.dir or path.parent / "docs"
        )
        target.mkdir(parents=True, exist_ok=True)

        written: List[Path] = []
        for slug, markdown in result.markdown().items():
            written.append(self._write(target / f"{slug}.md", self._finish(markdown, config)))

        if config.output.index if include_index is None else include_index:
            index = result.index_markdown()
            if config.output.toc:
                index = self.toc_builder.build(index)
            written.append(self._write(target / INDEX_FILENAME, self._finish(index, config)))

        if result.failures:
            report = build_failure_report(result.failures)
            written.append(self._write(target / FAILURES_FILENAME, self._finish(report, config)))

        if config.output.json if write_json is None else write_json:
            payload = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
            written.append(self._write(target / JSON_FILENAME, payload + "\n"))

        self.logger.info("Wrote %d files to %s", len(written), target)
        return WriteOutcome(directory=target, files=written, result=result)

    def run_validate(self, dump_path: str | Path) -> List[ValidationIssue]:
        """Return validation issues for the dump at ``dump_path``."""
        try:
            data = self.load_dump(Path(dump_path))
        except DumpValidationError as exc:
            return list(exc.issues)
        return check_dump(data)

    def load_dump(self, path: Path) -> Any:
        """Read a dump from disk; malformed JSON is a validation error."""
        if not path.exists():
            raise FileNotFoundError(f"Extractor dump not found: {path}")
        text = path.read_text(encoding="utf-8")
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            issue = ValidationIssue("$", f"Invalid JSON: {exc.msg} (line {exc.lineno})")
            raise DumpValidationError(f"Invalid extractor dump: {issue.detail}", [issue]) from exc

    def _build_docs(
        self, dump: ExtractorDump, lookups: LookupTables, workers: int
    ) -> List[_Outcome]:
        def _build(component: RawComponent) -> _Outcome:
            return self._build_one(component, lookups, dump.breakpoints)

        if workers <= 1 or len(dump.components) <= 1:
            return [_build(component) for component in dump.components]

        self.logger.debug("Building %d docs on %d workers", len(dump.components), workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() yields in submission order, which keeps input order.
            return list(executor.map(_build, dump.components))

    def _build_one(
        self,
        component: RawComponent,
        lookups: LookupTables,
        breakpoints: Mapping[str, Any],
    ) -> _Outcome:
        generation = self.config.generation if self.config else None
        log = component_logger(component.name, component.id)
        log.debug("Building docs")
        try:
            if generation is not None:
                return build_component_doc(
                    component,
                    lookups,
                    breakpoints,
                    group_fallback=generation.group_fallback,
                    description_fallback=generation.description_fallback,
                )
            return build_component_doc(component, lookups, breakpoints)
        except Exception as exc:
            self._log_exception(log, "Failed to build docs", exc)
            return GenerationFailure(
                component_name=component.name,
                component_id=component.id,
                message=str(exc) or exc.__class__.__name__,
                stack=traceback.format_exc(),
            )

    def _config_for(self, dump_path: Path) -> CompDocConfig:
        if self.config is None:
            self.config = load_config(dump_path.parent)
        return self.config

    def _configured_workers(self) -> int:
        return self.config.generation.workers if self.config else 1

    def _finish(self, markdown: str, config: CompDocConfig) -> str:
        return self.linter.lint(markdown) if config.output.lint else markdown

    def _write(self, path: Path, content: str) -> Path:
        path.write_text(content, encoding="utf-8")
        self.logger.debug("Wrote %s", path)
        return path

    @staticmethod
    def _log_exception(
        log: Union[logging.Logger, logging.LoggerAdapter], message: str, exc: Exception
    ) -> None:
        if log.isEnabledFor(logging.DEBUG):
            log.exception("%s: %s", message, exc)
        else:
            log.error("%s: %s", message, exc)


def _failure_from_raw(raw: Any, position: int, exc: Exception) -> GenerationFailure:
    name = component_id = f"component-{position}"
    if isinstance(raw, Mapping):
        component_id = str(raw.get("id") or component_id)
        name = str(raw.get("name") or component_id)
    return GenerationFailure(
        component_name=name,
        component_id=component_id,
        message=str(exc),
        stack="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    )


def generate_docs(data: Any, *, workers: int | None = None) -> GenerationResult:
    """Convenience wrapper around :meth:`Orchestrator.generate`."""
    return Orchestrator().generate(data, workers=workers)


__all__ = [
    "GenerationResult",
    "Orchestrator",
    "WriteOutcome",
    "generate_docs",
]
