"""CLI entrypoints for compdoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging
from .orchestrator import Orchestrator
from .validators import DumpValidationError


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    # Subcommands repeat the options with SUPPRESS so a value given before
    # the command is not reset by the subparser defaults.
    def _default(value: object) -> object:
        return argparse.SUPPRESS if suppress_default else value

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=_default(False),
        help="Log every component as it is built, with tracebacks for failures.",
    )
    group.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=_default(False),
        help="Only log warnings and errors.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=_default(None),
        help="Also write a full debug log to this file.",
    )


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compdoc",
        description="Generate component library documentation from an extractor dump.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate Markdown (and optionally JSON) docs for every component.",
    )
    _add_logging_options(generate_parser, suppress_default=True)
    generate_parser.add_argument("dump", help="Path to the extractor JSON dump.")
    generate_parser.add_argument(
        "-o",
        "--out",
        default=None,
        help="Output directory (defaults to output.dir or ./docs beside the dump).",
    )
    generate_parser.add_argument(
        "--workers",
        type=_positive_int,
        default=None,
        help="Number of worker threads for per-component processing.",
    )
    generate_parser.add_argument(
        "--json",
        dest="write_json",
        action="store_true",
        default=None,
        help="Also write docs.json with the full documentation model.",
    )
    generate_parser.add_argument(
        "--no-index",
        dest="include_index",
        action="store_false",
        default=None,
        help="Skip writing index.md.",
    )
    generate_parser.add_argument(
        "--config",
        default=None,
        help="Path to a .compdoc.yml file or its directory.",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Check that a dump has the expected top-level shape.",
    )
    _add_logging_options(validate_parser, suppress_default=True)
    validate_parser.add_argument("dump", help="Path to the extractor JSON dump.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service (requires the 'service' extra).",
    )
    _add_logging_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for compdoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    if args.command == "generate":
        try:
            config = load_config(Path(args.config)) if args.config else None
            outcome = Orchestrator(config=config).run_generate(
                args.dump,
                output_dir=args.out,
                workers=args.workers,
                write_json=args.write_json,
                include_index=args.include_index,
            )
        except (FileNotFoundError, ConfigError) as exc:
            parser.exit(1, f"{exc}\n")
        except DumpValidationError as exc:
            parser.exit(1, _format_issues(exc))
        except Exception as exc:  # pragma: no cover - defensive guard
            parser.exit(1, f"compdoc generate failed: {exc}\nRun with --verbose for more details.\n")
        result = outcome.result
        print(f"Documented {len(result.docs)} components in {_relativize(outcome.directory)}")
        if result.failures:
            print(f"{len(result.failures)} components failed:")
            for failure in result.failures:
                print(f"  - {failure.component_name} ({failure.component_id}): {failure.message}")
            sys.exit(2)
    elif args.command == "validate":
        try:
            issues = Orchestrator().run_validate(args.dump)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        if issues:
            parser.exit(1, _format_issues(DumpValidationError("Invalid extractor dump", issues)))
        print("Dump is valid")
    elif args.command == "serve":
        from .service import run_service

        try:
            run_service(host=args.host, port=args.port)
        except RuntimeError as exc:
            parser.exit(1, f"{exc}\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _format_issues(exc: DumpValidationError) -> str:
    if not exc.issues:
        return f"{exc}\n"
    lines = ["Invalid extractor dump:"]
    lines.extend(f"  - {issue.field}: {issue.detail}" for issue in exc.issues)
    return "\n".join(lines) + "\n"


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
