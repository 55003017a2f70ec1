"""CLI entrypoints for umlgen commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigError, UmlGenConfig, load_config
from .extractors import UnsupportedLanguageError
from .languages import LANGUAGES, extensions_for, language_for_path, normalise_language
from .logging import configure_logging, get_logger
from .models import DiagramDocument, SourceUnit
from .pipeline import DiagramGenerator, ExtractionError
from .sources import collect_sources

STDIN_PATH = "-"


def _add_logging_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    default: object = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only log warnings and errors.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="umlgen",
        description="Extract class structure from C#, Java or Python sources as a Mermaid class diagram.",
    )
    _add_logging_options(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Build a class diagram from source files or directories.",
    )
    _add_logging_options(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "paths",
        nargs="+",
        help=f"Source files or directories; use '{STDIN_PATH}' to read a snippet from stdin.",
    )
    generate_parser.add_argument(
        "-l",
        "--language",
        help="Language selector (csharp, java, python). Inferred from file extensions when omitted.",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        help="Write the result to this file instead of stdout.",
    )
    generate_parser.add_argument(
        "--format",
        choices=("mermaid", "json"),
        default="mermaid",
        help="Emit Mermaid text (default) or the full JSON document.",
    )
    generate_parser.add_argument(
        "--config",
        help="Path to .umlgen.yml (defaults to the current directory).",
    )

    languages_parser = subparsers.add_parser(
        "languages",
        help="List supported language selectors and extensions.",
    )
    _add_logging_options(languages_parser, suppress_default=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP diagram service.",
    )
    _add_logging_options(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for umlgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    if args.command == "generate":
        _run_generate(parser, args)
    elif args.command == "languages":
        for option in LANGUAGES:
            print(f"{option.id:<8} {option.label:<8} {' '.join(option.extensions)}")
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_generate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    logger = get_logger("cli")
    try:
        config = load_config(Path(args.config) if args.config else Path.cwd())
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    language = _resolve_language(args.language, config, args.paths)
    if language is None:
        parser.exit(
            1,
            "Could not determine the source language. Pass --language (csharp, java, python).\n",
        )

    generator = DiagramGenerator()
    try:
        generator.extractor_for(language)
        units = _load_units(args.paths, language, config)
    except (UnsupportedLanguageError, FileNotFoundError) as exc:
        parser.exit(1, f"{exc}\n")
    except KeyError:
        parser.exit(1, f"No file extensions are registered for language '{language}'\n")

    if not units:
        parser.exit(1, f"No {language} sources found in {', '.join(args.paths)}\n")

    try:
        document = generator.generate(language, units)
    except ExtractionError as exc:
        parser.exit(1, f"umlgen generate failed: {exc}\nRun with --verbose for more details.\n")

    rendered = _render(document, args.format)
    output = Path(args.output) if args.output else config.output
    if output is None:
        print(rendered)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rendered + "\n", encoding="utf-8")
    logger.info("Diagram written to %s", _relativize(output))


def _resolve_language(
    flag: Optional[str], config: UmlGenConfig, paths: List[str]
) -> Optional[str]:
    if flag:
        return normalise_language(flag) or flag
    if config.language:
        return config.language
    for raw in paths:
        if raw == STDIN_PATH:
            continue
        path = Path(raw)
        candidates = [path] if path.is_file() else sorted(path.rglob("*")) if path.is_dir() else []
        for candidate in candidates:
            language = language_for_path(candidate, config.extensions)
            if language is not None:
                return language
    return None


def _load_units(paths: List[str], language: str, config: UmlGenConfig) -> List[SourceUnit]:
    units: List[SourceUnit] = []
    file_paths = [Path(raw) for raw in paths if raw != STDIN_PATH]
    if len(file_paths) != len(paths):
        suffix = extensions_for(language, config.extensions)[0]
        units.append(SourceUnit(name=f"stdin{suffix}", content=sys.stdin.read()))
    if file_paths:
        units.extend(collect_sources(file_paths, language, config).units)
    return units


def _render(document: DiagramDocument, output_format: str) -> str:
    if output_format == "json":
        payload = document.to_dict()
        payload["stats"] = document.stats()
        return json.dumps(payload, indent=2)
    return document.text


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
