"""CLI entrypoints for genpreview commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict

from .config import ConfigError, load_config
from .llm.client import GenerationError
from .logging import configure_logging, get_logger
from .parsing import parse
from .preview.assembler import PreviewAssembler


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write debug-level log records to this file.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .genpreview.yml or the directory holding it (defaults to current directory).",
    )


def _add_output_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-o",
        "--output",
        help="Write the preview document to this file instead of standard output.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="genpreview",
        description="Extract files from generated text and build renderable previews.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_parser = subparsers.add_parser(
        "parse",
        help="List the files found in a generated response.",
    )
    _add_verbose_option(parse_parser, suppress_default=True)
    _add_log_file_option(parse_parser, suppress_default=True)
    parse_parser.add_argument(
        "response",
        help="Path to a file holding the generated text, or '-' for standard input.",
    )
    parse_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed files as JSON, including their content.",
    )

    preview_parser = subparsers.add_parser(
        "preview",
        help="Build the preview document for a response file or a project directory.",
    )
    _add_verbose_option(preview_parser, suppress_default=True)
    _add_log_file_option(preview_parser, suppress_default=True)
    _add_config_option(preview_parser)
    _add_output_option(preview_parser)
    preview_parser.add_argument(
        "path",
        help="Generated response file, or a directory whose files form the project.",
    )

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a project from a description and build its preview.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_log_file_option(generate_parser, suppress_default=True)
    _add_config_option(generate_parser)
    _add_output_option(generate_parser)
    generate_parser.add_argument("description", help="What the project should do.")
    generate_parser.add_argument(
        "--skip-plan",
        action="store_true",
        help="Generate files directly without asking for a plan first.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_log_file_option(serve_parser, suppress_default=True)
    _add_config_option(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for genpreview commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )
    get_logger("cli").debug("Running %s command", args.command)

    if args.command == "parse":
        try:
            text = _read_text(args.response)
        except OSError as exc:
            parser.exit(1, f"{exc}\n")
        files = parse(text)
        if args.json:
            print(json.dumps([_file_payload(record) for record in files], indent=2))
        elif not files:
            print("No files found in response")
        else:
            for record in files:
                print(f"{record.name}\t{record.language}\t{len(record.content)} chars")
    elif args.command == "preview":
        try:
            config = load_config(Path(args.config))
            contents = _load_project(Path(args.path))
        except ConfigError as exc:
            parser.exit(1, f"genpreview preview failed: {exc}\n")
        except OSError as exc:
            parser.exit(1, f"{exc}\n")
        document = PreviewAssembler.from_config(config.preview).build(contents)
        _emit(document.html, args.output)
    elif args.command == "generate":
        # Imported here so parse/preview stay usable without touching the network stack.
        from .session import BuilderSession

        try:
            config = load_config(Path(args.config))
            session = BuilderSession(config=config)
            if not args.skip_plan:
                session.generate_plan(args.description)
            outcome = session.generate_project(args.description)
        except (ConfigError, GenerationError) as exc:
            parser.exit(1, f"genpreview generate failed: {exc}\nRun with --verbose for more details.\n")
        if outcome is None:
            parser.exit(1, "Please enter a project description\n")
        if not outcome.files:
            parser.exit(1, "No files found in response\n")
        for record in outcome.files:
            print(f"Generated: {record.name} ({len(record.content)} chars)", file=sys.stderr)
        _emit(outcome.document.html, args.output)
    elif args.command == "serve":
        from .service.app import run_service

        try:
            config = load_config(Path(args.config))
        except ConfigError as exc:
            parser.exit(1, f"genpreview serve failed: {exc}\n")
        run_service(host=args.host, port=args.port, config=config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _read_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _load_project(path: Path) -> Dict[str, str]:
    """Return project files from a directory, or the files parsed out of a response file."""
    if path.is_dir():
        contents: Dict[str, str] = {}
        for file_path in sorted(path.rglob("*")):
            if file_path.is_file():
                name = file_path.relative_to(path).as_posix()
                contents[name] = file_path.read_text(encoding="utf-8", errors="replace")
        return contents
    contents = {}
    for record in parse(path.read_text(encoding="utf-8")):
        contents[record.name] = record.content
    return contents


def _file_payload(record) -> dict[str, str]:
    return {"name": record.name, "language": record.language, "content": record.content}


def _emit(html: str, output: str | None) -> None:
    if output:
        target = Path(output)
        target.write_text(html, encoding="utf-8")
        print(f"Preview written to {_relativize(target)}", file=sys.stderr)
    else:
        sys.stdout.write(html)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
