"""CLI entrypoints for routedoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, RouteDocConfig, load_config, parse_framework
from .errors import RouteDocError
from .logging import configure_logging, get_logger
from .models import Framework
from .pipeline import Pipeline
from .serializer import OUTPUT_FORMATS, serialize, write_output


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routedoc",
        description="Generate OpenAPI documents from Rust web service sources.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug-level logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Extract routes from a Rust project and emit an OpenAPI document.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the Rust project root (defaults to current directory).",
    )
    generate_parser.add_argument(
        "-f",
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (defaults to yaml).",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the document to this file instead of stdout.",
    )
    generate_parser.add_argument(
        "-w",
        "--framework",
        choices=[item.value for item in Framework],
        default=None,
        help="Skip detection and extract routes for this framework.",
    )
    generate_parser.add_argument("--title", default=None, help="API title for the info section.")
    generate_parser.add_argument(
        "--api-version", default=None, help="API version for the info section."
    )
    generate_parser.add_argument(
        "--description", default=None, help="API description for the info section."
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing document generation.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for routedoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "generate":
        _run_generate(parser, args)
    elif args.command == "serve":
        try:
            from .service import run_service
        except ModuleNotFoundError:
            parser.exit(
                1,
                "Service mode requires FastAPI. Install it with `pip install routedoc[service]`.\n",
            )
        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_generate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    logger = get_logger("cli")
    project = Path(args.path).expanduser().resolve()
    try:
        config = load_config(project) if project.is_dir() else RouteDocConfig(root=project)
        framework = parse_framework(args.framework) if args.framework else None
        result = Pipeline().run(
            project,
            framework=framework,
            title=args.title,
            version=args.api_version,
            description=args.description,
            config=config,
        )
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except (RouteDocError, ConfigError) as exc:
        parser.exit(1, f"routedoc generate failed: {exc}\nRun with --verbose for more details.\n")

    fmt = args.format or config.output.format
    content = serialize(result.document, fmt)
    output = Path(args.output) if args.output else config.output.path
    if output is None:
        sys.stdout.write(content)
        if not content.endswith("\n"):
            sys.stdout.write("\n")
    else:
        target = write_output(content, output)
        print(f"OpenAPI document written to {_relativize(target)}")

    for warning in result.warnings:
        logger.warning("%s", warning)
    logger.info(
        "Scanned %d files, parsed %d, extracted %d routes (%s)",
        result.files_scanned,
        result.files_parsed,
        len(result.routes),
        ", ".join(item.value for item in result.frameworks),
    )


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
