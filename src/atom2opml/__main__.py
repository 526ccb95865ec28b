# ABOUTME: CLI entry point for atom2opml.
# ABOUTME: Supports 'convert' (file or URL to OPML) and 'serve' commands.

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import structlog
import uvicorn

from atom2opml.config import get_settings
from atom2opml.errors import ConversionError
from atom2opml.services.converter import convert_file, convert_url
from atom2opml.services.fetcher import is_url

log = structlog.get_logger()


def configure_logging(level: str) -> None:
    """Send structlog output to stderr so stdout carries only OPML."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def cmd_convert(args: argparse.Namespace) -> int:
    """Convert a single Atom feed and write the OPML."""
    source: str = args.source
    try:
        if is_url(source):
            result = asyncio.run(convert_url(source))
        else:
            result = asyncio.run(convert_file(source))
    except ConversionError as e:
        print(f"error: {e.user_message}", file=sys.stderr)
        if str(e.cause) != e.user_message:
            print(f"  {e.cause}", file=sys.stderr)
        return 1

    if args.output in (None, "-"):
        sys.stdout.write(result.opml + "\n")
    else:
        output = Path(args.output)
        if output.is_dir():
            output = output / result.filename
        try:
            output.write_text(result.opml, encoding="utf-8")
        except OSError as e:
            log.error("opml_write_error", path=str(output), error=str(e))
            print(f"error: could not write {output}: {e.strerror or e}", file=sys.stderr)
            return 1
        log.info("opml_written", path=str(output))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the web UI server."""
    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    log.info("starting_server", host=host, port=port)
    uvicorn.run("atom2opml.web.app:app", host=host, port=port, reload=args.reload)
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(prog="atom2opml", description="Convert Atom feeds to OPML 1.0")
    subparsers = parser.add_subparsers(dest="command")

    # convert
    convert_parser = subparsers.add_parser("convert", help="Convert an Atom file or URL")
    convert_parser.add_argument("source", help="path to an Atom file, or an http(s) URL")
    convert_parser.add_argument(
        "-o", "--output", default=None, help="output file or directory ('-' for stdout)"
    )

    # serve
    serve_parser = subparsers.add_parser("serve", help="Start web UI")
    serve_parser.add_argument("--host", type=str, default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args()
    configure_logging(get_settings().log_level)

    if args.command == "convert":
        sys.exit(cmd_convert(args))
    elif args.command == "serve":
        sys.exit(cmd_serve(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
