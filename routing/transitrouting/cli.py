"""Command-line interface for the transit catalogue."""

import argparse
import logging
import sys

from . import __version__
from .catalogue.csv_loader import load_network_from_csv
from .catalogue.transit_network import TransitNetwork
from .config import config
from .exceptions import TransitCatalogueError
from .logger import resolve_level, logger
from .readers.json_reader import dumps, load_document, process_document
from .readers.text_reader import process_text


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    logger.set_level(logging.DEBUG if verbose else resolve_level(config.log_level))


def _open_input(path):
    return open(path, 'r', encoding='utf-8') if path else sys.stdin


def _open_output(path):
    return open(path, 'w', encoding='utf-8') if path else sys.stdout


def cmd_json(args: argparse.Namespace) -> int:
    """Execute json command."""
    setup_logging(args.verbose)
    try:
        source = _open_input(args.input)
        try:
            document = load_document(source.read())
        finally:
            if source is not sys.stdin:
                source.close()

        responses = process_document(document)
        indent = args.indent if args.indent is not None else config.json_indent
        target = _open_output(args.output)
        try:
            target.write(dumps(responses, indent=indent or None))
            target.write('\n')
        finally:
            if target is not sys.stdout:
                target.close()
        return 0
    except (TransitCatalogueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(f"json command failed: {e}")
        return 1


def cmd_text(args: argparse.Namespace) -> int:
    """Execute text command."""
    setup_logging(args.verbose)
    try:
        network = TransitNetwork()
        if args.csv_dir:
            load_network_from_csv(args.csv_dir, network)

        source = _open_input(args.input)
        target = _open_output(args.output)
        try:
            process_text(source, network, target)
        finally:
            if source is not sys.stdin:
                source.close()
            if target is not sys.stdout:
                target.close()
        return 0
    except (TransitCatalogueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(f"text command failed: {e}")
        return 1


def cmd_serve(args: argparse.Namespace) -> int:
    """Execute serve command."""
    setup_logging(args.verbose)
    from .api import create_app

    try:
        config.validate()
        app = create_app(path=args.input)
    except (TransitCatalogueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    api_config = config.get_api_config()
    if args.host:
        api_config['host'] = args.host
    if args.port:
        api_config['port'] = args.port
    logger.info(f"Serving transit catalogue at http://{api_config['host']}:{api_config['port']}")
    app.run(**api_config)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transit-catalogue",
        description="Bus network statistics, SVG maps and fastest itineraries",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # JSON command
    json_parser = subparsers.add_parser("json", help="Answer a JSON request document")
    json_parser.add_argument("--input", help="JSON document (default: stdin)")
    json_parser.add_argument("--output", help="Response file (default: stdout)")
    json_parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Indentation of the JSON output, 0 for compact (default: JSON_INDENT)",
    )
    json_parser.set_defaults(func=cmd_json)

    # Text command
    text_parser = subparsers.add_parser("text", help="Answer line-oriented text requests")
    text_parser.add_argument("--input", help="Text requests (default: stdin)")
    text_parser.add_argument("--output", help="Response file (default: stdout)")
    text_parser.add_argument("--csv-dir", help="Preload stops, distances and lines from CSV tables")
    text_parser.set_defaults(func=cmd_text)

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Serve the HTTP API over a JSON document")
    serve_parser.add_argument("--input", help="JSON document (default: CATALOGUE_INPUT)")
    serve_parser.add_argument("--host", help="Bind address (default: HOST)")
    serve_parser.add_argument("--port", type=int, help="Port (default: PORT)")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
