from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from .errors import SiteError
from .model import SiteModel
from .repo import list_input_files
from .server import run_server
from .watcher import SiteWatcher

DEFAULT_PORT = 8099
DEFAULT_HOST = "127.0.0.1"


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def resolve_content_dir(value: str) -> Path:
    content_dir = Path(value).resolve()
    if not content_dir.is_dir():
        print(f"Content directory not found: {content_dir}", file=sys.stderr)
        sys.exit(1)
    return content_dir


def build_model(content_dir: Path, local_origin: Optional[str] = None) -> SiteModel:
    model = SiteModel(content_dir, local_origin=local_origin)
    start = time.perf_counter()
    print("Building site...")
    model.set_input_files(list_input_files(content_dir))
    elapsed = time.perf_counter() - start
    print(f"Built site in {elapsed:.2f}s.")
    return model


def generate(args: argparse.Namespace) -> None:
    content_dir = resolve_content_dir(args.content_dir)
    output_dir = Path(args.output_dir).resolve()
    model = build_model(content_dir)
    written = model.write_output(output_dir)
    print(f"Wrote {len(written)} files to: {output_dir}")


def serve(args: argparse.Namespace) -> None:
    content_dir = resolve_content_dir(args.content_dir)
    local_origin = f"http://localhost:{args.port}"
    model = build_model(content_dir, local_origin=local_origin)

    watcher = None
    if args.watch:
        watcher = SiteWatcher(content_dir, model.set_input_files, debounce=args.debounce)
        watcher.prime(list_input_files(content_dir))
        watcher.start()

    print(f"Local server running on {local_origin}")
    try:
        run_server(model, host=args.host, port=args.port)
    finally:
        if watcher is not None:
            watcher.stop()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docsite", description="Static documentation site generator.")
    parser.add_argument("--verbose", action="store_true", help="Toggle verbose output.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser("generate", help="Generate static output for a content directory.")
    generate_parser.add_argument("content_dir", help="Directory containing the site content and config.")
    generate_parser.add_argument("output_dir", help="Directory to write generated output into (emptied first).")
    generate_parser.set_defaults(handler=generate)

    serve_parser = subparsers.add_parser("serve", help="Serve a content directory locally.")
    serve_parser.add_argument("content_dir", help="Directory containing the site content and config.")
    serve_parser.add_argument("--host", default=DEFAULT_HOST, help="Interface to bind.")
    serve_parser.add_argument("--port", default=DEFAULT_PORT, type=int, help="Port to listen on.")
    serve_parser.add_argument(
        "--watch",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Rebuild when content files change.",
    )
    serve_parser.add_argument(
        "--debounce",
        default=0.3,
        type=float,
        help="Seconds to wait for changes to settle before rebuilding.",
    )
    serve_parser.set_defaults(handler=serve)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    try:
        args.handler(args)
    except SiteError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)
