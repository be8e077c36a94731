"""
Command line entry point: ``dawg [options]``.
"""
from __future__ import annotations

import argparse
import sys

from . import __version__
from .app import run
from .options import resolve_options
from .shared import DawgError


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="dawg",
        description="Serve or convert a directory of markdown chapters as an HTML docs site.",
    )
    p.add_argument("-c", "--config", help="JSON config file (default: ./.dawg when present)")
    p.add_argument("-s", "--source", help="Chapter directory or single markdown file (default: ./docs)")
    p.add_argument("-o", "--output", help="Write HTML pages to this directory (or file, for one chapter)")
    p.add_argument("--clear", action="store_true", default=None, help="Empty the output before writing")
    p.add_argument(
        "--watch",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Rebuild when the source changes (default: on while serving)",
    )
    p.add_argument(
        "--serve",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Serve over HTTP (default: on when no output is given)",
    )
    p.add_argument("--host", help="Host to bind (default: 127.0.0.1, env DAWG_HOST)")
    p.add_argument("--port", type=int, help="Port to bind (default: 5678, env DAWG_PORT)")
    p.add_argument(
        "--dev",
        action="store_true",
        default=None,
        help="No caching or CSS minification; also watch the template and stylesheets",
    )
    p.add_argument("-q", "--quiet", action="store_true", default=None, help="Suppress log output")
    p.add_argument("-t", "--template", help="Jinja2 page template")
    p.add_argument(
        "--style",
        dest="styles",
        action="append",
        help="Stylesheet to bundle (repeatable; replaces the default stylesheets)",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        options = resolve_options(vars(args))
        run(options)
    except DawgError as exc:
        print(f"dawg: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
