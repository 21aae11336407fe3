"""Clack CLI entry point.

Allows running via `python -m clack` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import argparse
import logging

from .version import get_version_string


def _configure_logging(path: str | None) -> None:
    # The editor owns the screen, so log records can only go to a file
    if not path:
        logging.getLogger("clack").addHandler(logging.NullHandler())
        return
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger("clack")
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="clack", description="A typewriter for the terminal.")
    parser.add_argument("filename", nargs="?", help="file to open (created on first save)")
    parser.add_argument("-V", "--version", action="store_true", help="print version and exit")
    parser.add_argument("--log", metavar="FILE", help="write debug log to FILE")
    args = parser.parse_args(argv)

    if args.version:
        print(get_version_string())
        return

    _configure_logging(args.log)

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    editor = Editor()
    if args.filename:
        editor.load_file(args.filename)
    editor.run()


if __name__ == "__main__":  # pragma: no cover
    main()
