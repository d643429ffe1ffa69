"""Command dispatch for plcrashutil CLI."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from plcrash.cli.parser import _build_parser, _preprocess_argv

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the ``plcrashutil`` CLI.

    Args:
        argv: Argument list to parse.  Defaults to ``sys.argv[1:]``.

    Returns:
        Exit code: 0 on success, 1 on error.  Usage errors exit 2 via argparse.
    """
    if argv is None:
        argv = sys.argv[1:]

    argv = _preprocess_argv(argv)

    # Late import to allow tests to monkeypatch plcrash.cli.cmd_xxx
    import plcrash.cli as cli

    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT, stream=sys.stderr)

    if args.cmd == "convert":
        return cli.cmd_convert(path=args.file, format_name=args.format_name, json_mode=args.json)

    parser.error(f"Unknown command: {args.cmd}")
    return 2
