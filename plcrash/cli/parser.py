"""Argument parser for plcrashutil CLI."""

from __future__ import annotations

import argparse

from plcrash import __version__

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_FORMAT = "iphone"


def _preprocess_argv(argv: list[str]) -> list[str]:
    """Reorder global flags (--json, --log-level) before the subcommand.

    argparse doesn't accept parent-parser flags after a subcommand, so
    ``plcrashutil convert --json x.plcrash`` is rewritten to
    ``plcrashutil --json convert x.plcrash``.

    Args:
        argv: Raw argument list (without ``sys.argv[0]``).

    Returns:
        Reordered argument list with global flags moved to the front.
    """
    global_args: list[str] = []
    rest: list[str] = []
    i = 0
    while i < len(argv):
        token = argv[i]
        if token == "--":
            rest.extend(argv[i:])
            break
        if token == "--json":
            global_args.append(token)
            i += 1
            continue
        if token.startswith("--log-level="):
            global_args.append(token)
            i += 1
            continue
        if token == "--log-level":
            # Needs a value; leave a dangling flag for argparse to report.
            if i + 1 >= len(argv):
                rest.append(token)
                i += 1
                continue
            global_args.extend([token, argv[i + 1]])
            i += 2
            continue
        rest.append(token)
        i += 1

    return global_args + rest


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="plcrashutil",
        description="Convert PLCrashReporter crash logs to text",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("--json", action="store_true", help="Output machine-parseable JSON")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Diagnostic log level on stderr (default: WARNING)",
    )

    sub = parser.add_subparsers(dest="cmd", required=True)

    p_convert = sub.add_parser("convert", help="Convert a .plcrash file to a text crash log")
    p_convert.add_argument(
        "-f",
        "--format",
        default=DEFAULT_FORMAT,
        dest="format_name",
        help="Output format: ios or iphone (default: iphone)",
    )
    p_convert.add_argument("file", help="Path to the .plcrash file")

    return parser
