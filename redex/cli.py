#!/usr/bin/env python3
"""
REDEX Command-Line Interface

Dumps the token stream of rule-language source, one token per line.

Usage:
    redex rules.txt                 # Tokenize a file
    redex -e "swap(a, b) = b"       # Tokenize a string
    cat rules.txt | redex           # Filter mode
    redex --json rules.txt          # Tokens as a JSON array

Output format:
    <loc>: <kind> '<text>'

An invalid character is reported on stderr as
    <loc>: error: invalid token '<text>'
and the exit status is 1.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

import structlog

from . import __version__
from .lexer import Lexer, Token, TokenKind

logger = structlog.get_logger()


def configure_logging(verbosity: int = 0) -> None:
    """
    Configure structlog to write to stderr.

    verbosity: -1 shows errors only, 0 warnings, 1 or more debug events.
    """
    if verbosity < 0:
        level = logging.ERROR
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.DEBUG

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


class TokenDumper:
    """Prints the tokens of a source text."""

    def __init__(self, as_json: bool = False, out: Optional[TextIO] = None,
                 err: Optional[TextIO] = None):
        self.as_json = as_json
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def dump(self, text: str, file_path: Optional[str] = None) -> int:
        """
        Tokenize text and print every token.

        Returns:
            Exit code (0 for success, 1 if an invalid token was reached)
        """
        tokens: List[Token] = list(Lexer(text, file_path=file_path))
        logger.debug("tokenized", file=file_path, count=len(tokens))

        if self.as_json:
            print(json.dumps([t.to_dict() for t in tokens], indent=2), file=self.out)
        else:
            for token in tokens:
                print(token, file=self.out)

        last = tokens[-1]
        if last.kind is TokenKind.INVALID:
            print(f"{last.loc}: error: invalid token '{last.text}'", file=self.err)
            return 1
        return 0

    def dump_file(self, path: Path) -> int:
        """Tokenize a file, tagging locations with its path."""
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading {path}: {e}", file=self.err)
            return 1
        return self.dump(text, file_path=str(path))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="redex",
        description="REDEX - tokenize rule-language source",
        epilog="Examples:\n"
               "  redex rules.txt                Tokenize a file\n"
               "  redex -e 'f(x) = x'            Tokenize a string\n"
               "  cat rules.txt | redex --json   Filter mode, JSON output\n",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="Source file to tokenize"
    )

    parser.add_argument(
        "-e", "--expr",
        help="Tokenize a string instead of a file"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print tokens as a JSON array"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Show debug log events on stderr"
    )

    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log errors"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(-1 if args.quiet else args.verbose)

    dumper = TokenDumper(as_json=args.json)

    if args.expr is not None:
        return dumper.dump(args.expr)

    if args.file:
        return dumper.dump_file(Path(args.file))

    if sys.stdin.isatty():
        parser.print_usage(sys.stderr)
        return 2

    try:
        text = sys.stdin.read()
    except UnicodeDecodeError as e:
        print(f"Error reading <stdin>: {e}", file=sys.stderr)
        return 1
    return dumper.dump(text)


if __name__ == "__main__":
    sys.exit(main())
