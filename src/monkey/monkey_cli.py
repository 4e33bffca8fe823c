"""
Monkey CLI Entrypoint.

A developer tool that lexes and parses Monkey source and dumps the result. It
does not evaluate anything.

Features:
    - Read source from `.monkey` files or inline strings.
    - Print the canonical (fully parenthesized) rendering of the program,
      the token stream, or the AST as JSON.
    - Report every parse error on stderr and exit non-zero if there were any.

Example usage:
    monkey hello.monkey
    monkey -s "let x = 1 + 2 * 3;"
    monkey -s "fn(x) { x }" --json
    monkey hello.monkey --tokens --log-level DEBUG

Environment:
    MONKEY_LOG_LEVEL: default for `--log-level` (WARNING if unset).

Functions:
    run_monkey(...) -> int:
        Executes the pipeline (read → lex → parse → dump) and returns an exit status.

    main(argv=None) -> int:
        Parses CLI arguments and invokes `run_monkey`.
"""

import argparse
import json
import logging
import os
import sys

from monkey.monkey_lexer import tokenize
from monkey.monkey_parser import parse_program

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def run_monkey(
    source: str,
    is_string: bool = False,
    show_tokens: bool = False,
    as_json: bool = False,
    strict: bool = False,
) -> int:
    """
    Run the Monkey front end on `source` and print the result.

    Args:
        source (str): Monkey source code, or the path to a `.monkey` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        show_tokens (bool): If True, prints the token stream before the AST.
        as_json (bool): If True, prints the AST as JSON instead of its rendering.
        strict (bool): If True, `let` and `return` statements must end with `;`.

    Returns:
        int: 0 when the source parsed cleanly, 1 when errors were reported.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.monkey'.
    """
    if not is_string and not source.endswith(".monkey"):
        raise ValueError("Only .monkey files are supported.")
    if not is_string:
        logger.info("reading %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    if show_tokens:
        for tok in tokenize(source):
            print(f"{tok.line}:{tok.col}\t{tok.type.name}\t{tok.literal!r}")

    result = parse_program(source, require_semicolons=strict)

    if as_json:
        print(json.dumps(result.program.to_dict(), indent=2))
    else:
        print(result.program)

    for error in result.errors:
        print(f"error: {error}", file=sys.stderr)
    if not result.ok:
        logger.info("parse finished with %d error(s)", len(result.errors))
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the Monkey CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--tokens`: Print the token stream.
        - `--json`: Print the AST as JSON.
        - `--strict`: Require `;` after `let` and `return` statements.
        - `--log-level`: Logging threshold (defaults to $MONKEY_LOG_LEVEL or WARNING).
    """
    parser = argparse.ArgumentParser(prog="monkey")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream"
    )
    parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the AST as JSON"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Require ';' after let and return statements",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=os.environ.get("MONKEY_LOG_LEVEL", "WARNING").upper(),
        help="Logging threshold (default: $MONKEY_LOG_LEVEL or WARNING)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return run_monkey(
            source=args.source,
            is_string=args.string,
            show_tokens=args.tokens,
            as_json=args.as_json,
            strict=args.strict,
        )
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
