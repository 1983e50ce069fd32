"""
LBASIC CLI Entrypoint.

This module provides the command-line interface for checking LBASIC programs.

Features:
    - Read a program from a file, an inline string, or standard input.
    - Validate it and print exactly one line: `Accept` or
      `Syntax error on line <N>: <message>`.
    - Optionally trace every examined line to stderr.
    - Print the grammar's FIRST/FOLLOW/PREDICT sets.

Example usage:
    lbasic program.lb
    lbasic -s "x=1\\n$$"
    lbasic program.lb --strict --verbose
    lbasic --grammar

Exit status:
    0 on acceptance, 1 on a syntax error, 2 on usage or I/O errors.

Functions:
    read_lines(path: str) -> list[str]:
        Reads a UTF-8 source file into its lines.

    check_lines(lines: list[str], strict: bool = False, verbose: bool = False) -> int:
        Validates lines, prints the one-line result and returns the exit status.

    run_check(source: str, is_string: bool = False, strict: bool = False,
              verbose: bool = False) -> int:
        Executes the full pipeline (read -> validate -> print) and returns the exit status.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action.
"""

import argparse
import sys

from lbasic.lbasic_grammar import format_sets
from lbasic.lbasic_result import Accept
from lbasic.lbasic_validator import validate


def read_lines(path: str) -> list[str]:
    """Read a UTF-8 source file and split it into lines."""
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()


def print_trace(line: int, text: str) -> None:
    print(f"[trace] line {line}: {text}", file=sys.stderr)


def check_lines(lines: list[str], strict: bool = False, verbose: bool = False) -> int:
    """Validate `lines`, print the one-line result and return the exit status."""
    result = validate(lines, strict=strict, trace=print_trace if verbose else None)
    print(result)
    return 0 if isinstance(result, Accept) else 1


def run_check(
    source: str,
    is_string: bool = False,
    strict: bool = False,
    verbose: bool = False,
) -> int:
    """
    Run the LBASIC checker on a file or a literal program and print the result.

    Args:
        source (str): Path to a source file, or the program text with `is_string`.
        is_string (bool): If True, treats `source` as program text. A literal
            two-character `\\n` sequence is read as a line break. Defaults to False.
        strict (bool): Reject programs that reach `$$` with an open `while`. Defaults to False.
        verbose (bool): Trace each examined line to stderr. Defaults to False.

    Returns:
        int: The process exit status (0 accepted, 1 syntax error, 2 unreadable input).
    """
    # 1. Read source
    if is_string:
        lines = source.replace("\\n", "\n").splitlines()
    else:
        try:
            lines = read_lines(source)
        except (OSError, UnicodeDecodeError) as e:
            print(f"[error] >>> cannot read {source}: {e}", file=sys.stderr)
            return 2

    # 2. Validate and report
    return check_lines(lines, strict=strict, verbose=verbose)


def main() -> None:
    """
    Entry point for the LBASIC CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a literal program instead of a file path.
        - `--strict`: Report a `while` block still open at the `$$` line.
        - `--verbose`: Trace each examined line to stderr.
        - `--grammar`: Print the grammar analysis and exit.

    With no source argument the program is read from standard input.
    """
    parser = argparse.ArgumentParser(prog="lbasic")
    parser.add_argument(
        "source", nargs="?", help="Filename or literal program (with -s)"
    )
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal program"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject a while block left open at the $$ line",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Trace each examined line to stderr"
    )
    parser.add_argument(
        "--grammar",
        action="store_true",
        help="Print FIRST/FOLLOW/PREDICT sets and exit",
    )

    args = parser.parse_args()

    if args.grammar:
        print(format_sets())
        sys.exit(0)

    if args.source is None:
        try:
            lines = sys.stdin.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            print(f"[error] >>> cannot read standard input: {e}", file=sys.stderr)
            sys.exit(2)
        sys.exit(check_lines(lines, strict=args.strict, verbose=args.verbose))

    sys.exit(
        run_check(
            source=args.source,
            is_string=args.string,
            strict=args.strict,
            verbose=args.verbose,
        )
    )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
