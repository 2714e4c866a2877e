"""
COMFY CLI Entrypoint.

Command-line driver for the COMFY syntactic-analysis stage: reads source text,
lexes it, parses it, and prints the concrete syntax tree and any diagnostics.

Example usage:
    comfy program.comfy
    comfy -s "{ print(1) } $"
    comfy program.comfy --json
    comfy program.comfy --strict --verbose

Functions:
    run_comfy(source: str, is_string: bool = False, strict: bool = False,
              verbose: bool = False, as_json: bool = False) -> int:
        Runs lex -> parse -> output and returns the process exit status.

    main() -> None:
        Parses CLI arguments and exits with the status of `run_comfy`.
"""

import argparse
import json
import sys

from comfy.comfy_lexer import tokenize
from comfy.comfy_parser import NestingError, ParseError, parse


def run_comfy(
    source: str,
    is_string: bool = False,
    strict: bool = False,
    verbose: bool = False,
    as_json: bool = False,
) -> int:
    """
    Run the COMFY front end on a file or a source string.

    Args:
        source (str): Path to a source file, or the source itself when `is_string` is True.
        is_string (bool): Treat `source` as raw code instead of a file path. Defaults to False.
        strict (bool): Stop at the first syntax error. Defaults to False.
        verbose (bool): Print the parser trace to stdout. Defaults to False.
        as_json (bool): Print the tree as JSON instead of indented text. Defaults to False.

    Returns:
        int: 0 if the program parsed without diagnostics, 1 otherwise.

    Side Effects:
        Prints the tree to stdout and errors to stderr.
    """
    # 1. Read source
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Lexing
    try:
        tokens = tokenize(source)
    except SyntaxError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    # 3. Parsing
    try:
        result = parse(tokens, strict=strict, verbose=verbose)
    except (ParseError, NestingError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    # 4. Output
    if as_json:
        try:
            print(json.dumps(result.tree.to_dict(), indent=2))
        except RecursionError:
            print("error: syntax tree is too deep for JSON output", file=sys.stderr)
            return 1
    else:
        print(result.tree.render())

    for message in result.messages():
        print(f"error: {message}", file=sys.stderr)

    return 0 if result.ok else 1


def main() -> None:
    """
    Entry point for the COMFY CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `--strict`: Abort on the first syntax error.
        - `-v`, `--verbose`: Print the parser trace.
        - `--json`: Print the syntax tree as JSON.
    """
    parser = argparse.ArgumentParser(prog="comfy")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "--strict", action="store_true", help="Stop at the first syntax error"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Print the parser trace"
    )
    parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the tree as JSON"
    )

    args = parser.parse_args()

    sys.exit(
        run_comfy(
            source=args.source,
            is_string=args.string,
            strict=args.strict,
            verbose=args.verbose,
            as_json=args.as_json,
        )
    )


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
