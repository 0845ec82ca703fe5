"""Read lines, evaluate them, and print each value or error."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable
from typing import TextIO

from .errors import AplError
from .evaluator import Interpreter
from .values import format_value

logger = logging.getLogger("apl_jax.repl")

_DEFAULT_PROMPT = "\t"


def run_lines(lines: Iterable[str], interpreter: Interpreter, out: TextIO, *, prompt: str = "") -> int:
    """Evaluate each line in order and return how many of them failed.

    Blank lines are skipped. A failing line is reported on ``out`` and the
    loop moves on to the next one.
    """
    failures = 0
    out.write(prompt)
    out.flush()
    for raw in lines:
        line = raw.rstrip("\r\n")
        if line.strip():
            try:
                value = interpreter(line)
            except AplError as err:
                failures += 1
                logger.debug("line %r failed: %s", line, type(err).__name__)
                out.write(f"error: {err}\n")
            else:
                out.write(f"{format_value(value)}\n")
        out.write(prompt)
        out.flush()
    if prompt:
        out.write("\n")
    return failures


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="apl-jax", description="Evaluate integer/vector array expressions line by line.")
    parser.add_argument("file", nargs="?", help="read lines from this file instead of stdin")
    parser.add_argument(
        "-c",
        "--command",
        action="append",
        default=[],
        metavar="EXPR",
        help="evaluate EXPR and exit (repeatable; lines share one environment)",
    )
    parser.add_argument("--prompt", default=None, help="prompt printed before each line (default: a tab on a terminal)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        help="logging level for apl_jax loggers",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    interpreter = Interpreter()

    if args.command:
        run_lines(args.command, interpreter, sys.stdout)
        return 0

    if args.file is not None:
        try:
            handle = open(args.file, encoding="utf-8")
        except OSError as exc:
            print(f"apl-jax: cannot open {args.file}: {exc.strerror}", file=sys.stderr)
            return 1
        with handle:
            run_lines(handle, interpreter, sys.stdout, prompt=args.prompt or "")
        return 0

    prompt = args.prompt
    if prompt is None:
        prompt = _DEFAULT_PROMPT if sys.stdin.isatty() else ""
    run_lines(sys.stdin, interpreter, sys.stdout, prompt=prompt)
    return 0
