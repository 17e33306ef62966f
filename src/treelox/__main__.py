#!/usr/bin/env python3
"""
Command-line shell for treelox.

Usage:
    python -m treelox                  interactive prompt
    python -m treelox SCRIPT           run a script file
    python -m treelox --print-ast tree SCRIPT

Options:
    --print-ast {lisp,rpn,tree}   print the parsed tree instead of running
    --config FILE                 YAML settings file (else $TREELOX_CONFIG)
    -v                            increase log verbosity (can be repeated)

Exit codes follow sysexits.h: 64 bad usage, 65 syntax errors in the script,
66 unreadable script, 70 runtime error, 78 bad settings file.
"""

import argparse
import json
import logging
import sys
from enum import IntEnum
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Sequence, TextIO

from . import run_source
from .ast import BlockStmt, Expression, Statement
from .config import ConfigError, Settings, resolve_settings
from .errors import Diagnostic, DiagnosticCollector
from .lexer import scan
from .parser import parse
from .printer import LispPrinter, print_ast, statement_expression
from .runtime import Interpreter

logger = logging.getLogger("treelox")


class PosixExit(IntEnum):
    """Process exit codes from sysexits.h."""
    OK = 0
    USAGE = 64
    DATAERR = 65
    NOINPUT = 66
    SOFTWARE = 70
    CONFIG = 78


def configure_logging(verbosity: int, default_level: str = "WARNING") -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(logging, default_level)
    logging.basicConfig(level=level, stream=sys.stderr,
                        format="%(levelname)s %(name)s: %(message)s")


def make_sink(settings: Settings) -> Callable[[Diagnostic], None]:
    """Print each diagnostic to stderr as it is reported."""
    def sink(diagnostic: Diagnostic) -> None:
        if settings.diagnostic_style == "detailed":
            text = diagnostic.format(settings.show_source)
        elif settings.diagnostic_style == "json":
            text = json.dumps(diagnostic.to_json())
        else:
            text = diagnostic.format_classic()
        print(text, file=sys.stderr)
    return sink


def iter_expressions(statements: Sequence[Optional[Statement]]) -> Iterator[Expression]:
    """Expressions carried by statements, descending into blocks."""
    for stmt in statements:
        if isinstance(stmt, BlockStmt):
            yield from iter_expressions(stmt.statements)
            continue
        expr = statement_expression(stmt)
        if expr is not None:
            yield expr


def print_tree(source: str, style: str, diagnostics: DiagnosticCollector) -> int:
    """Parse source and print its tree instead of running it."""
    diagnostics.set_source(source)
    statements = parse(scan(source, diagnostics), diagnostics)
    if diagnostics.has_errors:
        return PosixExit.DATAERR

    try:
        if style == "lisp":
            printer = LispPrinter()
            lines = [printer.print_statement(stmt) for stmt in statements]
        else:
            lines = [print_ast(expr, style).rstrip("\n") for expr in iter_expressions(statements)]
    except RecursionError:
        print("Error: tree nested too deeply to print.", file=sys.stderr)
        return PosixExit.SOFTWARE

    for line in lines:
        print(line)
    return PosixExit.OK


def run_file(path: str, interpreter: Interpreter,
             diagnostics: DiagnosticCollector, print_style: Optional[str] = None) -> int:
    """Run a script file and map the outcome to an exit code."""
    try:
        source = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: cannot read {path}: {e.strerror or e}", file=sys.stderr)
        return PosixExit.NOINPUT
    except UnicodeDecodeError:
        print(f"Error: cannot read {path}: not valid UTF-8", file=sys.stderr)
        return PosixExit.NOINPUT

    logger.info("running %s", path)
    if print_style is not None:
        return print_tree(source, print_style, diagnostics)

    result = run_source(source, interpreter, diagnostics)
    if diagnostics.has_errors:
        return PosixExit.DATAERR
    if not result.success:
        return PosixExit.SOFTWARE
    return PosixExit.OK


def run_prompt(interpreter: Interpreter, diagnostics: DiagnosticCollector,
               settings: Settings, stdin: Optional[TextIO] = None,
               stdout: Optional[TextIO] = None, print_style: Optional[str] = None) -> int:
    """
    Read-eval-print loop.

    Each line runs against the same interpreter, so variables persist.
    Errors on one line do not affect the next. End of input exits cleanly.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    while True:
        stdout.write(settings.prompt)
        stdout.flush()
        line = stdin.readline()
        if not line:
            break
        if print_style is not None:
            print_tree(line, print_style, diagnostics)
        else:
            run_source(line, interpreter, diagnostics)
        diagnostics.clear()
    return PosixExit.OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog='treelox',
        description='Tree-walking interpreter for a Lox-style scripting language',
    )
    parser.add_argument('script', nargs='*', help='script file to run (omit for a prompt)')
    parser.add_argument('--print-ast', choices=('lisp', 'rpn', 'tree'), metavar='STYLE',
                        help='print the parsed tree (lisp, rpn or tree) instead of running')
    parser.add_argument('--config', metavar='FILE', help='YAML settings file')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='increase log verbosity (can be repeated)')
    args = parser.parse_args(argv)

    if len(args.script) > 1:
        print("Usage: treelox [script]")
        return PosixExit.USAGE

    try:
        settings = resolve_settings(args.config)
    except (FileNotFoundError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return PosixExit.CONFIG

    configure_logging(args.verbose, settings.log_level)
    logger.debug("settings: %s", settings.to_dict())

    diagnostics = DiagnosticCollector(max_errors=settings.max_errors, sink=make_sink(settings))
    interpreter = Interpreter(diagnostics=diagnostics)

    if args.script:
        return run_file(args.script[0], interpreter, diagnostics, args.print_ast)
    return run_prompt(interpreter, diagnostics, settings, print_style=args.print_ast)


if __name__ == '__main__':
    sys.exit(main())
