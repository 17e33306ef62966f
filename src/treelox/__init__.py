"""
treelox - a tree-walking interpreter for a small Lox-style scripting language.

This module provides:
- Lexer: Scans source text into tokens
- Parser: Builds statements from tokens, recovering from syntax errors
- Interpreter: Evaluates statements against chained environments
- Printers: Lisp, reverse Polish and directory-tree renderings of expressions

Usage:
    from treelox import scan, parse, Interpreter, DiagnosticCollector

    diagnostics = DiagnosticCollector()
    tokens = scan('var x = 1; { var x = 2; print x; } print x;', diagnostics)
    statements = parse(tokens, diagnostics)
    if diagnostics.has_errors:
        print(diagnostics.format_all())
    else:
        Interpreter(diagnostics=diagnostics).interpret(statements)

Or in one step:
    result = run_source('print "a" + "b";')
"""

import logging
from typing import Optional

from .tokens import (
    Token,
    TokenType,
    KEYWORDS,
    STATEMENT_KEYWORDS,
)

from .lexer import (
    Lexer,
    scan,
)

from .parser import (
    Parser,
    parse,
)

from .ast import (
    # Base
    Expression,
    Statement,
    # Expressions
    Literal,
    Grouping,
    Unary,
    Binary,
    Conditional,
    Variable,
    Assign,
    # Statements
    ExpressionStmt,
    PrintStmt,
    VarStmt,
    BlockStmt,
)

from .errors import (
    Diagnostic,
    DiagnosticCollector,
    ErrorPhase,
    ErrorSeverity,
    LoxError,
    LexerError,
    ParserError,
    LoxRuntimeError,
)

from .printer import (
    LispPrinter,
    ReversePolishPrinter,
    DirectoryPrinter,
    print_ast,
)

from .runtime import (
    Environment,
    ExecutionResult,
    Interpreter,
    interpret,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.3.0"


def run_source(source: str,
               interpreter: Optional[Interpreter] = None,
               diagnostics: Optional[DiagnosticCollector] = None) -> ExecutionResult:
    """
    Scan, parse and run a piece of source text.

    Args:
        source: Program text
        interpreter: Interpreter to run on; a fresh one is created if omitted
        diagnostics: Collector for scan and parse errors; defaults to the
            interpreter's collector

    Returns:
        ExecutionResult. A run with syntax errors executes nothing and
        returns ``success=False`` with no runtime error attached.
    """
    if diagnostics is None:
        diagnostics = interpreter.diagnostics if interpreter is not None else DiagnosticCollector()
    if interpreter is None:
        interpreter = Interpreter(diagnostics=diagnostics)

    diagnostics.set_source(source)
    tokens = scan(source, diagnostics)
    statements = parse(tokens, diagnostics)
    if diagnostics.has_errors:
        return ExecutionResult(success=False)
    return interpreter.interpret(statements)


__all__ = [
    # Tokens
    "Token",
    "TokenType",
    "KEYWORDS",
    "STATEMENT_KEYWORDS",
    # Lexer
    "Lexer",
    "scan",
    # Parser
    "Parser",
    "parse",
    # AST
    "Expression",
    "Statement",
    "Literal",
    "Grouping",
    "Unary",
    "Binary",
    "Conditional",
    "Variable",
    "Assign",
    "ExpressionStmt",
    "PrintStmt",
    "VarStmt",
    "BlockStmt",
    # Errors
    "Diagnostic",
    "DiagnosticCollector",
    "ErrorPhase",
    "ErrorSeverity",
    "LoxError",
    "LexerError",
    "ParserError",
    "LoxRuntimeError",
    # Printers
    "LispPrinter",
    "ReversePolishPrinter",
    "DirectoryPrinter",
    "print_ast",
    # Runtime
    "Environment",
    "ExecutionResult",
    "Interpreter",
    "interpret",
    "run_source",
]
