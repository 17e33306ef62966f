"""
Diagnostics and exceptions for the scanner, parser and interpreter.

Error code ranges:
- E0xx: Scanner errors
- E1xx: Parser errors
- E4xx: Runtime errors

Scan and parse errors are reported and recovered from; runtime errors are
reported once and end the run. None of them indicates a defect in the
interpreter itself.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from .tokens import Token, TokenType

logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for diagnostics."""
    ERROR = "error"
    WARNING = "warning"


class ErrorPhase(Enum):
    """Pipeline stage that produced a diagnostic."""
    SCAN = "scan"
    PARSE = "parse"
    RUNTIME = "runtime"


@dataclass
class Diagnostic:
    """A single diagnostic message."""
    code: str                       # E001, E101, etc.
    message: str                    # Human-readable message
    line: int
    phase: ErrorPhase
    where: str = ""                 # "at 'x'", "at end" or empty
    severity: ErrorSeverity = ErrorSeverity.ERROR
    source_line: Optional[str] = None   # The actual line of source code
    hints: List[str] = field(default_factory=list)

    def format_classic(self) -> str:
        """Format in the interpreter's one-line report style."""
        if self.phase == ErrorPhase.RUNTIME:
            return f"{self.message}\n[line {self.line}]"
        where = f" {self.where}" if self.where else ""
        return f"[line {self.line}] Error{where}: {self.message}"

    def format(self, show_source: bool = True) -> str:
        """Format the diagnostic with code, source excerpt and hints."""
        where = f" ({self.where})" if self.where else ""
        parts = [f"line {self.line}: {self.severity.value}[{self.code}]: {self.message}{where}"]

        if show_source and self.source_line is not None:
            parts.append("  |")
            parts.append(f"{self.line:>3} | {self.source_line}")

        for hint in self.hints:
            parts.append(f"    = hint: {hint}")

        return "\n".join(parts)

    def to_json(self) -> dict:
        """Convert to JSON-serializable dict for tooling integration."""
        return {
            "code": self.code,
            "message": self.message,
            "severity": self.severity.value,
            "phase": self.phase.value,
            "line": self.line,
            "where": self.where,
            "hints": self.hints,
        }


class LoxError(Exception):
    """Base exception for user-facing errors."""

    def __init__(self, diagnostic: Diagnostic):
        self.diagnostic = diagnostic
        super().__init__(diagnostic.message)

    def __str__(self) -> str:
        return self.diagnostic.format_classic()


class LexerError(LoxError):
    """Error during scanning (E0xx)."""
    pass


class ParserError(LoxError):
    """Error during parsing (E1xx)."""
    pass


class LoxRuntimeError(LoxError):
    """Error during evaluation (E4xx); carries the offending token."""

    def __init__(self, token: Token, message: str, code: str = "E400"):
        self.token = token
        super().__init__(Diagnostic(
            code=code,
            message=message,
            line=token.line,
            phase=ErrorPhase.RUNTIME,
            where=token_location(token),
        ))


def token_location(token: Token) -> str:
    """Describe where a token sits for error messages."""
    if token.type == TokenType.EOF:
        return "at end"
    return f"at '{token.lexeme}'"


# --- Scanner error codes ---

def error_unexpected_character(char: str, line: int) -> LexerError:
    """E001: Unexpected character."""
    return LexerError(Diagnostic(
        code="E001",
        message="Unexpected character.",
        line=line,
        phase=ErrorPhase.SCAN,
        hints=[f"'{char}' is not part of the language"],
    ))


def error_unterminated_string(line: int) -> LexerError:
    """E002: Unterminated string literal."""
    return LexerError(Diagnostic(
        code="E002",
        message="Unterminated string.",
        line=line,
        phase=ErrorPhase.SCAN,
        hints=["string literals must be closed with a matching '\"'"],
    ))


# --- Parser error codes ---

def error_expected(token: Token, message: str) -> ParserError:
    """E101: Unexpected token."""
    return ParserError(Diagnostic(
        code="E101",
        message=message,
        line=token.line,
        phase=ErrorPhase.PARSE,
        where=token_location(token),
    ))


def error_missing_left_operand(token: Token, level: str) -> ParserError:
    """E102: Binary operator with no left hand operand."""
    return ParserError(Diagnostic(
        code="E102",
        message=f"Missing left hand operand for {level}.",
        line=token.line,
        phase=ErrorPhase.PARSE,
        where=token_location(token),
    ))


def error_nesting_too_deep(token: Token) -> ParserError:
    """E103: Expression nested past the parser's stack depth."""
    return ParserError(Diagnostic(
        code="E103",
        message="Expression nested too deeply.",
        line=token.line,
        phase=ErrorPhase.PARSE,
        where=token_location(token),
        hints=["split the expression using variables"],
    ))


# --- Runtime error codes ---

def error_operand_not_number(operator: Token) -> LoxRuntimeError:
    """E401: Unary operand must be a number."""
    return LoxRuntimeError(operator, "Operand must be a number.", "E401")


def error_operands_not_numbers(operator: Token) -> LoxRuntimeError:
    """E402: Binary operands must be numbers."""
    return LoxRuntimeError(operator, "Operands must be numbers.", "E402")


def error_operands_not_numbers_or_strings(operator: Token) -> LoxRuntimeError:
    """E403: Binary operands must be two numbers or two strings."""
    return LoxRuntimeError(operator, "Operands must be two numbers or two strings.", "E403")


def error_division_by_zero(operator: Token) -> LoxRuntimeError:
    """E404: Division by zero."""
    return LoxRuntimeError(operator, "Division by zero.", "E404")


def error_undefined_variable(name: Token) -> LoxRuntimeError:
    """E405: Undefined variable."""
    return LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.", "E405")


def error_evaluation_too_deep(token: Token) -> LoxRuntimeError:
    """E406: Expression nested past the interpreter's stack depth."""
    return LoxRuntimeError(token, "Expression nested too deeply.", "E406")


class DiagnosticCollector:
    """
    Collects diagnostics from every stage of a run.

    ``report`` and ``report_runtime`` are the two reporting callbacks the
    scanner, parser and interpreter use. An optional ``sink`` is called with
    each diagnostic as it arrives, so a shell can print errors immediately.
    """

    def __init__(self, max_errors: int = 20,
                 sink: Optional[Callable[[Diagnostic], None]] = None,
                 source: Optional[str] = None):
        self.diagnostics: List[Diagnostic] = []
        self.max_errors = max_errors
        self.sink = sink
        self._source_lines = source.splitlines() if source else []
        self._error_count = 0

    def add(self, diagnostic: Diagnostic) -> None:
        """Add a diagnostic."""
        if diagnostic.source_line is None:
            diagnostic.source_line = self._get_source_line(diagnostic.line)
        self.diagnostics.append(diagnostic)
        if diagnostic.severity == ErrorSeverity.ERROR:
            self._error_count += 1
        logger.debug("diagnostic %s: %s", diagnostic.code, diagnostic.message)
        if self.sink is not None:
            self.sink(diagnostic)

    def add_error(self, error: LoxError) -> None:
        """Add an error exception as a diagnostic."""
        self.add(error.diagnostic)

    def report(self, line: int, where: str, message: str, code: str = "E100",
               phase: ErrorPhase = ErrorPhase.PARSE) -> None:
        """
        Report an error from a line and a message alone.

        The scanner and parser build coded errors and go through
        ``add_error``. Callers that only know a line and a message use this;
        pass ``phase=ErrorPhase.SCAN`` for a scan error.
        """
        self.add(Diagnostic(
            code=code,
            message=message,
            line=line,
            phase=phase,
            where=where,
        ))

    def report_runtime(self, error: LoxRuntimeError) -> None:
        """Report a runtime error."""
        self.add_error(error)

    def set_source(self, source: str) -> None:
        """Attach source text used for the excerpts in detailed output."""
        self._source_lines = source.splitlines()

    def _get_source_line(self, line_num: int) -> Optional[str]:
        if 1 <= line_num <= len(self._source_lines):
            return self._source_lines[line_num - 1]
        return None

    def clear(self) -> None:
        """Forget everything collected so far."""
        self.diagnostics.clear()
        self._error_count = 0

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def has_errors(self) -> bool:
        """True if any scan or parse error was reported."""
        return any(d.phase != ErrorPhase.RUNTIME and d.severity == ErrorSeverity.ERROR
                   for d in self.diagnostics)

    @property
    def has_runtime_errors(self) -> bool:
        return any(d.phase == ErrorPhase.RUNTIME for d in self.diagnostics)

    @property
    def should_stop(self) -> bool:
        """Check if we've hit the max error limit."""
        return self._error_count >= self.max_errors

    def format_all(self, show_source: bool = True) -> str:
        """Format all diagnostics for display."""
        parts = [d.format(show_source) for d in self.diagnostics]
        if self._error_count > 0:
            parts.append(f"{self._error_count} error(s)")
        return "\n\n".join(parts)

    def to_json(self) -> dict:
        """Convert all diagnostics to JSON format."""
        return {
            "diagnostics": [d.to_json() for d in self.diagnostics],
            "error_count": self._error_count,
        }
