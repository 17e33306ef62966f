"""
Tree-walking interpreter for treelox.

Executes statements in order against a chain of environments. A runtime error
stops the run; it is reported to the diagnostics collector and returned in the
ExecutionResult instead of propagating to the caller.
"""

import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Optional, TextIO

from .environment import Environment
from .values import is_equal, is_number, is_truthy, stringify
from ..ast import (
    Expression, Literal, Grouping, Unary, Binary, Conditional, Variable, Assign,
    Statement, ExpressionStmt, PrintStmt, VarStmt, BlockStmt,
)
from ..errors import (
    DiagnosticCollector,
    LoxRuntimeError,
    error_division_by_zero,
    error_evaluation_too_deep,
    error_operand_not_number,
    error_operands_not_numbers,
    error_operands_not_numbers_or_strings,
)
from ..tokens import Token, TokenType

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Result of interpreting a list of statements."""
    success: bool
    error: Optional[LoxRuntimeError] = None

    @property
    def error_message(self) -> Optional[str]:
        if self.error is None:
            return None
        return self.error.diagnostic.message


class Interpreter:
    """
    Tree-walking interpreter.

    One instance keeps its global environment between calls to
    ``interpret``, so an interactive session sees earlier definitions.
    """

    def __init__(self, output: Optional[TextIO] = None,
                 diagnostics: Optional[DiagnosticCollector] = None):
        """
        Initialize the interpreter.

        Args:
            output: Stream print writes to (default: sys.stdout at write time)
            diagnostics: Collector that receives runtime errors
        """
        self.output = output
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
        self.globals = Environment()
        self.environment = self.globals
        # Last operator reached; locates errors that carry no token of their own
        self._location = Token(TokenType.EOF, "", None, 1)

    def interpret(self, statements: Iterable[Optional[Statement]]) -> ExecutionResult:
        """
        Execute statements in order until the first runtime error.

        Args:
            statements: Parsed statements; must come from an error-free parse

        Returns:
            ExecutionResult; on failure ``error`` holds the reported error
        """
        try:
            for statement in statements:
                self._execute(statement)
        except RecursionError:
            e = error_evaluation_too_deep(self._location)
            logger.debug("runtime error at line %d: %s", e.token.line, e.diagnostic.message)
            self.diagnostics.report_runtime(e)
            return ExecutionResult(success=False, error=e)
        except LoxRuntimeError as e:
            logger.debug("runtime error at line %d: %s", e.token.line, e.diagnostic.message)
            self.diagnostics.report_runtime(e)
            return ExecutionResult(success=False, error=e)
        return ExecutionResult(success=True)

    @contextmanager
    def scope(self):
        """
        Context manager that makes a new environment current.

        Usage:
            with interp.scope():
                # definitions here are local to this scope
                interp.environment.define("x", 1.0)
        """
        previous = self.environment
        self.environment = Environment(previous)
        try:
            yield self.environment
        finally:
            self.environment = previous

    # =========================================================================
    # Statement Execution
    # =========================================================================

    def _execute(self, stmt: Statement) -> None:
        match stmt:
            case ExpressionStmt(expression):
                self._evaluate(expression)
            case PrintStmt(expression):
                self._write(stringify(self._evaluate(expression)))
            case VarStmt(name, initializer):
                value = None
                if initializer is not None:
                    value = self._evaluate(initializer)
                enclosing = self.environment.enclosing
                if enclosing is not None and enclosing.contains(name.lexeme):
                    logger.debug("line %d: %r shadows an outer variable", name.line, name.lexeme)
                self.environment.define(name.lexeme, value)
            case BlockStmt(statements):
                self._execute_block(statements)
            case _:
                raise TypeError(f"Cannot execute {stmt!r}")

    def _execute_block(self, statements: Iterable[Statement]) -> None:
        with self.scope():
            logger.debug("entering block scope")
            for statement in statements:
                self._execute(statement)

    def _write(self, text: str) -> None:
        stream = self.output if self.output is not None else sys.stdout
        stream.write(text + "\n")

    # =========================================================================
    # Expression Evaluation
    # =========================================================================

    def _evaluate(self, expr: Expression) -> Any:
        match expr:
            case Literal(value):
                return value
            case Grouping(inner):
                return self._evaluate(inner)
            case Unary(operator, right):
                self._location = operator
                return self._evaluate_unary(operator, self._evaluate(right))
            case Binary(left, operator, right) if operator.type == TokenType.COMMA:
                self._evaluate(left)
                return self._evaluate(right)
            case Binary(left, operator, right):
                self._location = operator
                lhs = self._evaluate(left)
                rhs = self._evaluate(right)
                return self._evaluate_binary(operator, lhs, rhs)
            case Conditional(condition, then_branch, else_branch):
                if is_equal(self._evaluate(condition), True):
                    return self._evaluate(then_branch)
                return self._evaluate(else_branch)
            case Variable(name):
                return self.environment.get(name)
            case Assign(name, value_expr):
                value = self._evaluate(value_expr)
                self.environment.assign(name, value)
                return value
            case _:
                raise TypeError(f"Cannot evaluate {expr!r}")

    def _evaluate_unary(self, operator: Token, right: Any) -> Any:
        match operator.type:
            case TokenType.BANG:
                return not is_truthy(right)
            case TokenType.MINUS:
                self._check_number_operand(operator, right)
                return -right
        raise TypeError(f"Unknown unary operator {operator.lexeme!r}")

    def _evaluate_binary(self, operator: Token, left: Any, right: Any) -> Any:
        match operator.type:
            case TokenType.EQUAL_EQUAL:
                return is_equal(left, right)
            case TokenType.BANG_EQUAL:
                return not is_equal(left, right)

            case TokenType.GREATER:
                self._check_comparable(operator, left, right)
                return left > right
            case TokenType.GREATER_EQUAL:
                self._check_comparable(operator, left, right)
                return left >= right
            case TokenType.LESS:
                self._check_comparable(operator, left, right)
                return left < right
            case TokenType.LESS_EQUAL:
                self._check_comparable(operator, left, right)
                return left <= right

            case TokenType.PLUS:
                self._check_comparable(operator, left, right)
                return left + right
            case TokenType.MINUS:
                self._check_number_operands(operator, left, right)
                return left - right
            case TokenType.STAR:
                self._check_number_operands(operator, left, right)
                return left * right
            case TokenType.SLASH:
                self._check_number_operands(operator, left, right)
                if right == 0:
                    raise error_division_by_zero(operator)
                return left / right
        raise TypeError(f"Unknown binary operator {operator.lexeme!r}")

    # =========================================================================
    # Operand Checks
    # =========================================================================

    @staticmethod
    def _check_number_operand(operator: Token, operand: Any) -> None:
        if not is_number(operand):
            raise error_operand_not_number(operator)

    @staticmethod
    def _check_number_operands(operator: Token, left: Any, right: Any) -> None:
        if not (is_number(left) and is_number(right)):
            raise error_operands_not_numbers(operator)

    @staticmethod
    def _check_comparable(operator: Token, left: Any, right: Any) -> None:
        """Both numbers or both strings."""
        if is_number(left) and is_number(right):
            return
        if isinstance(left, str) and isinstance(right, str):
            return
        raise error_operands_not_numbers_or_strings(operator)


def interpret(statements: Iterable[Optional[Statement]],
              interpreter: Optional[Interpreter] = None) -> ExecutionResult:
    """Run statements on the given interpreter, or on a fresh one."""
    if interpreter is None:
        interpreter = Interpreter()
    return interpreter.interpret(statements)
