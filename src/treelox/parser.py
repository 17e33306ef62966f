"""
Recursive descent parser for treelox.

Converts a token list into a list of statements. Each grammar rule is a
method; binary levels share one generic loop that builds left-leaning trees.

Precedence, lowest to highest:

    sequence     ,               left
    assignment   =               right
    conditional  ?:              right (else branch)
    equality     == !=           left
    comparison   < <= > >=       left
    term         + -             left
    factor       * /             left
    unary        ! -             right
    primary

Errors are reported to the diagnostics collector as they happen. The parser
then discards tokens up to the next statement boundary and carries on, so one
run reports every syntax error it can find. A declaration that failed shows up
as None in the result.
"""

import logging
from typing import Callable, List, Optional

from .tokens import Token, TokenType, STATEMENT_KEYWORDS
from .ast import (
    # Expressions
    Expression, Literal, Grouping, Unary, Binary, Conditional, Variable, Assign,
    # Statements
    Statement, ExpressionStmt, PrintStmt, VarStmt, BlockStmt,
)
from .errors import (
    DiagnosticCollector,
    ParserError,
    error_expected,
    error_missing_left_operand,
    error_nesting_too_deep,
)

logger = logging.getLogger(__name__)


class Parser:
    """
    Recursive descent parser.

    Usage:
        parser = Parser(tokens)
        statements = parser.parse()
        if parser.diagnostics.has_errors:
            ...
    """

    EQUALITY_OPERATORS = (TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)
    COMPARISON_OPERATORS = (TokenType.GREATER, TokenType.GREATER_EQUAL,
                            TokenType.LESS, TokenType.LESS_EQUAL)
    TERM_OPERATORS = (TokenType.MINUS, TokenType.PLUS)
    FACTOR_OPERATORS = (TokenType.SLASH, TokenType.STAR)

    def __init__(self, tokens: List[Token], diagnostics: Optional[DiagnosticCollector] = None):
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("Token list must end with an EOF token")
        self.tokens = tokens
        self.pos = 0
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()

    # =========================================================================
    # Token Navigation
    # =========================================================================

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _peek(self, offset: int = 0) -> Token:
        """Peek at token at current position + offset."""
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[idx]

    def _previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def _is_at_end(self) -> bool:
        return self._current().type == TokenType.EOF

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        return self._current().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._current()
        if not self._is_at_end():
            self.pos += 1
        return token

    def _match(self, *token_types: TokenType) -> Optional[Token]:
        """Consume token if it matches any of the given types."""
        if self._current().type in token_types:
            return self._advance()
        return None

    def _consume(self, token_type: TokenType, message: str) -> Token:
        """Consume token of expected type, or report and raise."""
        if self._check(token_type):
            return self._advance()
        raise self._error(self._current(), message)

    def _error(self, token: Token, message: str) -> ParserError:
        """Report an error at a token and return it for raising."""
        error = error_expected(token, message)
        self.diagnostics.add_error(error)
        return error

    def _synchronize(self) -> None:
        """Discard tokens until a likely statement boundary."""
        self._advance()
        while not self._is_at_end():
            if self._previous().type == TokenType.SEMICOLON:
                return
            if self._current().type in STATEMENT_KEYWORDS:
                return
            self._advance()

    # =========================================================================
    # Statement Parsing
    # =========================================================================

    def _declaration(self) -> Optional[Statement]:
        try:
            if self._match(TokenType.VAR):
                return self._var_declaration()
            return self._statement()
        except ParserError:
            self._synchronize()
            return None
        except RecursionError:
            self.diagnostics.add_error(error_nesting_too_deep(self._current()))
            self._synchronize()
            return None

    def _var_declaration(self) -> VarStmt:
        name = self._consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self._match(TokenType.EQUAL):
            initializer = self._expression()

        self._consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return VarStmt(name, initializer)

    def _statement(self) -> Statement:
        if self._match(TokenType.PRINT):
            return self._print_statement()
        if self._match(TokenType.LEFT_BRACE):
            return BlockStmt(tuple(self._block()))
        return self._expression_statement()

    def _print_statement(self) -> PrintStmt:
        value = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return PrintStmt(value)

    def _expression_statement(self) -> ExpressionStmt:
        expr = self._expression()
        self._consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return ExpressionStmt(expr)

    def _block(self) -> List[Optional[Statement]]:
        """Parse declarations up to the closing brace."""
        statements = []
        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            statements.append(self._declaration())

        self._consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    # =========================================================================
    # Expression Parsing
    # =========================================================================

    def _expression(self) -> Optional[Expression]:
        return self._sequence()

    def _sequence(self) -> Optional[Expression]:
        return self._binary(self._assignment, TokenType.COMMA)

    def _assignment(self) -> Optional[Expression]:
        """Assignment when an identifier is directly followed by '='."""
        if self._check(TokenType.IDENTIFIER) and self._peek(1).type == TokenType.EQUAL:
            name = self._advance()
            self._advance()  # consume '='
            return Assign(name, self._assignment())
        return self._conditional()

    def _conditional(self) -> Optional[Expression]:
        expr = self._equality()

        if self._match(TokenType.QUESTION):
            then_branch = self._expression()
            self._consume(TokenType.COLON,
                          "Expect ':' after then branch of conditional expression.")
            else_branch = self._conditional()
            expr = Conditional(expr, then_branch, else_branch)

        return expr

    def _equality(self) -> Optional[Expression]:
        return self._binary(self._comparison, *self.EQUALITY_OPERATORS)

    def _comparison(self) -> Optional[Expression]:
        return self._binary(self._term, *self.COMPARISON_OPERATORS)

    def _term(self) -> Optional[Expression]:
        return self._binary(self._factor, *self.TERM_OPERATORS)

    def _factor(self) -> Optional[Expression]:
        return self._binary(self._unary, *self.FACTOR_OPERATORS)

    def _binary(self, operand: Callable[[], Optional[Expression]],
                *operators: TokenType) -> Optional[Expression]:
        """Parse one left-associative binary level."""
        expr = operand()

        while self._match(*operators):
            operator = self._previous()
            right = operand()
            expr = Binary(expr, operator, right)

        return expr

    def _unary(self) -> Optional[Expression]:
        if self._match(TokenType.BANG, TokenType.MINUS):
            operator = self._previous()
            return Unary(operator, self._unary())
        return self._primary()

    def _primary(self) -> Optional[Expression]:
        if self._match(TokenType.FALSE):
            return Literal(False)
        if self._match(TokenType.TRUE):
            return Literal(True)
        if self._match(TokenType.NIL):
            return Literal(None)

        if self._match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self._previous().literal)

        if self._match(TokenType.IDENTIFIER):
            return Variable(self._previous())

        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        # Error productions: a binary operator with no left operand
        if self._match(*self.EQUALITY_OPERATORS):
            return self._missing_left_operand("equality", self._equality)
        if self._match(*self.COMPARISON_OPERATORS):
            return self._missing_left_operand("comparison", self._comparison)
        if self._match(TokenType.PLUS):
            return self._missing_left_operand("term", self._term)
        if self._match(*self.FACTOR_OPERATORS):
            return self._missing_left_operand("factor", self._factor)

        raise self._error(self._current(), "Expect expression.")

    def _missing_left_operand(self, level: str,
                              operand: Callable[[], Optional[Expression]]) -> None:
        """Report the operator, then parse and discard its right operand."""
        self.diagnostics.add_error(error_missing_left_operand(self._previous(), level))
        operand()
        return None

    # =========================================================================
    # Entry Point
    # =========================================================================

    def parse(self) -> List[Optional[Statement]]:
        """Parse declarations until EOF."""
        statements = []
        while not self._is_at_end():
            statements.append(self._declaration())
            if self.diagnostics.should_stop:
                logger.debug("stopping after %d errors", self.diagnostics.error_count)
                break
        return statements


def parse(tokens: List[Token],
          diagnostics: Optional[DiagnosticCollector] = None) -> List[Optional[Statement]]:
    """
    Convenience function to parse tokens into statements.

    Args:
        tokens: List of tokens from the scanner, ending with EOF
        diagnostics: Collector that receives parse errors

    Returns:
        Statements in source order; a declaration that failed to parse is None.
        Check ``diagnostics.has_errors`` before running the result.
    """
    return Parser(tokens, diagnostics).parse()
