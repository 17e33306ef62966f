"""
Token types for the treelox scanner.

Tokens are created once by the scanner and never change. Keywords reserved for
future statements (class, fun, for, ...) are scanned as keywords even though
the grammar does not use them yet; the parser resynchronizes on them.
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenType(Enum):
    """All token types recognized by the scanner."""

    # --- Single-character tokens ---
    LEFT_PAREN = auto()         # (
    RIGHT_PAREN = auto()        # )
    LEFT_BRACE = auto()         # {
    RIGHT_BRACE = auto()        # }
    COMMA = auto()              # , (also the sequence operator)
    DOT = auto()                # .
    MINUS = auto()              # -
    PLUS = auto()               # +
    SEMICOLON = auto()          # ;
    SLASH = auto()              # /
    STAR = auto()               # *
    QUESTION = auto()           # ? (conditional)
    COLON = auto()              # : (conditional)

    # --- One or two character tokens ---
    BANG = auto()               # !
    BANG_EQUAL = auto()         # !=
    EQUAL = auto()              # =
    EQUAL_EQUAL = auto()        # ==
    GREATER = auto()            # >
    GREATER_EQUAL = auto()      # >=
    LESS = auto()               # <
    LESS_EQUAL = auto()         # <=

    # --- Literals ---
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # --- Keywords ---
    AND = auto()
    CLASS = auto()
    ELSE = auto()
    FALSE = auto()
    FUN = auto()
    FOR = auto()
    IF = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    # --- Special ---
    EOF = auto()                # end of input


@dataclass(frozen=True)
class Token:
    """A single token from the scanner."""
    type: TokenType
    lexeme: str             # The original source text
    literal: Any = None     # float for NUMBER, str for STRING, otherwise None
    line: int = 1

    def __post_init__(self) -> None:
        if self.lexeme is None:
            raise ValueError("Lexeme must not be None")
        if self.line < 0:
            raise ValueError("Line number must not be negative")

    def __str__(self) -> str:
        return f"{self.type.name} {self.lexeme} {self.literal}"


# Reserved words - maps lexeme to token type
KEYWORDS: dict[str, TokenType] = {
    "and": TokenType.AND,
    "class": TokenType.CLASS,
    "else": TokenType.ELSE,
    "false": TokenType.FALSE,
    "for": TokenType.FOR,
    "fun": TokenType.FUN,
    "if": TokenType.IF,
    "nil": TokenType.NIL,
    "or": TokenType.OR,
    "print": TokenType.PRINT,
    "return": TokenType.RETURN,
    "super": TokenType.SUPER,
    "this": TokenType.THIS,
    "true": TokenType.TRUE,
    "var": TokenType.VAR,
    "while": TokenType.WHILE,
}


# Tokens that begin a statement; the parser resynchronizes on these
STATEMENT_KEYWORDS: frozenset[TokenType] = frozenset({
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
})


def keyword_type(lexeme: str) -> Optional[TokenType]:
    """Return the keyword token type for a lexeme, or None for identifiers."""
    return KEYWORDS.get(lexeme)
