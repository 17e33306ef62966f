"""
Scanner for treelox.

Converts source text into a flat list of tokens for the parser.
Supports:
- Single and double character operators (maximal munch)
- Identifiers and reserved words
- Number literals (digits with an optional fractional part)
- String literals, which may span lines
- Line comments (//) and block comments (/* */, not nested)

Bad input never stops the scan: each unexpected character or unterminated
string is reported to the diagnostics collector and scanning carries on.
"""

import logging
from typing import Iterator, List, Optional

from .tokens import Token, TokenType, keyword_type
from .errors import (
    DiagnosticCollector,
    error_unexpected_character,
    error_unterminated_string,
)

logger = logging.getLogger(__name__)


# Single-character tokens that never start a longer token
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    '(': TokenType.LEFT_PAREN,
    ')': TokenType.RIGHT_PAREN,
    '{': TokenType.LEFT_BRACE,
    '}': TokenType.RIGHT_BRACE,
    ',': TokenType.COMMA,
    '.': TokenType.DOT,
    '-': TokenType.MINUS,
    '+': TokenType.PLUS,
    ';': TokenType.SEMICOLON,
    '*': TokenType.STAR,
    '?': TokenType.QUESTION,
    ':': TokenType.COLON,
}

# Operators that may be followed by '=' - (alone, with '=')
EQUALS_PAIRS: dict[str, tuple[TokenType, TokenType]] = {
    '!': (TokenType.BANG, TokenType.BANG_EQUAL),
    '=': (TokenType.EQUAL, TokenType.EQUAL_EQUAL),
    '<': (TokenType.LESS, TokenType.LESS_EQUAL),
    '>': (TokenType.GREATER, TokenType.GREATER_EQUAL),
}

ESCAPE_CHARS: dict[str, str] = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '\\': '\\',
    '"': '"',
}


def _is_alpha(ch: str) -> bool:
    return ('a' <= ch <= 'z') or ('A' <= ch <= 'Z') or ch == '_'


def _is_digit(ch: str) -> bool:
    return '0' <= ch <= '9'


class Lexer:
    """
    Single-pass scanner.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.scan_tokens()

    Or for streaming:
        for token in Lexer(source_code):
            process(token)
    """

    def __init__(self, source: str, diagnostics: Optional[DiagnosticCollector] = None):
        if source is None:
            raise ValueError("Source text must be defined.")
        self.source = source
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticCollector()
        self.start = 0          # Start of the lexeme being scanned
        self.pos = 0            # Current position in source
        self.line = 1           # Current line (1-indexed)

    def _peek(self, offset: int = 0) -> str:
        """Look at character at current position + offset without consuming."""
        idx = self.pos + offset
        if idx >= len(self.source):
            return '\0'
        return self.source[idx]

    def _advance(self) -> str:
        """Consume and return current character."""
        ch = self.source[self.pos]
        self.pos += 1
        if ch == '\n':
            self.line += 1
        return ch

    def _match(self, expected: str) -> bool:
        """Consume character if it matches expected."""
        if self._is_at_end() or self.source[self.pos] != expected:
            return False
        self._advance()
        return True

    def _is_at_end(self) -> bool:
        return self.pos >= len(self.source)

    def _make_token(self, token_type: TokenType, literal=None) -> Token:
        lexeme = self.source[self.start:self.pos]
        return Token(token_type, lexeme, literal, self.line)

    def _skip_line_comment(self) -> None:
        while self._peek() != '\n' and not self._is_at_end():
            self._advance()

    def _skip_block_comment(self) -> None:
        """Skip to the first '*/'; an inner '/*' does not nest."""
        while not self._is_at_end():
            if self._peek() == '*' and self._peek(1) == '/':
                self._advance()
                self._advance()
                return
            self._advance()

    def _scan_string(self) -> Optional[Token]:
        """Scan a string literal; the opening quote is already consumed."""
        start_line = self.line
        chars = []
        while not self._is_at_end() and self._peek() != '"':
            ch = self._advance()
            if ch == '\\' and not self._is_at_end():
                escaped = self._advance()
                chars.append(ESCAPE_CHARS.get(escaped, '\\' + escaped))
            else:
                chars.append(ch)

        if self._is_at_end():
            self.diagnostics.add_error(error_unterminated_string(self.line))
            logger.debug("unterminated string starting on line %d", start_line)
            return None

        self._advance()  # closing quote
        return self._make_token(TokenType.STRING, ''.join(chars))

    def _scan_number(self) -> Token:
        """Scan a number; a '.' is only consumed when digits follow it."""
        while _is_digit(self._peek()):
            self._advance()

        if self._peek() == '.' and _is_digit(self._peek(1)):
            self._advance()  # consume '.'
            while _is_digit(self._peek()):
                self._advance()

        return self._make_token(TokenType.NUMBER, float(self.source[self.start:self.pos]))

    def _scan_identifier(self) -> Token:
        while _is_alpha(self._peek()) or _is_digit(self._peek()):
            self._advance()

        text = self.source[self.start:self.pos]
        return self._make_token(keyword_type(text) or TokenType.IDENTIFIER)

    def _scan_token(self) -> Optional[Token]:
        """Scan one lexeme; returns None for whitespace, comments and errors."""
        ch = self._advance()

        if ch in SINGLE_CHAR_TOKENS:
            return self._make_token(SINGLE_CHAR_TOKENS[ch])

        if ch in EQUALS_PAIRS:
            alone, with_equals = EQUALS_PAIRS[ch]
            return self._make_token(with_equals if self._match('=') else alone)

        if ch == '/':
            if self._match('/'):
                self._skip_line_comment()
                return None
            if self._match('*'):
                self._skip_block_comment()
                return None
            return self._make_token(TokenType.SLASH)

        if ch in ' \r\t\n':
            return None

        if ch == '"':
            return self._scan_string()

        if _is_digit(ch):
            return self._scan_number()

        if _is_alpha(ch):
            return self._scan_identifier()

        self.diagnostics.add_error(error_unexpected_character(ch, self.line))
        return None

    def __iter__(self) -> Iterator[Token]:
        """Iterate over tokens, ending with EOF."""
        while not self._is_at_end():
            self.start = self.pos
            token = self._scan_token()
            if token is not None:
                yield token
        yield Token(TokenType.EOF, "", None, self.line)

    def scan_tokens(self) -> List[Token]:
        """Scan the entire source, returning a list of tokens."""
        tokens = list(self)
        logger.debug("scanned %d tokens over %d line(s)", len(tokens), self.line)
        return tokens


def scan(source: str, diagnostics: Optional[DiagnosticCollector] = None) -> List[Token]:
    """
    Convenience function to scan source code.

    Args:
        source: The source code to scan
        diagnostics: Collector that receives scan errors

    Returns:
        List of tokens, always ending with a single EOF token
    """
    return Lexer(source, diagnostics).scan_tokens()
