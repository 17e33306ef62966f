"""
Unit tests for the treelox token model.
"""

import dataclasses

import pytest
from treelox import Token, TokenType, KEYWORDS
from treelox.tokens import keyword_type


class TestToken:
    """Test Token construction and rendering."""

    def test_str_includes_type_lexeme_and_literal(self):
        """String form is TYPE lexeme literal."""
        token = Token(TokenType.NUMBER, "12.5", 12.5, 3)
        assert str(token) == "NUMBER 12.5 12.5"

    def test_str_without_literal(self):
        """Absent literal renders as None."""
        assert str(Token(TokenType.PLUS, "+", None, 1)) == "PLUS + None"

    def test_eof_has_empty_lexeme(self):
        """The end marker may have an empty lexeme."""
        token = Token(TokenType.EOF, "", None, 7)
        assert token.lexeme == ""
        assert token.line == 7

    def test_none_lexeme_rejected(self):
        """A missing lexeme is a construction error."""
        with pytest.raises(ValueError):
            Token(TokenType.IDENTIFIER, None, None, 1)

    def test_negative_line_rejected(self):
        """Line numbers cannot be negative."""
        with pytest.raises(ValueError):
            Token(TokenType.IDENTIFIER, "x", None, -1)

    def test_line_zero_allowed(self):
        """Zero is a valid (non-negative) line."""
        assert Token(TokenType.IDENTIFIER, "x", None, 0).line == 0

    def test_tokens_are_immutable(self):
        """Tokens cannot be modified after creation."""
        token = Token(TokenType.IDENTIFIER, "x", None, 1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            token.lexeme = "y"

    def test_equality_by_value(self):
        """Tokens with the same fields compare equal."""
        assert Token(TokenType.STRING, '"a"', "a", 2) == Token(TokenType.STRING, '"a"', "a", 2)


class TestKeywords:
    """Test the reserved word table."""

    @pytest.mark.parametrize("word", [
        "and", "class", "else", "false", "for", "fun", "if", "nil",
        "or", "print", "return", "super", "this", "true", "var", "while",
    ])
    def test_reserved_word(self, word):
        """Every reserved word maps to its own token type."""
        assert keyword_type(word) is TokenType[word.upper()]

    def test_identifier_is_not_keyword(self):
        """Non-reserved words are not keywords."""
        assert keyword_type("orchid") is None

    def test_keywords_are_case_sensitive(self):
        """Reserved words are lowercase only."""
        assert keyword_type("Print") is None

    def test_keyword_count(self):
        """The table holds sixteen reserved words."""
        assert len(KEYWORDS) == 16
