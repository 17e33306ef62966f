"""
Unit tests for treelox diagnostics.
"""

import pytest
from treelox import (
    Diagnostic, DiagnosticCollector, ErrorPhase, ErrorSeverity,
    LoxRuntimeError, ParserError, Token, TokenType,
)
from treelox.errors import (
    error_expected,
    error_division_by_zero,
    error_unexpected_character,
    token_location,
)


def token(lexeme, token_type=TokenType.IDENTIFIER, line=1):
    return Token(token_type, lexeme, None, line)


class TestDiagnostic:
    """Test diagnostic formatting."""

    def test_classic_with_location(self):
        """Parse errors name the location."""
        diag = error_expected(token("x", line=3), "Expect ';' after value.").diagnostic
        assert diag.format_classic() == "[line 3] Error at 'x': Expect ';' after value."

    def test_classic_without_location(self):
        """Scan errors have no location."""
        diag = error_unexpected_character("@", 2).diagnostic
        assert diag.format_classic() == "[line 2] Error: Unexpected character."

    def test_classic_runtime(self):
        """Runtime errors print the message then the line."""
        error = error_division_by_zero(token("/", TokenType.SLASH, line=5))
        assert error.diagnostic.format_classic() == "Division by zero.\n[line 5]"
        assert str(error) == "Division by zero.\n[line 5]"

    def test_detailed_format(self):
        """The detailed format shows code, source line and hints."""
        diag = Diagnostic(
            code="E001",
            message="Unexpected character.",
            line=1,
            phase=ErrorPhase.SCAN,
            source_line="var @;",
            hints=["remove it"],
        )
        text = diag.format()
        assert "error[E001]: Unexpected character." in text
        assert "  1 | var @;" in text
        assert "= hint: remove it" in text
        assert "var @;" not in diag.format(show_source=False)

    def test_to_json(self):
        """JSON form carries the key fields."""
        diag = error_expected(token("x"), "Expect expression.").diagnostic
        data = diag.to_json()
        assert data["code"] == "E101"
        assert data["phase"] == "parse"
        assert data["severity"] == "error"
        assert data["where"] == "at 'x'"

    def test_location_at_end(self):
        """EOF is described as 'at end'."""
        assert token_location(Token(TokenType.EOF, "", None, 1)) == "at end"
        assert token_location(token("+", TokenType.PLUS)) == "at '+'"


class TestDiagnosticCollector:
    """Test collecting and querying diagnostics."""

    def test_empty(self):
        """A new collector has no errors."""
        diagnostics = DiagnosticCollector()
        assert not diagnostics.has_errors
        assert not diagnostics.has_runtime_errors
        assert diagnostics.error_count == 0

    def test_report(self):
        """report records a located error."""
        diagnostics = DiagnosticCollector()
        diagnostics.report(4, "at 'x'", "Bad thing.")
        assert diagnostics.has_errors
        assert diagnostics.diagnostics[0].format_classic() == "[line 4] Error at 'x': Bad thing."

    def test_report_defaults(self):
        """report files a generic parse error unless told otherwise."""
        diagnostics = DiagnosticCollector()
        diagnostics.report(1, "", "Bad thing.")
        assert diagnostics.diagnostics[0].code == "E100"
        assert diagnostics.diagnostics[0].phase == ErrorPhase.PARSE

    def test_report_scan_error(self):
        """report accepts a code and phase for scan errors."""
        diagnostics = DiagnosticCollector()
        diagnostics.report(2, "", "Unexpected character.", code="E001", phase=ErrorPhase.SCAN)
        diag = diagnostics.diagnostics[0]
        assert diag.code == "E001"
        assert diag.phase == ErrorPhase.SCAN
        assert diag.format_classic() == "[line 2] Error: Unexpected character."
        assert diagnostics.has_errors

    def test_report_runtime(self):
        """Runtime errors are tracked separately from syntax errors."""
        diagnostics = DiagnosticCollector()
        diagnostics.report_runtime(LoxRuntimeError(token("x"), "Oops."))
        assert diagnostics.has_runtime_errors
        assert not diagnostics.has_errors
        assert diagnostics.error_count == 1

    def test_warnings_do_not_count(self):
        """Warnings are collected but are not errors."""
        diagnostics = DiagnosticCollector()
        diagnostics.add(Diagnostic(code="W001", message="hm", line=1,
                                   phase=ErrorPhase.PARSE,
                                   severity=ErrorSeverity.WARNING))
        assert len(diagnostics.diagnostics) == 1
        assert not diagnostics.has_errors
        assert diagnostics.error_count == 0

    def test_sink_receives_each_diagnostic(self):
        """The sink sees diagnostics as they arrive."""
        seen = []
        diagnostics = DiagnosticCollector(sink=seen.append)
        diagnostics.report(1, "", "one")
        diagnostics.report(2, "", "two")
        assert [d.message for d in seen] == ["one", "two"]

    def test_source_line_attached(self):
        """Source text is used to fill in the offending line."""
        diagnostics = DiagnosticCollector(source="first\nsecond")
        diagnostics.report(2, "", "msg")
        assert diagnostics.diagnostics[0].source_line == "second"

    def test_source_line_out_of_range(self):
        """Lines past the source get no excerpt."""
        diagnostics = DiagnosticCollector(source="only")
        diagnostics.report(9, "", "msg")
        assert diagnostics.diagnostics[0].source_line is None

    def test_should_stop(self):
        """should_stop trips at max_errors."""
        diagnostics = DiagnosticCollector(max_errors=2)
        diagnostics.report(1, "", "a")
        assert not diagnostics.should_stop
        diagnostics.report(1, "", "b")
        assert diagnostics.should_stop

    def test_clear(self):
        """clear forgets everything."""
        diagnostics = DiagnosticCollector()
        diagnostics.report(1, "", "a")
        diagnostics.clear()
        assert not diagnostics.has_errors
        assert diagnostics.error_count == 0

    def test_format_all(self):
        """format_all joins diagnostics and adds a count."""
        diagnostics = DiagnosticCollector()
        diagnostics.report(1, "", "a")
        diagnostics.report(2, "", "b")
        text = diagnostics.format_all(show_source=False)
        assert "a" in text and "b" in text
        assert text.endswith("2 error(s)")

    def test_to_json(self):
        """JSON form lists every diagnostic."""
        diagnostics = DiagnosticCollector()
        diagnostics.add_error(error_expected(token("x"), "Expect expression."))
        data = diagnostics.to_json()
        assert data["error_count"] == 1
        assert data["diagnostics"][0]["message"] == "Expect expression."

    def test_parser_error_is_lox_error(self):
        """Error classes carry their diagnostic."""
        error = error_expected(token("x"), "Expect expression.")
        assert isinstance(error, ParserError)
        with pytest.raises(ParserError):
            raise error
