"""
Tree printers for debugging the parser.

Three renderings of an expression tree:

    LispPrinter            (* (- 123.0) (group 45.67))
    ReversePolishPrinter   123.0 - 45.67 *
    DirectoryPrinter       *
                           ├ -
                           │ └ 123.0
                           └ ()
                             └ 45.67

Only the Lisp printer understands statements.
"""

from typing import Iterator, List, Optional, Tuple

from .ast import (
    Expression, Literal, Grouping, Unary, Binary, Conditional, Variable, Assign,
    Statement, ExpressionStmt, PrintStmt, VarStmt, BlockStmt,
)
from .runtime.values import format_number


def literal_text(value) -> str:
    """Render a literal value the way the printers show it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    return str(value)


class AstPrinter:
    """Base class for expression printers."""

    def print(self, expr: Expression) -> str:
        raise NotImplementedError


class LispPrinter(AstPrinter):
    """Fully parenthesized prefix form."""

    def print(self, expr: Expression) -> str:
        match expr:
            case Literal(value):
                return literal_text(value)
            case Grouping(inner):
                return self._parenthesize("group", inner)
            case Unary(operator, right):
                return self._parenthesize(operator.lexeme, right)
            case Binary(left, operator, right):
                return self._parenthesize(operator.lexeme, left, right)
            case Conditional(condition, then_branch, else_branch):
                return self._parenthesize("?:", condition, then_branch, else_branch)
            case Variable(name):
                return name.lexeme
            case Assign(name, value):
                return f"(= {name.lexeme} {self.print(value)})"
            case _:
                raise TypeError(f"Cannot print {expr!r}")

    def print_statement(self, stmt: Statement) -> str:
        match stmt:
            case ExpressionStmt(expression):
                return self._parenthesize(";", expression)
            case PrintStmt(expression):
                return self._parenthesize("print", expression)
            case VarStmt(name, None):
                return f"(var {name.lexeme})"
            case VarStmt(name, initializer):
                return f"(var {name.lexeme} {self.print(initializer)})"
            case BlockStmt(statements):
                parts = ["(block"]
                parts.extend(" " + self.print_statement(s) for s in statements)
                return "".join(parts) + ")"
            case _:
                raise TypeError(f"Cannot print {stmt!r}")

    def _parenthesize(self, name: str, *exprs: Expression) -> str:
        parts = [name] + [self.print(e) for e in exprs]
        return "(" + " ".join(parts) + ")"


class ReversePolishPrinter(AstPrinter):
    """Postfix form; grouping disappears."""

    def print(self, expr: Expression) -> str:
        match expr:
            case Literal(value):
                return literal_text(value)
            case Grouping(inner):
                return self.print(inner)
            case Unary(operator, right):
                return self._postfix(operator.lexeme, right)
            case Binary(left, operator, right):
                return self._postfix(operator.lexeme, left, right)
            case Conditional(condition, then_branch, else_branch):
                return self._postfix("?:", condition, then_branch, else_branch)
            case Variable(name):
                return name.lexeme
            case Assign(name, value):
                return f"{self.print(value)} {name.lexeme} ="
            case _:
                raise TypeError(f"Cannot print {expr!r}")

    def _postfix(self, name: str, *exprs: Expression) -> str:
        return " ".join([self.print(e) for e in exprs] + [name])


class DirectoryPrinter(AstPrinter):
    """One node per line, drawn like a directory listing."""

    BRANCH = "├ "
    LAST = "└ "
    PIPE = "│ "
    SPACE = "  "

    def print(self, expr: Expression) -> str:
        return "".join(line + "\n" for line in self._lines(expr))

    def _node(self, expr: Expression) -> Tuple[str, List[Expression]]:
        """Label and children of a node."""
        match expr:
            case Literal(value):
                return literal_text(value), []
            case Grouping(inner):
                return "()", [inner]
            case Unary(operator, right):
                return operator.lexeme, [right]
            case Binary(left, operator, right):
                return operator.lexeme, [left, right]
            case Conditional(condition, then_branch, else_branch):
                return "?:", [condition, then_branch, else_branch]
            case Variable(name):
                return name.lexeme, []
            case Assign(name, value):
                return "=", [Variable(name), value]
            case _:
                raise TypeError(f"Cannot print {expr!r}")

    def _lines(self, expr: Expression) -> Iterator[str]:
        label, children = self._node(expr)
        yield label
        for i, child in enumerate(children):
            last = i == len(children) - 1
            head, tail = (self.LAST, self.SPACE) if last else (self.BRANCH, self.PIPE)
            for j, line in enumerate(self._lines(child)):
                yield (head if j == 0 else tail) + line


PRINTERS = {
    "lisp": LispPrinter,
    "rpn": ReversePolishPrinter,
    "tree": DirectoryPrinter,
}


def print_ast(expr: Expression, style: str = "lisp") -> str:
    """Render an expression with the named printer."""
    try:
        printer = PRINTERS[style]()
    except KeyError:
        raise ValueError(f"Unknown printer style: {style!r}") from None
    return printer.print(expr)


def statement_expression(stmt: Optional[Statement]) -> Optional[Expression]:
    """The expression a statement carries, if it has exactly one."""
    match stmt:
        case ExpressionStmt(expression) | PrintStmt(expression):
            return expression
        case VarStmt(_, initializer):
            return initializer
        case _:
            return None
