"""
Abstract Syntax Tree (AST) node definitions for treelox.

Expressions and statements are closed sets of frozen dataclasses. Nodes are
built once by the parser, never mutated, and consumed by structural pattern
matching in the interpreter and the printers.
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .tokens import Token


# =============================================================================
# Base Classes
# =============================================================================

@dataclass(frozen=True)
class Expression:
    """Base class for all expressions."""
    pass


@dataclass(frozen=True)
class Statement:
    """Base class for all statements."""
    pass


# =============================================================================
# Expression Nodes
# =============================================================================

@dataclass(frozen=True)
class Literal(Expression):
    """A literal value: None (nil), bool, float or str."""
    value: Any


@dataclass(frozen=True)
class Grouping(Expression):
    """A parenthesized expression."""
    expression: Optional[Expression]


@dataclass(frozen=True)
class Unary(Expression):
    """A prefix operation (e.g., -n, !x)."""
    operator: Token
    right: Optional[Expression]


@dataclass(frozen=True)
class Binary(Expression):
    """A binary operation, including the ',' sequence operator."""
    left: Optional[Expression]
    operator: Token
    right: Optional[Expression]


@dataclass(frozen=True)
class Conditional(Expression):
    """A ternary conditional (cond ? a : b)."""
    condition: Optional[Expression]
    then_branch: Optional[Expression]
    else_branch: Optional[Expression]


@dataclass(frozen=True)
class Variable(Expression):
    """A variable reference."""
    name: Token


@dataclass(frozen=True)
class Assign(Expression):
    """An assignment to an existing variable; yields the assigned value."""
    name: Token
    value: Optional[Expression]


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass(frozen=True)
class ExpressionStmt(Statement):
    """An expression evaluated for its side effects."""
    expression: Optional[Expression]


@dataclass(frozen=True)
class PrintStmt(Statement):
    """Write the stringified value of an expression."""
    expression: Optional[Expression]


@dataclass(frozen=True)
class VarStmt(Statement):
    """Declare a variable in the current scope."""
    name: Token
    initializer: Optional[Expression] = None


@dataclass(frozen=True)
class BlockStmt(Statement):
    """A braced block with its own scope."""
    statements: Tuple[Optional[Statement], ...] = ()
