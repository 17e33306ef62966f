"""
Variable scopes for the interpreter.

Environments form a chain through ``enclosing`` for lexical scoping. The
global environment has no parent; each block gets a child for the length of
its execution.
"""

from typing import Any, Dict, Optional

from ..tokens import Token
from ..errors import error_undefined_variable


class Environment:
    """A single scope of variable bindings."""

    def __init__(self, enclosing: Optional["Environment"] = None):
        self.values: Dict[str, Any] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Any) -> None:
        """Bind a name in this scope, replacing any existing binding here."""
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """
        Look up a variable in this scope or enclosing scopes.

        Raises:
            LoxRuntimeError: If no scope in the chain defines the name
        """
        if name.lexeme in self.values:
            return self.values[name.lexeme]
        if self.enclosing is not None:
            return self.enclosing.get(name)
        raise error_undefined_variable(name)

    def assign(self, name: Token, value: Any) -> None:
        """
        Update an existing variable in the nearest scope that defines it.

        Never creates a binding.

        Raises:
            LoxRuntimeError: If no scope in the chain defines the name
        """
        if name.lexeme in self.values:
            self.values[name.lexeme] = value
            return
        if self.enclosing is not None:
            self.enclosing.assign(name, value)
            return
        raise error_undefined_variable(name)

    def contains(self, name: str) -> bool:
        """Check if a variable exists in this scope or parents."""
        if name in self.values:
            return True
        return self.enclosing is not None and self.enclosing.contains(name)

    def __repr__(self) -> str:
        depth = 0
        env = self.enclosing
        while env is not None:
            depth += 1
            env = env.enclosing
        return f"Environment(depth={depth}, names={sorted(self.values)})"
