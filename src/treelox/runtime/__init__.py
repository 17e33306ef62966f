"""
treelox runtime - tree-walking evaluation.

This module provides:
- Interpreter: Executes parsed statements
- Environment: Chained variable scopes
- Value helpers: truthiness, equality and stringification
"""

from .values import format_number, is_equal, is_number, is_truthy, stringify
from .environment import Environment
from .interpreter import ExecutionResult, Interpreter, interpret

__all__ = [
    "Environment",
    "ExecutionResult",
    "Interpreter",
    "format_number",
    "interpret",
    "is_equal",
    "is_number",
    "is_truthy",
    "stringify",
]
