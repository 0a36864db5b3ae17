"""Interpreter module for just-cond."""

from .arith import parse_shell_int
from .conditionals import FALSE, TRUE, binary_test, evaluate_conditional, unary_test
from .errors import FatalError, InterpreterError
from .types import (
    InterpreterContext,
    InterpreterState,
    ShellOptions,
    VariableMetadata,
    VariableStore,
)

__all__ = [
    "FALSE",
    "TRUE",
    "FatalError",
    "InterpreterContext",
    "InterpreterError",
    "InterpreterState",
    "ShellOptions",
    "VariableMetadata",
    "VariableStore",
    "binary_test",
    "evaluate_conditional",
    "parse_shell_int",
    "unary_test",
]
