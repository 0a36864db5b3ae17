"""Conditional builtins."""

from .test import (
    handle_bracket,
    handle_conditional,
    handle_test,
    parse_conditional,
    parse_test_args,
)

BUILTINS = {
    "test": handle_test,
    "[": handle_bracket,
    "[[": handle_conditional,
}

__all__ = [
    "BUILTINS",
    "handle_bracket",
    "handle_conditional",
    "handle_test",
    "parse_conditional",
    "parse_test_args",
]
