"""Test-expression AST."""

from .types import (
    BinaryOperator,
    BinaryTest,
    ParenTest,
    TestExpr,
    UnaryOperator,
    UnaryTest,
    WordLeaf,
)

__all__ = [
    "BinaryOperator",
    "BinaryTest",
    "ParenTest",
    "TestExpr",
    "UnaryOperator",
    "UnaryTest",
    "WordLeaf",
]
