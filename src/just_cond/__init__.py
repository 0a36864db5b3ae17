"""just-cond: test / [ / [[ conditional evaluation for a sandboxed shell."""

from .ast import (
    BinaryOperator,
    BinaryTest,
    ParenTest,
    TestExpr,
    UnaryOperator,
    UnaryTest,
    WordLeaf,
)
from .cond import Conditional
from .fs import FileMode, InMemoryFs, OsFs
from .interpreter import FALSE, TRUE, FatalError, InterpreterContext, InterpreterState
from .types import ExecResult, FsStat, IFileSystem

__version__ = "0.1.0"

__all__ = [
    "BinaryOperator",
    "BinaryTest",
    "Conditional",
    "ExecResult",
    "FALSE",
    "FatalError",
    "FileMode",
    "FsStat",
    "IFileSystem",
    "InMemoryFs",
    "InterpreterContext",
    "InterpreterState",
    "OsFs",
    "ParenTest",
    "TRUE",
    "TestExpr",
    "UnaryOperator",
    "UnaryTest",
    "WordLeaf",
]
