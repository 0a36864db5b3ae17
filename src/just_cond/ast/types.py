"""AST node types for test expressions.

The same tree serves ``[[ ... ]]`` and the ``test`` / ``[`` argument form.
Nodes are frozen; evaluation never mutates them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class BinaryOperator(Enum):
    """Binary test operators, valued by their ``[[`` spelling."""

    REGEX_MATCH = "=~"
    GLOB_MATCH = "=="
    GLOB_NO_MATCH = "!="
    NEWER = "-nt"
    OLDER = "-ot"
    SAME_FILE = "-ef"
    NUM_EQ = "-eq"
    NUM_NE = "-ne"
    NUM_LE = "-le"
    NUM_GE = "-ge"
    NUM_LT = "-lt"
    NUM_GT = "-gt"
    LOGICAL_AND = "&&"
    LOGICAL_OR = "||"
    LEX_BEFORE = "<"
    LEX_AFTER = ">"


class UnaryOperator(Enum):
    """Unary test operators, valued by their spelling."""

    # existence and file type
    EXISTS = "-e"
    REGULAR_FILE = "-f"
    DIRECTORY = "-d"
    CHAR_DEVICE = "-c"
    BLOCK_DEVICE = "-b"
    NAMED_PIPE = "-p"
    SOCKET = "-S"
    SYMLINK = "-L"
    STICKY = "-k"
    SET_UID = "-u"
    SET_GID = "-g"
    # recognised by the parser, not evaluated
    GROUP_OWNER = "-G"
    USER_OWNER = "-O"
    MODIFIED_SINCE_READ = "-N"
    # access
    READABLE = "-r"
    WRITABLE = "-w"
    EXECUTABLE = "-x"
    NON_EMPTY_FILE = "-s"
    # scalars
    TERMINAL_FD = "-t"
    EMPTY_STRING = "-z"
    NON_EMPTY_STRING = "-n"
    # shell tables
    OPTION_SET = "-o"
    VARIABLE_SET = "-v"
    IS_NAMEREF = "-R"
    LOGICAL_NOT = "!"


# Alternate spellings
UNARY_ALIASES: dict[str, UnaryOperator] = {
    "-a": UnaryOperator.EXISTS,
    "-h": UnaryOperator.SYMLINK,
}

UNARY_OPS: dict[str, UnaryOperator] = {
    **{op.value: op for op in UnaryOperator if op is not UnaryOperator.LOGICAL_NOT},
    **UNARY_ALIASES,
}
"""Prefix operators that take one operand (``!`` is handled separately)."""

NUMERIC_OPS = frozenset({
    BinaryOperator.NUM_EQ,
    BinaryOperator.NUM_NE,
    BinaryOperator.NUM_LE,
    BinaryOperator.NUM_GE,
    BinaryOperator.NUM_LT,
    BinaryOperator.NUM_GT,
})

FILE_COMPARE_OPS = frozenset({
    BinaryOperator.NEWER,
    BinaryOperator.OLDER,
    BinaryOperator.SAME_FILE,
})


@dataclass(frozen=True)
class WordLeaf:
    """A single word operand.

    ``quoted`` marks a word whose glob metacharacters are literal when it
    is used as a pattern.
    """

    value: str
    quoted: bool = False


@dataclass(frozen=True)
class ParenTest:
    """A parenthesized sub-expression."""

    inner: "TestExpr"


@dataclass(frozen=True)
class BinaryTest:
    """``left op right``."""

    op: BinaryOperator
    left: "TestExpr"
    right: "TestExpr"


@dataclass(frozen=True)
class UnaryTest:
    """``op operand``."""

    op: UnaryOperator
    operand: "TestExpr"


TestExpr = Union[WordLeaf, ParenTest, BinaryTest, UnaryTest]
