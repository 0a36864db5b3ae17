"""Conditional expression evaluation.

Reduces a test-expression tree to a truth string: "" is false, "1" is
true. This is the shared engine behind ``[[ ... ]]``, ``test`` and ``[``.

Failure tiers:
- missing files, non-matching patterns and unparsable numbers are false
- an invalid regex is false and sets exit status 2
- an unknown unary operator or malformed tree is fatal
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Optional

from ..ast.types import (
    BinaryOperator,
    BinaryTest,
    FILE_COMPARE_OPS,
    NUMERIC_OPS,
    ParenTest,
    TestExpr,
    UnaryOperator,
    UnaryTest,
    WordLeaf,
)
from .arith import parse_shell_int
from .pattern import compile_pattern

if TYPE_CHECKING:
    from ..types import FsStat, ProbeMode
    from .types import InterpreterContext


TRUE = "1"
FALSE = ""


def _truth(value: bool) -> str:
    return TRUE if value else FALSE


async def evaluate_conditional(ctx: "InterpreterContext", node: TestExpr) -> str:
    """Evaluate a test expression to its truth string."""
    if isinstance(node, WordLeaf):
        return await ctx.expand_word(node)

    if isinstance(node, ParenTest):
        return await evaluate_conditional(ctx, node.inner)

    if isinstance(node, BinaryTest):
        if node.op in (BinaryOperator.GLOB_MATCH, BinaryOperator.GLOB_NO_MATCH):
            return await _glob_test(ctx, node)
        # Both sides are always evaluated, even for && and ||
        x = await evaluate_conditional(ctx, node.left)
        y = await evaluate_conditional(ctx, node.right)
        return _truth(await binary_test(ctx, node.op, x, y))

    if isinstance(node, UnaryTest):
        x = await evaluate_conditional(ctx, node.operand)
        return _truth(await unary_test(ctx, node.op, x))

    ctx.fatal(f"unhandled test expression: {node!r}")
    return FALSE


async def _glob_test(ctx: "InterpreterContext", node: BinaryTest) -> str:
    # The left side is a plain word, never a sub-expression.
    if not isinstance(node.left, WordLeaf) or not isinstance(node.right, WordLeaf):
        ctx.fatal(f"{node.op.value}: operands must be words")
        return FALSE
    value = await ctx.expand_word(node.left)
    matcher = compile_pattern(await ctx.expand_pattern(node.right))
    return _truth(matcher(value) == (node.op is BinaryOperator.GLOB_MATCH))


async def _stat(ctx: "InterpreterContext", name: str) -> Optional["FsStat"]:
    path = ctx.resolve_path(name)
    try:
        return await ctx.fs.stat(path)
    except OSError:
        return None


async def binary_test(
    ctx: "InterpreterContext", op: BinaryOperator, x: str, y: str
) -> bool:
    """Evaluate a binary operator over two already-evaluated strings."""
    if op is BinaryOperator.REGEX_MATCH:
        try:
            regex = re.compile(y)
        except re.error:
            ctx.set_exit_status(2)
            return False
        return regex.search(x) is not None

    if op in FILE_COMPARE_OPS:
        i1, i2 = await _stat(ctx, x), await _stat(ctx, y)
        if i1 is None or i2 is None:
            return False
        if op is BinaryOperator.NEWER:
            return i1.mtime > i2.mtime
        if op is BinaryOperator.OLDER:
            return i1.mtime < i2.mtime
        return (i1.dev, i1.ino) == (i2.dev, i2.ino)

    if op in NUMERIC_OPS:
        a, b = parse_shell_int(x), parse_shell_int(y)
        if op is BinaryOperator.NUM_EQ:
            return a == b
        if op is BinaryOperator.NUM_NE:
            return a != b
        if op is BinaryOperator.NUM_LE:
            return a <= b
        if op is BinaryOperator.NUM_GE:
            return a >= b
        if op is BinaryOperator.NUM_LT:
            return a < b
        return a > b

    if op is BinaryOperator.LOGICAL_AND:
        return x != "" and y != ""
    if op is BinaryOperator.LOGICAL_OR:
        return x != "" or y != ""

    if op is BinaryOperator.LEX_BEFORE:
        return x < y
    # LEX_AFTER, and anything unrecognised
    return x > y


async def _probe_open(ctx: "InterpreterContext", name: str, mode: "ProbeMode") -> bool:
    try:
        async with ctx.fs.open_probe(ctx.resolve_path(name), mode):
            pass
    except OSError:
        return False
    return True


async def unary_test(ctx: "InterpreterContext", op: UnaryOperator, x: str) -> bool:
    """Evaluate a unary operator over an already-evaluated string."""
    # File type tests
    if op is UnaryOperator.EXISTS:
        return await _stat(ctx, x) is not None
    if op is UnaryOperator.SYMLINK:
        try:
            info = await ctx.fs.lstat(ctx.resolve_path(x))
        except OSError:
            return False
        return info.mode.is_symlink

    if op in _MODE_TESTS:
        info = await _stat(ctx, x)
        return info is not None and _MODE_TESTS[op](info)

    # Access tests
    if op is UnaryOperator.READABLE:
        return await _probe_open(ctx, x, "r")
    if op is UnaryOperator.WRITABLE:
        return await _probe_open(ctx, x, "w")
    if op is UnaryOperator.EXECUTABLE:
        return await ctx.look_path(ctx.resolve_path(x)) is not None
    if op is UnaryOperator.NON_EMPTY_FILE:
        info = await _stat(ctx, x)
        return info is not None and info.size > 0

    if op is UnaryOperator.TERMINAL_FD:
        return ctx.fs.isatty(parse_shell_int(x))

    # String tests
    if op is UnaryOperator.EMPTY_STRING:
        return x == ""
    if op is UnaryOperator.NON_EMPTY_STRING:
        return x != ""

    if op is UnaryOperator.OPTION_SET:
        if x == "errexit":
            return ctx.stop_on_cmd_err
        return False
    if op is UnaryOperator.VARIABLE_SET:
        # Bound to the empty string still counts as set
        return ctx.lookup_var(x) is not None
    if op is UnaryOperator.IS_NAMEREF:
        return ctx.lookup_var(x) is not None and ctx.state.env.is_nameref(x)

    if op is UnaryOperator.LOGICAL_NOT:
        return x == ""

    # GROUP_OWNER, USER_OWNER and MODIFIED_SINCE_READ land here too.
    ctx.fatal(f"unhandled unary test op: {getattr(op, 'value', op)}")
    return False


_MODE_TESTS = {
    UnaryOperator.REGULAR_FILE: lambda info: info.mode.is_regular,
    UnaryOperator.DIRECTORY: lambda info: info.mode.is_dir,
    UnaryOperator.CHAR_DEVICE: lambda info: info.mode.is_char_device,
    UnaryOperator.BLOCK_DEVICE: lambda info: info.mode.is_block_device,
    UnaryOperator.NAMED_PIPE: lambda info: info.mode.is_named_pipe,
    UnaryOperator.SOCKET: lambda info: info.mode.is_socket,
    UnaryOperator.STICKY: lambda info: info.mode.is_sticky,
    UnaryOperator.SET_UID: lambda info: info.mode.is_setuid,
    UnaryOperator.SET_GID: lambda info: info.mode.is_setgid,
}
