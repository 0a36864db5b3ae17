"""Test / [ / [[ builtin implementation.

The builtins turn already-expanded words into a test-expression tree and
evaluate it, returning exit code 0 (true), 1 (false) or 2 (usage error or
invalid regex).

Usage: test expression
       [ expression ]
       [[ expression ]]

File operators:
  -e/-a FILE  True if FILE exists (-a between operands is AND in test / [)
  -f FILE     True if FILE exists and is a regular file
  -d FILE     True if FILE exists and is a directory
  -b/-c FILE  True if FILE is a block/character device
  -p/-S FILE  True if FILE is a named pipe/socket
  -h/-L FILE  True if FILE is a symbolic link
  -k/-u/-g    True if FILE has the sticky/setuid/setgid bit
  -s FILE     True if FILE exists and has size > 0
  -r/-w FILE  True if FILE can be opened for reading/writing
  -x FILE     True if FILE is executable
  F1 -nt F2   True if F1 is newer than F2
  F1 -ot F2   True if F1 is older than F2
  F1 -ef F2   True if F1 and F2 are the same file

String operators:
  -z STRING   True if STRING is empty
  -n STRING   True if STRING is not empty
  STRING      True if STRING is not empty
  S1 = S2     True if strings are equal ([[ ]]: S2 is a glob pattern)
  S1 != S2    True if strings are not equal
  S1 =~ RE    True if RE matches part of S1 ([[ ]] only)
  S1 < S2     True if S1 sorts before S2
  S1 > S2     True if S1 sorts after S2

Numeric operators:
  N1 -eq N2, -ne, -lt, -le, -gt, -ge

Other:
  -t FD       True if FD is a terminal
  -o OPTION   True if the shell option is set
  -v VAR      True if the variable is set
  -R VAR      True if the variable is a nameref

Logical operators:
  ! EXPR           True if EXPR is false
  ( EXPR )         Grouping
  EXPR -a EXPR     AND (test / [)      EXPR && EXPR  AND ([[ ]])
  EXPR -o EXPR     OR (test / [)       EXPR || EXPR  OR ([[ ]])
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence, Union

from ...ast.types import (
    BinaryOperator,
    BinaryTest,
    ParenTest,
    TestExpr,
    UNARY_OPS,
    UnaryOperator,
    UnaryTest,
    WordLeaf,
)
from ...types import ExecResult
from ..conditionals import evaluate_conditional

if TYPE_CHECKING:
    from ..types import InterpreterContext

Word = Union[str, WordLeaf]

_COMPARISON_OPS: dict[str, BinaryOperator] = {
    "<": BinaryOperator.LEX_BEFORE,
    ">": BinaryOperator.LEX_AFTER,
    "-nt": BinaryOperator.NEWER,
    "-ot": BinaryOperator.OLDER,
    "-ef": BinaryOperator.SAME_FILE,
    "-eq": BinaryOperator.NUM_EQ,
    "-ne": BinaryOperator.NUM_NE,
    "-lt": BinaryOperator.NUM_LT,
    "-le": BinaryOperator.NUM_LE,
    "-gt": BinaryOperator.NUM_GT,
    "-ge": BinaryOperator.NUM_GE,
    "=": BinaryOperator.GLOB_MATCH,
    "==": BinaryOperator.GLOB_MATCH,
    "!=": BinaryOperator.GLOB_NO_MATCH,
}

# test / [
_CLASSIC_BINARY_OPS = _COMPARISON_OPS
_CLASSIC_AND, _CLASSIC_OR = "-a", "-o"

# [[ ]]
_COND_BINARY_OPS = {**_COMPARISON_OPS, "=~": BinaryOperator.REGEX_MATCH}
_COND_AND, _COND_OR = "&&", "||"


class _TestParser:
    """Recursive-descent parser over already-expanded words.

    Precedence, lowest first: or, and, !, primary.
    """

    def __init__(self, words: Sequence[Word], double_bracket: bool):
        self.words = [w if isinstance(w, WordLeaf) else WordLeaf(w) for w in words]
        self.pos = 0
        self.double_bracket = double_bracket
        if double_bracket:
            self.binary_ops = _COND_BINARY_OPS
            self.and_op, self.or_op = _COND_AND, _COND_OR
        else:
            self.binary_ops = _CLASSIC_BINARY_OPS
            self.and_op, self.or_op = _CLASSIC_AND, _CLASSIC_OR

    def _is(self, word: Optional[WordLeaf], token: str) -> bool:
        # Inside [[ ]] a quoted word is never an operator.
        if word is None or (self.double_bracket and word.quoted):
            return False
        return word.value == token

    def _peek(self, offset: int = 0) -> Optional[WordLeaf]:
        i = self.pos + offset
        return self.words[i] if i < len(self.words) else None

    def _advance(self) -> WordLeaf:
        word = self._peek()
        if word is None:
            raise ValueError("argument expected")
        self.pos += 1
        return word

    def _unary_op(self, word: Optional[WordLeaf]) -> Optional[UnaryOperator]:
        if word is None or (self.double_bracket and word.quoted):
            return None
        return UNARY_OPS.get(word.value)

    def _binary_op(self, word: Optional[WordLeaf]) -> Optional[BinaryOperator]:
        if word is None or (self.double_bracket and word.quoted):
            return None
        return self.binary_ops.get(word.value)

    def parse(self) -> TestExpr:
        if not self.double_bracket:
            expr = self._parse_by_count(self.words)
            if expr is not None:
                return expr
        if not self.words:
            raise ValueError("expression expected")
        expr = self._parse_or()
        if self.pos < len(self.words):
            if self.double_bracket:
                raise ValueError(f"syntax error near `{self.words[self.pos].value}'")
            raise ValueError("too many arguments")
        return expr

    def _parse_by_count(self, words: list[WordLeaf]) -> Optional[TestExpr]:
        """POSIX rules for test with up to four arguments."""
        n = len(words)
        if n == 0:
            return WordLeaf("")
        if n == 1:
            return words[0]
        if n == 2:
            if words[0].value == "!":
                return UnaryTest(UnaryOperator.LOGICAL_NOT, words[1])
            op = UNARY_OPS.get(words[0].value)
            if op is None:
                raise ValueError(f"{words[0].value}: unary operator expected")
            return UnaryTest(op, words[1])
        if n == 3:
            middle = words[1].value
            if middle in (_CLASSIC_AND, _CLASSIC_OR):
                op = (BinaryOperator.LOGICAL_AND if middle == _CLASSIC_AND
                      else BinaryOperator.LOGICAL_OR)
                return BinaryTest(op, words[0], words[2])
            if middle in self.binary_ops:
                return self._make_binary(self.binary_ops[middle], words[0], words[2])
            if words[0].value == "!":
                return UnaryTest(UnaryOperator.LOGICAL_NOT, self._parse_by_count(words[1:]))
            if words[0].value == "(" and words[2].value == ")":
                return ParenTest(words[1])
            raise ValueError(f"{middle}: binary operator expected")
        if n == 4:
            if words[0].value == "!":
                return UnaryTest(UnaryOperator.LOGICAL_NOT, self._parse_by_count(words[1:]))
            if words[0].value == "(" and words[3].value == ")":
                return ParenTest(self._parse_by_count(words[1:3]))
        return None

    def _make_binary(self, op: BinaryOperator, left: WordLeaf, right: WordLeaf) -> TestExpr:
        if not self.double_bracket and op in (
            BinaryOperator.GLOB_MATCH, BinaryOperator.GLOB_NO_MATCH
        ):
            # test / [ compare strings literally
            right = WordLeaf(right.value, quoted=True)
        return BinaryTest(op, left, right)

    def _parse_or(self) -> TestExpr:
        left = self._parse_and()
        while self._is(self._peek(), self.or_op):
            self._advance()
            left = BinaryTest(BinaryOperator.LOGICAL_OR, left, self._parse_and())
        return left

    def _parse_and(self) -> TestExpr:
        left = self._parse_not()
        while self._is(self._peek(), self.and_op):
            self._advance()
            left = BinaryTest(BinaryOperator.LOGICAL_AND, left, self._parse_not())
        return left

    def _parse_not(self) -> TestExpr:
        if self._is(self._peek(), "!") and self._peek(1) is not None:
            self._advance()
            return UnaryTest(UnaryOperator.LOGICAL_NOT, self._parse_not())
        return self._parse_primary()

    def _parse_primary(self) -> TestExpr:
        word = self._peek()
        if self._is(word, "("):
            self._advance()
            inner = self._parse_or()
            if not self._is(self._peek(), ")"):
                raise ValueError("missing ')'")
            self._advance()
            return ParenTest(inner)

        # "-f x" is a unary test unless "-f" is itself the left operand.
        # A leading "-a" is Exists here; between operands _parse_and takes it.
        unary = self._unary_op(word)
        if unary is not None and self._peek(1) is not None and self._binary_op(self._peek(1)) is None:
            self._advance()
            return UnaryTest(unary, self._advance())

        left = self._advance()
        binary = self._binary_op(self._peek())
        if binary is not None:
            self._advance()
            return self._make_binary(binary, left, self._advance())
        return left


def parse_test_args(args: Sequence[Word]) -> TestExpr:
    """Parse the arguments of ``test`` / ``[`` into a tree."""
    return _TestParser(args, double_bracket=False).parse()


def parse_conditional(words: Sequence[Word]) -> TestExpr:
    """Parse the words between ``[[`` and ``]]`` into a tree."""
    return _TestParser(words, double_bracket=True).parse()


async def _run(ctx: "InterpreterContext", name: str, parse, words: Sequence[Word]) -> ExecResult:
    try:
        expr = parse(words)
    except ValueError as e:
        return ExecResult(stdout="", stderr=f"bash: {name}: {e}\n", exit_code=2)

    ctx.set_exit_status(0)
    result = await evaluate_conditional(ctx, expr)
    exit_code = ctx.state.last_exit_code or (0 if result else 1)
    return ExecResult(stdout="", stderr="", exit_code=exit_code, env=ctx.state.env.to_env_dict())


async def handle_test(ctx: "InterpreterContext", args: Sequence[Word]) -> ExecResult:
    """Execute the test builtin."""
    return await _run(ctx, "test", parse_test_args, args)


async def handle_bracket(ctx: "InterpreterContext", args: Sequence[Word]) -> ExecResult:
    """Execute the [ builtin (requires closing ])."""
    if not args or _value(args[-1]) != "]":
        return ExecResult(stdout="", stderr="bash: [: missing `]'\n", exit_code=2)
    return await _run(ctx, "[", parse_test_args, args[:-1])


async def handle_conditional(ctx: "InterpreterContext", words: Sequence[Word]) -> ExecResult:
    """Execute a [[ ... ]] conditional (requires closing ]])."""
    if not words or _value(words[-1]) != "]]":
        return ExecResult(stdout="", stderr="bash: conditional: missing `]]'\n", exit_code=2)
    return await _run(ctx, "conditional", parse_conditional, words[:-1])


def _value(word: Word) -> str:
    return word.value if isinstance(word, WordLeaf) else word
