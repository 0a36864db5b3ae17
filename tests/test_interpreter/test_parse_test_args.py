"""Tests for turning test / [[ words into expression trees."""

import pytest

from just_cond.ast.types import (
    BinaryOperator,
    BinaryTest,
    ParenTest,
    UnaryOperator,
    UnaryTest,
    WordLeaf,
)
from just_cond.interpreter.builtins import parse_conditional, parse_test_args


class TestClassicParsing:
    """test / [ argument vectors."""

    def test_empty(self):
        assert parse_test_args([]) == WordLeaf("")

    def test_unary(self):
        assert parse_test_args(["-f", "x"]) == UnaryTest(UnaryOperator.REGULAR_FILE, WordLeaf("x"))
        assert parse_test_args(["-a", "x"]) == UnaryTest(UnaryOperator.EXISTS, WordLeaf("x"))

    def test_equality_is_literal(self):
        assert parse_test_args(["a", "=", "b*"]) == BinaryTest(
            BinaryOperator.GLOB_MATCH, WordLeaf("a"), WordLeaf("b*", quoted=True)
        )

    def test_logical_operators(self):
        assert parse_test_args(["a", "-o", "b", "-a", "c", "-a", "d"]) == BinaryTest(
            BinaryOperator.LOGICAL_OR,
            WordLeaf("a"),
            BinaryTest(
                BinaryOperator.LOGICAL_AND,
                BinaryTest(BinaryOperator.LOGICAL_AND, WordLeaf("b"), WordLeaf("c")),
                WordLeaf("d"),
            ),
        )

    def test_nested_parens(self):
        tree = parse_test_args(["(", "-n", "a", ")", "-a", "!", "-z", "b"])
        assert tree == BinaryTest(
            BinaryOperator.LOGICAL_AND,
            ParenTest(UnaryTest(UnaryOperator.NON_EMPTY_STRING, WordLeaf("a"))),
            UnaryTest(
                UnaryOperator.LOGICAL_NOT,
                UnaryTest(UnaryOperator.EMPTY_STRING, WordLeaf("b")),
            ),
        )

    def test_leading_dash_a_is_unary(self):
        assert parse_test_args(["-a", "/tmp", "-a", "-n", "x"]) == BinaryTest(
            BinaryOperator.LOGICAL_AND,
            UnaryTest(UnaryOperator.EXISTS, WordLeaf("/tmp")),
            UnaryTest(UnaryOperator.NON_EMPTY_STRING, WordLeaf("x")),
        )

    def test_unclosed_paren(self):
        with pytest.raises(ValueError, match="missing"):
            parse_test_args(["(", "a", "-a", "b"])


class TestDoubleBracketParsing:
    """Words between [[ and ]]."""

    def test_glob_right_side_keeps_quoting(self):
        assert parse_conditional(["abc", "==", "a*"]) == BinaryTest(
            BinaryOperator.GLOB_MATCH, WordLeaf("abc"), WordLeaf("a*")
        )

    def test_regex(self):
        assert parse_conditional(["x", "=~", "^a"]) == BinaryTest(
            BinaryOperator.REGEX_MATCH, WordLeaf("x"), WordLeaf("^a")
        )

    def test_and_before_or(self):
        assert parse_conditional(["a", "||", "b", "&&", "c"]) == BinaryTest(
            BinaryOperator.LOGICAL_OR,
            WordLeaf("a"),
            BinaryTest(BinaryOperator.LOGICAL_AND, WordLeaf("b"), WordLeaf("c")),
        )

    def test_unary_operator_as_left_operand(self):
        assert parse_conditional(["-f", "==", "-f"]) == BinaryTest(
            BinaryOperator.GLOB_MATCH, WordLeaf("-f"), WordLeaf("-f")
        )

    def test_nameref_operator(self):
        assert parse_conditional(["-R", "ref"]) == UnaryTest(UnaryOperator.IS_NAMEREF, WordLeaf("ref"))

    def test_empty_is_an_error(self):
        with pytest.raises(ValueError):
            parse_conditional([])

    def test_missing_right_operand(self):
        with pytest.raises(ValueError, match="argument expected"):
            parse_conditional(["a", "=="])
