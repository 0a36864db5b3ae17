"""Tests for glob pattern compilation."""

import pytest

from just_cond.interpreter.pattern import compile_pattern, escape_glob, glob_to_regex


class TestCompilePattern:
    """Whole-string glob matching."""

    @pytest.mark.parametrize("pattern,value,expected", [
        ("*.txt", "file.txt", True),
        ("*.txt", "file.txt.bak", False),
        ("a?c", "abc", True),
        ("a?c", "abbc", False),
        ("[abc]x", "bx", True),
        ("[!abc]x", "bx", False),
        ("[^abc]x", "dx", True),
        ("[a-c]*", "cat", True),
        ("[[:digit:]]*", "7up", True),
        ("[[:digit:]]*", "up", False),
        ("[]]", "]", True),
        ("a.b", "axb", False),
        ("a+b", "a+b", True),
        ("(x)", "(x)", True),
        ("\\*", "*", True),
        ("\\*", "a", False),
        ("[", "[", True),
        ("", "", True),
    ])
    def test_match(self, pattern, value, expected):
        assert compile_pattern(pattern)(value) is expected

    def test_star_spans_newlines(self):
        assert compile_pattern("a*b")("a\nb") is True

    def test_invalid_range_matches_nothing(self):
        matcher = compile_pattern("[z-a]")
        assert matcher("z") is False
        assert matcher("[z-a]") is False

    def test_glob_to_regex_is_unanchored(self):
        assert glob_to_regex("*.py") == ".*\\.py"


class TestEscapeGlob:
    """Quoted words match only themselves."""

    @pytest.mark.parametrize("literal", ["a*", "?", "[abc]", "back\\slash", "plain"])
    def test_escaped_matches_itself(self, literal):
        assert compile_pattern(escape_glob(literal))(literal) is True

    def test_escaped_star_is_literal(self):
        assert compile_pattern(escape_glob("a*"))("abc") is False
