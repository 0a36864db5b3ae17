"""Default word expansion.

Operands reach the evaluator already expanded by the host interpreter, so
the defaults here are literal. Hosts that expand parameters or command
substitutions pass their own callables to InterpreterContext.
"""

from ..ast.types import WordLeaf
from .pattern import escape_glob


def expand_word(word: WordLeaf) -> str:
    return word.value


def expand_word_for_pattern(word: WordLeaf) -> str:
    """Expand a word for use as a glob pattern.

    Glob metacharacters in quoted words are escaped so they match
    literally, while unquoted ones stay active.
    """
    if word.quoted:
        return escape_glob(word.value)
    return word.value
