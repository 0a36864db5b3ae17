"""Glob pattern compilation for ``==`` / ``!=`` inside ``[[ ]]``."""

import re
from typing import Callable

# POSIX character class mappings
_POSIX_CLASSES = {
    "[:alpha:]": "a-zA-Z",
    "[:digit:]": "0-9",
    "[:alnum:]": "a-zA-Z0-9",
    "[:upper:]": "A-Z",
    "[:lower:]": "a-z",
    "[:space:]": " \\t\\n\\r\\f\\v",
    "[:blank:]": " \\t",
    "[:punct:]": r"!\"#$%&'()*+,\-./:;<=>?@\[\\\]^_`{|}~",
    "[:graph:]": "!-~",
    "[:print:]": " -~",
    "[:cntrl:]": "\\x00-\\x1f\\x7f",
    "[:xdigit:]": "0-9a-fA-F",
}

Matcher = Callable[[str], bool]


def escape_glob(s: str) -> str:
    """Escape glob metacharacters so s only matches itself."""
    return re.sub(r"([*?\[\]\\])", r"\\\1", s)


def _find_class_end(pattern: str, i: int) -> int:
    """Index of the ']' closing the bracket expression opened at i, or -1."""
    j = i + 1
    if j < len(pattern) and pattern[j] in "!^":
        j += 1
    # ']' as the first member is literal
    if j < len(pattern) and pattern[j] == "]":
        j += 1
    while j < len(pattern):
        if pattern[j] == "[" and pattern.startswith("[:", j):
            end = pattern.find(":]", j + 2)
            if end != -1:
                j = end + 2
                continue
        if pattern[j] == "]":
            return j
        j += 1
    return -1


def glob_to_regex(pattern: str) -> str:
    """Convert a glob pattern to an (unanchored) regex.

    Supports ``*``, ``?``, bracket expressions with ``!``/``^`` negation and
    POSIX classes, and backslash escapes.
    """
    result = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "*":
            result.append(".*")
        elif c == "?":
            result.append(".")
        elif c == "[":
            close_pos = _find_class_end(pattern, i)
            if close_pos == -1:
                # No closing ']' - treat '[' as literal
                result.append("\\[")
            else:
                j = i + 1
                if pattern[j] in "!^":
                    result.append("[^")
                    j += 1
                else:
                    result.append("[")
                while j < close_pos:
                    if pattern.startswith("[:", j):
                        end = pattern.find(":]", j + 2)
                        posix_name = pattern[j:end + 2]
                        if posix_name in _POSIX_CLASSES:
                            result.append(_POSIX_CLASSES[posix_name])
                            j = end + 2
                            continue
                    if pattern[j] in "\\[]^":
                        result.append("\\" + pattern[j])
                    else:
                        result.append(pattern[j])
                    j += 1
                result.append("]")
                i = close_pos
        elif c == "\\":
            # Backslash escape in glob pattern - next char is literal
            if i + 1 < len(pattern):
                i += 1
                result.append(re.escape(pattern[i]))
            else:
                result.append("\\\\")
        else:
            result.append(re.escape(c))
        i += 1
    return "".join(result)


def compile_pattern(pattern: str) -> Matcher:
    """Compile a glob into a whole-string matcher.

    A pattern that cannot be compiled (e.g. a reversed range) matches
    nothing.
    """
    try:
        regex = re.compile(glob_to_regex(pattern), re.DOTALL)
    except re.error:
        return lambda s: False
    return lambda s: regex.fullmatch(s) is not None
