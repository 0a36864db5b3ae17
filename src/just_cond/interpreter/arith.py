"""Integer parsing for numeric test operands."""

import re

_INT_RE = re.compile(r"[+-]?[0-9]+")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def parse_shell_int(value: str) -> int:
    """Parse a test operand as a signed integer.

    The whole string must be an optional sign followed by digits; anything
    else (including surrounding whitespace) yields 0. Out-of-range values
    saturate at the signed 64-bit limits.
    """
    if not _INT_RE.fullmatch(value):
        return 0
    return max(INT64_MIN, min(INT64_MAX, int(value)))
