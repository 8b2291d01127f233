"""
Significant-length metric used for every budget comparison.
"""

from typing import Sequence


def significant_length(lines: Sequence[str], count_whitespace: bool = False) -> int:
    """
    Size of an ordered sequence of lines.

    By default leading/trailing whitespace of each line is ignored, but every
    line break still costs one character so many short lines are not free.
    With ``count_whitespace`` the lines are measured exactly as joined text.
    """
    if not lines:
        return 0
    if count_whitespace:
        return sum(len(line) for line in lines) + len(lines) - 1
    return sum(len(line.strip()) for line in lines) + len(lines) - 1


def text_length(text: str, count_whitespace: bool = False) -> int:
    """Significant length of a text measured over its ``\\n``-separated lines."""
    return significant_length(text.split("\n"), count_whitespace)
