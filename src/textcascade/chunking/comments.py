"""
Comment-aware pre-pass for structured source code.

Source text is cut into blocks that each start at a comment run, so later
separator splitting never lands inside a comment block.
"""

from typing import List

LINE_COMMENT = "//"
BLOCK_COMMENT_OPEN = "/*"


def _lines_with_terminators(text: str) -> List[str]:
    lines = [line + "\n" for line in text.split("\n")]
    lines[-1] = lines[-1][:-1]
    if not lines[-1]:
        lines.pop()
    return lines


def _is_line_comment(line: str) -> bool:
    return line.strip().startswith(LINE_COMMENT)


def _starts_block(line: str, previous: str) -> bool:
    stripped = line.strip()
    if stripped.startswith(BLOCK_COMMENT_OPEN):
        return True
    return stripped.startswith(LINE_COMMENT) and not _is_line_comment(previous)


def split_on_comments(text: str) -> List[List[str]]:
    """
    Group source lines into blocks, each opened by a comment run.

    Lines keep their ``\\n`` terminators, so
    ``"".join("".join(block) for block in blocks) == text``.
    """
    if not text:
        return []

    blocks: List[List[str]] = []
    current: List[str] = []
    previous = ""

    for line in _lines_with_terminators(text):
        if _starts_block(line, previous) and current:
            blocks.append(current)
            current = []
        current.append(line)
        previous = line

    if current:
        blocks.append(current)

    return blocks


def _line_length(line: str, count_whitespace: bool) -> int:
    body = line[:-1] if line.endswith("\n") else line
    return len(body) if count_whitespace else len(body.strip())


def _cut_offsets(lines: List[str], chunk_size: int, count_whitespace: bool) -> List[int]:
    """
    Line offsets where a block is cut, found in one pass.

    A segment is closed before the first line that takes its running length
    past ``chunk_size``; a single line over the budget becomes its own segment.
    """
    cuts: List[int] = []
    start = 0
    total = 0

    for position, line in enumerate(lines):
        size = _line_length(line, count_whitespace)
        if position > start:
            total += 1 + size
            if total > chunk_size:
                cuts.append(position)
                start, total = position, size
        else:
            total = size

        if position == start and total > chunk_size:
            cuts.append(position + 1)
            start, total = position + 1, 0

    return cuts


def pre_split_source(
    text: str, chunk_size: int, count_whitespace: bool = False
) -> List[str]:
    """
    Cut source text into pre-segments for the recursive splitter.

    Blocks within ``chunk_size`` pass through whole; a larger block is cut at
    every line where its running significant length would exceed
    ``chunk_size``. ``"".join(result) == text``.
    """
    segments: List[str] = []

    for block in split_on_comments(text):
        start = 0
        for cut in _cut_offsets(block, chunk_size, count_whitespace):
            segments.append("".join(block[start:cut]))
            start = cut
        if start < len(block):
            segments.append("".join(block[start:]))

    return segments
