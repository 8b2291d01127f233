"""
Overlap backfill: prepend trailing context from the previous chunk.
"""

from typing import List

from ..core.logging import log
from ..core.models import Chunk, LineRange
from .metrics import significant_length


def lines_from_previous(
    previous_lines: List[str],
    current_lines: List[str],
    chunk_size: int,
    count_whitespace: bool = False,
) -> List[str]:
    """
    Trailing lines of the previous chunk that fit in front of the current one.

    Lines are taken last-first until the combined significant length would pass
    ``chunk_size``; the line that overflows keeps only its trailing characters
    (or is dropped when nothing of it fits).

    Returns:
        Added lines in forward order
    """
    added: List[str] = []

    for line in reversed(previous_lines):
        added.append(line)
        # Line order does not affect the metric
        new_length = significant_length(added + current_lines, count_whitespace)

        if new_length > chunk_size:
            last = line if count_whitespace else line.strip()
            overflow = new_length - chunk_size
            slice_amount = len(last) - overflow

            if slice_amount <= 0:
                added.pop()
            else:
                added[-1] = last[-slice_amount:]
            break

    added.reverse()
    return added


def add_overlap(
    chunks: List[Chunk],
    chunk_size: int,
    count_whitespace: bool = False,
    debug: bool = False,
) -> List[Chunk]:
    """
    Backfill every chunk after the first with context from its predecessor.

    Predecessors are read as they were before backfilling, so context never
    cascades across more than one chunk boundary. Input chunks are not
    modified; replaced chunks are new values.
    """
    if len(chunks) <= 1:
        return list(chunks)

    result = [chunks[0]]

    for previous, current in zip(chunks, chunks[1:]):
        current_lines = current.content.split("\n")
        added = lines_from_previous(
            previous.content.split("\n"), current_lines, chunk_size, count_whitespace
        )

        if debug:
            log.debug(
                "split.overlap",
                lines=current.lines.as_dict(),
                added_lines=len(added),
            )

        result.append(
            current._replace(
                content="\n".join(added + current_lines),
                lines=LineRange(current.lines.start - len(added), current.lines.end),
            )
        )

    return result
