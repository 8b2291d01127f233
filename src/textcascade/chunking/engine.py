"""
Recursive descent over a separator cascade.

Text is packed on the coarsest separator first; any packed piece that is still
over budget is refined on a later separator. The traversal uses an explicit
work stack, so deep cascades on pathological input never hit Python's
recursion limit.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Sequence, Tuple, Union

from ..core.logging import log
from ..core.models import Chunk, LineRange
from .boundaries import Boundary
from .metrics import text_length
from .packer import pack


class SplitPolicy(Enum):
    """How an oversized piece picks its next separator."""

    # First piece of a call: keep refining in the same local context
    REFINE = "refine"
    # Later pieces start a new chunk boundary and may hold coarse structure again
    RESTART = "restart"

    @classmethod
    def for_position(cls, position: int) -> "SplitPolicy":
        return cls.REFINE if position == 0 else cls.RESTART

    def next_index(self, index: int) -> int:
        if self is SplitPolicy.REFINE:
            return index + 1
        return 0


class LeafBuilder:
    """Ordered accumulator of finished leaves plus the running line counter."""

    def __init__(self, start_line: int = 1):
        self.chunks: List[Chunk] = []
        self.line = start_line
        self.oversized = 0

    def __len__(self) -> int:
        return len(self.chunks)

    @property
    def is_empty(self) -> bool:
        return not self.chunks

    def add(self, content: str) -> Chunk:
        """Record ``content`` as the next leaf and advance the line counter."""
        start = self.line
        end = start + content.count("\n")
        chunk = Chunk(content=content, lines=LineRange(start, end))
        self.chunks.append(chunk)
        self.line = end
        return chunk


# Work items: ("split", text, cascade index) or ("leaf", text, oversized flag)
_Task = Tuple[str, str, Union[int, bool]]


def split_node(
    text: str,
    cascade: Sequence[Boundary],
    builder: LeafBuilder,
    chunk_size: int,
    chunk_overlap: int = 0,
    count_whitespace: bool = False,
    index: int = 0,
    debug: bool = False,
) -> LeafBuilder:
    """
    Split ``text`` into leaves appended to ``builder``.

    Each split step reserves ``chunk_overlap`` of the budget once the builder
    already holds a leaf. A piece that cannot be refined any further (the
    cascade is exhausted) is emitted oversized rather than dropped.
    """
    stack: List[_Task] = [("split", text, index)]

    while stack:
        kind, piece_text, value = stack.pop()

        if kind == "leaf":
            chunk = builder.add(piece_text)
            if value:
                builder.oversized += 1
            if debug:
                log.debug(
                    "split.leaf",
                    lines=chunk.lines.as_dict(),
                    length=text_length(chunk.content, count_whitespace),
                    oversized=bool(value),
                )
            continue

        level = int(value)
        if level >= len(cascade):
            stack.append(("leaf", piece_text, True))
            continue

        reserved = 0 if builder.is_empty else chunk_overlap
        budget = chunk_size - reserved
        boundary = cascade[level]
        pieces = pack(piece_text, boundary, budget, count_whitespace)

        if debug:
            log.debug(
                "split.pack",
                separator=boundary.name,
                level=level,
                budget=budget,
                pieces=len(pieces),
            )

        tasks: List[_Task] = []
        for position, piece in enumerate(pieces):
            if text_length(piece, count_whitespace) > budget:
                policy = SplitPolicy.for_position(position)
                tasks.append(("split", piece, policy.next_index(level)))
            else:
                tasks.append(("leaf", piece, False))

        # Stack is LIFO; push in reverse so pieces are handled in order
        stack.extend(reversed(tasks))

    return builder


def split_segments(
    segments: Sequence[str],
    cascade: Sequence[Boundary],
    chunk_size: int,
    chunk_overlap: int = 0,
    count_whitespace: bool = False,
    debug: bool = False,
    start_line: int = 1,
) -> Tuple[List[Chunk], int]:
    """
    Split independent pre-segments in order.

    Every segment gets a fresh leaf list (so its first leaf is measured
    against the full ``chunk_size``); the line counter carries across.

    Returns:
        Tuple of (chunks, oversized leaf count)
    """
    chunks: List[Chunk] = []
    oversized = 0
    line = start_line

    for position, segment in enumerate(segments):
        builder = LeafBuilder(start_line=line)
        split_node(
            segment,
            cascade,
            builder,
            chunk_size,
            chunk_overlap,
            count_whitespace,
            debug=debug,
        )
        if debug:
            log.debug("split.segment", segment=position, leaves=len(builder))
        chunks.extend(builder.chunks)
        oversized += builder.oversized
        line = builder.line

    return chunks, oversized

