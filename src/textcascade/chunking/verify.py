"""
Chunk verification: provenance, coverage and budget checks for one text.
"""

from typing import Dict, List, Optional, Sequence

from ..core.models import Chunk, Document
from .metrics import text_length

COMMENT_PREFIXES = ("/*", "///")

# Backfilled line chunks land within a few characters of chunk_size
LINE_SPLITTER_TOLERANCE = 5


def _is_comment_chunk(content: str) -> bool:
    return content.strip().startswith(COMMENT_PREFIXES)


def verify_chunks(
    chunks: Sequence[Chunk],
    text: str,
    chunk_size: int,
    count_whitespace: bool = False,
    tolerance: Optional[int] = None,
    check_lossless: bool = False,
    max_examples: int = 5,
) -> Dict:
    """
    Verify the chunks produced from ``text``.

    Args:
        chunks: Chunks in emission order
        text: Source text the chunks were produced from
        chunk_size: Target size the splitter was configured with
        count_whitespace: Metric mode the splitter was configured with
        tolerance: Allowed distance from ``chunk_size`` for middle chunks;
            defaults to 30% of ``chunk_size``
        check_lossless: Also require the contents to concatenate to ``text``
        max_examples: Breach examples kept in the report

    Returns:
        Verification results dictionary; ``ok`` summarises every check
    """
    if tolerance is None:
        tolerance = int(chunk_size * 0.3)

    lengths = [text_length(chunk.content, count_whitespace) for chunk in chunks]
    line_count = len(text.split("\n"))

    monotonic = all(
        previous.lines.start <= current.lines.start
        for previous, current in zip(chunks, chunks[1:])
    )
    terminal = bool(chunks) and chunks[-1].lines.end == line_count

    breaches: List[Dict] = []
    # First and last chunks are allowed to be short
    for position in range(1, len(chunks) - 1):
        content = chunks[position].content
        if _is_comment_chunk(content):
            continue
        distance = abs(lengths[position] - chunk_size)
        if distance > tolerance:
            breaches.append(
                {
                    "index": position,
                    "length": lengths[position],
                    "distance": distance,
                    "lines": chunks[position].lines.as_dict(),
                }
            )

    oversized = [
        position for position, length in enumerate(lengths) if length > chunk_size
    ]

    report: Dict = {
        "chunkCount": len(chunks),
        "lineCount": line_count,
        "monotonic": monotonic,
        "terminalCoverage": terminal,
        "budget": {
            "chunkSize": chunk_size,
            "tolerance": tolerance,
            "breaches": len(breaches),
            "examples": breaches[:max_examples],
        },
        "oversized": {"count": len(oversized), "indexes": oversized[:max_examples]},
        "lengthStats": {
            "min": min(lengths) if lengths else 0,
            "max": max(lengths) if lengths else 0,
            "total": sum(lengths),
        },
    }

    checks = [monotonic, terminal]
    if check_lossless:
        lossless = "".join(chunk.content for chunk in chunks) == text
        report["lossless"] = lossless
        checks.append(lossless)

    report["ok"] = all(checks) and not breaches
    return report


def verify_documents(
    documents: Sequence[Document],
    text: str,
    chunk_size: int,
    **kwargs,
) -> Dict:
    """``verify_chunks`` over assembled documents."""
    chunks = [Chunk(document.content, document.lines) for document in documents]
    return verify_chunks(chunks, text, chunk_size, **kwargs)
