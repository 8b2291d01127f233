"""
Chunking engine.

This package provides:
- Significant-length metric with optional whitespace counting
- Zero-width separator cascades for generic text, Markdown and source code
- Greedy packing and recursive descent over a cascade
- Comment-aware pre-split for source code
- Overlap backfill for the line splitter
- Document assembly and verification
"""

from .assemble import assemble_documents
from .boundaries import (
    GENERIC_SEPARATORS,
    LINE_BOUNDARY,
    MARKDOWN_SEPARATORS,
    SOURCE_SEPARATORS,
    WHITESPACE_BOUNDARY,
    Boundary,
    ContentType,
    cascade_for,
    line_start_boundary,
)
from .comments import pre_split_source, split_on_comments
from .engine import LeafBuilder, SplitPolicy, split_node, split_segments
from .metrics import significant_length, text_length
from .overlap import add_overlap, lines_from_previous
from .packer import pack
from .splitters import (
    LineTextSplitter,
    RecursiveTextSplitter,
    TextSplitter,
    build_splitter,
    build_splitter_from_settings,
)
from .verify import verify_chunks, verify_documents

__all__ = [
    "Boundary",
    "ContentType",
    "GENERIC_SEPARATORS",
    "LINE_BOUNDARY",
    "LeafBuilder",
    "LineTextSplitter",
    "MARKDOWN_SEPARATORS",
    "RecursiveTextSplitter",
    "SOURCE_SEPARATORS",
    "SplitPolicy",
    "TextSplitter",
    "WHITESPACE_BOUNDARY",
    "add_overlap",
    "assemble_documents",
    "build_splitter",
    "build_splitter_from_settings",
    "cascade_for",
    "line_start_boundary",
    "lines_from_previous",
    "pack",
    "pre_split_source",
    "significant_length",
    "split_node",
    "split_on_comments",
    "split_segments",
    "text_length",
    "verify_chunks",
    "verify_documents",
]
