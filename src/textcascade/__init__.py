"""
textcascade

Separator-cascading text splitter producing bounded, order-preserving
chunks with line provenance for retrieval pipelines.
"""

from .chunking import (
    ContentType,
    LineTextSplitter,
    RecursiveTextSplitter,
    build_splitter,
)
from .core.config import ConfigurationError
from .core.models import Chunk, Document, LineRange

__version__ = "0.3.0"

__all__ = [
    "Chunk",
    "ConfigurationError",
    "ContentType",
    "Document",
    "LineRange",
    "LineTextSplitter",
    "RecursiveTextSplitter",
    "build_splitter",
]
