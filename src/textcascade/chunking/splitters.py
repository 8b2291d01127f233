"""
Public splitters: the separator-cascade splitter and the line splitter.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

from ..core.config import SETTINGS, ConfigurationError, Settings
from ..core.logging import log
from ..core.models import Chunk, Document, LineRange
from .assemble import assemble_documents
from .boundaries import ContentType, SeparatorSpec, cascade_for
from .comments import pre_split_source
from .engine import split_segments
from .metrics import significant_length
from .overlap import add_overlap


class TextSplitter:
    """Shared budget handling and document plumbing for both splitters."""

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        count_whitespace: bool = False,
        debug: bool = False,
    ):
        if chunk_size <= 0:
            raise ConfigurationError(f"chunk_size must be positive, got {chunk_size}")
        if chunk_overlap < 0:
            raise ConfigurationError(
                f"chunk_overlap must not be negative, got {chunk_overlap}"
            )
        if chunk_overlap >= chunk_size:
            log.warning(
                "split.config.overlap_exceeds_size",
                chunk_size=chunk_size,
                chunk_overlap=chunk_overlap,
            )

        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.count_whitespace = count_whitespace
        self.debug = debug

    def split_chunks(self, text: str) -> List[Chunk]:
        raise NotImplementedError

    def split_text(self, text: str) -> List[str]:
        return [chunk.content for chunk in self.split_chunks(text)]

    def create_documents(
        self,
        texts: Sequence[str],
        metadatas: Optional[Sequence[Dict[str, Any]]] = None,
    ) -> List[Document]:
        """
        Split every text and wrap the chunks as documents.

        ``metadatas[i]`` is merged into every document produced from
        ``texts[i]``; missing entries mean no caller metadata.
        """
        metadatas = metadatas or []
        documents: List[Document] = []

        for position, text in enumerate(texts):
            metadata = metadatas[position] if position < len(metadatas) else None
            documents.extend(assemble_documents(self.split_chunks(text), metadata))

        return documents

    async def acreate_documents(
        self,
        texts: Sequence[str],
        metadatas: Optional[Sequence[Dict[str, Any]]] = None,
    ) -> List[Document]:
        """Awaitable ``create_documents`` for async pipelines; runs inline."""
        return self.create_documents(texts, metadatas)

    def split_documents(self, documents: Sequence[Document]) -> List[Document]:
        """Re-split documents, keeping their metadata but not their old ``loc``."""
        texts = [document.content for document in documents]
        metadatas = [
            {key: value for key, value in document.metadata.items() if key != "loc"}
            for document in documents
        ]
        return self.create_documents(texts, metadatas)

    def _done(self, chunks: List[Chunk], **extra: Any) -> List[Chunk]:
        if self.debug:
            log.debug(
                "split.done",
                splitter=type(self).__name__,
                chunks=len(chunks),
                **extra,
            )
        return chunks


class RecursiveTextSplitter(TextSplitter):
    """
    Split text along a separator cascade, coarsest boundary first.

    Source content runs the comment-aware pre-pass first so comment blocks
    are never cut. Overlap is not backfilled here: ``chunk_overlap`` only
    reserves budget once a segment already holds a chunk.
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        content_type: Union[str, ContentType] = ContentType.CUSTOM,
        separators: Optional[Sequence[SeparatorSpec]] = None,
        count_whitespace: bool = False,
        debug: bool = False,
    ):
        super().__init__(chunk_size, chunk_overlap, count_whitespace, debug)
        self.content_type = ContentType.parse(content_type)
        self.separators = cascade_for(self.content_type, separators)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "RecursiveTextSplitter":
        settings = settings or SETTINGS
        return cls(
            chunk_size=settings.CHUNK_SIZE,
            chunk_overlap=settings.CHUNK_OVERLAP,
            content_type=settings.CONTENT_TYPE,
            separators=settings.CUSTOM_SEPARATORS or None,
            count_whitespace=settings.COUNT_WHITESPACE,
            debug=settings.SPLIT_DEBUG,
        )

    def pre_split(self, text: str) -> List[str]:
        """Segments handed independently to the cascade."""
        if self.content_type is ContentType.SOURCE:
            return pre_split_source(text, self.chunk_size, self.count_whitespace)
        return [text] if text else []

    def split_chunks(self, text: str) -> List[Chunk]:
        segments = self.pre_split(text)
        chunks, oversized = split_segments(
            segments,
            self.separators,
            self.chunk_size,
            self.chunk_overlap,
            self.count_whitespace,
            debug=self.debug,
        )
        return self._done(chunks, segments=len(segments), oversized=oversized)


class LineTextSplitter(TextSplitter):
    """
    Pack whole lines into chunks, then backfill overlap from the previous chunk.

    Lines are packed against ``chunk_size - chunk_overlap`` so the backfill
    pass can top every chunk up to ``chunk_size`` with preceding context.
    """

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "LineTextSplitter":
        settings = settings or SETTINGS
        return cls(
            chunk_size=settings.CHUNK_SIZE,
            chunk_overlap=settings.CHUNK_OVERLAP,
            count_whitespace=settings.COUNT_WHITESPACE,
            debug=settings.SPLIT_DEBUG,
        )

    def _length(self, lines: List[str]) -> int:
        return significant_length(lines, self.count_whitespace)

    def pack_lines(self, text: str) -> List[Chunk]:
        """Greedy line packing without overlap."""
        if not text:
            return []

        lines = text.split("\n")
        budget = self.chunk_size - self.chunk_overlap
        chunks: List[Chunk] = []
        page: List[str] = []
        counter = 0

        for line in lines:
            counter += 1

            # A line that overflows a non-empty page opens the next page
            if page and self._length(page + [line]) > budget:
                if "\n".join(page).strip():
                    chunks.append(_page_chunk(page, counter))
                page = []

            page.append(line)

        counter += 1
        chunks.append(_page_chunk(page, counter))
        return chunks

    def split_chunks(self, text: str) -> List[Chunk]:
        chunks = add_overlap(
            self.pack_lines(text),
            self.chunk_size,
            self.count_whitespace,
            debug=self.debug,
        )
        return self._done(chunks)


def _page_chunk(page: List[str], counter: int) -> Chunk:
    return Chunk(
        content="\n".join(page),
        lines=LineRange(counter - len(page), counter - 1),
    )


def build_splitter(
    content_type: Union[str, ContentType] = ContentType.GENERIC, **kwargs: Any
) -> TextSplitter:
    """
    Splitter for a content type.

    Generic text gets the line splitter (the only one that backfills
    overlap); markdown, source and custom cascades get the recursive splitter.
    """
    kind = ContentType.parse(content_type)
    if kind is ContentType.GENERIC and not kwargs.get("separators"):
        kwargs.pop("separators", None)
        return LineTextSplitter(**kwargs)
    return RecursiveTextSplitter(content_type=kind, **kwargs)


def build_splitter_from_settings(settings: Optional[Settings] = None) -> TextSplitter:
    settings = settings or SETTINGS
    return build_splitter(
        settings.CONTENT_TYPE,
        chunk_size=settings.CHUNK_SIZE,
        chunk_overlap=settings.CHUNK_OVERLAP,
        separators=settings.CUSTOM_SEPARATORS or None,
        count_whitespace=settings.COUNT_WHITESPACE,
        debug=settings.SPLIT_DEBUG,
    )
