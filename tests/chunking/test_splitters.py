"""Tests for the public splitters and document assembly."""

import asyncio

import pytest

from textcascade.chunking.boundaries import ContentType
from textcascade.chunking.metrics import text_length
from textcascade.chunking.splitters import (
    LineTextSplitter,
    RecursiveTextSplitter,
    build_splitter,
    build_splitter_from_settings,
)
from textcascade.chunking.verify import verify_documents
from textcascade.core.config import ConfigurationError, Settings
from textcascade.core.models import Document, LineRange

pytestmark = pytest.mark.unit

FOUR_LINES = "aaaaa\nbbbbb\nccccc\nddddd"


class TestLineTextSplitter:
    """Line packing plus overlap backfill."""

    def test_backfills_previous_context(self):
        splitter = LineTextSplitter(chunk_size=13, chunk_overlap=3)
        docs = splitter.create_documents([FOUR_LINES])

        assert [doc.content for doc in docs] == [
            "aaaaa",
            "aaaaa\nbbbbb",
            "bbbbb\nccccc",
            "ccccc\nddddd",
        ]
        assert [doc.metadata["loc"]["lines"]["from"] for doc in docs] == [1, 1, 2, 3]
        assert docs[-1].metadata["loc"]["lines"]["to"] == 4

    def test_initial_chunks_before_backfill(self):
        splitter = LineTextSplitter(chunk_size=13, chunk_overlap=3)
        chunks = splitter.pack_lines(FOUR_LINES)
        assert [chunk.content for chunk in chunks] == ["aaaaa", "bbbbb", "ccccc", "ddddd"]
        assert [chunk.lines for chunk in chunks] == [LineRange(i, i) for i in range(1, 5)]

    def test_zero_overlap_still_fills_headroom(self):
        """chunk_overlap=0 does not mean zero added context."""
        splitter = LineTextSplitter(chunk_size=10, chunk_overlap=0)
        assert [chunk.content for chunk in splitter.pack_lines(FOUR_LINES)] == [
            "aaaaa",
            "bbbbb",
            "ccccc",
            "ddddd",
        ]
        assert splitter.split_text(FOUR_LINES) == [
            "aaaaa",
            "aaaa\nbbbbb",
            "bbbb\nccccc",
            "cccc\nddddd",
        ]

    def test_whitespace_only_pages_are_skipped(self):
        splitter = LineTextSplitter(chunk_size=5, chunk_overlap=0)
        chunks = splitter.pack_lines("aaaaa\n   \nbbbbb")
        assert [chunk.content for chunk in chunks] == ["aaaaa", "bbbbb"]
        assert [chunk.lines for chunk in chunks] == [LineRange(1, 1), LineRange(3, 3)]

    def test_budget_adherence(self, uniform_lines):
        splitter = LineTextSplitter(chunk_size=100, chunk_overlap=20)
        chunks = splitter.split_chunks("\n".join(uniform_lines))
        assert len(chunks) == 7
        for chunk in chunks[1:-1]:
            assert abs(text_length(chunk.content) - 100) <= 5

    def test_overlap_starts_with_suffix_of_previous(self, uniform_lines):
        splitter = LineTextSplitter(chunk_size=100, chunk_overlap=20)
        text = "\n".join(uniform_lines)
        initial = splitter.pack_lines(text)
        final = splitter.split_chunks(text)

        for previous, current in zip(initial, final[1:]):
            previous_lines = previous.content.split("\n")
            head = current.content.split("\n")[0]
            assert head
            assert any(line.endswith(head) for line in previous_lines)

    def test_provenance(self, sample_md):
        splitter = LineTextSplitter(chunk_size=550, chunk_overlap=200)
        docs = splitter.create_documents([sample_md])
        starts = [doc.lines.start for doc in docs]
        assert starts == sorted(starts)
        assert docs[-1].lines.end == len(sample_md.split("\n"))

    def test_empty_text(self):
        assert LineTextSplitter(chunk_size=10, chunk_overlap=2).split_text("") == []


class TestRecursiveTextSplitter:
    """Cascade splitting for markdown, source and custom separators."""

    def test_custom_without_separators_fails(self):
        with pytest.raises(ConfigurationError):
            RecursiveTextSplitter(chunk_size=100, chunk_overlap=0, content_type="custom")

    def test_default_content_type_requires_separators(self):
        with pytest.raises(ConfigurationError):
            RecursiveTextSplitter()

    @pytest.mark.parametrize("chunk_size, chunk_overlap", [(0, 0), (-5, 0), (10, -1)])
    def test_invalid_budget(self, chunk_size, chunk_overlap):
        with pytest.raises(ConfigurationError):
            RecursiveTextSplitter(
                chunk_size=chunk_size, chunk_overlap=chunk_overlap, content_type="markdown"
            )

    @pytest.mark.parametrize("chunk_size", [80, 200, 550])
    def test_source_is_lossless(self, sample_sol, chunk_size):
        splitter = RecursiveTextSplitter(
            chunk_size=chunk_size, chunk_overlap=0, content_type="source"
        )
        docs = splitter.create_documents([sample_sol])

        assert "".join(doc.content for doc in docs) == sample_sol
        for previous, current in zip(docs, docs[1:]):
            assert previous.lines.start <= current.lines.start
        assert docs[-1].lines.end == len(sample_sol.split("\n"))

    def test_source_segments_reconstruct(self, sample_sol):
        splitter = RecursiveTextSplitter(chunk_size=550, chunk_overlap=0, content_type="sol")
        assert "".join(splitter.pre_split(sample_sol)) == sample_sol

    def test_doc_comment_example(self):
        text = "/// doc comment\nfunction foo() {}\n"
        splitter = RecursiveTextSplitter(chunk_size=550, chunk_overlap=0, content_type="source")
        assert "".join(splitter.split_text(text)) == text

    def test_comment_blocks_are_not_cut(self, sample_sol):
        """A comment run that fits the budget lands inside a single chunk."""
        splitter = RecursiveTextSplitter(chunk_size=200, chunk_overlap=0, content_type="source")
        natspec = "/**\n * @title Vault\n"
        contents = splitter.split_text(sample_sol)
        assert any(natspec in content for content in contents)

    def test_source_middle_chunks_near_budget(self):
        functions = "".join(
            f"    function setValue{i:03d}(uint256 next) external {{\n"
            "        value = next;\n"
            "        emit Updated(next);\n"
            "    }\n"
            for i in range(40)
        )
        text = "pragma solidity ^0.8.19;\n\ncontract Registry {\n" + functions + "}\n"
        splitter = RecursiveTextSplitter(chunk_size=550, chunk_overlap=0, content_type="source")
        docs = splitter.create_documents([text])

        report = verify_documents(docs, text, 550, tolerance=int(550 * 0.3), check_lossless=True)
        assert report["chunkCount"] == 7
        assert report["budget"]["breaches"] == 0
        assert report["lossless"] is True
        assert report["ok"] is True

    @pytest.mark.parametrize("chunk_size", [60, 550])
    def test_markdown_provenance(self, sample_md, chunk_size):
        splitter = RecursiveTextSplitter(
            chunk_size=chunk_size, chunk_overlap=0, content_type="md"
        )
        docs = splitter.create_documents([sample_md])
        starts = [doc.lines.start for doc in docs]
        assert starts == sorted(starts)
        assert docs[-1].lines.end == len(sample_md.split("\n"))
        assert "".join(doc.content for doc in docs) == sample_md

    def test_markdown_splits_on_headings_first(self, sample_md):
        splitter = RecursiveTextSplitter(chunk_size=550, chunk_overlap=0, content_type="markdown")
        contents = splitter.split_text(sample_md)
        assert len(contents) > 1
        assert contents[1].startswith("#")

    def test_generic_cascade_budget(self, uniform_lines):
        """Uniform lines pack into exactly ten-line chunks."""
        text = "\n".join(uniform_lines) + "\n"
        splitter = RecursiveTextSplitter(chunk_size=100, chunk_overlap=0, content_type="generic")
        chunks = splitter.split_chunks(text)
        assert len(chunks) == 5
        assert all(text_length(chunk.content) == 100 for chunk in chunks)
        assert [chunk.lines for chunk in chunks] == [
            LineRange(1, 11),
            LineRange(11, 21),
            LineRange(21, 31),
            LineRange(31, 41),
            LineRange(41, 51),
        ]

    def test_custom_separators(self):
        splitter = RecursiveTextSplitter(
            chunk_size=6,
            chunk_overlap=0,
            content_type="custom",
            separators=[r"(?<=;)"],
        )
        assert splitter.split_text("ab;cd;ef;gh") == ["ab;cd;", "ef;gh"]

    def test_oversized_token_is_kept(self):
        splitter = RecursiveTextSplitter(chunk_size=5, chunk_overlap=0, content_type="generic")
        token = "y" * 12
        assert splitter.split_text(f"ab {token} cd") == ["ab ", f"{token} ", "cd"]

    def test_deterministic(self, sample_sol):
        splitter = RecursiveTextSplitter(chunk_size=120, chunk_overlap=20, content_type="source")
        first = splitter.create_documents([sample_sol])
        second = splitter.create_documents([sample_sol])
        third = RecursiveTextSplitter(
            chunk_size=120, chunk_overlap=20, content_type="source"
        ).create_documents([sample_sol])
        assert first == second == third

    def test_debug_does_not_change_output(self, sample_md):
        quiet = RecursiveTextSplitter(chunk_size=120, chunk_overlap=0, content_type="md")
        loud = RecursiveTextSplitter(
            chunk_size=120, chunk_overlap=0, content_type="md", debug=True
        )
        assert quiet.split_text(sample_md) == loud.split_text(sample_md)


class TestDocuments:
    """Metadata merging and document helpers."""

    def test_metadata_merged_per_text(self):
        splitter = LineTextSplitter(chunk_size=13, chunk_overlap=3)
        docs = splitter.create_documents(
            ["one\ntwo", "three"], [{"source": "a.txt", "tags": ["x"]}]
        )
        assert docs[0].metadata == {
            "loc": {"lines": {"from": 1, "to": 2}},
            "source": "a.txt",
            "tags": ["x"],
        }
        assert docs[-1].metadata == {"loc": {"lines": {"from": 1, "to": 1}}}

    def test_metadata_is_copied(self):
        metadata = {"tags": ["x"]}
        splitter = RecursiveTextSplitter(chunk_size=4, chunk_overlap=0, content_type="generic")
        docs = splitter.create_documents(["aaa\nbbb\nccc"], [metadata])
        assert len(docs) > 1
        docs[0].metadata["tags"].append("y")
        assert docs[1].metadata["tags"] == ["x"]
        assert metadata == {"tags": ["x"]}

    def test_split_documents_replaces_loc(self):
        source = Document(
            content=FOUR_LINES,
            metadata={"loc": {"lines": {"from": 9, "to": 9}}, "source": "s"},
        )
        splitter = LineTextSplitter(chunk_size=13, chunk_overlap=3)
        docs = splitter.split_documents([source])
        assert len(docs) == 4
        assert all(doc.metadata["source"] == "s" for doc in docs)
        assert docs[0].metadata["loc"] == {"lines": {"from": 1, "to": 1}}

    def test_async_create_documents(self):
        splitter = LineTextSplitter(chunk_size=13, chunk_overlap=3)
        docs = asyncio.run(splitter.acreate_documents([FOUR_LINES]))
        assert docs == splitter.create_documents([FOUR_LINES])


class TestBuildSplitter:
    """Content type to splitter mapping."""

    def test_generic_uses_line_splitter(self):
        splitter = build_splitter("generic", chunk_size=100, chunk_overlap=10)
        assert isinstance(splitter, LineTextSplitter)

    def test_structured_types_use_cascade(self):
        for content_type in ("markdown", "source"):
            splitter = build_splitter(content_type, chunk_size=100, chunk_overlap=10)
            assert isinstance(splitter, RecursiveTextSplitter)
            assert splitter.content_type is ContentType.parse(content_type)

    def test_generic_with_separators_uses_cascade(self):
        splitter = build_splitter("generic", chunk_size=100, separators=[r"(?<=\.)"])
        assert isinstance(splitter, RecursiveTextSplitter)

    def test_custom_without_separators_fails(self):
        with pytest.raises(ConfigurationError):
            build_splitter("custom", chunk_size=100, separators=[])

    def test_from_settings(self):
        settings = Settings(CHUNK_SIZE=300, CHUNK_OVERLAP=30, CONTENT_TYPE="md")
        splitter = build_splitter_from_settings(settings)
        assert isinstance(splitter, RecursiveTextSplitter)
        assert splitter.chunk_size == 300
        assert splitter.chunk_overlap == 30

        line_splitter = LineTextSplitter.from_settings(Settings(CHUNK_SIZE=50, CHUNK_OVERLAP=5))
        assert (line_splitter.chunk_size, line_splitter.chunk_overlap) == (50, 5)
