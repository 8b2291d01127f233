from typing import Any, Dict, NamedTuple

from pydantic import BaseModel, Field


class LineRange(NamedTuple):
    """1-indexed inclusive range of source lines covered by a chunk."""

    start: int
    end: int

    def as_dict(self) -> Dict[str, int]:
        return {"from": self.start, "to": self.end}


class Chunk(NamedTuple):
    """A finished piece of source text with its line provenance."""

    content: str
    lines: LineRange

    @property
    def loc(self) -> Dict[str, Any]:
        return {"lines": self.lines.as_dict()}


class Document(BaseModel):
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def lines(self) -> LineRange:
        """Line range recorded under metadata["loc"]["lines"]."""
        span = self.metadata["loc"]["lines"]
        return LineRange(span["from"], span["to"])
