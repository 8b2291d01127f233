"""
Zero-width boundaries and the separator cascades built from them.
"""

import re
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..core.config import ConfigurationError


class ContentType(Enum):
    """Content types with a dedicated separator cascade."""

    GENERIC = "generic"
    MARKDOWN = "markdown"
    SOURCE = "source"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: Union[str, "ContentType"]) -> "ContentType":
        if isinstance(value, cls):
            return value
        aliases = {"md": cls.MARKDOWN, "sol": cls.SOURCE, "code": cls.SOURCE}
        name = str(value).strip().lower()
        if name in aliases:
            return aliases[name]
        try:
            return cls(name)
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ConfigurationError(
                f"Unknown content type {value!r}; expected one of: {choices}"
            ) from None


class Boundary:
    """
    A named zero-width split position.

    Only the start of each regex match is used, so splitting never consumes
    characters and ``"".join(boundary.split(text)) == text`` always holds.
    Positions at the very start or end of the text are ignored.
    """

    __slots__ = ("name", "pattern")

    def __init__(self, name: str, pattern: Union[str, "re.Pattern[str]"]):
        self.name = name
        self.pattern = re.compile(pattern) if isinstance(pattern, str) else pattern

    def __repr__(self) -> str:
        return f"Boundary({self.name!r}, {self.pattern.pattern!r})"

    def matches(self, text: str, pos: int) -> bool:
        """True if a split position sits at ``pos``."""
        if pos <= 0 or pos >= len(text):
            return False
        # Lookbehinds still see text before pos
        return self.pattern.match(text, pos) is not None

    def positions(self, text: str) -> Iterator[int]:
        """Interior split positions in ascending order."""
        last = 0
        for match in self.pattern.finditer(text):
            pos = match.start()
            if last < pos < len(text):
                last = pos
                yield pos

    def split(self, text: str) -> List[str]:
        """Split ``text`` at every boundary position; no piece is empty."""
        if not text:
            return []
        pieces = []
        start = 0
        for pos in self.positions(text):
            pieces.append(text[start:pos])
            start = pos
        pieces.append(text[start:])
        return pieces


def line_start_boundary(marker: str, name: Optional[str] = None) -> Boundary:
    """Boundary before any line whose content (after indentation) starts with ``marker``."""
    return Boundary(name or marker.strip(), rf"(?<=\n)(?=[ \t]*{marker})")


LINE_BOUNDARY = Boundary("line", r"(?<=\n)")
WHITESPACE_BOUNDARY = Boundary("whitespace", r"(?<=\s)(?=\S)")

GENERIC_SEPARATORS: Tuple[Boundary, ...] = (LINE_BOUNDARY, WHITESPACE_BOUNDARY)


def _keywords(words: Iterable[str]) -> List[Boundary]:
    return [line_start_boundary(f"{word} ", word) for word in words]


MARKDOWN_SEPARATORS: Tuple[Boundary, ...] = (
    # Headings, level 1 first; setext headings are not handled
    *[line_start_boundary("#" * level + " ", "h%d" % level) for level in range(1, 7)],
    # End of a fenced code block
    line_start_boundary(r"```\n\n", "code-fence-end"),
    # Horizontal rules of exactly three markers
    line_start_boundary(r"\*{3}\n\n", "rule-asterisk"),
    line_start_boundary(r"---\n\n", "rule-dash"),
    line_start_boundary(r"___\n\n", "rule-underscore"),
    *GENERIC_SEPARATORS,
)

SOURCE_SEPARATORS: Tuple[Boundary, ...] = (
    # Compiler directives
    *_keywords(["pragma", "using"]),
    # Containers
    *_keywords(["contract", "interface", "library"]),
    # Members
    *_keywords(
        ["constructor", "type", "function", "event", "modifier", "error", "struct", "enum"]
    ),
    # Control flow
    *_keywords(["if", "for", "while", "do", "assembly"]),
    *GENERIC_SEPARATORS,
)

BUILTIN_CASCADES = {
    ContentType.GENERIC: GENERIC_SEPARATORS,
    ContentType.MARKDOWN: MARKDOWN_SEPARATORS,
    ContentType.SOURCE: SOURCE_SEPARATORS,
}

SeparatorSpec = Union[str, Boundary]


def cascade_for(
    content_type: Union[str, ContentType],
    separators: Optional[Sequence[SeparatorSpec]] = None,
) -> Tuple[Boundary, ...]:
    """
    Resolve the separator cascade for a content type.

    Explicit ``separators`` (regex strings or ``Boundary`` objects) replace the
    built-in cascade. A custom content type without separators is a
    configuration error.
    """
    kind = ContentType.parse(content_type)

    if separators:
        cascade = []
        for spec in separators:
            if isinstance(spec, Boundary):
                cascade.append(spec)
                continue
            try:
                cascade.append(Boundary(spec, spec))
            except re.error as e:
                raise ConfigurationError(f"Invalid separator pattern {spec!r}: {e}") from e
        return tuple(cascade)

    if kind is ContentType.CUSTOM:
        raise ConfigurationError(
            "Custom content type requires at least one separator; "
            "use the markdown or source content type or pass separators"
        )

    return BUILTIN_CASCADES[kind]
