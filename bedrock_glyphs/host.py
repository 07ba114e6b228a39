"""Contracts with the host editor.

The library never talks to a concrete editor. It needs a document it can read
and edit in UTF-16 code units, a view that accepts decoration ranges keyed by
descriptor, and a few UI hooks (messages, a picker, descriptor disposal).
:class:`TextDocument` is a plain in-memory document usable by simple hosts.
"""

from typing import List, Optional, Protocol, Sequence, Tuple

from bedrock_glyphs.hex_resolution import GlyphCandidate
from bedrock_glyphs.renderer.descriptor import RenderDescriptor
from bedrock_glyphs.types import CodeUnitOffset
from bedrock_glyphs.utils.text import (
    offset_to_position,
    position_to_offset,
    python_index,
)


class Document(Protocol):
    def get_text(self) -> str: ...

    def replace(self, start: CodeUnitOffset, end: CodeUnitOffset, text: str) -> None: ...


class EditorView(Protocol):
    @property
    def document(self) -> Document: ...

    @property
    def cursor(self) -> CodeUnitOffset: ...

    def set_decorations(
        self,
        descriptor: RenderDescriptor,
        ranges: List[Tuple[CodeUnitOffset, CodeUnitOffset]],
    ) -> None: ...


class HostUI(Protocol):
    def show_info(self, message: str) -> None: ...

    def show_warning(self, message: str) -> None: ...

    def pick(self, candidates: Sequence[GlyphCandidate]) -> Optional[GlyphCandidate]: ...

    def dispose(self, descriptor: RenderDescriptor) -> None: ...


class TextDocument:
    """Mutable text buffer addressed in UTF-16 code units."""

    def __init__(self, text: str = "") -> None:
        self._text = text
        self.version = 0

    def get_text(self) -> str:
        return self._text

    def replace(self, start: CodeUnitOffset, end: CodeUnitOffset, text: str) -> None:
        if end < start:
            raise ValueError(f"Invalid range [{start}, {end})")
        i = python_index(self._text, start)
        j = python_index(self._text, end)
        self._text = self._text[:i] + text + self._text[j:]
        self.version += 1

    def position_at(self, offset: CodeUnitOffset) -> Tuple[int, int]:
        return offset_to_position(self._text, offset)

    def offset_at(self, line: int, character: int) -> CodeUnitOffset:
        return position_to_offset(self._text, line, character)
