"""Hover details for glyph code points.

A rendered glyph is drawn *after* its source character, so a pointer resting
on the image usually sits one position past the code point. The lookup tries
the code point at the position first and then the one ending there.
"""

from dataclasses import dataclass
from typing import Optional

from bedrock_glyphs.index import GlyphIndex
from bedrock_glyphs.sheet import GlyphCell, format_code_point
from bedrock_glyphs.types import CodeUnitOffset
from bedrock_glyphs.utils.text import code_point_at, code_point_before


@dataclass(frozen=True)
class GlyphHover:
    start: CodeUnitOffset
    end: CodeUnitOffset
    cell: GlyphCell

    @property
    def code_point(self) -> int:
        return self.cell.code_point

    def markdown(self) -> str:
        return (
            "**Bedrock Glyphs**\n\n"
            f"Code: `{format_code_point(self.code_point)}`\n\n"
            f"Glyph: `{self.cell.sheet_filename}`\n\n"
            f"Position: Row {self.cell.row}, Col {self.cell.col}\n\n"
        )


def hover_at(text: str, offset: CodeUnitOffset, index: GlyphIndex) -> Optional[GlyphHover]:
    for span in (code_point_at(text, offset), code_point_before(text, offset)):
        if span is None:
            continue
        cell = index.lookup(span.code_point)
        if cell is not None:
            return GlyphHover(span.start, span.end, cell)
    return None
