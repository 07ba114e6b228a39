"""Inline glyph rendering for two-byte private-use code points.

Sprite sheets named ``glyph_XX.png`` (256×256 pixels, a 16×16 grid of
16×16 cells, one sheet per leading byte ``XX``) are discovered under a
project root and indexed so that every code point ``0xXXRC`` maps to the
cell at row ``R`` column ``C`` of sheet ``XX``. The package is organised
leaf-first:

* :mod:`bedrock_glyphs.locator` finds sheet files (bounded-depth scan).
* :mod:`bedrock_glyphs.utils.image` decodes rasters and detects empty cells.
* :mod:`bedrock_glyphs.index` builds the code point → cell mapping.
* :mod:`bedrock_glyphs.renderer` turns document text into decoration ranges.
* :mod:`bedrock_glyphs.hex_resolution` powers the "insert glyph" command.
* :mod:`bedrock_glyphs.controller` wires everything to a host editor.
"""

from bedrock_glyphs.config import GlyphConfig
from bedrock_glyphs.controller import GlyphController
from bedrock_glyphs.index import GlyphIndex
from bedrock_glyphs.renderer.descriptor import DescriptorCache, RenderDescriptor
from bedrock_glyphs.renderer.model import RenderSpan, compute_render_model
from bedrock_glyphs.sheet import GlyphCell, GlyphSheet
from bedrock_glyphs.types import RenderMode

__all__ = [
    "DescriptorCache",
    "GlyphCell",
    "GlyphConfig",
    "GlyphController",
    "GlyphIndex",
    "GlyphSheet",
    "RenderDescriptor",
    "RenderMode",
    "RenderSpan",
    "compute_render_model",
]
