import os
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from bedrock_glyphs.hex_resolution import GlyphCandidate
from bedrock_glyphs.host import TextDocument
from bedrock_glyphs.renderer.descriptor import RenderDescriptor
from bedrock_glyphs.utils.text import utf16_length

Cell = Tuple[int, int]
Range = Tuple[int, int]


def sheet_pixels(opaque_cells: Optional[Iterable[Cell]] = None) -> np.ndarray:
    """256x256 RGBA raster; all cells opaque when ``opaque_cells`` is None."""
    pixels = np.zeros((256, 256, 4), dtype=np.uint8)
    if opaque_cells is None:
        pixels[..., :] = (200, 80, 40, 255)
        return pixels
    for row, col in opaque_cells:
        pixels[row * 16 : (row + 1) * 16, col * 16 : (col + 1) * 16] = (200, 80, 40, 255)
    return pixels


def write_sheet(
    directory: str,
    sheet_byte: int,
    opaque_cells: Optional[Iterable[Cell]] = None,
    name: Optional[str] = None,
) -> str:
    """Write ``glyph_XX.png`` into ``directory`` (created if needed)."""
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, name or f"glyph_{sheet_byte:02X}.png")
    Image.fromarray(sheet_pixels(opaque_cells)).save(path)
    return path


def write_garbage(directory: str, name: str) -> str:
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, name)
    with open(path, "wb") as f:
        f.write(b"definitely not a png")
    return path


class FakeView:
    """Editor view that records every set_decorations call."""

    def __init__(self, text: str = "", cursor: Optional[int] = None):
        self._document = TextDocument(text)
        self._cursor = cursor
        self.calls: List[Tuple[RenderDescriptor, List[Range]]] = []
        self.decorations: Dict[RenderDescriptor, List[Range]] = {}

    @property
    def document(self) -> TextDocument:
        return self._document

    @property
    def cursor(self) -> int:
        if self._cursor is None:
            return utf16_length(self._document.get_text())
        return self._cursor

    def set_decorations(self, descriptor: RenderDescriptor, ranges: List[Range]) -> None:
        self.calls.append((descriptor, list(ranges)))
        if ranges:
            self.decorations[descriptor] = list(ranges)
        else:
            self.decorations.pop(descriptor, None)


class FakeHost:
    """Collects messages; picks the candidate at ``pick_index`` (or none)."""

    def __init__(self, pick_index: Optional[int] = 0):
        self.pick_index = pick_index
        self.infos: List[str] = []
        self.warnings: List[str] = []
        self.offered: List[Sequence[GlyphCandidate]] = []
        self.disposed: List[RenderDescriptor] = []

    def show_info(self, message: str) -> None:
        self.infos.append(message)

    def show_warning(self, message: str) -> None:
        self.warnings.append(message)

    def pick(self, candidates: Sequence[GlyphCandidate]) -> Optional[GlyphCandidate]:
        self.offered.append(candidates)
        if self.pick_index is None:
            return None
        return candidates[self.pick_index]

    def dispose(self, descriptor: RenderDescriptor) -> None:
        self.disposed.append(descriptor)
