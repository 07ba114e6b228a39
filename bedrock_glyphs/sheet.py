"""Glyph sheets and the cells they contain.

A sheet is one ``glyph_XX.png`` raster. Cell ``(row, col)`` of sheet ``XX``
renders code point ``XX * 256 + row * 16 + col``. Cells are never stored on
their own; :class:`GlyphCell` is the metadata an index entry carries.
"""

from dataclasses import dataclass, field
import re
from typing import Iterator, Optional, Tuple

import numpy as np
import numpy.typing as npt

from bedrock_glyphs.types import CELLS_PER_SHEET, GRID_SIZE, CodePoint, SheetByte
from bedrock_glyphs.utils.image import decode_rgba

SHEET_FILE_PATTERN = re.compile(r"^glyph_([0-9A-Fa-f]{2})\.png$", re.IGNORECASE)


def parse_sheet_filename(name: str) -> Optional[SheetByte]:
    """Return the byte value encoded in a sheet file name, or ``None``."""
    match = SHEET_FILE_PATTERN.match(name)
    if match is None:
        return None
    return int(match.group(1), 16)


def sheet_filename(sheet_byte: SheetByte) -> str:
    return f"glyph_{sheet_byte:02X}.png"


def code_point_for(sheet_byte: SheetByte, row: int, col: int) -> CodePoint:
    return sheet_byte * CELLS_PER_SHEET + row * GRID_SIZE + col


def format_code_point(code_point: CodePoint) -> str:
    """``U+XXXX`` label, at least four upper-case digits."""
    return f"U+{code_point:04X}"


def split_code_point(code_point: CodePoint) -> Tuple[SheetByte, int, int]:
    """Inverse of :func:`code_point_for` for two-byte code points."""
    sheet_byte, low = divmod(code_point, CELLS_PER_SHEET)
    row, col = divmod(low, GRID_SIZE)
    return sheet_byte, row, col


def iter_cells() -> Iterator[Tuple[int, int]]:
    """Yield every ``(row, col)`` of a sheet in row-major order."""
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            yield row, col


@dataclass(eq=False)
class GlyphSheet:
    """A located sheet file; pixels are decoded on first use.

    Attributes:
        sheet_byte: Leading byte served by this sheet (0-255).
        path: File system path of the raster.
    """

    sheet_byte: SheetByte
    path: str
    _pixels: Optional[npt.NDArray[np.uint8]] = field(
        default=None, init=False, repr=False
    )

    @property
    def name(self) -> str:
        """Upper-case two-digit byte label, e.g. ``"E1"``."""
        return f"{self.sheet_byte:02X}"

    @property
    def filename(self) -> str:
        return sheet_filename(self.sheet_byte)

    def load_pixels(self) -> npt.NDArray[np.uint8]:
        """Decode the raster into an ``(H, W, 4)`` RGBA array (cached).

        Raises:
            SheetDecodeError: The file is missing or not a readable image.
        """
        if self._pixels is None:
            self._pixels = decode_rgba(self.path)
        return self._pixels

    @property
    def size(self) -> Tuple[int, int]:
        """``(width, height)`` of the decoded raster."""
        pixels = self.load_pixels()
        return int(pixels.shape[1]), int(pixels.shape[0])

    def cell(self, row: int, col: int, transparent: bool = False) -> "GlyphCell":
        return GlyphCell(
            sheet_byte=self.sheet_byte,
            row=row,
            col=col,
            source_ref=self.path,
            transparent=transparent,
        )


@dataclass(frozen=True)
class GlyphCell:
    """Index entry for one code point.

    Attributes:
        sheet_byte: Leading byte of the sheet holding the cell.
        row: Cell row in ``[0, 16)``.
        col: Cell column in ``[0, 16)``.
        source_ref: Path of the sheet raster.
        transparent: Whether every pixel of the cell has alpha 0. Indexed
            cells never set it; transparent cells are left out instead.
    """

    sheet_byte: SheetByte
    row: int
    col: int
    source_ref: str
    transparent: bool = False

    @property
    def code_point(self) -> CodePoint:
        return code_point_for(self.sheet_byte, self.row, self.col)

    @property
    def sheet_filename(self) -> str:
        return sheet_filename(self.sheet_byte)
