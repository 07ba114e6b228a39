"""Code point → glyph cell index.

The index is rebuilt from disk as a whole: a new mapping is assembled off to
the side and swapped in with a single assignment, so readers only ever see
the previous index or the complete new one. Both stores are persistent maps
(``pyrsistent.PMap``) and are never mutated in place.

Build order (first registered sheet per byte wins):

1. ``<root>/font`` directly.
2. Breadth-first search for ``font`` directories under ``root``.
3. Bundled fallback sheets for ``E0`` and ``E1``, only for bytes that no
   project sheet registered.
"""

from dataclasses import dataclass
import logging
import os
from typing import Dict, Iterable, Iterator, Optional, Tuple

from pyrsistent import pmap
from pyrsistent.typing import PMap

from bedrock_glyphs.exceptions import SheetDecodeError
from bedrock_glyphs.locator import DEFAULT_MAX_DEPTH, SheetFile, iter_sheet_files
from bedrock_glyphs.sheet import GlyphCell, GlyphSheet, iter_cells, sheet_filename
from bedrock_glyphs.types import CodePoint, SheetByte
from bedrock_glyphs.utils.image import safe_transparency_mask

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_DIR = os.path.join(os.path.dirname(os.path.realpath(__file__)), "vanilla")
FALLBACK_SHEET_BYTES: Tuple[SheetByte, ...] = (0xE0, 0xE1)


@dataclass(frozen=True)
class IndexOptions:
    """Knobs for :meth:`GlyphIndex.rebuild`.

    Attributes:
        exclude_transparent: Leave fully transparent cells out of the index.
        max_depth: Directory levels searched below the root.
        fallback_dir: Directory holding the bundled fallback sheets, or
            ``None`` to disable the fallback.
    """

    exclude_transparent: bool = True
    max_depth: int = DEFAULT_MAX_DEPTH
    fallback_dir: Optional[str] = DEFAULT_FALLBACK_DIR


def index_sheet(
    sheet: GlyphSheet, exclude_transparent: bool
) -> Iterator[Tuple[CodePoint, GlyphCell]]:
    """Yield the index entries contributed by one sheet.

    With filtering on, the raster is decoded and transparent cells are
    dropped. A sheet that cannot be decoded keeps all 256 cells.
    """
    mask = None
    if exclude_transparent:
        try:
            pixels = sheet.load_pixels()
        except SheetDecodeError as exc:
            logger.warning("%s; indexing every cell of glyph_%s", exc, sheet.name)
        else:
            mask = safe_transparency_mask(pixels, sheet.path)

    for row, col in iter_cells():
        if mask is not None and mask[row, col]:
            continue
        cell = sheet.cell(row, col)
        yield cell.code_point, cell


def fallback_sheets(fallback_dir: Optional[str]) -> Iterator[SheetFile]:
    if fallback_dir is None:
        return
    for sheet_byte in FALLBACK_SHEET_BYTES:
        path = os.path.join(fallback_dir, sheet_filename(sheet_byte))
        if os.path.isfile(path):
            yield SheetFile(sheet_byte, path)


def build_index(
    root: str, options: IndexOptions
) -> Tuple[PMap[CodePoint, GlyphCell], PMap[SheetByte, GlyphSheet]]:
    """Assemble fresh entry and sheet maps without touching any live index."""
    entries: Dict[CodePoint, GlyphCell] = {}
    sheets: Dict[SheetByte, GlyphSheet] = {}

    def register(found: Iterable[SheetFile]) -> None:
        for sheet_file in found:
            if sheet_file.sheet_byte in sheets:
                continue
            sheet = GlyphSheet(sheet_file.sheet_byte, sheet_file.path)
            sheets[sheet.sheet_byte] = sheet
            entries.update(index_sheet(sheet, options.exclude_transparent))

    register(iter_sheet_files(root, options.max_depth))
    register(fallback_sheets(options.fallback_dir))
    return pmap(entries), pmap(sheets)


class GlyphIndex:
    """Lookup table from code point to :class:`GlyphCell`."""

    _entries: PMap[CodePoint, GlyphCell]
    _sheets: PMap[SheetByte, GlyphSheet]

    def __init__(self) -> None:
        self._entries = pmap()
        self._sheets = pmap()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, code_point: object) -> bool:
        return code_point in self._entries

    def lookup(self, code_point: CodePoint) -> Optional[GlyphCell]:
        return self._entries.get(code_point)

    def sheet(self, sheet_byte: SheetByte) -> Optional[GlyphSheet]:
        """The sheet registered for ``sheet_byte`` in the current build."""
        return self._sheets.get(sheet_byte)

    @property
    def entries(self) -> PMap[CodePoint, GlyphCell]:
        return self._entries

    @property
    def sheets(self) -> PMap[SheetByte, GlyphSheet]:
        return self._sheets

    def clear(self) -> None:
        self._entries = pmap()
        self._sheets = pmap()

    def rebuild(self, root: Optional[str], options: IndexOptions = IndexOptions()) -> int:
        """Replace the index with a fresh scan of ``root``.

        Without a root there is no project to scan and the index is left
        empty. Returns the number of indexed code points.
        """
        if root is None:
            self.clear()
            return 0
        entries, sheets = build_index(root, options)
        self._entries, self._sheets = entries, sheets
        logger.debug("Indexed %d code points from %d sheets", len(entries), len(sheets))
        return len(entries)
