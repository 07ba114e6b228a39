"""Reusable visual descriptors for glyph decorations.

A :class:`RenderDescriptor` is what the host turns into one decoration type:
the whole sheet embedded as a data URI, scaled to 1600% inside a 16px box and
shifted so that a single cell shows. Descriptors compare by identity; the
cache hands out the same instance for the same ``(sheet, row, col, mode)``
key until it is invalidated, so hosts can diff "what is applied" against
"what should be applied" cheaply.
"""

from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from bedrock_glyphs.exceptions import SheetDecodeError
from bedrock_glyphs.sheet import GlyphCell
from bedrock_glyphs.types import CELL_SIZE, GRID_SIZE, RenderMode, SheetByte
from bedrock_glyphs.utils.image import background_position, crop_fraction, png_data_uri

logger = logging.getLogger(__name__)

DescriptorKey = Tuple[SheetByte, int, int, RenderMode]


@dataclass(frozen=True, eq=False)
class RenderDescriptor:
    """Visual parameters for every occurrence of one glyph cell.

    Attributes:
        sheet_byte: Leading byte of the sheet.
        row: Cell row.
        col: Cell column.
        render_mode: Whether the source character is suppressed.
        image_uri: ``data:image/png;base64,...`` of the full sheet.
        position: CSS background-position percentages ``(x, y)``.
        crop: Top-left corner of the cell as a fraction of the sheet size.
    """

    sheet_byte: SheetByte
    row: int
    col: int
    render_mode: RenderMode
    image_uri: str = field(repr=False)
    position: Tuple[float, float]
    crop: Tuple[float, float]

    @property
    def key(self) -> DescriptorKey:
        return (self.sheet_byte, self.row, self.col, self.render_mode)

    @property
    def hides_source(self) -> bool:
        return self.render_mode is RenderMode.HIDE

    def style(self) -> Dict[str, Any]:
        """Decoration options in the shape editor hosts expect."""
        if self.hides_source:
            # Collapse the source character so the image takes its place.
            base = {"letter_spacing": "-1ch", "opacity": "0"}
        else:
            base = {"letter_spacing": "0", "opacity": "1"}
        x, y = self.position
        scale = GRID_SIZE * 100
        after = {
            "content_text": " ",
            "width": f"{CELL_SIZE}px",
            "height": f"{CELL_SIZE}px",
            "margin": "0",
            "text_decoration": (
                "display:inline-block;"
                f"width:{CELL_SIZE}px;"
                f"height:{CELL_SIZE}px;"
                f"background-image:url('{self.image_uri}');"
                f"background-size:{scale}% {scale}%;"
                f"background-position:{x:g}% {y:g}%;"
                "background-repeat:no-repeat;"
            ),
        }
        return {**base, "after": after}


class DescriptorCache:
    """Memoizes descriptors by ``(sheet, row, col, mode)``.

    Sheet images are read and base64-encoded once per file. Sheets that
    cannot be read produce no descriptor (the glyph is simply not drawn) and
    are reported once until the next invalidation.
    """

    def __init__(self) -> None:
        self._descriptors: Dict[DescriptorKey, RenderDescriptor] = {}
        self._sheet_uris: Dict[str, str] = {}
        self._failed: Set[str] = set()

    def __len__(self) -> int:
        return len(self._descriptors)

    def descriptors(self) -> List[RenderDescriptor]:
        return list(self._descriptors.values())

    def _sheet_uri(self, path: str) -> Optional[str]:
        uri = self._sheet_uris.get(path)
        if uri is not None or path in self._failed:
            return uri
        try:
            uri = png_data_uri(path)
        except SheetDecodeError as exc:
            self._failed.add(path)
            logger.warning("%s", exc)
            return None
        self._sheet_uris[path] = uri
        return uri

    def get(self, cell: GlyphCell, render_mode: RenderMode) -> Optional[RenderDescriptor]:
        key: DescriptorKey = (cell.sheet_byte, cell.row, cell.col, render_mode)
        descriptor = self._descriptors.get(key)
        if descriptor is not None:
            return descriptor
        uri = self._sheet_uri(cell.source_ref)
        if uri is None:
            return None
        descriptor = RenderDescriptor(
            sheet_byte=cell.sheet_byte,
            row=cell.row,
            col=cell.col,
            render_mode=render_mode,
            image_uri=uri,
            position=background_position(cell.row, cell.col),
            crop=crop_fraction(cell.row, cell.col),
        )
        self._descriptors[key] = descriptor
        return descriptor

    def invalidate_all(self) -> List[RenderDescriptor]:
        """Drop every cached descriptor and sheet image.

        Returns the dropped descriptors so the host can dispose of them.
        """
        dropped = list(self._descriptors.values())
        self._descriptors.clear()
        self._sheet_uris.clear()
        self._failed.clear()
        return dropped
