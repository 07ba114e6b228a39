"""Resolve a hex token typed before the cursor into a glyph insertion.

The token is the longest run of 2 to 4 hex digits ending at the cursor,
optionally preceded by ``0x``, ``\\u``, ``U+`` or ``&#x``:

* 4 digits name a code point directly (``E123`` → ``U+E123``).
* 2 digits name a sheet (``0xE1`` → sheet ``E1``); every non-transparent cell
  of that sheet becomes a candidate for the host's picker.

Either way the result replaces the token (prefix included) with the literal
character. Failures raise :class:`~bedrock_glyphs.exceptions.GlyphError`
subclasses and leave the document untouched.
"""

from dataclasses import dataclass
import logging
import os
import re
from typing import NamedTuple, Optional, Tuple

from bedrock_glyphs.exceptions import HexTokenError, SheetDecodeError, SheetNotFoundError
from bedrock_glyphs.index import GlyphIndex
from bedrock_glyphs.locator import DEFAULT_MAX_DEPTH, find_sheet
from bedrock_glyphs.sheet import (
    GlyphSheet,
    code_point_for,
    format_code_point,
    iter_cells,
    sheet_filename,
)
from bedrock_glyphs.types import GRID_SIZE, CodePoint, CodeUnitOffset, SheetByte
from bedrock_glyphs.utils.image import background_position, png_data_uri, safe_transparency_mask
from bedrock_glyphs.utils.text import utf16_length

logger = logging.getLogger(__name__)

HEX_TOKEN_PATTERN = re.compile(
    r"(?P<prefix>0x|\\u|u\+|&#x)?(?P<digits>[0-9a-f]{2,4})$", re.IGNORECASE
)
SURROGATES = range(0xD800, 0xE000)


class HexMatch(NamedTuple):
    prefix: str
    digits: str

    @property
    def token(self) -> str:
        return self.prefix + self.digits

    @property
    def value(self) -> int:
        return int(self.digits, 16)


@dataclass(frozen=True)
class Replacement:
    """Replace code units ``[start, end)`` with ``text``."""

    start: CodeUnitOffset
    end: CodeUnitOffset
    text: str


@dataclass(frozen=True)
class GlyphCandidate:
    """One pickable cell of a sheet.

    Attributes:
        code_point: Code point the cell renders.
        row: Cell row.
        col: Cell column.
        label: ``"U+E123 [2, 3]"``.
        description: Sheet file name the cell comes from.
        icon_uri: Data URI of the whole sheet.
        icon_position: Background-position percentages showing the cell.
    """

    code_point: CodePoint
    row: int
    col: int
    label: str
    description: str
    icon_uri: str
    icon_position: Tuple[float, float]

    @property
    def text(self) -> str:
        return chr(self.code_point)

    def icon_style(self, size: int = 32) -> str:
        """Inline CSS drawing this cell from the embedded sheet in a square box."""
        x, y = self.icon_position
        scale = GRID_SIZE * 100
        return (
            f"width:{size}px;height:{size}px;image-rendering:pixelated;"
            f"background-image:url('{self.icon_uri}');"
            f"background-size:{scale}% {scale}%;"
            f"background-position:{x:g}% {y:g}%;"
            "background-repeat:no-repeat;"
        )


@dataclass(frozen=True)
class HexResolution:
    """Outcome of resolving a token.

    Exactly one of ``replacement`` (direct) or ``candidates`` (picker) is
    meaningful; :meth:`choose` turns a picked candidate into a replacement
    over the same token span.
    """

    start: CodeUnitOffset
    end: CodeUnitOffset
    replacement: Optional[Replacement] = None
    candidates: Tuple[GlyphCandidate, ...] = ()
    sheet: Optional[GlyphSheet] = None

    @property
    def is_direct(self) -> bool:
        return self.replacement is not None

    def choose(self, candidate: GlyphCandidate) -> Replacement:
        return Replacement(self.start, self.end, candidate.text)


def match_hex_token(text_before_cursor: str) -> HexMatch:
    match = HEX_TOKEN_PATTERN.search(text_before_cursor)
    if match is None:
        raise HexTokenError("No hex code before the cursor (expected e.g. E123 or 0xE1)")
    hex_match = HexMatch(match.group("prefix") or "", match.group("digits"))
    if len(hex_match.digits) == 3:
        raise HexTokenError(
            f"'{hex_match.token}' has 3 hex digits; use 4 for a code point or 2 for a sheet"
        )
    return hex_match


def locate_sheet(
    sheet_byte: SheetByte,
    index: GlyphIndex,
    root: Optional[str],
    fallback_dir: Optional[str],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> GlyphSheet:
    """Find the sheet for ``sheet_byte``: index first, then disk, then fallback."""
    sheet = index.sheet(sheet_byte)
    if sheet is not None:
        return sheet
    path = find_sheet(root, sheet_byte, max_depth) if root is not None else None
    if path is None and fallback_dir is not None:
        candidate = os.path.join(fallback_dir, sheet_filename(sheet_byte))
        if os.path.isfile(candidate):
            path = candidate
    if path is None:
        raise SheetNotFoundError(sheet_byte)
    logger.debug("Located glyph_%02X outside the index at %s", sheet_byte, path)
    return GlyphSheet(sheet_byte, path)


def sheet_candidates(
    sheet: GlyphSheet, exclude_transparent: bool
) -> Tuple[GlyphCandidate, ...]:
    """Candidates for every (non-transparent) cell, row-major.

    A sheet that exists but cannot be decoded offers all 256 cells, matching
    how the index treats it.

    Raises:
        SheetDecodeError: The sheet file is missing or cannot be read.
    """
    uri = png_data_uri(sheet.path)
    mask = None
    if exclude_transparent:
        try:
            pixels = sheet.load_pixels()
        except SheetDecodeError as exc:
            logger.warning("%s; offering every cell of glyph_%s", exc, sheet.name)
        else:
            mask = safe_transparency_mask(pixels, sheet.path)
    candidates = []
    for row, col in iter_cells():
        if mask is not None and mask[row, col]:
            continue
        code_point = code_point_for(sheet.sheet_byte, row, col)
        candidates.append(
            GlyphCandidate(
                code_point=code_point,
                row=row,
                col=col,
                label=f"{format_code_point(code_point)} [{row}, {col}]",
                description=sheet.filename,
                icon_uri=uri,
                icon_position=background_position(row, col),
            )
        )
    return tuple(candidates)


def resolve_hex_token(
    text_before_cursor: str,
    cursor: CodeUnitOffset,
    index: GlyphIndex,
    root: Optional[str],
    exclude_transparent: bool = True,
    fallback_dir: Optional[str] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> HexResolution:
    """Resolve the token that ends at ``cursor``.

    Arguments:
        text_before_cursor: Text of the cursor's line up to the cursor.
        cursor: Code unit offset of the cursor in the document.
        index: Current glyph index, consulted before searching disk.
        root: Project root for a targeted sheet search.
        exclude_transparent: Hide fully transparent cells from the picker.
        fallback_dir: Bundled fallback sheets, searched last.
        max_depth: Depth limit for the targeted search.
    """
    hex_match = match_hex_token(text_before_cursor)
    start = cursor - utf16_length(hex_match.token)

    if len(hex_match.digits) == 4:
        code_point = hex_match.value
        if code_point in SURROGATES:
            raise HexTokenError(f"{format_code_point(code_point)} is a surrogate, not a character")
        return HexResolution(
            start=start,
            end=cursor,
            replacement=Replacement(start, cursor, chr(code_point)),
        )

    sheet = locate_sheet(hex_match.value, index, root, fallback_dir, max_depth)
    candidates = sheet_candidates(sheet, exclude_transparent)
    return HexResolution(start=start, end=cursor, candidates=candidates, sheet=sheet)
