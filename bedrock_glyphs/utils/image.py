import base64
import logging
import numpy as np
import numpy.typing as npt
from PIL import Image
from typing import Tuple

from bedrock_glyphs.exceptions import SheetDecodeError
from bedrock_glyphs.types import CELL_SIZE, GRID_SIZE

# Type aliases for clarity
UInt8Array = npt.NDArray[np.uint8]
BoolArray = npt.NDArray[np.bool_]

logger = logging.getLogger(__name__)


def decode_rgba(path: str) -> UInt8Array:
    """
    Decode an image file into an (H, W, 4) uint8 array, whatever its mode.
    """
    try:
        with Image.open(path) as img:
            rgba = img.convert("RGBA")
    except (OSError, ValueError) as exc:
        raise SheetDecodeError(path, str(exc)) from exc
    return np.asarray(rgba, dtype=np.uint8)


def is_cell_transparent(pixels: UInt8Array, row: int, col: int) -> bool:
    """
    True iff every pixel of the 16x16 block at (col*16, row*16) has alpha 0.

    Blocks that do not fit inside the raster, or rasters without an alpha
    channel, count as opaque.
    """
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        return False
    y0, x0 = row * CELL_SIZE, col * CELL_SIZE
    block = pixels[y0 : y0 + CELL_SIZE, x0 : x0 + CELL_SIZE, 3]
    if block.shape != (CELL_SIZE, CELL_SIZE):
        return False
    return not bool(block.any())


def transparency_mask(pixels: UInt8Array) -> BoolArray:
    """
    Per-cell transparency as a (16, 16) bool array indexed [row, col].
    """
    mask: BoolArray = np.zeros((GRID_SIZE, GRID_SIZE), dtype=np.bool_)
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            mask[row, col] = is_cell_transparent(pixels, row, col)
    return mask


def safe_transparency_mask(pixels: UInt8Array, label: str) -> BoolArray:
    """
    Like transparency_mask, but a malformed raster yields an all-opaque mask.
    """
    try:
        return transparency_mask(pixels)
    except (IndexError, TypeError, ValueError) as exc:
        logger.warning("Transparency check failed for %s (%s); keeping all cells", label, exc)
        return np.zeros((GRID_SIZE, GRID_SIZE), dtype=np.bool_)


def png_data_uri(path: str) -> str:
    """
    Embed a file's raw bytes as a ``data:image/png;base64,...`` URI.
    """
    try:
        with open(path, "rb") as f:
            payload = f.read()
    except OSError as exc:
        raise SheetDecodeError(path, str(exc)) from exc
    return "data:image/png;base64," + base64.b64encode(payload).decode("ascii")


def background_position(row: int, col: int) -> Tuple[float, float]:
    """
    CSS background-position percentages that show cell (row, col) of a
    sheet scaled to 1600% in a 16px box.
    """
    last = GRID_SIZE - 1
    return col * 100 / last, row * 100 / last


def crop_fraction(row: int, col: int) -> Tuple[float, float]:
    """
    Top-left corner of a cell as a fraction of the sheet size.
    """
    return col / GRID_SIZE, row / GRID_SIZE
