"""Common type aliases, sheet geometry and enumerations."""

from enum import StrEnum, auto

CodePoint = int
SheetByte = int
CodeUnitOffset = int

SHEET_SIZE = 256
CELL_SIZE = 16
GRID_SIZE = SHEET_SIZE // CELL_SIZE
CELLS_PER_SHEET = GRID_SIZE * GRID_SIZE


class RenderMode(StrEnum):
    """How a decoration treats the source character it is attached to."""

    HIDE = auto()
    SHOW = auto()

    @classmethod
    def from_flag(cls, hide_source_char: bool) -> "RenderMode":
        return cls.HIDE if hide_source_char else cls.SHOW
