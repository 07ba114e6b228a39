"""Exceptions raised at the user-facing edges of the library.

Scan, decode and lookup problems during indexing or rendering are absorbed
where they happen (fewer glyphs, opaque cells, no decoration). Only the
interactive hex resolution path raises, and the controller turns those into
host messages.
"""


class GlyphError(Exception):
    """Base class for glyph related failures."""


class SheetNotFoundError(GlyphError):
    """No sheet file exists for the requested byte value."""

    def __init__(self, sheet_byte: int) -> None:
        super().__init__(f"No glyph sheet found for glyph_{sheet_byte:02X}.png")
        self.sheet_byte = sheet_byte


class SheetDecodeError(GlyphError):
    """A sheet file exists but could not be read as an image."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Unable to read glyph sheet {path}: {reason}")
        self.path = path
        self.reason = reason


class HexTokenError(GlyphError):
    """The text before the cursor does not end with a usable hex token."""
