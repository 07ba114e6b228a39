"""UTF-16 code unit arithmetic over Python strings.

Host editors address text in UTF-16 code units: a code point above the Basic
Multilingual Plane takes two units. Python strings may carry such a code point
either as one character or, when text came through a surrogate-preserving
codec, as a high/low surrogate pair of two characters. Both forms are
consumed as a single step of width 2, so ranges never split a pair.
"""

from typing import Iterator, NamedTuple, Optional, Tuple

from bedrock_glyphs.types import CodePoint, CodeUnitOffset

HIGH_SURROGATES = range(0xD800, 0xDC00)
LOW_SURROGATES = range(0xDC00, 0xE000)


class CodePointSpan(NamedTuple):
    """One code point located in a string.

    ``start``/``end`` are UTF-16 code unit offsets, ``index`` is the Python
    string index of its first character and ``length`` the number of Python
    characters it occupies (2 only for an explicit surrogate pair).
    """

    start: CodeUnitOffset
    end: CodeUnitOffset
    code_point: CodePoint
    index: int
    length: int

    @property
    def width(self) -> int:
        return self.end - self.start


def utf16_width(code_point: CodePoint) -> int:
    return 2 if code_point > 0xFFFF else 1


def combine_surrogates(high: int, low: int) -> CodePoint:
    return 0x10000 + ((high - 0xD800) << 10) + (low - 0xDC00)


def iter_code_points(text: str) -> Iterator[CodePointSpan]:
    """Walk ``text`` one code point at a time with UTF-16 offsets."""
    offset = 0
    i = 0
    n = len(text)
    while i < n:
        cp = ord(text[i])
        length = 1
        if cp in HIGH_SURROGATES and i + 1 < n and ord(text[i + 1]) in LOW_SURROGATES:
            cp = combine_surrogates(cp, ord(text[i + 1]))
            length = 2
        width = utf16_width(cp)
        yield CodePointSpan(offset, offset + width, cp, i, length)
        offset += width
        i += length


def utf16_length(text: str) -> int:
    return sum(span.width for span in iter_code_points(text))


def code_point_at(text: str, offset: CodeUnitOffset) -> Optional[CodePointSpan]:
    """The code point starting at ``offset``, or ``None`` past the end or
    when ``offset`` falls inside a surrogate pair."""
    for span in iter_code_points(text):
        if span.start == offset:
            return span
        if span.start > offset:
            break
    return None


def code_point_before(text: str, offset: CodeUnitOffset) -> Optional[CodePointSpan]:
    """The code point ending exactly at ``offset``."""
    for span in iter_code_points(text):
        if span.end == offset:
            return span
        if span.end > offset:
            break
    return None


def python_index(text: str, offset: CodeUnitOffset) -> int:
    """Map a code unit offset to a Python string index (clamped to the end).

    An offset inside a surrogate pair maps to the start of that pair.
    """
    for span in iter_code_points(text):
        if span.end > offset:
            return span.index
    return len(text)


def offset_to_position(text: str, offset: CodeUnitOffset) -> Tuple[int, int]:
    """Translate a linear offset into ``(line, character)``.

    ``\\n``, ``\\r\\n`` and a lone ``\\r`` end a line; ``character`` counts
    code units from the start of its line.
    """
    line = 0
    line_start = 0
    previous_cr = False
    for span in iter_code_points(text):
        if span.start >= offset:
            break
        if span.code_point == 0x0A:
            line += 0 if previous_cr else 1
            line_start = span.end
        elif span.code_point == 0x0D:
            line += 1
            line_start = span.end
        previous_cr = span.code_point == 0x0D
    return line, max(0, min(offset, utf16_length(text)) - line_start)


def position_to_offset(text: str, line: int, character: int) -> CodeUnitOffset:
    """Inverse of :func:`offset_to_position`; clamps to the line end."""
    current = 0
    line_start = 0
    spans = list(iter_code_points(text))
    i = 0
    while current < line and i < len(spans):
        cp = spans[i].code_point
        if cp == 0x0D and i + 1 < len(spans) and spans[i + 1].code_point == 0x0A:
            i += 1
        if cp in (0x0A, 0x0D):
            current += 1
            line_start = spans[i].end
        i += 1
    line_end = line_start
    while i < len(spans) and spans[i].code_point not in (0x0A, 0x0D):
        line_end = spans[i].end
        i += 1
    return min(line_start + max(0, character), line_end)


def line_prefix(text: str, offset: CodeUnitOffset) -> Tuple[CodeUnitOffset, str]:
    """Return ``(line_start, prefix)``: the text of ``offset``'s line before it."""
    offset = min(max(0, offset), utf16_length(text))
    _, character = offset_to_position(text, offset)
    start = offset - character
    return start, text[python_index(text, start) : python_index(text, offset)]
