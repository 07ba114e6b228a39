import pytest

from bedrock_glyphs.host import TextDocument


def test_replace_uses_utf16_offsets() -> None:
    document = TextDocument("\U0001f600 0xE1")
    document.replace(3, 7, chr(0xE100))
    assert document.get_text() == "\U0001f600 " + chr(0xE100)
    assert document.version == 1


def test_replace_inserts_at_empty_range() -> None:
    document = TextDocument("ab")
    document.replace(1, 1, "x")
    assert document.get_text() == "axb"


def test_replace_rejects_reversed_range() -> None:
    document = TextDocument("abc")
    with pytest.raises(ValueError):
        document.replace(2, 1, "x")
    assert document.version == 0


def test_positions() -> None:
    document = TextDocument("one\n\U0001f600two")
    assert document.position_at(6) == (1, 2)
    assert document.offset_at(1, 2) == 6
    assert document.offset_at(0, 99) == 3
