from typing import Tuple

import pytest

from bedrock_glyphs.config import GlyphConfig
from bedrock_glyphs.controller import GlyphController
from bedrock_glyphs.renderer.descriptor import RenderDescriptor
from bedrock_glyphs.types import RenderMode
from tests.test_utils import FakeHost, FakeView, write_garbage, write_sheet

EMOJI_PAIR = chr(0xD83D) + chr(0xDE00)


def make_controller(
    tmp_path, pick_index=0, config=None
) -> Tuple[GlyphController, FakeHost]:
    write_sheet(str(tmp_path / "font"), 0xE1, [(0, 0), (2, 3)])
    host = FakeHost(pick_index)
    controller = GlyphController(host, str(tmp_path), config, fallback_dir=None)
    return controller, host


def descriptor_for(
    controller: GlyphController, code_point: int, mode: RenderMode = RenderMode.HIDE
) -> RenderDescriptor:
    cell = controller.index.lookup(code_point)
    assert cell is not None
    descriptor = controller.cache.get(cell, mode)
    assert descriptor is not None
    return descriptor


def test_activate_renders_active_view(tmp_path) -> None:
    controller, _ = make_controller(tmp_path)
    view = FakeView("a" + chr(0xE123) + chr(0xE100) + chr(0xE123))
    assert controller.activate(view) == 2
    assert controller.active_view is view

    e123 = descriptor_for(controller, 0xE123)
    e100 = descriptor_for(controller, 0xE100)
    assert view.calls == [(e123, [(1, 2), (3, 4)]), (e100, [(2, 3)])]


def test_activate_without_view(tmp_path) -> None:
    controller, _ = make_controller(tmp_path)
    assert controller.activate() == 2
    assert controller.active_view is None
    assert controller.refresh() is None


def test_ranges_follow_utf16_offsets(tmp_path) -> None:
    controller, _ = make_controller(tmp_path)
    view = FakeView(EMOJI_PAIR + "\U0001f600" + chr(0xE123))
    controller.activate(view)
    assert list(view.decorations.values()) == [[(4, 5)]]


def test_text_change_clears_unreferenced_descriptors(tmp_path) -> None:
    controller, _ = make_controller(tmp_path)
    view = FakeView(chr(0xE123) + chr(0xE100))
    controller.activate(view)
    e123 = descriptor_for(controller, 0xE123)
    e100 = descriptor_for(controller, 0xE100)

    view.calls.clear()
    view.document.replace(0, 2, "x" + chr(0xE100))
    controller.on_text_changed(view)
    assert view.calls == [(e123, []), (e100, [(1, 2)])]
    assert view.decorations == {e100: [(1, 2)]}


def test_text_change_in_inactive_view_is_ignored(tmp_path) -> None:
    controller, _ = make_controller(tmp_path)
    active = FakeView(chr(0xE123))
    other = FakeView(chr(0xE100))
    controller.activate(active)
    controller.on_text_changed(other)
    assert other.calls == []


def test_switching_views_clears_leftovers(tmp_path) -> None:
    controller, _ = make_controller(tmp_path)
    first = FakeView(chr(0xE123))
    second = FakeView(chr(0xE100))
    controller.activate(first)
    e123 = descriptor_for(controller, 0xE123)

    controller.on_active_editor_changed(second)
    e100 = descriptor_for(controller, 0xE100)
    assert controller.active_view is second
    assert second.calls == [(e123, []), (e100, [(0, 1)])]

    controller.on_active_editor_changed(None)
    assert controller.active_view is None


def test_configuration_change_disposes_and_rerenders(tmp_path) -> None:
    controller, host = make_controller(tmp_path)
    view = FakeView(chr(0xE123))
    controller.activate(view)
    hidden = descriptor_for(controller, 0xE123)

    view.calls.clear()
    controller.on_configuration_changed(GlyphConfig(hide_source_char=False))
    assert host.disposed == [hidden]
    assert len(view.calls) == 1
    shown, ranges = view.calls[0]
    assert shown is not hidden
    assert shown.render_mode is RenderMode.SHOW
    assert not shown.hides_source
    assert ranges == [(0, 1)]


def test_unchanged_configuration_is_a_no_op(tmp_path) -> None:
    controller, host = make_controller(tmp_path)
    view = FakeView(chr(0xE123))
    controller.activate(view)
    view.calls.clear()
    controller.on_configuration_changed(GlyphConfig())
    assert host.disposed == []
    assert view.calls == []


def test_including_transparent_cells_rebuilds_index(tmp_path) -> None:
    controller, _ = make_controller(tmp_path)
    view = FakeView(chr(0xE155))
    controller.activate(view)
    assert view.calls == []

    controller.on_configuration_changed(GlyphConfig(exclude_transparent=False))
    assert len(controller.index) == 256
    assert list(view.decorations.values()) == [[(0, 1)]]


def test_reload_picks_up_new_sheets(tmp_path) -> None:
    controller, host = make_controller(tmp_path)
    view = FakeView(chr(0x4200))
    controller.activate(view)
    assert view.decorations == {}

    write_sheet(str(tmp_path / "font"), 0x42, None)
    old = controller.cache.descriptors()
    assert controller.reload() == 2 + 256
    assert host.infos == ["Bedrock glyphs reloaded! Found 258 glyphs."]
    assert host.disposed == old
    assert list(view.decorations.values()) == [[(0, 1)]]


def test_reload_without_root(tmp_path) -> None:
    host = FakeHost()
    controller = GlyphController(host, None, fallback_dir=None)
    assert controller.reload() == 0
    assert host.infos == ["Bedrock glyphs reloaded! Found 0 glyphs."]


def test_resolve_direct_code_point(tmp_path) -> None:
    controller, host = make_controller(tmp_path)
    view = FakeView("say E123")
    controller.activate(view)
    replacement = controller.resolve_hex_at_cursor()
    assert replacement is not None
    assert view.document.get_text() == "say " + chr(0xE123)
    assert host.offered == []


def test_resolve_sheet_with_picker(tmp_path) -> None:
    controller, host = make_controller(tmp_path, pick_index=1)
    view = FakeView("line one\nx 0xE1")
    controller.activate(view)
    replacement = controller.resolve_hex_at_cursor(view)
    assert replacement is not None
    assert (replacement.start, replacement.end) == (11, 15)
    assert [c.label for c in host.offered[0]] == ["U+E100 [0, 0]", "U+E123 [2, 3]"]
    assert view.document.get_text() == "line one\nx " + chr(0xE123)

    controller.on_text_changed(view)
    assert list(view.decorations.values()) == [[(11, 12)]]


def test_resolve_uses_cursor_position(tmp_path) -> None:
    controller, _ = make_controller(tmp_path)
    view = FakeView("E123 tail", cursor=4)
    controller.activate(view)
    controller.resolve_hex_at_cursor(view)
    assert view.document.get_text() == chr(0xE123) + " tail"


def test_dismissed_picker_leaves_document(tmp_path) -> None:
    controller, host = make_controller(tmp_path, pick_index=None)
    view = FakeView("0xE1")
    controller.activate(view)
    assert controller.resolve_hex_at_cursor(view) is None
    assert len(host.offered) == 1
    assert view.document.get_text() == "0xE1"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("hello", "No hex code"),
        ("xE12", "3 hex digits"),
        ("0x77", "glyph_77.png"),
        ("DFFF", "surrogate"),
    ],
)
def test_resolve_failures_warn_without_editing(tmp_path, text: str, expected: str) -> None:
    controller, host = make_controller(tmp_path)
    view = FakeView(text)
    controller.activate(view)
    assert controller.resolve_hex_at_cursor(view) is None
    assert len(host.warnings) == 1
    assert expected in host.warnings[0]
    assert view.document.get_text() == text


def test_resolve_sheet_without_visible_cells(tmp_path) -> None:
    controller, host = make_controller(tmp_path)
    write_sheet(str(tmp_path / "font"), 0xE2, [])
    view = FakeView("0xE2")
    controller.activate(view)
    assert controller.resolve_hex_at_cursor(view) is None
    assert host.warnings == ["No visible glyphs in glyph_E2.png"]
    assert host.offered == []


def test_resolve_undecodable_sheet_offers_every_cell(tmp_path) -> None:
    controller, host = make_controller(tmp_path, pick_index=5)
    write_garbage(str(tmp_path / "font"), "glyph_78.png")
    view = FakeView("0x78")
    controller.activate(view)
    replacement = controller.resolve_hex_at_cursor(view)
    assert replacement is not None
    assert host.warnings == []
    assert len(host.offered[0]) == 256
    assert view.document.get_text() == chr(0x7805)


def test_resolve_without_view(tmp_path) -> None:
    controller, host = make_controller(tmp_path)
    controller.activate()
    assert controller.resolve_hex_at_cursor() is None
    assert host.warnings == []


def test_hover(tmp_path) -> None:
    controller, _ = make_controller(tmp_path)
    view = FakeView("a" + chr(0xE123) + "b")
    controller.activate(view)
    hover = controller.hover(view.document, 2)
    assert hover is not None
    assert hover.code_point == 0xE123
    assert "Position: Row 2, Col 3" in hover.markdown()
    assert controller.hover(view.document, 0) is None


def test_deactivate_disposes_everything(tmp_path) -> None:
    controller, host = make_controller(tmp_path)
    view = FakeView(chr(0xE123) + chr(0xE100))
    controller.activate(view)
    cached = controller.cache.descriptors()
    controller.deactivate()
    assert host.disposed == cached
    assert len(controller.cache) == 0
    assert controller.active_view is None
