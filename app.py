import html
import logging
import os
from typing import Dict, List, Optional, Sequence, Tuple

import streamlit as st

from bedrock_glyphs.config import GlyphConfig
from bedrock_glyphs.controller import GlyphController
from bedrock_glyphs.hex_resolution import GlyphCandidate
from bedrock_glyphs.host import TextDocument
from bedrock_glyphs.renderer.descriptor import RenderDescriptor
from bedrock_glyphs.utils.text import iter_code_points, utf16_length

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

Range = Tuple[int, int]

st.set_page_config(layout="wide", page_title="Bedrock Glyphs")
st.markdown(
    """
    <style>
        header, footer, #MainMenu { visibility: hidden; }
        .glyph-preview { font-family: monospace; white-space: pre-wrap; line-height: 20px; }
    </style>
""",
    unsafe_allow_html=True,
)


# --------- Host adapters ---------


class StreamlitView:
    """Editor view backed by session state; keeps the ranges it was given."""

    def __init__(self, document: TextDocument):
        self._document = document
        self.cursor_offset = 0
        self.decorations: Dict[RenderDescriptor, List[Range]] = {}

    @property
    def document(self) -> TextDocument:
        return self._document

    @property
    def cursor(self) -> int:
        return self.cursor_offset

    def set_decorations(self, descriptor: RenderDescriptor, ranges: List[Range]) -> None:
        if ranges:
            self.decorations[descriptor] = list(ranges)
        else:
            self.decorations.pop(descriptor, None)


class StreamlitHost:
    """Messages become toasts; the picker is a two-step button grid."""

    def show_info(self, message: str) -> None:
        st.toast(message, icon="✅")

    def show_warning(self, message: str) -> None:
        st.toast(message, icon="⚠️")

    def pick(self, candidates: Sequence[GlyphCandidate]) -> Optional[GlyphCandidate]:
        picked: Optional[str] = st.session_state.pop("picked_label", None)
        if picked is not None:
            for candidate in candidates:
                if candidate.label == picked:
                    st.session_state["candidates"] = []
                    return candidate
        st.session_state["candidates"] = list(candidates)
        return None

    def dispose(self, descriptor: RenderDescriptor) -> None:
        view: Optional[StreamlitView] = st.session_state.get("view")
        if view is not None:
            view.decorations.pop(descriptor, None)


# --------- State ---------


def make_controller(root: str, config: GlyphConfig) -> None:
    document = TextDocument("Glyphs: \ue000 \ue001 \ue010 and \ue123\n0xE1")
    view = StreamlitView(document)
    controller = GlyphController(StreamlitHost(), root, config)
    st.session_state["document"] = document
    st.session_state["view"] = view
    st.session_state["controller"] = controller
    st.session_state["candidates"] = []
    controller.activate(view)


def set_default_state() -> None:
    if "controller" not in st.session_state:
        make_controller(os.getcwd(), GlyphConfig())


def preview_html(text: str, decorations: Dict[RenderDescriptor, List[Range]]) -> str:
    by_start: Dict[int, Tuple[int, RenderDescriptor]] = {}
    for descriptor, ranges in decorations.items():
        for start, end in ranges:
            by_start[start] = (end, descriptor)

    parts: List[str] = []
    for span in iter_code_points(text):
        char = html.escape(text[span.index : span.index + span.length])
        hit = by_start.get(span.start)
        if hit is None:
            parts.append(char)
            continue
        style = hit[1].style()
        parts.append(
            f'<span style="letter-spacing:{style["letter_spacing"]};'
            f'opacity:{style["opacity"]}">{char}</span>'
            f'<span style="{style["after"]["text_decoration"]}"></span>'
        )
    return f'<div class="glyph-preview">{"".join(parts)}</div>'


def icon_html(candidate: GlyphCandidate) -> str:
    title = html.escape(candidate.description)
    return f'<div title="{title}" style="{candidate.icon_style()}"></div>'


def candidate_grid(controller: GlyphController, candidates: List[GlyphCandidate]) -> None:
    st.subheader(f"Pick a glyph ({len(candidates)})")
    columns = st.columns(8)
    for i, candidate in enumerate(candidates):
        with columns[i % 8]:
            st.markdown(icon_html(candidate), unsafe_allow_html=True)
            if st.button(candidate.label, key=f"pick_{candidate.code_point}"):
                st.session_state["picked_label"] = candidate.label
                view: StreamlitView = st.session_state["view"]
                if controller.resolve_hex_at_cursor(view) is not None:
                    controller.on_text_changed(view)
                st.rerun()


# --------- Main App ---------

set_default_state()
controller: GlyphController = st.session_state["controller"]
document: TextDocument = st.session_state["document"]
view: StreamlitView = st.session_state["view"]

tab_editor, tab_config, tab_index = st.tabs(["Editor", "Config", "Index"])

with tab_config:
    root = st.text_input("Project root", value=controller.root or os.getcwd(), key="root")
    hide_source_char = st.checkbox(
        "Hide source character", value=controller.config.hide_source_char, key="hide"
    )
    exclude_transparent = st.checkbox(
        "Exclude fully transparent cells",
        value=controller.config.exclude_transparent,
        key="exclude",
    )
    new_config = GlyphConfig(
        hide_source_char=hide_source_char, exclude_transparent=exclude_transparent
    )
    if root != controller.root:
        controller.root = root
        controller.reload()
    controller.on_configuration_changed(new_config)

with tab_editor:
    left_col, right_col = st.columns([0.6, 0.4])

    with left_col:
        text = st.text_area("Document", value=document.get_text(), height=240, key="text")
        if text != document.get_text():
            document.replace(0, utf16_length(document.get_text()), text)
            controller.on_text_changed(view)

        view.cursor_offset = st.number_input(
            "Cursor offset (UTF-16 code units)",
            min_value=0,
            max_value=utf16_length(document.get_text()),
            value=utf16_length(document.get_text()),
            key="cursor",
        )
        st.markdown(preview_html(document.get_text(), view.decorations), unsafe_allow_html=True)

    with right_col:
        if st.button("🔁 Reload glyphs", key="reload_btn", use_container_width=True):
            controller.reload()
        if st.button("🔣 Resolve hex at cursor", key="resolve_btn", use_container_width=True):
            if controller.resolve_hex_at_cursor(view) is not None:
                controller.on_text_changed(view)
                st.rerun()

        hover = controller.hover(document, int(view.cursor_offset))
        if hover is not None:
            st.info(hover.markdown(), icon="🔍")

    candidates: List[GlyphCandidate] = st.session_state.get("candidates", [])
    if candidates:
        candidate_grid(controller, candidates)

with tab_index:
    st.info(f"**Indexed code points:** {len(controller.index)}", icon="🔢")
    st.json(
        {
            sheet.name: sheet.path
            for _, sheet in sorted(controller.index.sheets.items())
        },
        expanded=1,
    )
