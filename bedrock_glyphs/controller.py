"""Glue between the glyph engine and a host editor.

:class:`GlyphController` owns the process-wide state (index, descriptor
cache, configuration, active view) and exposes the host-facing entry points:

* events: :meth:`~GlyphController.on_active_editor_changed`,
  :meth:`~GlyphController.on_text_changed`,
  :meth:`~GlyphController.on_configuration_changed`;
* commands: :meth:`~GlyphController.reload`,
  :meth:`~GlyphController.resolve_hex_at_cursor`;
* queries: :meth:`~GlyphController.hover`.

Every call runs to completion synchronously; the only suspension point is the
host's picker.
"""

import logging
from typing import Optional, Tuple

from bedrock_glyphs.config import GlyphConfig, changed_keys
from bedrock_glyphs.exceptions import GlyphError
from bedrock_glyphs.hex_resolution import Replacement, resolve_hex_token
from bedrock_glyphs.host import Document, EditorView, HostUI
from bedrock_glyphs.hover import GlyphHover, hover_at
from bedrock_glyphs.index import DEFAULT_FALLBACK_DIR, GlyphIndex, IndexOptions
from bedrock_glyphs.locator import DEFAULT_MAX_DEPTH
from bedrock_glyphs.renderer.descriptor import DescriptorCache, RenderDescriptor
from bedrock_glyphs.renderer.model import RenderUpdate, compute_render_model, plan_update
from bedrock_glyphs.types import CodeUnitOffset
from bedrock_glyphs.utils.text import line_prefix

logger = logging.getLogger(__name__)


class GlyphController:
    root: Optional[str]
    config: GlyphConfig
    index: GlyphIndex
    cache: DescriptorCache

    def __init__(
        self,
        host: HostUI,
        root: Optional[str],
        config: Optional[GlyphConfig] = None,
        fallback_dir: Optional[str] = DEFAULT_FALLBACK_DIR,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ):
        self.host = host
        self.root = root
        self.config = config or GlyphConfig()
        self.fallback_dir = fallback_dir
        self.max_depth = max_depth
        self.index = GlyphIndex()
        self.cache = DescriptorCache()
        self._active: Optional[EditorView] = None
        self._applied: Tuple[RenderDescriptor, ...] = ()

    @property
    def active_view(self) -> Optional[EditorView]:
        return self._active

    @property
    def index_options(self) -> IndexOptions:
        return IndexOptions(
            exclude_transparent=self.config.exclude_transparent,
            max_depth=self.max_depth,
            fallback_dir=self.fallback_dir,
        )

    # --- Lifecycle ---

    def activate(self, view: Optional[EditorView] = None) -> int:
        count = self.index.rebuild(self.root, self.index_options)
        logger.info("Glyph index ready with %d code points", count)
        if view is not None:
            self.on_active_editor_changed(view)
        return count

    def deactivate(self) -> None:
        self._dispose_descriptors()
        self._active = None

    def _dispose_descriptors(self) -> None:
        for descriptor in self.cache.invalidate_all():
            self.host.dispose(descriptor)
        self._applied = ()

    def _reset(self) -> int:
        self._dispose_descriptors()
        self.index.clear()
        return self.index.rebuild(self.root, self.index_options)

    # --- Events ---

    def on_active_editor_changed(self, view: Optional[EditorView]) -> None:
        self._active = view
        # The new view may still carry ranges from an earlier visit.
        self._applied = tuple(self.cache.descriptors())
        if view is not None:
            self.refresh()

    def on_text_changed(self, view: EditorView) -> None:
        if view is self._active:
            self.refresh()

    def on_configuration_changed(self, config: GlyphConfig) -> None:
        keys = changed_keys(self.config, config)
        self.config = config
        if not keys:
            return
        logger.info("Configuration changed (%s); rebuilding", ", ".join(sorted(keys)))
        self._reset()
        self.refresh()

    def refresh(self) -> Optional[RenderUpdate]:
        """Recompute the active view's render model and push the difference."""
        view = self._active
        if view is None:
            return None
        model = compute_render_model(
            view.document.get_text(), self.index, self.cache, self.config.render_mode
        )
        update = plan_update(self._applied, model)
        for descriptor in update.cleared:
            view.set_decorations(descriptor, [])
        for descriptor, ranges in update.applied.items():
            view.set_decorations(descriptor, ranges)
        self._applied = update.active
        return update

    # --- Commands ---

    def reload(self) -> int:
        """Clear everything, rebuild from disk and report the glyph count."""
        count = self._reset()
        self.refresh()
        logger.info("Reloaded glyph index: %d code points", count)
        self.host.show_info(f"Bedrock glyphs reloaded! Found {count} glyphs.")
        return count

    def resolve_hex_at_cursor(self, view: Optional[EditorView] = None) -> Optional[Replacement]:
        """Replace the hex token before the cursor with its glyph character.

        Returns the applied replacement, or ``None`` when nothing changed
        (no token, no sheet, picker dismissed).
        """
        view = view or self._active
        if view is None:
            return None
        text = view.document.get_text()
        cursor = view.cursor
        _, prefix = line_prefix(text, cursor)
        try:
            resolution = resolve_hex_token(
                prefix,
                cursor,
                self.index,
                self.root,
                exclude_transparent=self.config.exclude_transparent,
                fallback_dir=self.fallback_dir,
                max_depth=self.max_depth,
            )
        except GlyphError as exc:
            self.host.show_warning(str(exc))
            return None

        if resolution.replacement is not None:
            replacement = resolution.replacement
        else:
            if not resolution.candidates:
                name = resolution.sheet.filename if resolution.sheet else "sheet"
                self.host.show_warning(f"No visible glyphs in {name}")
                return None
            choice = self.host.pick(resolution.candidates)
            if choice is None:
                return None
            replacement = resolution.choose(choice)

        view.document.replace(replacement.start, replacement.end, replacement.text)
        return replacement

    # --- Queries ---

    def hover(self, document: Document, offset: CodeUnitOffset) -> Optional[GlyphHover]:
        return hover_at(document.get_text(), offset, self.index)
