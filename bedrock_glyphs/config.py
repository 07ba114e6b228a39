"""User configuration for glyph rendering.

Hosts store settings under the ``bedrockGlyphs`` section. Two switches exist:

* ``hideSourceChar``: collapse the private-use character so only the glyph
  image is visible (default ``True``).
* ``excludeTransparent``: leave cells whose 16×16 block is fully transparent
  out of the index (default ``True``).

Either switch changing means cached descriptors no longer match what the
user asked for, so the controller invalidates and reloads on any change.
"""

from dataclasses import dataclass, fields
from typing import Any, FrozenSet, Mapping

from bedrock_glyphs.types import RenderMode

CONFIG_SECTION = "bedrockGlyphs"

# host key -> dataclass field
CONFIG_KEYS: Mapping[str, str] = {
    "hideSourceChar": "hide_source_char",
    "excludeTransparent": "exclude_transparent",
}


@dataclass(frozen=True)
class GlyphConfig:
    """Rendering and indexing switches.

    Attributes:
        hide_source_char: Suppress the source character under each glyph.
        exclude_transparent: Skip fully transparent cells when indexing.
    """

    hide_source_char: bool = True
    exclude_transparent: bool = True

    @property
    def render_mode(self) -> RenderMode:
        return RenderMode.from_flag(self.hide_source_char)

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> "GlyphConfig":
        """Read a config from host settings.

        Accepts either dotted keys (``{"bedrockGlyphs.hideSourceChar": False}``)
        or a nested section (``{"bedrockGlyphs": {"hideSourceChar": False}}``).
        Missing or non-boolean values keep their defaults.
        """
        section = settings.get(CONFIG_SECTION)
        if not isinstance(section, Mapping):
            section = {}
        defaults = cls()
        values = {}
        for host_key, field_name in CONFIG_KEYS.items():
            value = section.get(host_key, settings.get(f"{CONFIG_SECTION}.{host_key}"))
            if isinstance(value, bool):
                values[field_name] = value
            else:
                values[field_name] = getattr(defaults, field_name)
        return cls(**values)


def changed_keys(old: GlyphConfig, new: GlyphConfig) -> FrozenSet[str]:
    """Return the dotted host keys whose values differ between two configs."""
    by_field = {field_name: host_key for host_key, field_name in CONFIG_KEYS.items()}
    return frozenset(
        f"{CONFIG_SECTION}.{by_field[f.name]}"
        for f in fields(GlyphConfig)
        if getattr(old, f.name) != getattr(new, f.name)
    )
