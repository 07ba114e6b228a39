"""Render model computation and update planning.

``compute_render_model`` walks document text by code point and emits one
:class:`RenderSpan` per indexed code point. Hosts then apply the model with
one call per descriptor (all ranges sharing a visual at once), after clearing
descriptors that were active before but are no longer referenced.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Optional, Protocol, Tuple

from bedrock_glyphs.renderer.descriptor import DescriptorCache, RenderDescriptor
from bedrock_glyphs.sheet import GlyphCell
from bedrock_glyphs.types import CodePoint, CodeUnitOffset, RenderMode
from bedrock_glyphs.utils.text import iter_code_points

Range = Tuple[CodeUnitOffset, CodeUnitOffset]


class RenderSpan(NamedTuple):
    """Half-open code unit range ``[start, end)`` drawn with ``descriptor``."""

    start: CodeUnitOffset
    end: CodeUnitOffset
    descriptor: RenderDescriptor


RenderModel = Tuple[RenderSpan, ...]


class CellLookup(Protocol):
    """Anything that maps a code point to a cell, e.g. a GlyphIndex."""

    def lookup(self, code_point: CodePoint) -> Optional[GlyphCell]: ...


def compute_render_model(
    text: str,
    index: CellLookup,
    cache: DescriptorCache,
    render_mode: RenderMode,
) -> RenderModel:
    spans: List[RenderSpan] = []
    for cp in iter_code_points(text):
        cell = index.lookup(cp.code_point)
        if cell is None:
            continue
        descriptor = cache.get(cell, render_mode)
        if descriptor is None:
            continue
        spans.append(RenderSpan(cp.start, cp.end, descriptor))
    return tuple(spans)


def group_by_descriptor(model: Iterable[RenderSpan]) -> Dict[RenderDescriptor, List[Range]]:
    """Ranges per descriptor, descriptors in order of first appearance."""
    groups: Dict[RenderDescriptor, List[Range]] = {}
    for span in model:
        groups.setdefault(span.descriptor, []).append((span.start, span.end))
    return groups


@dataclass(frozen=True)
class RenderUpdate:
    """What a host must do to move from the previous model to the new one.

    Attributes:
        cleared: Descriptors previously applied that the new model no longer
            uses; their ranges must be set to empty.
        applied: New range lists per descriptor, replacing earlier ranges.
    """

    cleared: Tuple[RenderDescriptor, ...]
    applied: Dict[RenderDescriptor, List[Range]]

    @property
    def active(self) -> Tuple[RenderDescriptor, ...]:
        return tuple(self.applied)


def plan_update(previous: Iterable[RenderDescriptor], model: RenderModel) -> RenderUpdate:
    applied = group_by_descriptor(model)
    cleared = tuple(d for d in dict.fromkeys(previous) if d not in applied)
    return RenderUpdate(cleared=cleared, applied=applied)
