"""Sheet discovery under a project root.

Sheets live in directories literally named ``font``. The root-level
``<root>/font`` is checked first, then the tree is walked breadth-first, one
depth level at a time, down to ``max_depth`` levels. Hidden directories and
``node_modules`` are never entered, and a ``font`` directory is scanned but
not descended into. Entries are visited in sorted order so two scans of the
same tree report the same sheets in the same order.

Unreadable directories are counted in :class:`ScanStats` and skipped; the
walk carries on with their siblings.
"""

from collections import deque
from dataclasses import dataclass, field
import logging
import os
from typing import Deque, Iterator, List, NamedTuple, Optional, Set, Tuple

from bedrock_glyphs.sheet import parse_sheet_filename
from bedrock_glyphs.types import SheetByte

logger = logging.getLogger(__name__)

CONTAINER_DIR_NAME = "font"
DEFAULT_MAX_DEPTH = 3
SKIPPED_DIR_NAMES = frozenset({"node_modules"})


class SheetFile(NamedTuple):
    sheet_byte: SheetByte
    path: str


@dataclass
class ScanStats:
    """Counters filled in while a walk runs."""

    skipped_dirs: int = 0
    containers: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ScanResult:
    """Every sheet file found, in discovery order, plus walk statistics."""

    sheets: Tuple[SheetFile, ...]
    skipped_dirs: int
    containers: Tuple[str, ...]


def is_skipped_dir(name: str) -> bool:
    return name.startswith(".") or name in SKIPPED_DIR_NAMES


def _list_dir(path: str, stats: ScanStats) -> Optional[List[os.DirEntry]]:
    try:
        with os.scandir(path) as it:
            entries = list(it)
    except OSError as exc:
        stats.skipped_dirs += 1
        logger.debug("Skipping unreadable directory %s (%s)", path, exc)
        return None
    return sorted(entries, key=lambda e: e.name)


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError:
        return False


def _is_file(entry: os.DirEntry) -> bool:
    try:
        return entry.is_file()
    except OSError:
        return False


def iter_container(path: str, stats: ScanStats) -> Iterator[SheetFile]:
    """Yield the sheet files directly inside one ``font`` directory."""
    entries = _list_dir(path, stats)
    if entries is None:
        return
    stats.containers.append(path)
    for entry in entries:
        sheet_byte = parse_sheet_filename(entry.name)
        if sheet_byte is None or not _is_file(entry):
            continue
        yield SheetFile(sheet_byte, entry.path)


def iter_sheet_files(
    root: str,
    max_depth: int = DEFAULT_MAX_DEPTH,
    stats: Optional[ScanStats] = None,
) -> Iterator[SheetFile]:
    """Lazily walk ``root`` and yield sheet files in discovery order.

    Consumers that only need the first match can stop iterating early; no
    further directories are read.
    """
    stats = stats if stats is not None else ScanStats()
    visited: Set[str] = set()

    canonical = os.path.join(root, CONTAINER_DIR_NAME)
    if os.path.isdir(canonical):
        visited.add(os.path.normpath(canonical))
        yield from iter_container(canonical, stats)

    worklist: Deque[Tuple[str, int]] = deque([(root, 0)])
    while worklist:
        directory, depth = worklist.popleft()
        if depth >= max_depth:
            continue
        entries = _list_dir(directory, stats)
        if entries is None:
            continue
        for entry in entries:
            if not _is_dir(entry) or is_skipped_dir(entry.name):
                continue
            if entry.name != CONTAINER_DIR_NAME:
                worklist.append((entry.path, depth + 1))
                continue
            key = os.path.normpath(entry.path)
            if key in visited:
                continue
            visited.add(key)
            yield from iter_container(entry.path, stats)


def scan_sheets(root: str, max_depth: int = DEFAULT_MAX_DEPTH) -> ScanResult:
    """Collect every sheet file under ``root``."""
    stats = ScanStats()
    sheets = tuple(iter_sheet_files(root, max_depth, stats))
    logger.debug(
        "Found %d sheet files in %d font directories under %s (%d skipped)",
        len(sheets),
        len(stats.containers),
        root,
        stats.skipped_dirs,
    )
    return ScanResult(
        sheets=sheets,
        skipped_dirs=stats.skipped_dirs,
        containers=tuple(stats.containers),
    )


def find_sheet(
    root: str, sheet_byte: SheetByte, max_depth: int = DEFAULT_MAX_DEPTH
) -> Optional[str]:
    """Return the first sheet file for ``sheet_byte`` under ``root``, if any."""
    for found in iter_sheet_files(root, max_depth):
        if found.sheet_byte == sheet_byte:
            return found.path
    return None
