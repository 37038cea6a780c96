"""Reconstruct the directory forest from per-directory statistics."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping

from .logging import get_logger
from .models import ROOT_LABEL, DirectoryNode, DirectoryStats, build_breakdown

logger = get_logger("tree")

AgeResolver = Callable[[str], int]


@dataclass
class _Slot:
    """Arena entry for one directory while the forest is being linked."""

    path: str
    stats: DirectoryStats
    age_days: int
    children: List[str] = field(default_factory=list)


def _display_name(path: str) -> str:
    return posixpath.basename(path) if path else ROOT_LABEL


def _parent_path(path: str) -> str:
    return posixpath.dirname(path)


def build_directory_tree(
    stats: Mapping[str, DirectoryStats],
    age_of: AgeResolver,
) -> List[DirectoryNode]:
    """Return the directory forest for ``stats``.

    Nodes are first materialized into an arena keyed by path, then linked in a
    single pass: a node whose parent path has a node becomes its child, any
    other non-root node is promoted to the top level. The root node (empty
    path) always leads the forest; every other level is ordered by descending
    line count, ties keeping encounter order.
    """
    arena: Dict[str, _Slot] = {
        path: _Slot(path=path, stats=entry, age_days=age_of(path))
        for path, entry in stats.items()
    }

    top_level: List[str] = []
    for path in arena:
        if path == "":
            continue
        parent = _parent_path(path)
        if parent in arena:
            arena[parent].children.append(path)
        else:
            logger.debug("Promoting %s to a top-level node (no counted parent)", path)
            top_level.append(path)

    frozen = _freeze(arena)
    forest = [frozen[path] for path in top_level]
    forest.sort(key=lambda node: node.lines, reverse=True)
    if "" in arena:
        forest.insert(0, frozen[""])
    return forest


def _freeze(arena: Mapping[str, _Slot]) -> Dict[str, DirectoryNode]:
    """Build immutable nodes children-first, without recursion."""
    # Reversed pre-order visits every child before its parent.
    order: List[str] = []
    stack = [path for path in arena if _parent_path(path) not in arena or path == ""]
    while stack:
        path = stack.pop()
        order.append(path)
        stack.extend(arena[path].children)

    frozen: Dict[str, DirectoryNode] = {}
    for path in reversed(order):
        slot = arena[path]
        children = sorted(
            (frozen[child] for child in slot.children),
            key=lambda node: node.lines,
            reverse=True,
        )
        frozen[path] = DirectoryNode(
            name=_display_name(path),
            path=path,
            age_days=slot.age_days,
            lines=slot.stats.lines,
            languages=build_breakdown(slot.stats.languages, slot.stats.lines),
            children=tuple(children),
        )
    return frozen


__all__ = ["AgeResolver", "build_directory_tree"]
