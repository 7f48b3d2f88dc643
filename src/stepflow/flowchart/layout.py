"""Row/column placement for level-ordered flowcharts."""

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from ..config.settings import Settings
from .model import FlowNode

Point = Tuple[float, float]


def row_positions(count: int, y: float, settings: Settings) -> List[Point]:
    """Place ``count`` nodes on one row.

    A single node is centered on x = 0; parallel nodes are spread evenly and
    symmetrically about x = 0.
    """
    if count <= 0:
        return []
    if count == 1:
        return [(-settings.node_width / 2, y)]
    span = (count - 1) * settings.horizontal_spacing
    start_x = -span / 2
    return [(start_x + idx * settings.horizontal_spacing, y) for idx in range(count)]


def place_levels(level_sizes: Sequence[int], settings: Settings) -> List[List[Point]]:
    """Return positions for every level, top to bottom."""

    placed: List[List[Point]] = []
    y = 0.0
    for size in level_sizes:
        placed.append(row_positions(size, y, settings))
        y += settings.vertical_spacing
    return placed


def group_rows(nodes: Sequence[FlowNode]) -> List[List[FlowNode]]:
    """Group nodes into rows by y, each row ordered left to right."""

    rows: Dict[float, List[FlowNode]] = {}
    for node in nodes:
        rows.setdefault(node.y, []).append(node)
    return [sorted(rows[y], key=lambda node: node.x) for y in sorted(rows)]
