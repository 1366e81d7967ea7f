"""Bubble-graph placement for the family network view.

Positions depend only on the canvas size and the member order of the
snapshot, so repeated calls over the same data give identical output.
Nothing here tries to avoid overlap on large graphs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Literal

try:
    from .index import RelationshipIndex
except ImportError:  # pragma: no cover
    # Support running with CWD=familytree (e.g., `python -m uvicorn main:app`).
    from index import RelationshipIndex

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
GRID_MARGIN = 100
_CIRCLE_MAX_MEMBERS = 6
_CIRCLE_RADIUS_RATIO = 0.25

EdgeKind = Literal["marriage", "parent-child"]


@dataclass(frozen=True)
class NodePosition:
    id: int
    x: float
    y: float


@dataclass(frozen=True)
class LayoutEdge:
    id: int
    from_id: int
    to_id: int
    kind: EdgeKind


@dataclass(frozen=True)
class NetworkLayout:
    width: float
    height: float
    nodes: tuple[NodePosition, ...]
    edges: tuple[LayoutEdge, ...]

    def as_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "nodes": [{"id": n.id, "x": n.x, "y": n.y} for n in self.nodes],
            "edges": [
                {"id": e.id, "from": e.from_id, "to": e.to_id, "kind": e.kind}
                for e in self.edges
            ],
        }


def _positions(n: int, width: float, height: float) -> list[tuple[float, float]]:
    cx = width / 2
    cy = height / 2
    if n == 0:
        return []
    if n == 1:
        return [(cx, cy)]

    if n <= _CIRCLE_MAX_MEMBERS:
        radius = min(width, height) * _CIRCLE_RADIUS_RATIO
        out = []
        for i in range(n):
            angle = 2 * math.pi * i / n
            out.append((cx + math.cos(angle) * radius, cy + math.sin(angle) * radius))
        return out

    cols = math.ceil(math.sqrt(n))
    rows = math.ceil(n / cols)
    spacing_x = (width - 2 * GRID_MARGIN) / ((cols - 1) or 1)
    spacing_y = (height - 2 * GRID_MARGIN) / ((rows - 1) or 1)
    return [
        (GRID_MARGIN + (i % cols) * spacing_x, GRID_MARGIN + (i // cols) * spacing_y)
        for i in range(n)
    ]


def compute_layout(
    index: RelationshipIndex,
    width: float = DEFAULT_WIDTH,
    height: float = DEFAULT_HEIGHT,
) -> NetworkLayout:
    member_ids = list(index.members)
    nodes = tuple(
        NodePosition(id=mid, x=x, y=y)
        for mid, (x, y) in zip(member_ids, _positions(len(member_ids), width, height))
    )

    edges: list[LayoutEdge] = [
        LayoutEdge(id=m.id, from_id=m.spouse1_id, to_id=m.spouse2_id, kind="marriage")
        for m in index.marriages
    ]
    edges.extend(
        LayoutEdge(id=link.id, from_id=link.parent_id, to_id=link.child_id, kind="parent-child")
        for link in index.links
    )

    return NetworkLayout(width=width, height=height, nodes=nodes, edges=tuple(edges))
