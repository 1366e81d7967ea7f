"""Whole-network views: raw snapshot, bubble-graph layout and statistics."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

try:
    from ..db import db_conn
    from ..index import RelationshipIndex, build_index
    from ..layout import DEFAULT_HEIGHT, DEFAULT_WIDTH, compute_layout
    from ..queries import fetch_network
    from ..serialize import _marriage_to_public, _member_to_public, _parent_child_to_public
    from ..stats import compute_statistics
except ImportError:  # pragma: no cover
    # Support running with CWD=familytree (e.g., `python -m uvicorn main:app`).
    from db import db_conn
    from index import RelationshipIndex, build_index
    from layout import DEFAULT_HEIGHT, DEFAULT_WIDTH, compute_layout
    from queries import fetch_network
    from serialize import _marriage_to_public, _member_to_public, _parent_child_to_public
    from stats import compute_statistics

router = APIRouter(prefix="/network", tags=["network"])


def _load_index() -> RelationshipIndex:
    with db_conn() as conn:
        members, marriages, links = fetch_network(conn)
    return build_index(members, marriages, links)


@router.get("")
def network_snapshot() -> dict[str, Any]:
    index = _load_index()
    return {
        "members": [_member_to_public(m) for m in index.members.values()],
        "marriages": [_marriage_to_public(m) for m in index.marriages],
        "parent_child": [_parent_child_to_public(link) for link in index.links],
    }


@router.get("/layout")
def network_layout(
    width: int = Query(default=DEFAULT_WIDTH, ge=200, le=10_000),
    height: int = Query(default=DEFAULT_HEIGHT, ge=200, le=10_000),
) -> dict[str, Any]:
    """Node coordinates and edges for the bubble graph.

    Each node also carries the member payload so the client can draw labels
    without a second request.
    """

    index = _load_index()
    payload = compute_layout(index, width=width, height=height).as_dict()
    for node in payload["nodes"]:
        node["member"] = _member_to_public(index.members[node["id"]])
    return payload


@router.get("/stats")
def network_stats() -> dict[str, Any]:
    return compute_statistics(_load_index()).as_dict()
