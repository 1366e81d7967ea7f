from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from psycopg import errors as pg_errors

try:
    from ..db import db_conn
    from ..index import build_index
    from ..queries import (
        PARENT_CHILD_COLUMNS,
        _parent_child_from_row,
        get_member,
        get_parent_child,
        list_parent_child_links,
    )
    from ..schemas import ParentChildCreate
    from ..serialize import _parent_child_to_public
except ImportError:  # pragma: no cover
    # Support running with CWD=familytree (e.g., `python -m uvicorn main:app`).
    from db import db_conn
    from index import build_index
    from queries import (
        PARENT_CHILD_COLUMNS,
        _parent_child_from_row,
        get_member,
        get_parent_child,
        list_parent_child_links,
    )
    from schemas import ParentChildCreate
    from serialize import _parent_child_to_public

log = logging.getLogger(__name__)

router = APIRouter(prefix="/parent-child", tags=["parent-child"])


@router.post("")
def create_parent_child(body: ParentChildCreate) -> dict[str, Any]:
    """Link a parent to a child.

    Rejects duplicates and links that would make a member their own ancestor.
    """

    with db_conn() as conn:
        for label, mid in (("parent", body.parent_id), ("child", body.child_id)):
            if get_member(conn, mid) is None:
                raise HTTPException(status_code=404, detail=f"{label} not found: {mid}")

        links = list_parent_child_links(conn)
        if any(link.parent_id == body.parent_id and link.child_id == body.child_id for link in links):
            raise HTTPException(status_code=409, detail="parent-child link already exists")

        index = build_index([], [], links)
        if index.would_create_cycle(body.parent_id, body.child_id):
            raise HTTPException(status_code=409, detail="child is already an ancestor of parent")

        try:
            row = conn.execute(
                f"""
                INSERT INTO parent_child (parent_id, child_id)
                VALUES (%s, %s)
                RETURNING {PARENT_CHILD_COLUMNS}
                """,
                (body.parent_id, body.child_id),
            ).fetchone()
        except pg_errors.UniqueViolation as e:
            raise HTTPException(status_code=409, detail="parent-child link already exists") from e
        conn.commit()

    link = _parent_child_from_row(tuple(row))
    log.info("created parent-child link %s (%s -> %s)", link.id, link.parent_id, link.child_id)
    return _parent_child_to_public(link)


@router.get("")
def list_parent_child_route() -> dict[str, Any]:
    with db_conn() as conn:
        links = list_parent_child_links(conn)
    return {"results": [_parent_child_to_public(link) for link in links], "total": len(links)}


@router.delete("/{link_id}")
def delete_parent_child(link_id: int) -> dict[str, Any]:
    with db_conn() as conn:
        if get_parent_child(conn, link_id) is None:
            raise HTTPException(status_code=404, detail=f"parent-child link not found: {link_id}")
        conn.execute("DELETE FROM parent_child WHERE id = %s", (link_id,))
        conn.commit()

    log.info("deleted parent-child link %s", link_id)
    return {"ok": True}
