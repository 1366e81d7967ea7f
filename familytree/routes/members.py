"""Family member CRUD routes.

Members are never deleted through the API; relationships are removed through
their own routes.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

try:
    from ..db import db_conn
    from ..details import resolve_member_details
    from ..errors import MemberNotFound
    from ..index import build_index
    from ..queries import MEMBER_COLUMNS, _member_from_row, fetch_network, get_member, list_members
    from ..schemas import MemberCreate, MemberUpdate
    from ..serialize import _member_to_public, _relationships_to_public
except ImportError:  # pragma: no cover
    # Support running with CWD=familytree (e.g., `python -m uvicorn main:app`).
    from db import db_conn
    from details import resolve_member_details
    from errors import MemberNotFound
    from index import build_index
    from queries import MEMBER_COLUMNS, _member_from_row, fetch_network, get_member, list_members
    from schemas import MemberCreate, MemberUpdate
    from serialize import _member_to_public, _relationships_to_public

log = logging.getLogger(__name__)

router = APIRouter(prefix="/members", tags=["members"])

_UPDATABLE_COLUMNS = ("first_name", "last_name", "birth_date", "death_date", "gender", "picture_url")


@router.post("")
def create_member(body: MemberCreate) -> dict[str, Any]:
    with db_conn() as conn:
        row = conn.execute(
            f"""
            INSERT INTO family_member (first_name, last_name, birth_date, death_date, gender, picture_url)
            VALUES (%s, %s, %s, %s, %s, %s)
            RETURNING {MEMBER_COLUMNS}
            """,
            (
                body.first_name,
                body.last_name,
                body.birth_date,
                body.death_date,
                body.gender.value if body.gender else None,
                body.picture_url,
            ),
        ).fetchone()
        conn.commit()

    member = _member_from_row(tuple(row))
    log.info("created member %s", member.id)
    return _member_to_public(member)


@router.get("")
def list_members_route() -> dict[str, Any]:
    with db_conn() as conn:
        members = list_members(conn)
    return {"results": [_member_to_public(m) for m in members], "total": len(members)}


@router.get("/{member_id}")
def get_member_route(member_id: int) -> dict[str, Any]:
    with db_conn() as conn:
        member = get_member(conn, member_id)
    if member is None:
        raise HTTPException(status_code=404, detail=f"member not found: {member_id}")
    return _member_to_public(member)


@router.put("/{member_id}")
def update_member(member_id: int, body: MemberUpdate) -> dict[str, Any]:
    changes = body.model_dump(exclude_unset=True)
    if "gender" in changes and changes["gender"] is not None:
        changes["gender"] = changes["gender"].value

    with db_conn() as conn:
        existing = get_member(conn, member_id)
        if existing is None:
            raise HTTPException(status_code=404, detail=f"member not found: {member_id}")

        birth = changes.get("birth_date", existing.birth_date)
        death = changes.get("death_date", existing.death_date)
        if birth is not None and death is not None and death < birth:
            raise HTTPException(status_code=422, detail="death_date must not precede birth_date")

        if not changes:
            return _member_to_public(existing)

        columns = [c for c in _UPDATABLE_COLUMNS if c in changes]
        assignments = ", ".join(f"{c} = %s" for c in columns)
        row = conn.execute(
            f"UPDATE family_member SET {assignments} WHERE id = %s RETURNING {MEMBER_COLUMNS}",
            (*[changes[c] for c in columns], member_id),
        ).fetchone()
        conn.commit()

    log.info("updated member %s (%s)", member_id, ", ".join(columns))
    return _member_to_public(_member_from_row(tuple(row)))


@router.get("/{member_id}/relationships")
def member_relationships(member_id: int) -> dict[str, Any]:
    """Parents, children and spouses (with their marriage record) of one member."""

    with db_conn() as conn:
        members, marriages, links = fetch_network(conn)

    index = build_index(members, marriages, links)
    try:
        rel = resolve_member_details(index, member_id)
    except MemberNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _relationships_to_public(rel)
