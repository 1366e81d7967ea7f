from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from psycopg import errors as pg_errors

try:
    from ..db import db_conn
    from ..queries import MARRIAGE_COLUMNS, _marriage_from_row, get_marriage, get_member, list_marriages
    from ..schemas import MarriageCreate, MarriageUpdate
    from ..serialize import _marriage_to_public
except ImportError:  # pragma: no cover
    # Support running with CWD=familytree (e.g., `python -m uvicorn main:app`).
    from db import db_conn
    from queries import MARRIAGE_COLUMNS, _marriage_from_row, get_marriage, get_member, list_marriages
    from schemas import MarriageCreate, MarriageUpdate
    from serialize import _marriage_to_public

log = logging.getLogger(__name__)

router = APIRouter(prefix="/marriages", tags=["marriages"])


@router.post("")
def create_marriage(body: MarriageCreate) -> dict[str, Any]:
    """Record a marriage. The pair is stored smaller id first, so (a, b) and (b, a) collide."""

    spouse1_id, spouse2_id = body.normalized_pair()

    with db_conn() as conn:
        for sid in (spouse1_id, spouse2_id):
            if get_member(conn, sid) is None:
                raise HTTPException(status_code=404, detail=f"member not found: {sid}")

        existing = conn.execute(
            "SELECT id FROM marriage WHERE spouse1_id = %s AND spouse2_id = %s",
            (spouse1_id, spouse2_id),
        ).fetchone()
        if existing:
            raise HTTPException(status_code=409, detail="these members are already married")

        try:
            row = conn.execute(
                f"""
                INSERT INTO marriage (spouse1_id, spouse2_id, marriage_date, divorce_date)
                VALUES (%s, %s, %s, %s)
                RETURNING {MARRIAGE_COLUMNS}
                """,
                (spouse1_id, spouse2_id, body.marriage_date, body.divorce_date),
            ).fetchone()
        except pg_errors.UniqueViolation as e:
            raise HTTPException(status_code=409, detail="these members are already married") from e
        conn.commit()

    marriage = _marriage_from_row(tuple(row))
    log.info("created marriage %s between %s and %s", marriage.id, spouse1_id, spouse2_id)
    return _marriage_to_public(marriage)


@router.get("")
def list_marriages_route() -> dict[str, Any]:
    with db_conn() as conn:
        marriages = list_marriages(conn)
    return {"results": [_marriage_to_public(m) for m in marriages], "total": len(marriages)}


@router.put("/{marriage_id}")
def update_marriage(marriage_id: int, body: MarriageUpdate) -> dict[str, Any]:
    changes = body.model_dump(exclude_unset=True)

    with db_conn() as conn:
        existing = get_marriage(conn, marriage_id)
        if existing is None:
            raise HTTPException(status_code=404, detail=f"marriage not found: {marriage_id}")

        married = changes.get("marriage_date", existing.marriage_date)
        divorced = changes.get("divorce_date", existing.divorce_date)
        if married is not None and divorced is not None and divorced < married:
            raise HTTPException(status_code=422, detail="divorce_date must not precede marriage_date")

        row = conn.execute(
            f"""
            UPDATE marriage SET marriage_date = %s, divorce_date = %s
            WHERE id = %s
            RETURNING {MARRIAGE_COLUMNS}
            """,
            (married, divorced, marriage_id),
        ).fetchone()
        conn.commit()

    log.info("updated marriage %s", marriage_id)
    return _marriage_to_public(_marriage_from_row(tuple(row)))


@router.delete("/{marriage_id}")
def delete_marriage(marriage_id: int) -> dict[str, Any]:
    with db_conn() as conn:
        if get_marriage(conn, marriage_id) is None:
            raise HTTPException(status_code=404, detail=f"marriage not found: {marriage_id}")
        conn.execute("DELETE FROM marriage WHERE id = %s", (marriage_id,))
        conn.commit()

    log.info("deleted marriage %s", marriage_id)
    return {"ok": True}
