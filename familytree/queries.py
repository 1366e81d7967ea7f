from __future__ import annotations

from typing import Any

import psycopg

try:
    from .models import Gender, Marriage, Member, ParentChild
except ImportError:  # pragma: no cover
    # Support running with CWD=familytree (e.g., `python -m uvicorn main:app`).
    from models import Gender, Marriage, Member, ParentChild

MEMBER_COLUMNS = "id, first_name, last_name, birth_date, death_date, gender, picture_url, created_at"
MARRIAGE_COLUMNS = "id, spouse1_id, spouse2_id, marriage_date, divorce_date, created_at"
PARENT_CHILD_COLUMNS = "id, parent_id, child_id, created_at"


def _member_from_row(r: tuple[Any, ...]) -> Member:
    # r = (id, first_name, last_name, birth_date, death_date, gender, picture_url, created_at)
    mid, first, last, birth, death, gender, picture, created = r
    return Member(
        id=mid,
        first_name=first,
        last_name=last,
        birth_date=birth,
        death_date=death,
        gender=Gender(gender) if gender else None,
        picture_url=picture,
        created_at=created,
    )


def _marriage_from_row(r: tuple[Any, ...]) -> Marriage:
    mid, s1, s2, married, divorced, created = r
    return Marriage(
        id=mid,
        spouse1_id=s1,
        spouse2_id=s2,
        marriage_date=married,
        divorce_date=divorced,
        created_at=created,
    )


def _parent_child_from_row(r: tuple[Any, ...]) -> ParentChild:
    lid, parent_id, child_id, created = r
    return ParentChild(id=lid, parent_id=parent_id, child_id=child_id, created_at=created)


def list_members(conn: psycopg.Connection) -> list[Member]:
    rows = conn.execute(f"SELECT {MEMBER_COLUMNS} FROM family_member ORDER BY id").fetchall()
    return [_member_from_row(tuple(r)) for r in rows]


def list_marriages(conn: psycopg.Connection) -> list[Marriage]:
    rows = conn.execute(f"SELECT {MARRIAGE_COLUMNS} FROM marriage ORDER BY id").fetchall()
    return [_marriage_from_row(tuple(r)) for r in rows]


def list_parent_child_links(conn: psycopg.Connection) -> list[ParentChild]:
    rows = conn.execute(f"SELECT {PARENT_CHILD_COLUMNS} FROM parent_child ORDER BY id").fetchall()
    return [_parent_child_from_row(tuple(r)) for r in rows]


def get_member(conn: psycopg.Connection, member_id: int) -> Member | None:
    row = conn.execute(
        f"SELECT {MEMBER_COLUMNS} FROM family_member WHERE id = %s",
        (member_id,),
    ).fetchone()
    return _member_from_row(tuple(row)) if row else None


def get_marriage(conn: psycopg.Connection, marriage_id: int) -> Marriage | None:
    row = conn.execute(
        f"SELECT {MARRIAGE_COLUMNS} FROM marriage WHERE id = %s",
        (marriage_id,),
    ).fetchone()
    return _marriage_from_row(tuple(row)) if row else None


def get_parent_child(conn: psycopg.Connection, link_id: int) -> ParentChild | None:
    row = conn.execute(
        f"SELECT {PARENT_CHILD_COLUMNS} FROM parent_child WHERE id = %s",
        (link_id,),
    ).fetchone()
    return _parent_child_from_row(tuple(row)) if row else None


def fetch_network(
    conn: psycopg.Connection,
) -> tuple[list[Member], list[Marriage], list[ParentChild]]:
    """Read all three collections on one connection so they form one snapshot."""

    return list_members(conn), list_marriages(conn), list_parent_child_links(conn)
