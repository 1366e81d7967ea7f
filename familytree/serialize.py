from __future__ import annotations

from datetime import date, datetime
from typing import Any

try:
    from .details import MemberRelationships
    from .models import Marriage, Member, ParentChild
    from .names import _display_name, _initials
except ImportError:  # pragma: no cover
    # Support running with CWD=familytree (e.g., `python -m uvicorn main:app`).
    from details import MemberRelationships
    from models import Marriage, Member, ParentChild
    from names import _display_name, _initials


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _member_to_public(m: Member) -> dict[str, Any]:
    return {
        "id": m.id,
        "first_name": m.first_name,
        "last_name": m.last_name,
        "display_name": _display_name(m.first_name, m.last_name),
        "initials": _initials(m.first_name, m.last_name),
        "birth_date": _iso(m.birth_date),
        "death_date": _iso(m.death_date),
        "gender": m.gender.value if m.gender is not None else None,
        "picture_url": m.picture_url,
        "created_at": _iso(m.created_at),
    }


def _marriage_to_public(m: Marriage) -> dict[str, Any]:
    return {
        "id": m.id,
        "spouse1_id": m.spouse1_id,
        "spouse2_id": m.spouse2_id,
        "marriage_date": _iso(m.marriage_date),
        "divorce_date": _iso(m.divorce_date),
        "is_active": m.is_active,
        "created_at": _iso(m.created_at),
    }


def _parent_child_to_public(link: ParentChild) -> dict[str, Any]:
    return {
        "id": link.id,
        "parent_id": link.parent_id,
        "child_id": link.child_id,
        "created_at": _iso(link.created_at),
    }


def _relationships_to_public(rel: MemberRelationships) -> dict[str, Any]:
    return {
        "member": _member_to_public(rel.member),
        "parents": [_member_to_public(p) for p in rel.parents],
        "children": [_member_to_public(c) for c in rel.children],
        "spouses": [
            {"spouse": _member_to_public(s.spouse), "marriage": _marriage_to_public(s.marriage)}
            for s in rel.spouses
        ],
    }
