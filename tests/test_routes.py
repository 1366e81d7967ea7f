from __future__ import annotations

import re
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Iterator

import pytest
from fastapi import HTTPException

import familytree.routes.marriages as marriage_routes
import familytree.routes.members as member_routes
import familytree.routes.network as network_routes
import familytree.routes.parent_child as parent_child_routes
from familytree.main import health
from familytree.schemas import MarriageCreate, MarriageUpdate, MemberCreate, MemberUpdate, ParentChildCreate

_CREATED = datetime(2026, 1, 1, tzinfo=timezone.utc)
_MEMBER_FIELDS = ["id", "first_name", "last_name", "birth_date", "death_date", "gender", "picture_url", "created_at"]


@dataclass
class _FakeResult:
    rows: list[tuple[Any, ...]]

    def fetchall(self) -> list[tuple[Any, ...]]:
        return list(self.rows)

    def fetchone(self) -> tuple[Any, ...] | None:
        return self.rows[0] if self.rows else None


class _FakeConn:
    """Dict-backed stand-in for the three tables, matched on query prefixes."""

    def __init__(self) -> None:
        self.members: dict[int, tuple[Any, ...]] = {}
        self.marriages: dict[int, tuple[Any, ...]] = {}
        self.links: dict[int, tuple[Any, ...]] = {}
        self._next_id = 1
        self.commits = 0

    def _new_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    def commit(self) -> None:
        self.commits += 1

    def execute(self, query: str, params: tuple[Any, ...] = ()) -> _FakeResult:
        q = " ".join((query or "").split()).lower()

        if q.startswith("insert into family_member"):
            row = (self._new_id(), *params, _CREATED)
            self.members[row[0]] = row
            return _FakeResult([row])

        if q.startswith("update family_member set"):
            columns = re.findall(r"(\w+) = %s", q.split(" where ")[0])
            *values, member_id = params
            row = list(self.members[member_id])
            for col, val in zip(columns, values):
                row[_MEMBER_FIELDS.index(col)] = val
            self.members[member_id] = tuple(row)
            return _FakeResult([tuple(row)])

        if q.startswith("select id, first_name") and "from family_member" in q:
            if "where id = %s" in q:
                row = self.members.get(params[0])
                return _FakeResult([row] if row else [])
            return _FakeResult([self.members[k] for k in sorted(self.members)])

        if q.startswith("select id from marriage where spouse1_id"):
            return _FakeResult([(r[0],) for r in self.marriages.values() if (r[1], r[2]) == tuple(params)])

        if q.startswith("insert into marriage"):
            row = (self._new_id(), *params, _CREATED)
            self.marriages[row[0]] = row
            return _FakeResult([row])

        if q.startswith("update marriage set"):
            married, divorced, marriage_id = params
            r = self.marriages[marriage_id]
            row = (r[0], r[1], r[2], married, divorced, r[5])
            self.marriages[marriage_id] = row
            return _FakeResult([row])

        if q.startswith("select id, spouse1_id"):
            if "where id = %s" in q:
                row = self.marriages.get(params[0])
                return _FakeResult([row] if row else [])
            return _FakeResult([self.marriages[k] for k in sorted(self.marriages)])

        if q.startswith("delete from marriage"):
            self.marriages.pop(params[0], None)
            return _FakeResult([])

        if q.startswith("insert into parent_child"):
            row = (self._new_id(), *params, _CREATED)
            self.links[row[0]] = row
            return _FakeResult([row])

        if q.startswith("select id, parent_id"):
            if "where id = %s" in q:
                row = self.links.get(params[0])
                return _FakeResult([row] if row else [])
            return _FakeResult([self.links[k] for k in sorted(self.links)])

        if q.startswith("delete from parent_child"):
            self.links.pop(params[0], None)
            return _FakeResult([])

        raise AssertionError(f"Unexpected query: {query}")


@pytest.fixture()
def conn(monkeypatch: pytest.MonkeyPatch) -> _FakeConn:
    fake = _FakeConn()

    @contextmanager
    def _fake_db_conn() -> Iterator[_FakeConn]:
        yield fake

    for module in (member_routes, marriage_routes, parent_child_routes, network_routes):
        monkeypatch.setattr(module, "db_conn", _fake_db_conn)
    return fake


def _add(first: str, last: str = "Hale", **kw: Any) -> int:
    return member_routes.create_member(MemberCreate(first_name=first, last_name=last, **kw))["id"]


def test_health() -> None:
    assert health()["status"] == "ok"


def test_create_and_get_member(conn: _FakeConn) -> None:
    created = member_routes.create_member(
        MemberCreate(first_name="anne", last_name="Smith", birth_date=date(1980, 2, 3), gender="female")
    )
    assert created["initials"] == "AS"
    assert created["birth_date"] == "1980-02-03"
    assert created["gender"] == "female"
    assert conn.commits == 1

    fetched = member_routes.get_member_route(created["id"])
    assert fetched["display_name"] == "anne Smith"
    assert member_routes.list_members_route()["total"] == 1


def test_get_missing_member_is_404(conn: _FakeConn) -> None:
    with pytest.raises(HTTPException) as exc:
        member_routes.get_member_route(42)
    assert exc.value.status_code == 404


def test_update_member_applies_only_sent_fields(conn: _FakeConn) -> None:
    mid = _add("Thomas", birth_date=date(1958, 1, 12))

    updated = member_routes.update_member(mid, MemberUpdate(last_name="Price"))
    assert updated["last_name"] == "Price"
    assert updated["first_name"] == "Thomas"
    assert updated["birth_date"] == "1958-01-12"


def test_update_member_rejects_death_before_stored_birth(conn: _FakeConn) -> None:
    mid = _add("Thomas", birth_date=date(1958, 1, 12))

    with pytest.raises(HTTPException) as exc:
        member_routes.update_member(mid, MemberUpdate(death_date=date(1950, 1, 1)))
    assert exc.value.status_code == 422


def test_member_relationships(conn: _FakeConn) -> None:
    a, b, c, lonely = _add("A"), _add("B"), _add("C"), _add("Lonely")
    marriage_routes.create_marriage(MarriageCreate(spouse1_id=a, spouse2_id=b))
    parent_child_routes.create_parent_child(ParentChildCreate(parent_id=a, child_id=c))

    rel = member_routes.member_relationships(a)
    assert [s["spouse"]["id"] for s in rel["spouses"]] == [b]
    assert [ch["id"] for ch in rel["children"]] == [c]
    assert rel["parents"] == []

    empty = member_routes.member_relationships(lonely)
    assert (empty["parents"], empty["children"], empty["spouses"]) == ([], [], [])

    with pytest.raises(HTTPException) as exc:
        member_routes.member_relationships(999)
    assert exc.value.status_code == 404


def test_marriage_pair_is_normalized_and_unique(conn: _FakeConn) -> None:
    a, b = _add("A"), _add("B")

    created = marriage_routes.create_marriage(MarriageCreate(spouse1_id=b, spouse2_id=a))
    assert (created["spouse1_id"], created["spouse2_id"]) == (a, b)
    assert created["is_active"] is True

    with pytest.raises(HTTPException) as exc:
        marriage_routes.create_marriage(MarriageCreate(spouse1_id=a, spouse2_id=b))
    assert exc.value.status_code == 409


def test_marriage_with_unknown_member_is_404(conn: _FakeConn) -> None:
    a = _add("A")
    with pytest.raises(HTTPException) as exc:
        marriage_routes.create_marriage(MarriageCreate(spouse1_id=a, spouse2_id=77))
    assert exc.value.status_code == 404


def test_update_and_delete_marriage(conn: _FakeConn) -> None:
    a, b = _add("A"), _add("B")
    mid = marriage_routes.create_marriage(
        MarriageCreate(spouse1_id=a, spouse2_id=b, marriage_date=date(2000, 5, 1))
    )["id"]

    with pytest.raises(HTTPException) as exc:
        marriage_routes.update_marriage(mid, MarriageUpdate(divorce_date=date(1999, 1, 1)))
    assert exc.value.status_code == 422

    updated = marriage_routes.update_marriage(mid, MarriageUpdate(divorce_date=date(2010, 1, 1)))
    assert updated["marriage_date"] == "2000-05-01"
    assert updated["is_active"] is False

    assert marriage_routes.delete_marriage(mid) == {"ok": True}
    assert marriage_routes.list_marriages_route()["total"] == 0
    with pytest.raises(HTTPException) as exc:
        marriage_routes.delete_marriage(mid)
    assert exc.value.status_code == 404


def test_parent_child_rejects_duplicates_and_cycles(conn: _FakeConn) -> None:
    a, b, c = _add("A"), _add("B"), _add("C")
    parent_child_routes.create_parent_child(ParentChildCreate(parent_id=a, child_id=b))
    parent_child_routes.create_parent_child(ParentChildCreate(parent_id=b, child_id=c))

    with pytest.raises(HTTPException) as exc:
        parent_child_routes.create_parent_child(ParentChildCreate(parent_id=a, child_id=b))
    assert exc.value.status_code == 409

    with pytest.raises(HTTPException) as exc:
        parent_child_routes.create_parent_child(ParentChildCreate(parent_id=c, child_id=a))
    assert exc.value.status_code == 409

    with pytest.raises(HTTPException) as exc:
        parent_child_routes.create_parent_child(ParentChildCreate(parent_id=a, child_id=404))
    assert exc.value.status_code == 404


def test_delete_parent_child(conn: _FakeConn) -> None:
    a, b = _add("A"), _add("B")
    link_id = parent_child_routes.create_parent_child(ParentChildCreate(parent_id=a, child_id=b))["id"]

    assert parent_child_routes.delete_parent_child(link_id) == {"ok": True}
    assert parent_child_routes.list_parent_child_route()["results"] == []
    with pytest.raises(HTTPException) as exc:
        parent_child_routes.delete_parent_child(link_id)
    assert exc.value.status_code == 404


def test_network_layout_and_stats(conn: _FakeConn) -> None:
    a, b, c = _add("A", gender="male"), _add("B", gender="female"), _add("C")
    marriage_routes.create_marriage(MarriageCreate(spouse1_id=a, spouse2_id=b))
    parent_child_routes.create_parent_child(ParentChildCreate(parent_id=a, child_id=c))

    snapshot = network_routes.network_snapshot()
    assert len(snapshot["members"]) == 3
    assert len(snapshot["marriages"]) == 1
    assert len(snapshot["parent_child"]) == 1

    layout = network_routes.network_layout(width=800, height=600)
    node_ids = {n["id"] for n in layout["nodes"]}
    assert node_ids == {a, b, c}
    assert all("member" in n for n in layout["nodes"])
    for e in layout["edges"]:
        assert e["from"] in node_ids
        assert e["to"] in node_ids
    assert {e["kind"] for e in layout["edges"]} == {"marriage", "parent-child"}

    stats = network_routes.network_stats()
    assert stats["member_count"] == 3
    assert stats["generation_depth"] == 2
    assert stats["gender_distribution"] == {"male": 1, "female": 1, "unknown": 1}
    assert stats["average_age"] is None
