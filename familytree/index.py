from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

try:
    from .models import Marriage, Member, ParentChild
except ImportError:  # pragma: no cover
    # Support running with CWD=familytree (e.g., `python -m uvicorn main:app`).
    from models import Marriage, Member, ParentChild


@dataclass(frozen=True)
class RelationshipIndex:
    """Lookup maps over one snapshot of members, marriages and parent-child links.

    Lookups for unknown ids return an empty tuple. The index never mutates the
    records it was built from; rebuild it when the snapshot changes.
    """

    members: dict[int, Member] = field(default_factory=dict)
    marriages: tuple[Marriage, ...] = ()
    links: tuple[ParentChild, ...] = ()
    marriages_by_member: dict[int, tuple[Marriage, ...]] = field(default_factory=dict)
    links_by_parent: dict[int, tuple[ParentChild, ...]] = field(default_factory=dict)
    links_by_child: dict[int, tuple[ParentChild, ...]] = field(default_factory=dict)

    def member(self, member_id: int) -> Member | None:
        return self.members.get(member_id)

    def marriages_of(self, member_id: int) -> tuple[Marriage, ...]:
        return self.marriages_by_member.get(member_id, ())

    def child_links(self, parent_id: int) -> tuple[ParentChild, ...]:
        return self.links_by_parent.get(parent_id, ())

    def parent_links(self, child_id: int) -> tuple[ParentChild, ...]:
        return self.links_by_child.get(child_id, ())

    def child_ids(self, parent_id: int) -> list[int]:
        return [link.child_id for link in self.child_links(parent_id)]

    def would_create_cycle(self, parent_id: int, child_id: int) -> bool:
        """True if linking parent_id -> child_id closes a loop.

        That is the case when child_id is parent_id itself or already one of
        its ancestors.
        """

        if parent_id == child_id:
            return True

        seen: set[int] = {parent_id}
        frontier = [parent_id]
        while frontier:
            next_frontier: list[int] = []
            for node in frontier:
                for link in self.parent_links(node):
                    if link.parent_id == child_id:
                        return True
                    if link.parent_id in seen:
                        continue
                    seen.add(link.parent_id)
                    next_frontier.append(link.parent_id)
            frontier = next_frontier
        return False


def _group(items: Iterable[tuple[int, object]]) -> dict[int, tuple]:
    out: dict[int, list] = {}
    for key, item in items:
        out.setdefault(key, []).append(item)
    return {k: tuple(v) for k, v in out.items()}


def build_index(
    members: Iterable[Member],
    marriages: Iterable[Marriage],
    links: Iterable[ParentChild],
) -> RelationshipIndex:
    members = list(members)
    marriages = tuple(marriages)
    links = tuple(links)

    def _marriage_keys() -> Iterable[tuple[int, Marriage]]:
        for m in marriages:
            yield m.spouse1_id, m
            # A self-marriage is filed once so it does not show up twice.
            if m.spouse2_id != m.spouse1_id:
                yield m.spouse2_id, m

    return RelationshipIndex(
        members={m.id: m for m in members},
        marriages=marriages,
        links=links,
        marriages_by_member=_group(_marriage_keys()),
        links_by_parent=_group((link.parent_id, link) for link in links),
        links_by_child=_group((link.child_id, link) for link in links),
    )
