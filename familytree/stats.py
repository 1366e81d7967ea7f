from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Optional

try:
    from .index import RelationshipIndex
    from .models import Member
except ImportError:  # pragma: no cover
    # Support running with CWD=familytree (e.g., `python -m uvicorn main:app`).
    from index import RelationshipIndex
    from models import Member

log = logging.getLogger(__name__)

_UNKNOWN_GENDER = "unknown"


@dataclass(frozen=True)
class FamilyStatistics:
    member_count: int
    marriage_count: int
    parent_child_count: int
    gender_distribution: dict[str, int] = field(default_factory=dict)
    active_marriage_count: int = 0
    divorced_count: int = 0
    average_age: Optional[float] = None
    generation_depth: int = 1
    cycle_detected: bool = False

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def _age_years(member: Member, *, today: date) -> int | None:
    if member.birth_date is None:
        return None
    reference = member.death_date or today
    return reference.year - member.birth_date.year


def _gender_distribution(members: list[Member]) -> dict[str, int]:
    out: dict[str, int] = {}
    for m in members:
        key = m.gender.value if m.gender is not None else _UNKNOWN_GENDER
        out[key] = out.get(key, 0) + 1
    return out


def _average_age(members: list[Member], *, today: date) -> float | None:
    ages = [a for a in (_age_years(m, today=today) for m in members) if a is not None]
    if not ages:
        return None
    return sum(ages) / len(ages)


def _longest_descent(index: RelationshipIndex, root: int) -> tuple[int, bool]:
    """Return (deepest level reached from root, whether a cycle was hit).

    Iterative DFS. A child already on the current path is skipped, and a child
    is only re-expanded when reached at a strictly greater depth than before,
    so the walk terminates on cyclic input and still finds the longest path
    through a DAG.
    """

    best: dict[int, int] = {root: 1}
    on_path: set[int] = {root}
    stack = [(root, 1, iter(index.child_ids(root)))]
    deepest = 1
    cycle = False

    while stack:
        node, depth, children = stack[-1]
        child = next(children, None)
        if child is None:
            stack.pop()
            on_path.discard(node)
            continue

        if child in on_path:
            cycle = True
            continue
        if best.get(child, 0) >= depth + 1:
            continue

        best[child] = depth + 1
        deepest = max(deepest, depth + 1)
        on_path.add(child)
        stack.append((child, depth + 1, iter(index.child_ids(child))))

    return deepest, cycle


def generation_depth(index: RelationshipIndex) -> tuple[int, bool]:
    """Return (longest root-to-descendant chain, whether a traversal hit a cycle).

    Roots are members that appear as a parent and never as a child. The cycle
    flag only covers cycles reachable from some root; a loop in a component
    with no root goes unreported, so False does not mean the data is acyclic.
    """

    parents = {link.parent_id for link in index.links}
    children = {link.child_id for link in index.links}
    roots = sorted(mid for mid in parents - children if mid in index.members)
    if not roots:
        return 1, False

    depth = 1
    cycle = False
    for root in roots:
        d, hit = _longest_descent(index, root)
        depth = max(depth, d)
        if hit:
            log.warning("parent-child cycle reachable from member %s", root)
            cycle = True
    return depth, cycle


def compute_statistics(index: RelationshipIndex, *, today: date | None = None) -> FamilyStatistics:
    t = today or date.today()
    members = list(index.members.values())
    active = sum(1 for m in index.marriages if m.is_active)
    depth, cycle = generation_depth(index)

    return FamilyStatistics(
        member_count=len(members),
        marriage_count=len(index.marriages),
        parent_child_count=len(index.links),
        gender_distribution=_gender_distribution(members),
        active_marriage_count=active,
        divorced_count=len(index.marriages) - active,
        average_age=_average_age(members, today=t),
        generation_depth=depth,
        cycle_detected=cycle,
    )
