from __future__ import annotations

from dataclasses import dataclass, field

try:
    from .errors import MemberNotFound
    from .index import RelationshipIndex
    from .models import Marriage, Member
except ImportError:  # pragma: no cover
    # Support running with CWD=familytree (e.g., `python -m uvicorn main:app`).
    from errors import MemberNotFound
    from index import RelationshipIndex
    from models import Marriage, Member


@dataclass(frozen=True)
class SpouseLink:
    spouse: Member
    marriage: Marriage


@dataclass(frozen=True)
class MemberRelationships:
    member: Member
    parents: list[Member] = field(default_factory=list)
    children: list[Member] = field(default_factory=list)
    spouses: list[SpouseLink] = field(default_factory=list)


def resolve_member_details(index: RelationshipIndex, member_id: int) -> MemberRelationships:
    """Parents, children and spouses of one member.

    Raises MemberNotFound when the id is not in the index. Links that point
    at ids missing from the snapshot are skipped.
    """

    member = index.member(member_id)
    if member is None:
        raise MemberNotFound(member_id)

    parents = [
        p for p in (index.member(link.parent_id) for link in index.parent_links(member_id)) if p is not None
    ]
    children = [
        c for c in (index.member(link.child_id) for link in index.child_links(member_id)) if c is not None
    ]

    spouses: list[SpouseLink] = []
    for marriage in index.marriages_of(member_id):
        spouse = index.member(marriage.other_spouse(member_id))
        if spouse is None:
            continue
        spouses.append(SpouseLink(spouse=spouse, marriage=marriage))

    return MemberRelationships(member=member, parents=parents, children=children, spouses=spouses)
