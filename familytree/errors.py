from __future__ import annotations


class FamilyTreeError(Exception):
    pass


class MemberNotFound(FamilyTreeError, LookupError):
    def __init__(self, member_id: int) -> None:
        super().__init__(f"member not found: {member_id}")
        self.member_id = member_id
