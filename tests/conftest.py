from __future__ import annotations

from datetime import date

import pytest

from familytree.models import Gender, Marriage, Member, ParentChild


@pytest.fixture()
def fixed_today() -> date:
    # Keep tests deterministic.
    return date(2026, 1, 20)


@pytest.fixture()
def three_generations() -> tuple[list[Member], list[Marriage], list[ParentChild]]:
    # Grandparents 1+2 -> parent 3 (married to 4) -> children 5, 6. Member 7 is isolated.
    members = [
        Member(1, "Arthur", "Hale", date(1931, 4, 2), date(2004, 11, 19), Gender.MALE),
        Member(2, "Margaret", "Hale", date(1934, 8, 23), None, Gender.FEMALE),
        Member(3, "Thomas", "Hale", date(1958, 1, 12), None, Gender.MALE),
        Member(4, "Susan", "Price", date(1960, 6, 5), None, Gender.FEMALE),
        Member(5, "Emily", "Hale", date(1989, 3, 30), None, Gender.FEMALE),
        Member(6, "Daniel", "Hale", None, None, None),
        Member(7, "Robin", "Marsh", None, None, Gender.OTHER),
    ]
    marriages = [
        Marriage(1, 1, 2, date(1956, 6, 16), None),
        Marriage(2, 3, 4, date(1986, 9, 6), date(2001, 2, 1)),
    ]
    links = [
        ParentChild(1, 1, 3),
        ParentChild(2, 2, 3),
        ParentChild(3, 3, 5),
        ParentChild(4, 4, 5),
        ParentChild(5, 3, 6),
    ]
    return members, marriages, links
