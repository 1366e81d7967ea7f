"""CLI admin tool for the family tree database.

Usage:
    python -m familytree.admin init-db
    python -m familytree.admin load-demo
    python -m familytree.admin stats
"""

from __future__ import annotations

import argparse
import json
from datetime import date

import psycopg

from familytree.db import apply_schema, get_database_url
from familytree.index import build_index
from familytree.queries import fetch_network
from familytree.stats import compute_statistics

# (first_name, last_name, birth_date, death_date, gender)
_DEMO_MEMBERS = [
    ("Arthur", "Hale", date(1931, 4, 2), date(2004, 11, 19), "male"),
    ("Margaret", "Hale", date(1934, 8, 23), None, "female"),
    ("Thomas", "Hale", date(1958, 1, 12), None, "male"),
    ("Susan", "Hale", date(1960, 6, 5), None, "female"),
    ("Emily", "Hale", date(1989, 3, 30), None, "female"),
    ("Daniel", "Hale", date(1992, 10, 14), None, "male"),
]

# Indexes into _DEMO_MEMBERS.
_DEMO_MARRIAGES = [(0, 1, date(1956, 6, 16), None), (2, 3, date(1986, 9, 6), None)]
_DEMO_PARENT_CHILD = [(0, 2), (1, 2), (2, 4), (3, 4), (2, 5), (3, 5)]


def cmd_init_db(args: argparse.Namespace) -> None:
    with psycopg.connect(get_database_url()) as conn:
        apply_schema(conn)
    print("Schema applied.")


def cmd_load_demo(args: argparse.Namespace) -> None:
    with psycopg.connect(get_database_url()) as conn:
        apply_schema(conn)
        ids: list[int] = []
        for first, last, birth, death, gender in _DEMO_MEMBERS:
            row = conn.execute(
                """
                INSERT INTO family_member (first_name, last_name, birth_date, death_date, gender)
                VALUES (%s, %s, %s, %s, %s)
                RETURNING id
                """,
                (first, last, birth, death, gender),
            ).fetchone()
            ids.append(row[0])

        for a, b, married, divorced in _DEMO_MARRIAGES:
            s1, s2 = sorted((ids[a], ids[b]))
            conn.execute(
                "INSERT INTO marriage (spouse1_id, spouse2_id, marriage_date, divorce_date) VALUES (%s, %s, %s, %s)",
                (s1, s2, married, divorced),
            )

        for parent, child in _DEMO_PARENT_CHILD:
            conn.execute(
                "INSERT INTO parent_child (parent_id, child_id) VALUES (%s, %s)",
                (ids[parent], ids[child]),
            )
        conn.commit()
    print(f"Loaded {len(_DEMO_MEMBERS)} demo members.")


def cmd_stats(args: argparse.Namespace) -> None:
    with psycopg.connect(get_database_url()) as conn:
        members, marriages, links = fetch_network(conn)
    stats = compute_statistics(build_index(members, marriages, links))
    print(json.dumps(stats.as_dict(), indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Family tree admin tool")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create tables").set_defaults(func=cmd_init_db)
    sub.add_parser("load-demo", help="Insert a sample three-generation family").set_defaults(
        func=cmd_load_demo
    )
    sub.add_parser("stats", help="Print family statistics").set_defaults(func=cmd_stats)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
