from __future__ import annotations


def _display_name(first_name: str | None, last_name: str | None) -> str:
    parts = [p.strip() for p in (first_name, last_name) if p and p.strip()]
    return " ".join(parts)


def _initials(first_name: str | None, last_name: str | None) -> str:
    """Two-letter avatar fallback, e.g. ("anne", "Smith") -> "AS"."""
    out = ""
    for p in (first_name, last_name):
        s = (p or "").strip()
        if s:
            out += s[0]
    return out.upper()
