"""Drive search-query (``q``) and ``fields`` builders."""

from __future__ import annotations

import re
from typing import Optional

DEFAULT_LIST_FIELDS: str = "files(name, id, mimeType)"

_TRASHED_CLAUSE = re.compile(r"\btrashed\s*=\s*(?:true|false)\b", re.IGNORECASE)
_DANGLING_AND = re.compile(r"^\s*and\s+|\s+and\s*$|(?<=\s)and\s+(?=and\s)", re.IGNORECASE)
_STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\'')
_PLACEHOLDER = re.compile(r"\x00(\d+)\x00")


def quote(value: str) -> str:
    """Return ``value`` as a double-quoted Drive query string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def name_clause(name: str) -> str:
    return f"name = {quote(name)}"


def mime_type_clause(mime_type: str) -> str:
    return f"mimeType = {quote(mime_type)}"


def parent_clause(parent_id: str) -> str:
    return f"{quote(parent_id)} in parents"


def and_(*clauses: Optional[str]) -> str:
    """Join non-empty clauses with ``and``."""
    return " and ".join(c.strip() for c in clauses if c and c.strip())


def with_trashed_clause(q: Optional[str], trashed: Optional[bool] = False) -> str:
    """
    Replace (or add) the ``trashed`` clause of ``q``.

    Args:
        q: Query, possibly already holding a ``trashed = true|false`` clause.
        trashed: False keeps only non-trashed objects, True only trashed ones,
            None removes the constraint entirely.

    Quoted literals are left untouched, so ``name = "trashed = true"`` keeps
    its value.
    """
    literals: list[str] = []

    def _stash(match: re.Match) -> str:
        literals.append(match.group(0))
        return f"\x00{len(literals) - 1}\x00"

    rest = _STRING_LITERAL.sub(_stash, q or "")
    rest = _TRASHED_CLAUSE.sub("", rest)
    rest = _DANGLING_AND.sub("", rest).strip()
    rest = re.sub(r"\s{2,}", " ", rest)
    rest = _PLACEHOLDER.sub(lambda m: literals[int(m.group(1))], rest)
    if trashed is None:
        return rest
    return and_(rest, f"trashed = {'true' if trashed else 'false'}")


def with_page_token(fields: Optional[str]) -> str:
    """Make sure a files.list ``fields`` selector requests ``nextPageToken``."""
    fields = (fields or DEFAULT_LIST_FIELDS).strip()
    if "nextPageToken" in fields:
        return fields
    return f"nextPageToken, {fields}"
