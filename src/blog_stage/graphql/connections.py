"""Helpers for Relay-style connections and mutation payloads.

pg_graphql returns collections as ``{"edges": [{"node": {...}}], "pageInfo": {...}}``
and mutations as ``{"records": [...]}``. Any level may be ``null`` when a
query fails partially or RLS hides everything, so every helper tolerates
missing data.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def nodes(connection: Mapping[str, Any] | None) -> list[dict[str, Any]]:
    """Return the ``node`` objects of a connection in order."""
    if not connection:
        return []
    edges = connection.get("edges") or []
    return [edge["node"] for edge in edges if edge and edge.get("node") is not None]


def first_node(connection: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Return the first node of a connection, or ``None``."""
    found = nodes(connection)
    return found[0] if found else None


def edge_count(connection: Mapping[str, Any] | None) -> int:
    """Return the number of edges, used for count-only queries."""
    if not connection:
        return 0
    return len(connection.get("edges") or [])


def page_info(connection: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return the ``pageInfo`` block, or an empty mapping."""
    if not connection:
        return {}
    return dict(connection.get("pageInfo") or {})


def records(data: Mapping[str, Any] | None, field: str) -> list[dict[str, Any]]:
    """Return the ``records`` of a mutation payload field."""
    if not data:
        return []
    payload = data.get(field) or {}
    return list(payload.get("records") or [])


def first_record(data: Mapping[str, Any] | None, field: str) -> dict[str, Any] | None:
    """Return the first record of a mutation payload field, or ``None``."""
    found = records(data, field)
    return found[0] if found else None
