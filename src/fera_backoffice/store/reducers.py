"""Reducer-style functions over an immutable table state.

State is ``{collection: tuple(rows)}``; every function returns a new state and
never mutates its input.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from ..core.enums import Collection

TableState = Mapping[Collection, tuple[Mapping[str, Any], ...]]


def empty_state() -> TableState:
    return MappingProxyType({c: () for c in Collection})


def _with_table(state: TableState, collection: Collection, rows: tuple) -> TableState:
    new_state = dict(state)
    new_state[collection] = rows
    return MappingProxyType(new_state)


def upsert_row(state: TableState, collection: Collection, row: Mapping[str, Any]) -> TableState:
    """Insert, or merge the supplied fields into the row with the same id."""
    row_id = row.get("id")
    rows = state.get(collection, ())
    updated = []
    found = False
    for existing in rows:
        if row_id is not None and existing.get("id") == row_id:
            updated.append(MappingProxyType({**existing, **row}))
            found = True
        else:
            updated.append(existing)
    if not found:
        updated.append(MappingProxyType(dict(row)))
    return _with_table(state, collection, tuple(updated))


def remove_row(state: TableState, collection: Collection, row_id: str) -> TableState:
    rows = state.get(collection, ())
    return _with_table(state, collection, tuple(r for r in rows if r.get("id") != row_id))


def find_row(state: TableState, collection: Collection, row_id: str):
    for row in state.get(collection, ()):
        if row.get("id") == row_id:
            return row
    return None
