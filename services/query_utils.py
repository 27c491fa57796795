"""Utility helpers for building filtered Peewee queries."""

from typing import Iterable

from peewee import Field, ModelSelect

from services.validators import id_sort_key


def apply_search(query: ModelSelect, fields: Iterable[Field], search_text: str) -> ModelSelect:
    """Filter ``query`` by substring match on any of ``fields``."""
    text = (search_text or "").strip()
    if not text:
        return query
    condition = None
    for field in fields:
        expr = field.contains(text)
        condition = expr if condition is None else (condition | expr)
    return query.where(condition) if condition is not None else query


def next_identifier(field: Field) -> str:
    """Next numeric identifier for a CharField holding opaque ids.

    Non-numeric ids are ignored; numbering starts at ``1``.
    """
    model = field.model
    numeric = [
        int(value)
        for (value,) in model.select(field).tuples()
        if value and id_sort_key(value)[0] == 0
    ]
    return str(max(numeric, default=0) + 1)
