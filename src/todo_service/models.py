from __future__ import annotations

from datetime import datetime
from typing import TypedDict

from .schemas import TodoUpdate


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A lightweight domain value representing a persisted Todo item.

    Fields:
    - id: Unique integer identifier assigned by the store (never 0 once persisted)
    - title: Label of the todo
    - completed: Boolean completion flag
    - created_at: Creation timestamp, set once
    - updated_at: Last update timestamp, never earlier than created_at
    """

    id: int
    title: str
    completed: bool
    created_at: datetime
    updated_at: datetime


# PUBLIC_INTERFACE
def merge_todo(existing: TodoEntity, patch: TodoUpdate, now: datetime) -> TodoEntity:
    """
    Merge an update patch over an existing entity and return a new entity.

    The merge is value-based: a field of the patch only overrides the stored
    value when it is non-zero. An empty title and a false completion flag are
    treated as "not provided", so a patch can never set completed back to
    False. id and created_at always come from the existing entity.
    """
    merged = existing.copy()
    if patch.title:
        merged["title"] = patch.title
    if patch.completed:
        merged["completed"] = True
    merged["updated_at"] = max(now, existing["created_at"])
    return merged
