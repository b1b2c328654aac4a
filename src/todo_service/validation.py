"""
Pure checks run before the record store opens a transaction.

None of these functions touch storage; each either returns None or raises a
TodoError subclass describing the rejected input.
"""
from __future__ import annotations

from .errors import InvalidIdentifier, ValidationFailure
from .schemas import TodoCreate

MAX_TODO_ID = 2**63 - 1


# PUBLIC_INTERFACE
def validate_new_todo(todo: TodoCreate) -> None:
    """
    Reject a todo submitted for creation when it carries an id or has no title.

    Titles are not trimmed, so a whitespace-only title is accepted.
    """
    if todo.id != 0:
        raise InvalidIdentifier("ID should not be provided")
    if not todo.title:
        raise ValidationFailure("The title is required")


# PUBLIC_INTERFACE
def validate_todo_id(todo_id: int) -> None:
    """
    Reject identifiers that can never name a persisted todo: zero, negative
    values, and values beyond a signed 64-bit integer column.
    """
    if todo_id <= 0 or todo_id > MAX_TODO_ID:
        raise InvalidIdentifier("invalid ID")
