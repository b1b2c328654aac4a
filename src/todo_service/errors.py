from __future__ import annotations


# PUBLIC_INTERFACE
class TodoError(Exception):
    """Base class for every error raised by the todo core."""


class InvalidIdentifier(TodoError):
    """The caller supplied an id value that is not allowed for the operation."""


class ValidationFailure(TodoError):
    """A required field is missing or empty."""


class NotFound(TodoError):
    """The referenced todo does not exist."""

    def __init__(self, todo_id: int) -> None:
        super().__init__("todo not found")
        self.todo_id = todo_id


class PersistenceFailure(TodoError):
    """A transaction could not be executed, committed or rolled back."""


class QuoteUnavailable(TodoError):
    """The third-party quote API failed or returned an unusable response."""


class QuoteNotConfigured(TodoError):
    """No API key is configured for the quote API."""
