from __future__ import annotations

import logging
from typing import List, Optional

from .errors import NotFound, QuoteNotConfigured
from .models import TodoEntity
from .quotes import QuoteFetcher
from .repositories import Repository
from .schemas import Quote, TodoCreate, TodoUpdate
from .validation import validate_new_todo, validate_todo_id

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TodoService:
    """
    Transactional core for todo items.

    Inputs are validated before the repository is touched, so a rejected call
    never opens a transaction. Storage failures surface from the repository
    as PersistenceFailure; nothing is retried here.
    """

    def __init__(self, repository: Repository, quote_fetcher: Optional[QuoteFetcher] = None) -> None:
        self._repository = repository
        self._quote_fetcher = quote_fetcher

    @property
    def repository(self) -> Repository:
        return self._repository

    def create(self, todo: TodoCreate) -> TodoEntity:
        """Validate and persist a new todo; return it with its assigned id."""
        validate_new_todo(todo)
        created = self._repository.create(todo)
        logger.info("Created todo id=%d", created["id"])
        return created

    def update(self, todo_id: int, patch: TodoUpdate) -> TodoEntity:
        """Merge the non-zero fields of patch over todo `todo_id`."""
        validate_todo_id(todo_id)
        updated = self._repository.update(todo_id, patch)
        logger.info("Updated todo id=%d", todo_id)
        return updated

    def delete(self, todo_id: int) -> None:
        """Delete todo `todo_id`. Deleting a missing todo succeeds."""
        validate_todo_id(todo_id)
        removed = self._repository.delete(todo_id)
        logger.info("Deleted todo id=%d (row removed: %s)", todo_id, removed)

    def get(self, todo_id: int) -> TodoEntity:
        validate_todo_id(todo_id)
        item = self._repository.get(todo_id)
        if item is None:
            raise NotFound(todo_id)
        return item

    def list(self) -> List[TodoEntity]:
        return self._repository.list()

    def get_quote(self) -> Quote:
        """Fetch a random quote from the configured quote API."""
        if self._quote_fetcher is None:
            raise QuoteNotConfigured("quote API key is not configured")
        return self._quote_fetcher.fetch_random()
