from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from threading import RLock
from typing import List, Optional

from .errors import NotFound
from .models import TodoEntity, merge_todo
from .schemas import TodoCreate, TodoUpdate
from .settings import Settings, get_settings


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Abstract record store contract for todo storage backends.

    Every mutation is a single atomic attempt: it either completes entirely or
    leaves the store unchanged and raises. Callers always receive copies.
    """

    name: str = "abstract"

    @abstractmethod
    def create(self, data: TodoCreate) -> TodoEntity:
        """Persist a new todo and return it with its assigned id."""

    @abstractmethod
    def get(self, todo_id: int) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    def update(self, todo_id: int, data: TodoUpdate) -> TodoEntity:
        """Merge non-zero fields of data over the stored todo. Raise NotFound if absent."""

    @abstractmethod
    def delete(self, todo_id: int) -> bool:
        """Delete a todo by id. Return True if a row was removed; a missing id is not an error."""

    @abstractmethod
    def list(self) -> List[TodoEntity]:
        """Return all todos ordered by id."""

    def close(self) -> None:
        """Release resources held by the backend."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory record store, used as the default runtime backend
    and as a test double for the SQL store.
    """

    name = "memory"

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, TodoEntity] = {}
        self._next_id = 1

    def _now(self) -> datetime:
        return datetime.now()

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def create(self, data: TodoCreate) -> TodoEntity:
        now = self._now()
        with self._lock:
            entity: TodoEntity = {
                "id": self._allocate_id(),
                "title": data.title,
                "completed": data.completed,
                "created_at": now,
                "updated_at": now,
            }
            self._items[entity["id"]] = entity
            return entity.copy()

    def get(self, todo_id: int) -> Optional[TodoEntity]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else item.copy()

    def update(self, todo_id: int, data: TodoUpdate) -> TodoEntity:
        with self._lock:
            existing = self._items.get(todo_id)
            if existing is None:
                raise NotFound(todo_id)
            updated = merge_todo(existing, data, self._now())
            self._items[todo_id] = updated
            return updated.copy()

    def delete(self, todo_id: int) -> bool:
        with self._lock:
            return self._items.pop(todo_id, None) is not None

    def list(self) -> List[TodoEntity]:
        with self._lock:
            return [self._items[k].copy() for k in sorted(self._items)]


# PUBLIC_INTERFACE
def get_repository(settings: Optional[Settings] = None) -> Repository:
    """
    Factory to return the configured repository based on settings.
    - memory: InMemoryRepository
    - sql: SQLAlchemyRepository bound to settings.database_url
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sql":
        from .db import SQLAlchemyRepository, create_db_engine

        engine = create_db_engine(settings.database_url, pool_size=settings.db_pool_size)
        return SQLAlchemyRepository(engine, create_schema=settings.db_create_schema)
    return InMemoryRepository()
