from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from datetime import datetime
from typing import Generator, List, Optional

from sqlalchemy import Boolean, Column, DateTime, Integer, Text, create_engine, delete, select
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .errors import NotFound, PersistenceFailure
from .models import TodoEntity, merge_todo
from .repositories import Repository
from .schemas import TodoCreate, TodoUpdate

logger = logging.getLogger(__name__)

Base = declarative_base()

# Microsecond precision so stored timestamps equal the values handed back on create
_Timestamp = DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql")


class TodoRecord(Base):
    """Row of the todo table."""

    __tablename__ = "todo_models"
    # Never reuse the id of a deleted row
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(_Timestamp, nullable=False)
    updated_at = Column(_Timestamp, nullable=False)


# PUBLIC_INTERFACE
def create_db_engine(database_url: str, pool_size: int = 5) -> Engine:
    """
    Create the pooled engine shared by every request.

    SQLite files get their parent directory created; in-memory SQLite uses a
    single shared connection so that every session sees the same database.
    Server databases get a bounded pool with pre-ping.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        connect_args = {"check_same_thread": False}
        if not url.database or url.database == ":memory:":
            return create_engine(database_url, connect_args=connect_args, poolclass=StaticPool)
        os.makedirs(os.path.dirname(url.database) or ".", exist_ok=True)
        return create_engine(database_url, connect_args=connect_args)
    return create_engine(database_url, pool_size=pool_size, pool_pre_ping=True)


# PUBLIC_INTERFACE
def init_schema(engine: Engine) -> None:
    """Create the todo table if it does not exist yet."""
    Base.metadata.create_all(engine)


class SQLAlchemyRepository(Repository):
    """
    Relational record store. Each operation runs in its own transaction:
    begin, execute, then commit on success or roll back on any error.
    """

    name = "sql"

    def __init__(self, engine: Engine, create_schema: bool = True) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)
        if create_schema:
            init_schema(engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def _now(self) -> datetime:
        return datetime.now()

    @contextmanager
    def _transaction(self, operation: str) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            session.begin()
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            self._rollback(session, operation)
            logger.exception("Transaction for %s rolled back", operation)
            raise PersistenceFailure(f"{operation} failed: {exc.__class__.__name__}") from exc
        except BaseException:
            self._rollback(session, operation)
            raise
        finally:
            session.close()

    @staticmethod
    def _rollback(session: Session, operation: str) -> None:
        try:
            session.rollback()
        except SQLAlchemyError as exc:
            raise PersistenceFailure(f"{operation} rollback failed") from exc

    @staticmethod
    def _to_entity(record: TodoRecord) -> TodoEntity:
        return {
            "id": int(record.id),
            "title": str(record.title),
            "completed": bool(record.completed),
            "created_at": record.created_at,
            "updated_at": record.updated_at,
        }

    def create(self, data: TodoCreate) -> TodoEntity:
        now = self._now()
        with self._transaction("create") as session:
            record = TodoRecord(
                title=data.title,
                completed=data.completed,
                created_at=now,
                updated_at=now,
            )
            session.add(record)
            session.flush()
            entity = self._to_entity(record)
        return entity

    def get(self, todo_id: int) -> Optional[TodoEntity]:
        with self._transaction("get") as session:
            record = session.get(TodoRecord, todo_id)
            entity = None if record is None else self._to_entity(record)
        return entity

    def update(self, todo_id: int, data: TodoUpdate) -> TodoEntity:
        with self._transaction("update") as session:
            record = session.get(TodoRecord, todo_id)
            if record is None:
                raise NotFound(todo_id)
            merged = merge_todo(self._to_entity(record), data, self._now())
            record.title = merged["title"]
            record.completed = merged["completed"]
            record.updated_at = merged["updated_at"]
            session.flush()
            entity = self._to_entity(record)
        return entity

    def delete(self, todo_id: int) -> bool:
        with self._transaction("delete") as session:
            result = session.execute(delete(TodoRecord).where(TodoRecord.id == todo_id))
            deleted = result.rowcount > 0
        return deleted

    def list(self) -> List[TodoEntity]:
        with self._transaction("list") as session:
            records = session.execute(select(TodoRecord).order_by(TodoRecord.id)).scalars().all()
            entities = [self._to_entity(r) for r in records]
        return entities

    def close(self) -> None:
        self._engine.dispose()
