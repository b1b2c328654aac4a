import pytest
from sqlalchemy import inspect
from sqlalchemy.dialects import mysql
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from sqlalchemy.schema import CreateTable

from todo_service.db import SQLAlchemyRepository, TodoRecord, create_db_engine
from todo_service.errors import InvalidIdentifier, NotFound, PersistenceFailure
from todo_service.schemas import TodoCreate, TodoUpdate
from todo_service.services import TodoService


def _failing_commit(self):
    raise OperationalError("COMMIT", {}, Exception("database is locked"))


class TestSchema:
    def test_table_is_created(self, sql_repository):
        columns = {c["name"] for c in inspect(sql_repository.engine).get_columns("todo_models")}
        assert columns == {"id", "title", "completed", "created_at", "updated_at"}

    def test_schema_creation_can_be_skipped(self):
        engine = create_db_engine("sqlite:///:memory:")
        SQLAlchemyRepository(engine, create_schema=False)
        assert not inspect(engine).has_table("todo_models")
        engine.dispose()

    def test_sqlite_file_directory_is_created(self, tmp_path):
        db_path = tmp_path / "nested" / "todos.db"
        repo = SQLAlchemyRepository(create_db_engine(f"sqlite:///{db_path}"))
        repo.create(TodoCreate(title="on disk"))
        repo.close()
        assert db_path.exists()

    def test_mysql_timestamps_keep_microseconds(self):
        ddl = str(CreateTable(TodoRecord.__table__).compile(dialect=mysql.dialect()))
        assert "created_at DATETIME(6) NOT NULL" in ddl
        assert "updated_at DATETIME(6) NOT NULL" in ddl

    def test_stored_timestamps_match_created_values(self, sql_repository):
        created = sql_repository.create(TodoCreate(title="precise"))
        stored = sql_repository.get(created["id"])
        assert stored["created_at"] == created["created_at"]
        assert stored["updated_at"] == created["updated_at"]

    def test_ids_are_not_reused_after_delete(self, sql_repository):
        first = sql_repository.create(TodoCreate(title="first"))
        sql_repository.delete(first["id"])
        second = sql_repository.create(TodoCreate(title="second"))
        assert second["id"] > first["id"]


class TestTransactions:
    def test_create_commits_one_transaction(self, sql_repository, tx_events):
        sql_repository.create(TodoCreate(title="Learn Go"))
        assert tx_events["begin"] == 1
        assert tx_events["commit"] == 1
        assert tx_events["rollback"] == 0

    def test_delete_commits_one_transaction(self, sql_repository, tx_events):
        created = sql_repository.create(TodoCreate(title="short lived"))
        sql_repository.delete(created["id"])
        assert tx_events["begin"] == 2
        assert tx_events["commit"] == 2

    def test_rejected_inputs_never_open_a_transaction(self, sql_repository, tx_events):
        service = TodoService(sql_repository)
        with pytest.raises(InvalidIdentifier):
            service.delete(0)
        with pytest.raises(InvalidIdentifier):
            service.create(TodoCreate(id=5, title="x"))
        with pytest.raises(InvalidIdentifier):
            service.update(0, TodoUpdate(title="x"))
        assert tx_events == {"begin": 0, "commit": 0, "rollback": 0}

    def test_update_of_missing_row_rolls_back(self, sql_repository, tx_events):
        with pytest.raises(NotFound):
            sql_repository.update(77, TodoUpdate(title="ghost"))
        assert tx_events["commit"] == 0
        assert tx_events["rollback"] == 1

    def test_insert_failure_rolls_back_and_raises_persistence_failure(self, sql_repository, tx_events):
        TodoRecord.__table__.drop(sql_repository.engine)
        for key in tx_events:
            tx_events[key] = 0

        with pytest.raises(PersistenceFailure) as exc_info:
            sql_repository.create(TodoCreate(title="nowhere to go"))
        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert tx_events["commit"] == 0
        assert tx_events["rollback"] >= 1

    def test_commit_failure_on_create_leaves_store_empty(self, sql_repository, monkeypatch):
        monkeypatch.setattr(Session, "commit", _failing_commit)
        with pytest.raises(PersistenceFailure):
            sql_repository.create(TodoCreate(title="never stored"))
        monkeypatch.undo()
        assert sql_repository.list() == []

    def test_commit_failure_on_update_keeps_previous_values(self, sql_repository, monkeypatch):
        created = sql_repository.create(TodoCreate(title="stable"))
        monkeypatch.setattr(Session, "commit", _failing_commit)
        with pytest.raises(PersistenceFailure):
            sql_repository.update(created["id"], TodoUpdate(title="lost", completed=True))
        monkeypatch.undo()
        current = sql_repository.get(created["id"])
        assert current["title"] == "stable"
        assert current["completed"] is False
        assert current["updated_at"] == created["updated_at"]

    def test_commit_failure_on_delete_keeps_row(self, sql_repository, monkeypatch):
        created = sql_repository.create(TodoCreate(title="survivor"))
        monkeypatch.setattr(Session, "commit", _failing_commit)
        with pytest.raises(PersistenceFailure):
            sql_repository.delete(created["id"])
        monkeypatch.undo()
        assert sql_repository.get(created["id"]) is not None

    def test_delete_reports_whether_a_row_was_removed(self, sql_repository):
        created = sql_repository.create(TodoCreate(title="once"))
        assert sql_repository.delete(created["id"]) is True
        assert sql_repository.delete(created["id"]) is False
