import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event

# Ensure the module-level app never touches the filesystem during collection
os.environ.setdefault("PERSISTENCE_BACKEND", "memory")

from todo_service.db import SQLAlchemyRepository, create_db_engine  # noqa: E402
from todo_service.main import create_app  # noqa: E402
from todo_service.repositories import InMemoryRepository  # noqa: E402
from todo_service.services import TodoService  # noqa: E402


@pytest.fixture
def sql_repository():
    repo = SQLAlchemyRepository(create_db_engine("sqlite:///:memory:"))
    yield repo
    repo.close()


@pytest.fixture
def memory_repository():
    return InMemoryRepository()


@pytest.fixture(params=["memory", "sql"])
def repository(request):
    """Run a test once against each record store implementation."""
    if request.param == "memory":
        yield InMemoryRepository()
        return
    repo = SQLAlchemyRepository(create_db_engine("sqlite:///:memory:"))
    yield repo
    repo.close()


@pytest.fixture
def service(repository):
    return TodoService(repository)


@pytest.fixture
def tx_events(sql_repository):
    """Count connection-level begin/commit/rollback events on the SQL store's engine."""
    counts = {"begin": 0, "commit": 0, "rollback": 0}

    def _counter(name):
        def listener(conn):
            counts[name] += 1

        return listener

    listeners = [(name, _counter(name)) for name in counts]
    for name, fn in listeners:
        event.listen(sql_repository.engine, name, fn)
    yield counts
    for name, fn in listeners:
        event.remove(sql_repository.engine, name, fn)


@pytest.fixture
def client(memory_repository):
    app = create_app(repository=memory_repository)
    with TestClient(app) as c:
        yield c
