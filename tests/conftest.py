from __future__ import annotations

import logging

import pytest
from sqlalchemy import create_engine

from supply_tracker.services import InventoryStore
from supply_tracker.storage import DatabaseBackend, FileBackend


@pytest.fixture()
def file_backend(tmp_path):
    return FileBackend(tmp_path / "equipment.dat", tmp_path / "requests.dat")


@pytest.fixture()
def store(file_backend):
    store = InventoryStore(file_backend)
    store.load()
    return store


@pytest.fixture()
def db_engine():
    engine = create_engine("sqlite+pysqlite:///:memory:")
    yield engine
    engine.dispose()


@pytest.fixture()
def db_backend(db_engine):
    backend = DatabaseBackend(db_engine)
    try:
        yield backend
    finally:
        backend.close()


@pytest.fixture()
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
