import pytest

from sqlbridge.lib import config, store
from sqlbridge.lib.store import Registry


@pytest.fixture(autouse=True)
def data_dir(monkeypatch, tmp_path):
    """Isolated data dir and fresh default registry per test.

    Points SQLBRIDGE_DATA_DIR at tmp_path so load() and config never touch
    the real home directory.
    """
    store._reset_for_testing()
    config.clear_cache()

    data = tmp_path / "data"
    monkeypatch.setenv("SQLBRIDGE_DATA_DIR", str(data))

    yield data

    store._reset_for_testing()
    config.clear_cache()


@pytest.fixture
def registry():
    reg = Registry()
    yield reg
    reg.close_all()


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "t.db")


@pytest.fixture
def people(registry, db_path):
    """Registry with db_path open and a small `t` table."""
    registry.open(db_path)
    registry.run(db_path, lambda c: c.execute("CREATE TABLE t(id INTEGER, name TEXT)"))
    return registry
