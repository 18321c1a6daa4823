from pathlib import Path

from sqlbridge.lib import paths


def test_data_dir_env_override(monkeypatch):
    monkeypatch.setenv("SQLBRIDGE_DATA_DIR", "/opt/bridge")
    assert paths.data_dir() == Path("/opt/bridge")


def test_data_dir_expands_user(monkeypatch):
    monkeypatch.setenv("SQLBRIDGE_DATA_DIR", "~/bridge")
    assert paths.data_dir() == Path.home() / "bridge"


def test_data_dir_xdg_fallback(monkeypatch):
    monkeypatch.delenv("SQLBRIDGE_DATA_DIR", raising=False)
    monkeypatch.setenv("XDG_DATA_HOME", "/xdg")
    assert paths.data_dir() == Path("/xdg/sqlbridge")


def test_data_dir_home_fallback(monkeypatch):
    monkeypatch.delenv("SQLBRIDGE_DATA_DIR", raising=False)
    monkeypatch.delenv("XDG_DATA_HOME", raising=False)
    assert paths.data_dir() == Path.home() / ".local" / "share" / "sqlbridge"


def test_default_db_and_config_file(data_dir):
    assert paths.default_db("x.db") == data_dir / "x.db"
    assert paths.config_file() == data_dir / "config.yaml"
