import os
from pathlib import Path


def data_dir() -> Path:
    """Host application-data directory holding the default database and config."""
    override = os.environ.get("SQLBRIDGE_DATA_DIR")
    if override:
        return Path(override).expanduser()
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg).expanduser() / "sqlbridge"
    return Path.home() / ".local" / "share" / "sqlbridge"


def config_file() -> Path:
    return data_dir() / "config.yaml"


def default_db(db_file: str) -> Path:
    return data_dir() / db_file
