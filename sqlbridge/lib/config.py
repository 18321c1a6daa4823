from functools import lru_cache

import yaml

from sqlbridge.lib import paths
from sqlbridge.lib.store.sqlite import DEFAULT_BUSY_TIMEOUT_MS

DEFAULT_DB_FILE = "sqlbridge.db"


def clear_cache():
    load_config.cache_clear()


@lru_cache(maxsize=1)
def load_config() -> dict:
    """Load config.yaml from the data dir, returning an empty dict if not found."""
    path = paths.config_file()
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config at {path} must be a mapping")
    return data


def default_db_file() -> str:
    name = load_config().get("default_db_file") or DEFAULT_DB_FILE
    if "/" in name or "\\" in name:
        raise ValueError(f"default_db_file must be a bare filename, got {name!r}")
    return name


def busy_timeout_ms() -> int:
    return int(load_config().get("busy_timeout_ms", DEFAULT_BUSY_TIMEOUT_MS))


def log_level() -> str:
    return str(load_config().get("log_level", "WARNING")).upper()
