"""Command layer: the operations exposed to the host.

Every command looks the path up in the registry; a path that was never opened
fails with NotConnected. Nothing opens implicitly except ``open`` and ``load``.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from sqlbridge.errors import BatchFailed, InvalidParameterKind, NoResults
from sqlbridge.lib import config, paths
from sqlbridge.lib.store import batch as batch_engine
from sqlbridge.lib.store import registry as registry_mod
from sqlbridge.lib.store.connection import OpenOptions, Row
from sqlbridge.lib.store.registry import Registry

logger = logging.getLogger(__name__)

Options = OpenOptions | Mapping[str, Any] | None


def _registry(registry: Registry | None) -> Registry:
    return registry if registry is not None else registry_mod.default()


def _options(options: Options) -> OpenOptions:
    if isinstance(options, OpenOptions):
        return options
    resolved = OpenOptions.from_dict(options)
    resolved.busy_timeout_ms = config.busy_timeout_ms()
    return resolved


def open(path: str, options: Options = None, *, registry: Registry | None = None) -> bool:
    _registry(registry).open(path, _options(options))
    return True


def load(options: Options = None, *, registry: Registry | None = None) -> str:
    """Open the default database in the host data dir and return its path."""
    db_path = paths.default_db(config.default_db_file())
    db_path.parent.mkdir(parents=True, exist_ok=True)
    path = str(db_path)
    open(path, options, registry=registry)
    return path


def set_pragma(path: str, key: str, value: Any, *, registry: Registry | None = None) -> bool:
    return _registry(registry).run(path, lambda conn: conn.set_pragma(key, value))


def select(
    path: str,
    sql: str,
    params: Sequence[Any] | None = None,
    *,
    registry: Registry | None = None,
) -> list[Row]:
    return _registry(registry).run(path, lambda conn: conn.query(sql, params))


def select_first(
    path: str,
    sql: str,
    params: Sequence[Any] | None = None,
    *,
    registry: Registry | None = None,
) -> Row:
    rows = select(path, sql, params, registry=registry)
    if not rows:
        raise NoResults()
    return rows[0]


def execute(
    path: str,
    sql: str,
    params: Sequence[Any] | None = None,
    *,
    registry: Registry | None = None,
) -> bool:
    """Execute one statement, or one statement per row for array-of-arrays params."""
    params = params or []

    def run(conn):
        if not batch_engine.is_multi_row(params):
            return conn.execute(sql, params)
        for i, row in enumerate(params):
            if not isinstance(row, list | tuple):
                raise InvalidParameterKind(row, i)
        return conn.execute_many(sql, params)

    _registry(registry).run(path, run)
    return True


def batch(
    path: str,
    statements: Sequence[Sequence[Any]],
    *,
    registry: Registry | None = None,
) -> bool:
    """Execute (sql, params) pairs in order inside one transaction."""
    _registry(registry).run(
        path,
        lambda conn: conn.transaction_execute(
            [_statement(i, item) for i, item in enumerate(statements)]
        ),
    )
    return True


def _statement(index: int, item: Sequence[Any]) -> batch_engine.Statement:
    if isinstance(item, str):
        return item, []
    if not isinstance(item, list | tuple) or not 1 <= len(item) <= 2:
        raise BatchFailed(index, repr(item), "entry must be [sql, params]")
    sql = item[0]
    params = item[1] if len(item) == 2 else []
    if not isinstance(sql, str):
        raise BatchFailed(index, repr(sql), "sql must be a string")
    return sql, params


def close_all(*, registry: Registry | None = None) -> None:
    _registry(registry).close_all()


__all__ = [
    "open",
    "load",
    "set_pragma",
    "select",
    "select_first",
    "execute",
    "batch",
    "close_all",
]
