"""Connection handle: one open SQLite database file."""

import logging
import re
import sqlite3
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sqlbridge.errors import (
    ConnectFailed,
    ExecFailed,
    InvalidPragma,
    QueryFailed,
)
from sqlbridge.lib import codec
from sqlbridge.lib.store import batch
from sqlbridge.lib.store.sqlite import DEFAULT_BUSY_TIMEOUT_MS, connect

logger = logging.getLogger(__name__)

Row = dict[str, Any]

_PRAGMA_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")
_PRAGMA_WORD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_PRAGMA_NUMBER_RE = re.compile(r"^[+-]?\d+(\.\d+)?$")
_PRAGMA_QUOTED_RE = re.compile(r"^'[^';]*'$")

TRANSACTION_CONTROL_REJECTED = "transaction control is managed by batch; use batch() instead"


@dataclass
class OpenOptions:
    disable_foreign_keys: bool = False
    busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "OpenOptions":
        """Build options from a host payload (snake_case or camelCase keys)."""
        if not data:
            return cls()
        disable = data.get("disable_foreign_keys", data.get("disableForeignKeys"))
        if disable is None:
            disable = False
        if not isinstance(disable, bool):
            raise ValueError(f"disable_foreign_keys must be a boolean, got {disable!r}")
        return cls(disable_foreign_keys=disable)


def render_pragma_value(value: Any) -> str:
    """Render a pragma value for interpolation, rejecting anything unsafe."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, str):
        text = value.strip()
        if (
            _PRAGMA_WORD_RE.match(text)
            or _PRAGMA_NUMBER_RE.match(text)
            or _PRAGMA_QUOTED_RE.match(text)
        ):
            return text
        raise InvalidPragma(f"Invalid pragma value: {value!r}")
    raise InvalidPragma(f"Unsupported pragma value kind: {type(value).__name__}")


class Connection:
    """Owns exactly one open sqlite3 connection for one logical path.

    Not thread-safe on its own; the Registry serializes every call.
    """

    def __init__(self, path: str, conn: sqlite3.Connection):
        self.path = path
        self._conn: sqlite3.Connection | None = conn

    @classmethod
    def open(cls, path: str, options: OpenOptions | None = None) -> "Connection":
        options = options or OpenOptions()
        try:
            conn = connect(path, busy_timeout_ms=options.busy_timeout_ms)
        except sqlite3.Error as e:
            raise ConnectFailed(path, str(e)) from e

        handle = cls(path, conn)
        if options.disable_foreign_keys:
            try:
                conn.execute("PRAGMA foreign_keys = 0")
            except sqlite3.Error as e:
                logger.warning(f"Could not disable foreign keys on {path}: {e}")
        return handle

    @property
    def raw(self) -> sqlite3.Connection:
        if self._conn is None:
            raise sqlite3.ProgrammingError(f"Connection to {self.path} is closed")
        return self._conn

    @property
    def closed(self) -> bool:
        return self._conn is None

    def set_pragma(self, key: str, value: Any) -> bool:
        if not isinstance(key, str) or not _PRAGMA_KEY_RE.match(key):
            raise InvalidPragma(f"Invalid pragma key: {key!r}")
        sql = f"PRAGMA {key} = {render_pragma_value(value)}"
        try:
            self.raw.execute(sql).fetchall()
        except sqlite3.Error as e:
            raise ExecFailed(sql, str(e)) from e
        logger.info(f"Set {sql} on {self.path}")
        return True

    def query(self, sql: str, params: Sequence[Any] | None = None) -> list[Row]:
        if batch.is_transaction_control(sql):
            raise QueryFailed(sql, TRANSACTION_CONTROL_REJECTED)
        bound = codec.to_storage_params(params)
        try:
            cursor = self.raw.execute(sql, bound)
            names = [col[0] for col in cursor.description or ()]
            rows: list[Row] = []
            for record in cursor:
                rows.append(
                    {name: codec.from_storage_value(value) for name, value in zip(names, record)}
                )
        except sqlite3.Error as e:
            raise QueryFailed(sql, str(e)) from e
        return rows

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> int:
        if batch.is_transaction_control(sql):
            raise ExecFailed(sql, TRANSACTION_CONTROL_REJECTED)
        bound = codec.to_storage_params(params)
        try:
            cursor = self.raw.execute(sql, bound)
        except sqlite3.Error as e:
            raise ExecFailed(sql, str(e)) from e
        return cursor.rowcount

    def execute_many(self, sql: str, param_sets: Sequence[Sequence[Any]]) -> int:
        return batch.run(self.raw, batch.expand(sql, param_sets))

    def transaction_execute(self, statements: Sequence[batch.Statement]) -> int:
        return batch.run(self.raw, statements)

    def close(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.close()
        finally:
            self._conn = None
        logger.info(f"Closed connection to {self.path}")
