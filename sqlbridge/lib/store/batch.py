"""Transactional batch execution.

Statements run strictly in the order given, inside one explicit transaction.
The first failure rolls back everything executed so far.
"""

import logging
import re
import sqlite3
from collections.abc import Iterable, Sequence
from typing import Any

from sqlbridge.errors import BatchFailed, CommitFailed, ExecFailed, SqlBridgeError
from sqlbridge.lib import codec

logger = logging.getLogger(__name__)

Statement = tuple[str, Sequence[Any] | None]

_LEADING_COMMENTS_RE = re.compile(r"^(\s+|--[^\n]*(\n|$)|/\*.*?\*/)*", re.DOTALL)
_TRANSACTION_KEYWORDS = {"BEGIN", "COMMIT", "END", "ROLLBACK", "SAVEPOINT", "RELEASE"}


def is_multi_row(params: Sequence[Any] | None) -> bool:
    """Array-of-arrays params are detected by inspecting the first element only."""
    if not params or not isinstance(params, list | tuple):
        return False
    return isinstance(params[0], list | tuple)


def is_transaction_control(sql: str) -> bool:
    """True when the statement would start, end or nest a transaction itself."""
    body = _LEADING_COMMENTS_RE.sub("", sql, count=1)
    match = re.match(r"[A-Za-z]+", body)
    return bool(match) and match.group(0).upper() in _TRANSACTION_KEYWORDS


def expand(sql: str, param_sets: Sequence[Any]) -> list[Statement]:
    """Turn one sql + many parameter lists into an ordered statement list."""
    return [(sql, params) for params in param_sets]


def run(conn: sqlite3.Connection, statements: Iterable[Statement]) -> int:
    """Execute statements atomically and return the total rows affected."""
    try:
        conn.execute("BEGIN")
    except sqlite3.Error as e:
        raise ExecFailed("BEGIN", str(e)) from e

    total = 0
    for index, (sql, params) in enumerate(statements):
        try:
            if not isinstance(sql, str):
                raise BatchFailed(index, repr(sql), "sql must be a string")
            if params is not None and not isinstance(params, list | tuple):
                raise BatchFailed(index, sql, "parameters must be a list")
            if is_transaction_control(sql):
                raise BatchFailed(index, sql, "transaction control not allowed in batch")
            cursor = conn.execute(sql, codec.to_storage_params(params))
            if not conn.in_transaction:
                raise BatchFailed(index, sql, "statement ended the batch transaction")
            if cursor.rowcount > 0:
                total += cursor.rowcount
        except (sqlite3.Error, SqlBridgeError) as e:
            _rollback(conn)
            if isinstance(e, BatchFailed):
                raise
            logger.error(f"Batch statement {index} failed, rolled back: {e}")
            raise BatchFailed(index, sql, str(e)) from e

    try:
        conn.execute("COMMIT")
    except sqlite3.Error as e:
        _rollback(conn)
        logger.error(f"Commit failed: {e}")
        raise CommitFailed(f"Commit failed: {e}") from e
    return total


def _rollback(conn: sqlite3.Connection) -> None:
    if not conn.in_transaction:
        return
    try:
        conn.execute("ROLLBACK")
    except sqlite3.Error as e:
        logger.error(f"Rollback failed: {e}")
