"""Registry of open connections keyed by logical path.

One lock guards the map and every operation run against a connection taken
from it, so all database access in the process is serialized. Callers never
receive a Connection outside the critical section.
"""

import atexit
import logging
import threading
from collections.abc import Callable
from typing import TypeVar

from sqlbridge.errors import NotConnected
from sqlbridge.lib.store.connection import Connection, OpenOptions

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Registry:
    def __init__(self, opener: Callable[[str, OpenOptions], Connection] = Connection.open):
        self._lock = threading.RLock()
        self._connections: dict[str, Connection] = {}
        self._opener = opener

    def open(self, path: str, options: OpenOptions | None = None) -> None:
        """Open path and register it, replacing (and closing) any previous entry.

        The entry is only inserted once the open has succeeded.
        """
        options = options or OpenOptions()
        with self._lock:
            conn = self._opener(path, options)
            previous = self._connections.get(path)
            self._connections[path] = conn
            if previous is not None:
                logger.info(f"Replacing connection to {path}")
                previous.close()
            else:
                logger.info(f"Opened connection to {path}")

    def run(self, path: str, fn: Callable[[Connection], T]) -> T:
        """Run fn against the connection for path while holding the lock."""
        with self._lock:
            conn = self._connections.get(path)
            if conn is None:
                raise NotConnected(path)
            return fn(conn)

    def is_open(self, path: str) -> bool:
        with self._lock:
            return path in self._connections

    def paths(self) -> list[str]:
        with self._lock:
            return list(self._connections)

    def close_all(self) -> None:
        """Close every connection and empty the registry."""
        with self._lock:
            for path, conn in list(self._connections.items()):
                try:
                    conn.close()
                except Exception as e:
                    logger.warning(f"Failed to close {path}: {e}")
            self._connections.clear()


_default: Registry | None = None
_default_lock = threading.Lock()


def default() -> Registry:
    """Process-wide registry, created on first use and torn down at exit."""
    global _default
    with _default_lock:
        if _default is None:
            _default = Registry()
        return _default


def shutdown() -> None:
    global _default
    with _default_lock:
        if _default is not None:
            _default.close_all()
            _default = None


atexit.register(shutdown)


def _reset_for_testing() -> None:
    """Tear down the default registry (test-only)."""
    shutdown()
