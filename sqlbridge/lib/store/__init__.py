"""Connection registry, connection handles and batch execution."""

from sqlbridge.lib.store.connection import Connection, OpenOptions, Row
from sqlbridge.lib.store.registry import Registry, _reset_for_testing, default, shutdown
from sqlbridge.lib.store.sqlite import connect

__all__ = [
    "Connection",
    "OpenOptions",
    "Row",
    "Registry",
    "default",
    "shutdown",
    "_reset_for_testing",
    "connect",
]
