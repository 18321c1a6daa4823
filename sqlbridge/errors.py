"""Error taxonomy for the SQL bridge.

Every error renders to a plain string via ``str()`` so the host's serialization
layer can transport it uniformly.
"""


class SqlBridgeError(Exception):
    """Base exception for sqlbridge errors."""

    pass


class ConnectFailed(SqlBridgeError):
    """Raised when the underlying database file cannot be opened."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Connection failed to {path}{detail}")


class NotConnected(SqlBridgeError):
    """Raised when an operation targets a path that was never opened."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not connected to {path}")


class InvalidParameterKind(SqlBridgeError):
    """Raised when a parameter value has no SQLite representation."""

    def __init__(self, value, position: int | None = None):
        self.value = value
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"Unsupported parameter kind {type(value).__name__}{where}")


class EncodingError(SqlBridgeError):
    """Raised when a text column is not valid UTF-8."""

    pass


class InvalidPragma(SqlBridgeError):
    """Raised when a pragma key or value fails validation."""

    pass


class QueryFailed(SqlBridgeError):
    """Raised when the engine rejects a read query."""

    def __init__(self, sql: str, reason: str):
        self.sql = sql
        self.reason = reason
        super().__init__(f"Query failed: {reason} ({sql!r})")


class ExecFailed(SqlBridgeError):
    """Raised when the engine rejects a write/DDL statement."""

    def __init__(self, sql: str, reason: str):
        self.sql = sql
        self.reason = reason
        super().__init__(f"Execution failed: {reason} ({sql!r})")


class BatchFailed(SqlBridgeError):
    """Raised when one statement of a transactional batch fails.

    The whole transaction has been rolled back when this is raised.
    """

    def __init__(self, index: int, sql: str, reason: str):
        self.index = index
        self.sql = sql
        self.reason = reason
        super().__init__(f"Error on query {index} {sql!r}: {reason}")


class CommitFailed(SqlBridgeError):
    """Raised when every statement succeeded but COMMIT did not."""

    pass


class NoResults(SqlBridgeError):
    """Raised by select_first when the query returned no rows."""

    def __init__(self):
        super().__init__("No results")
