import logging
import sqlite3
import time
from pathlib import Path

from sqlbridge.lib import codec

logger = logging.getLogger(__name__)

DEFAULT_BUSY_TIMEOUT_MS = 5000


def connect(db_path: str | Path, busy_timeout_ms: int = DEFAULT_BUSY_TIMEOUT_MS) -> sqlite3.Connection:
    """Open a SQLite connection in autocommit mode.

    Transactions are issued explicitly (BEGIN/COMMIT/ROLLBACK) by the batch
    engine. Text columns are decoded through the codec so invalid UTF-8
    surfaces as EncodingError instead of a driver crash.
    """
    start = time.perf_counter()

    conn = sqlite3.connect(db_path, check_same_thread=False, isolation_level=None)
    try:
        conn.text_factory = codec.decode_text
        conn.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)}")
        # Force the file header to be read so corrupt/non-db files fail here.
        conn.execute("PRAGMA schema_version").fetchone()
    except sqlite3.Error:
        conn.close()
        raise

    elapsed = time.perf_counter() - start
    if elapsed > 0.1:
        logger.warning(f"SQLite connection took {elapsed:.3f}s (possible lock contention)")

    return conn
