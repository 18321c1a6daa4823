"""Path-keyed SQLite bridge: registry, query/execute/batch engine and value codec."""

__version__ = "0.2.0"
