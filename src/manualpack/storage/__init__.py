"""SQLite storage for .manualpack files."""

from manualpack.storage.store import ManualStore

__all__ = ["ManualStore"]
