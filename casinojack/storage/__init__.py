"""
Persistence for the casinojack engine's collaborators.

The engine itself stores nothing; the ledger and statistics keep their values
in a key-value store from this package.
"""

from casinojack.storage.kvstore import KeyValueStore, MemoryStore, SQLiteStore

__all__ = ["KeyValueStore", "MemoryStore", "SQLiteStore"]
