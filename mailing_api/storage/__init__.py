# mailing_api/storage/__init__.py
"""
Entry store abstraction.

The lifecycle service and the retention watcher only talk to EntryStore;
the SQL and in-memory providers are interchangeable behind it.
"""

from mailing_api.storage.base import (
    DuplicateEntryError,
    Entry,
    EntryStore,
    EntryStoreError,
    QueryParams,
)
from mailing_api.storage.factory import (
    get_entry_store,
    reset_entry_store,
    set_entry_store,
)
from mailing_api.storage.memory_provider import MemoryEntryStore

__all__ = [
    "Entry",
    "EntryStore",
    "EntryStoreError",
    "DuplicateEntryError",
    "QueryParams",
    "MemoryEntryStore",
    "get_entry_store",
    "set_entry_store",
    "reset_entry_store",
]
