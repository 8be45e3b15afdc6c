# mailing_api/storage/factory.py
"""
Factory function for creating the entry store.
"""

import logging
from typing import Optional

from mailing_api.storage.base import EntryStore

logger = logging.getLogger(__name__)

# Global singleton instance
_entry_store: Optional[EntryStore] = None


def get_entry_store(provider_name: Optional[str] = None) -> EntryStore:
    """
    Get or create the entry store instance.

    Args:
        provider_name: 'sql' or 'memory' (default from STORE_PROVIDER setting)

    Returns:
        EntryStore instance (singleton)
    """
    global _entry_store

    if _entry_store is not None:
        return _entry_store

    if provider_name is None:
        from mailing_api.config import get_settings

        provider_name = get_settings().STORE_PROVIDER
    name = provider_name.lower().strip()

    if name == "sql":
        from mailing_api.database import get_session_factory
        from mailing_api.storage.sql_provider import SQLEntryStore

        _entry_store = SQLEntryStore(get_session_factory())
    elif name == "memory":
        from mailing_api.storage.memory_provider import MemoryEntryStore

        _entry_store = MemoryEntryStore()
    else:
        raise ValueError(f"Unknown entry store provider: {name}. Available: sql, memory")

    logger.info(f"Entry store initialized: {_entry_store.name}")
    return _entry_store


def set_entry_store(store: EntryStore) -> None:
    """
    Set a custom entry store (useful for testing).
    """
    global _entry_store
    _entry_store = store


def reset_entry_store() -> None:
    """
    Reset the entry store singleton (for testing).
    """
    global _entry_store
    _entry_store = None
