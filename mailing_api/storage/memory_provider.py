# mailing_api/storage/memory_provider.py
"""
In-memory entry store for development and testing.

Honors the same invariants as the SQL store (duplicate rejection, ascending
id order, atomic batch delete) without a database.
NOT for production use: contents are lost on restart.
"""

import itertools
import logging
import threading
from collections.abc import Iterable
from dataclasses import replace
from typing import Optional

from mailing_api.storage.base import (
    DuplicateEntryError,
    Entry,
    EntryStore,
    QueryParams,
    as_utc,
)

logger = logging.getLogger(__name__)


class MemoryEntryStore(EntryStore):
    """
    Dict-backed entry store.

    A single lock makes every operation atomic with respect to the others,
    which is what request handlers and the retention watcher rely on.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[int, Entry] = {}
        self._keys: set[tuple] = set()
        self._ids = itertools.count(1)

        logger.info("Memory entry store initialized")

    @property
    def name(self) -> str:
        return "memory"

    def insert(self, entry: Entry) -> int:
        stored = replace(entry, insert_time=as_utc(entry.insert_time))
        key = stored.payload_key()

        with self._lock:
            if key in self._keys:
                raise DuplicateEntryError()
            entry_id = next(self._ids)
            self._entries[entry_id] = replace(stored, id=entry_id)
            self._keys.add(key)

        return entry_id

    def get(self, entry_id: int) -> Optional[Entry]:
        with self._lock:
            return self._entries.get(entry_id)

    def delete(self, entry_id: int) -> None:
        with self._lock:
            self._remove(entry_id)

    def batch_delete(self, entry_ids: Iterable[int]) -> None:
        ids = set(entry_ids)
        if not ids:
            return
        with self._lock:
            for entry_id in ids:
                self._remove(entry_id)

    def _remove(self, entry_id: int) -> None:
        """Caller must hold the lock."""
        entry = self._entries.pop(entry_id, None)
        if entry is not None:
            self._keys.discard(entry.payload_key())

    def query(self, params: Optional[QueryParams] = None) -> list[Entry]:
        params = params or QueryParams()
        cutoff = as_utc(params.insert_time_before) if params.insert_time_before is not None else None
        if params.limit is not None and params.limit <= 0:
            return []

        with self._lock:
            # dict preserves insertion order, which is ascending id order
            candidates = list(self._entries.values())

        result = []
        for entry in candidates:
            if params.mailing_id is not None and entry.mailing_id != params.mailing_id:
                continue
            if cutoff is not None and not entry.insert_time < cutoff:
                continue
            if params.id_greater_than is not None and not entry.id > params.id_greater_than:
                continue
            result.append(entry)
            if params.limit is not None and len(result) >= params.limit:
                break

        return result

    def count(self) -> int:
        with self._lock:
            return len(self._entries)
