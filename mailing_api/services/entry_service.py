"""
Entry lifecycle service.

Coordinates the entry store and the dispatcher for the /clients endpoints.
Holds no state of its own and never swallows store errors.
"""

import logging
from typing import Optional

from mailing_api.pagination import Cursor, cursor_to_params
from mailing_api.services.dispatcher import Dispatcher, LoggingDispatcher
from mailing_api.storage.base import Entry, EntryStore, QueryParams

logger = logging.getLogger(__name__)


class EntryService:
    """
    Add, send, delete, get and list mailing entries.

    Usage:
        service = EntryService(get_entry_store())
        entry_id = service.add(entry)
        service.send(mailing_id=1)
    """

    def __init__(self, store: EntryStore, dispatcher: Optional[Dispatcher] = None):
        self.store = store
        self.dispatcher = dispatcher or LoggingDispatcher()

    def add(self, entry: Entry) -> int:
        """
        Store a new entry and return its id.

        Raises:
            DuplicateEntryError: same payload and insert time already stored
            EntryStoreError: persistence failure
        """
        return self.store.insert(entry)

    def send(self, mailing_id: int) -> int:
        """
        Dispatch a mailing, then purge its entries.

        Entries are deleted only after the dispatcher returns; if it raises,
        the error propagates and the store is left untouched.

        Returns:
            Number of entries dispatched and removed
        """
        entries = self.store.query(QueryParams(mailing_id=mailing_id))
        if not entries:
            logger.info(f"Mailing {mailing_id} has no entries, nothing to send")
            return 0

        self.dispatcher.dispatch(mailing_id, entries)

        self.store.batch_delete({entry.id for entry in entries})
        logger.info(
            f"Sent mailing {mailing_id}, purged {len(entries)} entries",
            extra={"event": "mailing_sent", "mailing_id": mailing_id, "deleted": len(entries)},
        )
        return len(entries)

    def delete(self, entry_id: int) -> None:
        self.store.delete(entry_id)

    def get(self, entry_id: int) -> Optional[Entry]:
        return self.store.get(entry_id)

    def list(self, cursor: Cursor) -> list[Entry]:
        """One page of entries after cursor.after_id, ascending by id."""
        return self.store.query(cursor_to_params(cursor))
