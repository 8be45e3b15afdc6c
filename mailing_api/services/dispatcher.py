"""
Mail dispatch collaborator.

Actual delivery lives outside this service. EntryService hands every entry of
a mailing to a Dispatcher before purging them; a dispatcher that raises stops
the purge, so undelivered entries stay in the store.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from mailing_api.storage.base import Entry

logger = logging.getLogger(__name__)


class DispatchError(Exception):
    """Delivery of a mailing failed."""


class Dispatcher(ABC):
    """Delivers the entries of one mailing."""

    @abstractmethod
    def dispatch(self, mailing_id: int, entries: Sequence[Entry]) -> None:
        """
        Deliver all entries.

        Raises:
            DispatchError: if the mailing could not be delivered
        """
        pass


class LoggingDispatcher(Dispatcher):
    """Default dispatcher: records the mailing in the log and delivers nothing."""

    def dispatch(self, mailing_id: int, entries: Sequence[Entry]) -> None:
        logger.info(
            f"Dispatching mailing {mailing_id} to {len(entries)} recipients",
            extra={"event": "mailing_dispatched", "mailing_id": mailing_id, "entries": len(entries)},
        )
