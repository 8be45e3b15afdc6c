# mailing_api/storage/base.py
"""
Entry store interface.

Design principles:
- Entries are immutable once stored; the only mutation is deletion
- Ids are assigned by the store and increase with insertion order
- Every query result is ordered by ascending id
- Each operation is atomic on its own; callers never hold locks
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Optional

# Range of the INTEGER columns of the client table
MAX_INT32 = 2**31 - 1
MIN_INT32 = -(2**31)


class EntryStoreError(Exception):
    """Underlying persistence failure."""


class DuplicateEntryError(EntryStoreError):
    """Entry with the same payload and insert time already exists."""

    def __init__(self, message: str = "entry with given payload already exists"):
        super().__init__(message)


@dataclass(frozen=True)
class Entry:
    """A mailing entry. ``id`` is None until the store assigns one."""
    email: str
    title: str
    content: str
    mailing_id: int
    insert_time: datetime
    id: Optional[int] = None

    def payload_key(self) -> tuple:
        """Uniqueness key: everything except the id."""
        return (self.email, self.title, self.content, self.mailing_id, as_utc(self.insert_time))


@dataclass(frozen=True)
class QueryParams:
    """
    Filters for EntryStore.query(). Unset fields don't filter.
    If needed we can add another filters.
    """
    mailing_id: Optional[int] = None
    insert_time_before: Optional[datetime] = None  # strict <
    id_greater_than: Optional[int] = None  # strict >, pagination offset
    limit: Optional[int] = None


def as_utc(value: datetime) -> datetime:
    """Normalize to an aware UTC datetime. Naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class EntryStore(ABC):
    """
    Abstract interface for entry persistence.

    Implementations must handle:
    - Duplicate rejection on insert (never a silent merge)
    - Idempotent single delete
    - Atomic batch delete, with an empty id collection as a no-op
    - Ascending-id ordering of query results
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'sql', 'memory')."""
        pass

    @abstractmethod
    def insert(self, entry: Entry) -> int:
        """
        Store a new entry.

        Returns:
            The id assigned to the entry

        Raises:
            DuplicateEntryError: an entry with the same payload and insert time exists
            EntryStoreError: any other persistence failure
        """
        pass

    @abstractmethod
    def get(self, entry_id: int) -> Optional[Entry]:
        """Return the entry, or None if it doesn't exist."""
        pass

    @abstractmethod
    def delete(self, entry_id: int) -> None:
        """Delete an entry. Deleting a missing id is not an error."""
        pass

    @abstractmethod
    def batch_delete(self, entry_ids: Iterable[int]) -> None:
        """Delete all given ids in one atomic operation."""
        pass

    @abstractmethod
    def query(self, params: Optional[QueryParams] = None) -> list[Entry]:
        """
        Return entries ordered by ascending id.

        Filters in params are ANDed. None means all entries.
        """
        pass

    @abstractmethod
    def count(self) -> int:
        """Total number of stored entries."""
        pass
