# mailing_api/storage/sql_provider.py
"""
SQLAlchemy entry store for PostgreSQL (and SQLite in tests).

Every public method runs in its own session and transaction, so each call is
atomic at the database. Uniqueness is enforced by the uq_client_payload
constraint; violations surface as DuplicateEntryError.
"""

import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from mailing_api.models import ClientEntry
from mailing_api.storage.base import (
    DuplicateEntryError,
    Entry,
    EntryStore,
    EntryStoreError,
    QueryParams,
    as_utc,
)

logger = logging.getLogger(__name__)

# PostgreSQL unique_violation SQLSTATE
DUPLICATE_ERROR_CODE = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code is not None:
        return code == DUPLICATE_ERROR_CODE
    return "unique" in str(orig).lower()


def _to_entry(row: ClientEntry) -> Entry:
    return Entry(
        id=row.id,
        email=row.email,
        title=row.title,
        content=row.content,
        mailing_id=row.mailing_id,
        insert_time=as_utc(row.insert_time),
    )


class SQLEntryStore(EntryStore):
    """
    Relational entry store backed by the ``client`` table.

    Configuration:
    - DATABASE_URL and DB_* pool settings (see mailing_api.database)
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @property
    def name(self) -> str:
        return "sql"

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        """Yield a session, commit on success, translate failures to store errors."""
        session: Session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            if _is_unique_violation(e):
                raise DuplicateEntryError() from e
            raise EntryStoreError(f"integrity error: {e.orig}") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise EntryStoreError(str(e)) from e
        except (OverflowError, ValueError) as e:
            # Raised by DBAPI drivers before the statement reaches the database
            session.rollback()
            raise EntryStoreError(f"invalid parameter: {e}") from e
        finally:
            session.close()

    def insert(self, entry: Entry) -> int:
        with self._transaction() as session:
            row = ClientEntry(
                email=entry.email,
                title=entry.title,
                content=entry.content,
                mailing_id=entry.mailing_id,
                insert_time=as_utc(entry.insert_time),
            )
            session.add(row)
            session.flush()
            entry_id = row.id

        logger.debug(f"Inserted entry {entry_id} for mailing {entry.mailing_id}")
        return entry_id

    def get(self, entry_id: int) -> Optional[Entry]:
        with self._transaction() as session:
            row = session.query(ClientEntry).filter(ClientEntry.id == entry_id).first()
            return _to_entry(row) if row else None

    def delete(self, entry_id: int) -> None:
        with self._transaction() as session:
            session.query(ClientEntry).filter(ClientEntry.id == entry_id).delete(synchronize_session=False)

    def batch_delete(self, entry_ids: Iterable[int]) -> None:
        ids = sorted(set(entry_ids))
        if not ids:
            return

        with self._transaction() as session:
            deleted = (
                session.query(ClientEntry)
                .filter(ClientEntry.id.in_(ids))
                .delete(synchronize_session=False)
            )

        logger.debug(f"Batch deleted {deleted} of {len(ids)} entries")

    def query(self, params: Optional[QueryParams] = None) -> list[Entry]:
        with self._transaction() as session:
            q = session.query(ClientEntry)
            if params is not None:
                if params.mailing_id is not None:
                    q = q.filter(ClientEntry.mailing_id == params.mailing_id)
                if params.insert_time_before is not None:
                    q = q.filter(ClientEntry.insert_time < as_utc(params.insert_time_before))
                if params.id_greater_than is not None:
                    # Keyset pagination: with the primary key index this stays fast
                    # on large tables, unlike OFFSET.
                    q = q.filter(ClientEntry.id > params.id_greater_than)
            q = q.order_by(ClientEntry.id)
            if params is not None and params.limit is not None:
                q = q.limit(params.limit)

            return [_to_entry(row) for row in q.all()]

    def count(self) -> int:
        with self._transaction() as session:
            return session.query(ClientEntry).count()
