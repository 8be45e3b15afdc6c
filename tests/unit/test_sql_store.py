"""Unit tests for SQLEntryStore error translation."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from mailing_api.storage.base import DuplicateEntryError, EntryStoreError
from mailing_api.storage.sql_provider import SQLEntryStore, _is_unique_violation


def _integrity_error(orig) -> IntegrityError:
    return IntegrityError("INSERT INTO client ...", {}, orig)


class _PgError(Exception):
    def __init__(self, pgcode: str):
        super().__init__(f"pg error {pgcode}")
        self.pgcode = pgcode


class TestIsUniqueViolation:
    """Tests for _is_unique_violation()."""

    def test_postgres_unique_violation(self):
        assert _is_unique_violation(_integrity_error(_PgError("23505"))) is True

    def test_postgres_not_null_violation(self):
        assert _is_unique_violation(_integrity_error(_PgError("23502"))) is False

    def test_sqlite_unique_message(self):
        orig = Exception("UNIQUE constraint failed: client.email, client.title")
        assert _is_unique_violation(_integrity_error(orig)) is True


class TestTransactionErrors:
    """Store failures must surface as EntryStoreError, with the session cleaned up."""

    @pytest.fixture
    def session(self):
        return MagicMock()

    @pytest.fixture
    def sql_store_with_mock(self, session):
        factory = MagicMock(return_value=session)
        return SQLEntryStore(factory)

    def test_operational_error_becomes_store_error(self, sql_store_with_mock, session):
        session.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

        with pytest.raises(EntryStoreError):
            sql_store_with_mock.get(1)

        session.rollback.assert_called_once()
        session.close.assert_called_once()
        session.commit.assert_not_called()

    def test_unique_violation_becomes_duplicate_error(self, sql_store_with_mock, session, make_entry):
        session.flush.side_effect = _integrity_error(_PgError("23505"))

        with pytest.raises(DuplicateEntryError):
            sql_store_with_mock.insert(make_entry())

        session.rollback.assert_called_once()

    def test_other_integrity_error_is_generic_store_error(self, sql_store_with_mock, session, make_entry):
        session.flush.side_effect = _integrity_error(_PgError("23502"))

        with pytest.raises(EntryStoreError) as exc_info:
            sql_store_with_mock.insert(make_entry())

        assert not isinstance(exc_info.value, DuplicateEntryError)

    def test_driver_overflow_becomes_store_error(self, sql_store_with_mock, session, make_entry):
        session.flush.side_effect = OverflowError("Python int too large to convert to SQLite INTEGER")

        with pytest.raises(EntryStoreError):
            sql_store_with_mock.insert(make_entry())

        session.rollback.assert_called_once()
        session.close.assert_called_once()

    def test_batch_delete_empty_skips_database(self, sql_store_with_mock, session):
        sql_store_with_mock.batch_delete([])

        session.query.assert_not_called()

    def test_name(self, sql_store_with_mock):
        assert sql_store_with_mock.name == "sql"


class TestOutOfRangeValues:
    """Values the INTEGER columns cannot hold, against a real SQLite database."""

    def test_oversized_mailing_id_on_insert(self, sql_store, make_entry):
        with pytest.raises(EntryStoreError):
            sql_store.insert(make_entry(mailing_id=2**63))

        assert sql_store.count() == 0

    def test_store_still_usable_after_failure(self, sql_store, make_entry):
        with pytest.raises(EntryStoreError):
            sql_store.insert(make_entry(mailing_id=2**63))

        sql_store.insert(make_entry())

        assert sql_store.count() == 1
