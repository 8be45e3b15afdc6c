"""Unit tests for engine construction and startup wait."""

from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from mailing_api.config import Settings
from mailing_api.database import DatabaseNotReadyError, create_db_engine, wait_for_database


def _operational_error():
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


class TestCreateDbEngine:
    """Tests for create_db_engine()."""

    def test_sqlite_memory_uses_static_pool(self):
        engine = create_db_engine(Settings(_env_file=None, DATABASE_URL="sqlite:///:memory:"))

        assert isinstance(engine.pool, StaticPool)
        engine.dispose()

    @patch("mailing_api.database.create_engine")
    def test_postgres_pool_limits(self, mock_create_engine):
        settings = Settings(
            _env_file=None,
            DATABASE_URL="postgresql://u:p@db/mailing",
            DB_MAX_OPEN_CONNS=5,
            DB_MAX_IDLE_CONNS=2,
            DB_CONN_MAX_LIFETIME_SECS=45,
        )

        create_db_engine(settings)

        _, kwargs = mock_create_engine.call_args
        assert mock_create_engine.call_args.args[0] == "postgresql+psycopg2://u:p@db/mailing"
        assert kwargs["pool_size"] == 2
        assert kwargs["max_overflow"] == 3
        assert kwargs["pool_recycle"] == 45
        assert kwargs["pool_pre_ping"] is True

    @patch("mailing_api.database.create_engine")
    def test_zero_idle_still_keeps_one_connection(self, mock_create_engine):
        settings = Settings(
            _env_file=None,
            DATABASE_URL="postgresql://u:p@db/mailing",
            DB_MAX_OPEN_CONNS=1,
            DB_MAX_IDLE_CONNS=0,
        )

        create_db_engine(settings)

        _, kwargs = mock_create_engine.call_args
        assert kwargs["pool_size"] == 1
        assert kwargs["max_overflow"] == 0


class TestWaitForDatabase:
    """Tests for wait_for_database()."""

    def test_single_attempt_propagates_error(self):
        engine = MagicMock()
        engine.connect.side_effect = _operational_error()

        with pytest.raises(OperationalError):
            wait_for_database(engine, wait_seconds=0)

        assert engine.connect.call_count == 1

    @patch("mailing_api.database.time")
    def test_retries_until_ready(self, mock_time):
        mock_time.monotonic.side_effect = [0.0, 0.5]
        engine = MagicMock()
        engine.connect.side_effect = [_operational_error(), MagicMock()]

        wait_for_database(engine, wait_seconds=5)

        assert engine.connect.call_count == 2
        mock_time.sleep.assert_called_once_with(1.0)

    @patch("mailing_api.database.time")
    def test_gives_up_after_wait_window(self, mock_time):
        mock_time.monotonic.side_effect = [0.0, 0.5, 2.0]
        engine = MagicMock()
        engine.connect.side_effect = _operational_error()

        with pytest.raises(DatabaseNotReadyError):
            wait_for_database(engine, wait_seconds=1)

        assert engine.connect.call_count == 2
