"""Unit tests for the retention CLI."""

from datetime import UTC, datetime, timedelta

import pytest

from mailing_api.cli.retention import main
from mailing_api.storage.factory import set_entry_store


@pytest.fixture
def seeded_store(memory_store, make_entry):
    now = datetime.now(UTC)
    memory_store.insert(make_entry(title="old", insert_time=now - timedelta(hours=1)))
    memory_store.insert(make_entry(title="new", insert_time=now))
    set_entry_store(memory_store)
    return memory_store


class TestRetentionCli:
    """Tests for the status and sweep commands."""

    def test_status(self, seeded_store, capsys):
        assert main(["status"]) == 0

        out = capsys.readouterr().out
        assert "Total entries: 2" in out
        assert "Past TTL: 1" in out

    def test_sweep_dry_run_keeps_entries(self, seeded_store, capsys):
        assert main(["sweep", "--dry-run"]) == 0

        assert "Would delete 1 entries" in capsys.readouterr().out
        assert seeded_store.count() == 2

    def test_sweep_deletes_stale(self, seeded_store, capsys):
        assert main(["sweep"]) == 0

        assert "Deleted 1 entries" in capsys.readouterr().out
        assert seeded_store.count() == 1

    def test_ttl_override(self, seeded_store):
        main(["sweep", "--ttl-seconds", "7200"])

        assert seeded_store.count() == 2

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            main([])
