# mailing_api/services/retention/sweep_service.py
"""
Sweep service for TTL eviction of mailing entries.

Handles:
- Finding entries whose insert_time is older than now - ttl
- Removing all of them with a single batch delete
- Dry-run previews for the CLI
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Optional

from mailing_api.logging_config import log_operation
from mailing_api.storage.base import EntryStore, QueryParams

logger = logging.getLogger(__name__)

# Time for an entry to exist before the watcher removes it
DEFAULT_TTL = timedelta(minutes=5)


@dataclass
class SweepResult:
    """Result of a sweep operation."""

    cutoff: datetime
    stale_found: int = 0
    deleted: int = 0
    dry_run: bool = False


def sweep_expired_entries(
    store: EntryStore,
    ttl: timedelta = DEFAULT_TTL,
    now: Optional[datetime] = None,
    dry_run: bool = False,
) -> SweepResult:
    """
    Delete every entry inserted strictly before now - ttl.

    A sweep that finds nothing makes no delete call. Store errors propagate;
    the watcher decides whether they are fatal.
    """
    now = now or datetime.now(UTC)
    cutoff = now - ttl
    result = SweepResult(cutoff=cutoff, dry_run=dry_run)

    with log_operation("retention_sweep") as metrics:
        stale = store.query(QueryParams(insert_time_before=cutoff))
        result.stale_found = len(stale)

        if stale and not dry_run:
            store.batch_delete({entry.id for entry in stale})
            result.deleted = len(stale)

        metrics.update(
            cutoff=cutoff.isoformat(),
            stale_found=result.stale_found,
            deleted=result.deleted,
        )

    return result
