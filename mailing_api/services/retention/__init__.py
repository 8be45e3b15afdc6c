# mailing_api/services/retention/__init__.py
"""
Retention management for mailing entries.

Entries live for a fixed TTL (5 minutes by default). The watcher sweeps the
store on its own tick and batch-deletes everything older than the TTL.

Services:
- sweep_service: One stale-entry query plus batch delete
- watcher: Background thread running a sweep every tick
"""

from mailing_api.services.retention.sweep_service import (
    DEFAULT_TTL,
    SweepResult,
    sweep_expired_entries,
)
from mailing_api.services.retention.watcher import RetentionWatcher

__all__ = [
    "DEFAULT_TTL",
    "SweepResult",
    "sweep_expired_entries",
    "RetentionWatcher",
]
