"""
Service layer: entry lifecycle, mail dispatch and retention.
"""

from mailing_api.services.dispatcher import DispatchError, Dispatcher, LoggingDispatcher
from mailing_api.services.entry_service import EntryService

__all__ = [
    "Dispatcher",
    "DispatchError",
    "LoggingDispatcher",
    "EntryService",
]
