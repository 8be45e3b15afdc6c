# mailing_api/schemas/__init__.py
"""
Pydantic schemas for API request/response validation.
"""

from mailing_api.schemas.entries import (
    EntryCreate,
    EntryListResponse,
    EntryResponse,
    SendRequest,
)

__all__ = [
    "EntryCreate",
    "EntryResponse",
    "EntryListResponse",
    "SendRequest",
]
