# mailing_api/schemas/entries.py
"""
Schemas for /clients endpoints.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from mailing_api.storage.base import MAX_INT32, Entry


class EntryCreate(BaseModel):
    """Request to add a mailing entry."""

    email: EmailStr = Field(..., description="Recipient address")
    title: str = Field(..., min_length=1, description="Message subject")
    content: str = Field(..., min_length=1, description="Message body")
    mailing_id: int = Field(..., gt=0, le=MAX_INT32, description="Mailing the entry belongs to")
    insert_time: datetime = Field(..., description="Creation timestamp, part of the uniqueness key")

    def to_entry(self) -> Entry:
        return Entry(
            email=str(self.email),
            title=self.title,
            content=self.content,
            mailing_id=self.mailing_id,
            insert_time=self.insert_time,
        )


class EntryResponse(BaseModel):
    """A stored mailing entry."""

    id: int
    email: str
    title: str
    content: str
    mailing_id: int
    insert_time: datetime

    @classmethod
    def from_entry(cls, entry: Entry) -> "EntryResponse":
        return cls(
            id=entry.id,
            email=entry.email,
            title=entry.title,
            content=entry.content,
            mailing_id=entry.mailing_id,
            insert_time=entry.insert_time,
        )


class EntryListResponse(BaseModel):
    """One page of entries."""

    clients: list[EntryResponse]


class SendRequest(BaseModel):
    """Request to send a mailing."""

    mailing_id: int = Field(..., gt=0, le=MAX_INT32, description="Mailing to dispatch and purge")
