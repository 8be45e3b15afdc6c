# mailing_api/models.py
"""
Database models.

Tables:
- client: Mailing entries (recipient + message) grouped by mailing_id
"""

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from mailing_api.database import Base


class ClientEntry(Base):
    """
    One recipient/message row scoped to a mailing.

    Rows are never updated: they are inserted once and removed by an explicit
    delete, by a mailing send, or by the retention watcher.
    """
    __tablename__ = "client"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(320), nullable=False)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    mailing_id = Column(Integer, nullable=False)
    insert_time = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "email", "title", "content", "mailing_id", "insert_time",
            name="uq_client_payload",
        ),
        Index("ix_client_mailing_id", "mailing_id"),
        Index("ix_client_insert_time", "insert_time"),
        # ids are the pagination key and must never be reused
        {"sqlite_autoincrement": True},
    )
