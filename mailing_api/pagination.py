# mailing_api/pagination.py
"""
Cursor pagination for entry listing.

A cursor carries a page size and the last id the client has seen. The first
request sends only ``limit``; every following request sends ``after_id`` set to
the id of the last entry of the previous page (returned in the ``after_id``
response header). An empty page means the scan is finished.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from mailing_api.storage.base import MAX_INT32, MIN_INT32, Entry, QueryParams

DEFAULT_LIMIT = 20

# Plain base-10 ASCII digits with an optional sign; no underscores or other scripts
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


class CursorError(ValueError):
    """Malformed cursor input."""


@dataclass(frozen=True)
class Cursor:
    limit: int = DEFAULT_LIMIT
    after_id: Optional[int] = None


def parse_int32(raw: str) -> int:
    """
    Parse a decimal integer that fits the INTEGER columns of the client table.

    Raises:
        ValueError: not a plain decimal integer, or out of 32-bit range
    """
    if not _INT_PATTERN.fullmatch(raw):
        raise ValueError(f"not an integer: {raw!r}")
    value = int(raw)
    if not MIN_INT32 <= value <= MAX_INT32:
        raise ValueError(f"out of range: {raw}")
    return value


def _parse_int(name: str, raw: str) -> int:
    try:
        return parse_int32(raw)
    except ValueError:
        raise CursorError(f"{name} must be a 32-bit integer, got {raw!r}") from None


def parse_cursor(limit: Optional[str] = None, after_id: Optional[str] = None) -> Cursor:
    """
    Build a Cursor from raw query-string values.

    Absent or blank values fall back to the defaults.

    Raises:
        CursorError: a value is present but not a valid integer, or limit < 1
    """
    parsed_limit = DEFAULT_LIMIT
    if limit is not None and limit.strip():
        parsed_limit = _parse_int("limit", limit.strip())
        if parsed_limit < 1:
            raise CursorError(f"limit must be positive, got {parsed_limit}")

    parsed_after_id = None
    if after_id is not None and after_id.strip():
        parsed_after_id = _parse_int("after_id", after_id.strip())

    return Cursor(limit=parsed_limit, after_id=parsed_after_id)


def cursor_to_params(cursor: Cursor) -> QueryParams:
    return QueryParams(id_greater_than=cursor.after_id, limit=cursor.limit)


def next_after_id(entries: Sequence[Entry]) -> Optional[int]:
    """Id to send as after_id for the next page, None when the page is empty."""
    if not entries:
        return None
    return entries[-1].id
