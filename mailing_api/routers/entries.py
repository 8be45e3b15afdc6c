# mailing_api/routers/entries.py
"""
Mailing entry endpoints.

POST   /clients/      - Add an entry (204, 400 on duplicate)
POST   /clients/send  - Dispatch a mailing and purge its entries
DELETE /clients/{id}  - Delete an entry (idempotent)
GET    /clients/      - List entries with cursor pagination (?limit=&after_id=)
GET    /clients/{id}  - Get a single entry (204 when missing)
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse

from mailing_api.auth import require_token
from mailing_api.pagination import CursorError, next_after_id, parse_cursor, parse_int32
from mailing_api.schemas.entries import (
    EntryCreate,
    EntryListResponse,
    EntryResponse,
    SendRequest,
)
from mailing_api.services.dispatcher import DispatchError
from mailing_api.services.entry_service import EntryService
from mailing_api.storage.base import DuplicateEntryError, EntryStoreError
from mailing_api.storage.factory import get_entry_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["clients"], dependencies=[Depends(require_token)])

AFTER_ID_HEADER = "after_id"


def get_entry_service() -> EntryService:
    """FastAPI dependency wiring the service to the configured store."""
    return EntryService(get_entry_store())


def _parse_entry_id(raw: str) -> int:
    try:
        return parse_int32(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="Entry id must be a 32-bit integer")


def _store_failure(exc: EntryStoreError, action: str) -> HTTPException:
    logger.error(f"Failed to {action}: {exc}", exc_info=True)
    return HTTPException(status_code=500, detail=f"Failed to {action}")


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------


@router.post("", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
@router.post("/", status_code=status.HTTP_204_NO_CONTENT, response_class=Response, include_in_schema=False)
def add_entry(
    payload: EntryCreate,
    service: EntryService = Depends(get_entry_service),
):
    try:
        entry_id = service.add(payload.to_entry())
    except DuplicateEntryError as e:
        logger.warning(
            f"Rejected duplicate entry for mailing {payload.mailing_id}",
            extra={"event": "entry_duplicate", "handler": "add", "mailing_id": payload.mailing_id},
        )
        return JSONResponse(status_code=400, content={"error": str(e)})
    except EntryStoreError as e:
        raise _store_failure(e, "add client")

    logger.info(
        f"Added entry {entry_id}",
        extra={"event": "entry_added", "handler": "add", "entry_id": entry_id, "mailing_id": payload.mailing_id},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/send", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def send_mailing(
    payload: SendRequest,
    service: EntryService = Depends(get_entry_service),
):
    try:
        service.send(payload.mailing_id)
    except DispatchError as e:
        logger.error(
            f"Dispatch of mailing {payload.mailing_id} failed, entries kept: {e}",
            extra={"event": "mailing_dispatch_failed", "handler": "send", "mailing_id": payload.mailing_id},
        )
        raise HTTPException(status_code=502, detail=f"Failed to send mailing: {e}")
    except EntryStoreError as e:
        raise _store_failure(e, "send emails")

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_entry(
    entry_id: str,
    service: EntryService = Depends(get_entry_service),
):
    parsed_id = _parse_entry_id(entry_id)
    try:
        service.delete(parsed_id)
    except EntryStoreError as e:
        raise _store_failure(e, "delete client")

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("", response_model=EntryListResponse)
@router.get("/", response_model=EntryListResponse, include_in_schema=False)
def list_entries(
    limit: str | None = Query(None, description="Page size (default 20)"),
    after_id: str | None = Query(None, description="Last id seen on the previous page"),
    service: EntryService = Depends(get_entry_service),
):
    """
    List entries in ascending id order.

    The id of the last returned entry comes back in the after_id header;
    pass it as after_id to get the next page. 204 means no more entries.
    """
    try:
        cursor = parse_cursor(limit, after_id)
    except CursorError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        entries = service.list(cursor)
    except EntryStoreError as e:
        raise _store_failure(e, "get clients")

    if not entries:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    body = EntryListResponse(clients=[EntryResponse.from_entry(e) for e in entries])
    return JSONResponse(
        content=body.model_dump(mode="json"),
        headers={AFTER_ID_HEADER: str(next_after_id(entries))},
    )


@router.get("/{entry_id}", response_model=EntryResponse)
def get_entry(
    entry_id: str,
    service: EntryService = Depends(get_entry_service),
):
    parsed_id = _parse_entry_id(entry_id)
    try:
        entry = service.get(parsed_id)
    except EntryStoreError as e:
        raise _store_failure(e, "get client")

    if entry is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return EntryResponse.from_entry(entry)
