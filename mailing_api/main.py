# mailing_api/main.py

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from mailing_api import __version__
from mailing_api.config import get_settings
from mailing_api.logging_config import configure_logging
from mailing_api.middleware import RequestIDMiddleware
from mailing_api.routers import entries_router
from mailing_api.services.retention import RetentionWatcher
from mailing_api.storage.factory import get_entry_store

logger = logging.getLogger(__name__)


def _prepare_store():
    """Resolve the configured store, waiting for the database when it is SQL."""
    settings = get_settings()
    store = get_entry_store()

    if store.name == "sql":
        from mailing_api.database import get_engine, init_db, wait_for_database

        engine = get_engine()
        wait_for_database(engine, settings.DB_WAIT_SECONDS)
        init_db(engine)

    return store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the retention watcher with the app and stop it before exit."""
    settings = get_settings()
    configure_logging(json_format=settings.LOG_JSON, level=settings.LOG_LEVEL)

    store = await run_in_threadpool(_prepare_store)

    watcher = None
    if settings.WATCHER_ENABLED:
        watcher = RetentionWatcher(
            store,
            tick_period=settings.WATCHER_TICK_PERIOD_SECONDS,
            ttl=timedelta(seconds=settings.RETENTION_TTL_SECONDS),
        )
        watcher.start()
    app.state.watcher = watcher

    logger.info(f"Mailing API started (store={store.name})", extra={"event": "startup"})
    try:
        yield
    finally:
        # Blocks until an in-flight sweep has finished its batch delete
        if watcher is not None:
            await run_in_threadpool(watcher.stop)
        logger.info("Mailing API exiting", extra={"event": "shutdown"})


app = FastAPI(title="Mailing API", version=__version__, lifespan=lifespan)

app.add_middleware(RequestIDMiddleware)
app.include_router(entries_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client errors: answer 400 instead of 422."""
    logger.warning(
        f"Request is not valid: {request.method} {request.url.path}",
        extra={"event": "request_invalid", "method": request.method, "path": request.url.path},
    )
    return JSONResponse(
        status_code=400,
        content={"error": "request is not valid", "detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict:
    watcher = getattr(app.state, "watcher", None)
    return {
        "status": "ok",
        "service": "mailing-api",
        "version": __version__,
        "watcher_running": bool(watcher and watcher.running),
    }
