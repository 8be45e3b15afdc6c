"""
HTTP middlewares.
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from mailing_api.logging_config import request_id_var

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-RequestID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Tag every request with a request id and log its outcome.

    - Takes the id from the X-RequestID header or generates one
    - Exposes it through request_id_var so every log record carries it
    - Echoes it back in the X-RequestID response header
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        token = request_id_var.set(request_id)
        request.state.request_id = request_id

        start_time = time.time()
        try:
            response = await call_next(request)
            duration_ms = int((time.time() - start_time) * 1000)

            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms}ms)",
                extra={
                    "event": "request_complete",
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        except Exception as e:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.error(
                f"{request.method} {request.url.path} -> ERROR ({duration_ms}ms): {e}",
                extra={"event": "request_failed", "method": request.method, "path": request.url.path},
            )
            raise

        finally:
            request_id_var.reset(token)
