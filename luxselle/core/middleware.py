"""Request id and request logging middleware."""

import logging
import time
import uuid

from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)


def register_request_middleware(app: FastAPI) -> None:

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()

        logger.info(f"request_start id={request_id} method={request.method} path={request.url.path}")
        response = await call_next(request)

        duration_ms = round((time.perf_counter() - started) * 1000, 1)
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            f"request_end id={request_id} method={request.method} path={request.url.path} "
            f"status={response.status_code} duration_ms={duration_ms}"
        )
        response.headers["X-Request-Id"] = request_id
        return response
