import logging
import time
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from database import session_scope
from services import LogService


logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error."


def _request_port(request: Request) -> Optional[int]:
    server = request.scope.get("server")
    if server and len(server) > 1:
        return server[1]
    return request.url.port


def _request_path(request: Request) -> str:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    return path


def persist_log(request: Request, message: str, **fields) -> None:
    try:
        with session_scope(request.app.state.session_factory) as session:
            LogService(session).record(
                method=request.method,
                port=_request_port(request),
                path=_request_path(request),
                message=message,
                **fields,
            )
    except SQLAlchemyError:
        logger.exception("Failed to write log to database")


def log_endpoint_access(request: Request, message: str) -> None:
    logger.info(
        "%s method=%s path=%s", message, request.method, _request_path(request)
    )
    persist_log(request, message)


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "Unhandled error on %s %s", request.method, _request_path(request)
        )
        response = JSONResponse(
            status_code=500, content={"id": 500, "message": INTERNAL_ERROR}
        )
    duration_ms = round((time.perf_counter() - started) * 1000)
    logger.info(
        "http_request: method=%s path=%s status=%s duration_ms=%s",
        request.method,
        _request_path(request),
        response.status_code,
        duration_ms,
    )
    await run_in_threadpool(
        persist_log,
        request,
        "HTTP request received.",
        status=response.status_code,
        duration_ms=duration_ms,
    )
    return response
