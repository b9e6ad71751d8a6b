import argparse
import logging
from typing import Iterable, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import get_settings
from database import SessionLocal, create_tables
from request_log import log_requests
from routes import about_router, costs_router, logs_router, users_router

logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = "Route not found. Check port and path."

SERVICES: dict[str, tuple[str, list[APIRouter]]] = {
    "logs": ("Logs", [logs_router]),
    "users": ("Users", [users_router]),
    "costs": ("Costs", [costs_router]),
    "about": ("About", [about_router]),
}


def error_body(status_code: int, message: str) -> dict[str, object]:
    return {"id": status_code, "message": message}


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail
    if exc.status_code == 404 and message == "Not Found":
        message = ROUTE_NOT_FOUND
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, str(message)),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400, content=error_body(400, "Invalid request body.")
    )


def create_service_app(
    service_name: str,
    routers: Iterable[APIRouter],
    *,
    session_factory: Optional[sessionmaker] = None,
) -> FastAPI:
    app = FastAPI(title=f"Cost Manager - {service_name}")
    app.state.service_name = service_name
    app.state.session_factory = session_factory or SessionLocal
    app.middleware("http")(log_requests)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    for router in routers:
        app.include_router(router)
    return app


def build_service(service: str, **kwargs) -> FastAPI:
    name, routers = SERVICES[service]
    return create_service_app(name, routers, **kwargs)


logs_app = build_service("logs")
users_app = build_service("users")
costs_app = build_service("costs")
about_app = build_service("about")


def run(service: str) -> None:
    import uvicorn

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    create_tables()
    port = settings.port_for(service)
    logger.info('Service "%s" running on port %s.', SERVICES[service][0], port)
    uvicorn.run(build_service(service), host=settings.host, port=port)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Run one cost manager service.")
    parser.add_argument("service", choices=sorted(SERVICES))
    args = parser.parse_args(argv)
    run(args.service)


if __name__ == "__main__":
    main()
