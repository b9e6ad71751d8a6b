from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from config import DEVELOPERS
from request_log import log_endpoint_access
from schemas import (
    CostOut,
    DeveloperOut,
    LogOut,
    ReportOut,
    UserOut,
    UserTotalOut,
)
from services import (
    CostService,
    LogService,
    ReportService,
    UserAlreadyExists,
    UserNotFound,
    UserService,
)
from validation import (
    InvalidInput,
    parse_cost_payload,
    parse_report_params,
    parse_user_id,
    parse_user_payload,
)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def _as_payload(body: Any) -> dict[str, Any]:
    return body if isinstance(body, dict) else {}


def _first_present(request: Request, *names: str) -> Optional[str]:
    for name in names:
        value = request.query_params.get(name)
        if value is not None:
            return value
    return None


users_router = APIRouter(prefix="/api", tags=["users"])
costs_router = APIRouter(prefix="/api", tags=["costs"])
logs_router = APIRouter(prefix="/api", tags=["logs"])
about_router = APIRouter(prefix="/api", tags=["about"])


@users_router.post("/add", status_code=201, response_model=UserOut)
def add_user(
    request: Request,
    body: Any = Body(default=None),
    db: Session = Depends(get_db),
):
    log_endpoint_access(request, "Endpoint accessed: POST /api/add (user)")
    try:
        data = parse_user_payload(_as_payload(body))
    except InvalidInput as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    try:
        return UserService(db).create(data)
    except UserAlreadyExists as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@users_router.get("/users", response_model=list[UserOut])
def list_users(request: Request, db: Session = Depends(get_db)):
    log_endpoint_access(request, "Endpoint accessed: GET /api/users")
    return UserService(db).list_all()


@users_router.get("/users/{user_id}", response_model=UserTotalOut)
def get_user(user_id: str, request: Request, db: Session = Depends(get_db)):
    log_endpoint_access(request, f"Endpoint accessed: GET /api/users/{user_id}")
    try:
        numeric_id = parse_user_id(user_id)
    except InvalidInput as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    try:
        return UserService(db).summary(numeric_id)
    except UserNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@costs_router.post("/add", status_code=201, response_model=CostOut)
def add_cost(
    request: Request,
    body: Any = Body(default=None),
    db: Session = Depends(get_db),
):
    log_endpoint_access(request, "Endpoint accessed: POST /api/add (cost)")
    try:
        data = parse_cost_payload(_as_payload(body))
        return CostService(db).create(data)
    except InvalidInput as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except UserNotFound as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@costs_router.get("/report", response_model=ReportOut)
def get_report(request: Request, db: Session = Depends(get_db)):
    log_endpoint_access(request, "Endpoint accessed: GET /api/report")
    try:
        params = parse_report_params(
            _first_present(request, "userid", "userId", "id"),
            request.query_params.get("year"),
            request.query_params.get("month"),
        )
        return ReportService(db).monthly_report(params)
    except InvalidInput as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except UserNotFound as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@logs_router.get("/logs", response_model=list[LogOut])
def list_logs(request: Request, db: Session = Depends(get_db)):
    log_endpoint_access(request, "Endpoint accessed: GET /api/logs")
    return LogService(db).list_all()


@about_router.get("/about", response_model=list[DeveloperOut])
def about(request: Request):
    log_endpoint_access(request, "Endpoint accessed: GET /api/about")
    return list(DEVELOPERS)
