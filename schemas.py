from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserIn(BaseModel):
    id: int = Field(..., gt=0)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    birthday: date


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    birthday: date


class UserTotalOut(BaseModel):
    first_name: str
    last_name: str
    id: int
    total: float


class CostIn(BaseModel):
    description: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1, max_length=50)
    userid: int = Field(..., gt=0)
    sum: float = Field(..., ge=0, allow_inf_nan=False)
    date: datetime


class CostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    category: str
    userid: int
    sum: float
    date: datetime


class ReportEntry(BaseModel):
    sum: float
    description: str
    day: int = Field(..., ge=1, le=31)


class ReportOut(BaseModel):
    userid: int
    year: int
    month: int
    costs: list[dict[str, list[ReportEntry]]]


class LogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    time: datetime
    method: str
    port: Optional[int] = None
    path: str
    status: Optional[int] = None
    duration_ms: Optional[int] = None
    message: str


class DeveloperOut(BaseModel):
    first_name: str
    last_name: str
