from datetime import date, datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database import Base

# Largest value an INTEGER column can bind.
MAX_STORED_INT = 2**63 - 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utcnow, nullable=False
    )


class User(Base, TimestampMixin):
    __tablename__ = "users"

    # pk is storage-internal; `id` is the application-level user id.
    pk: Mapped[int] = mapped_column(Integer, primary_key=True)
    id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    birthday: Mapped[date] = mapped_column(Date, nullable=False)

    costs: Mapped[list["Cost"]] = relationship("Cost", back_populates="user")

    __table_args__ = (CheckConstraint("id > 0", name="ck_users_id_positive"),)


class Cost(Base, TimestampMixin):
    __tablename__ = "costs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    userid: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    sum: Mapped[float] = mapped_column(Float, nullable=False)
    # Naive local time in the configured timezone.
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="costs")

    __table_args__ = (
        Index("ix_costs_userid_date", "userid", "date"),
        CheckConstraint("sum >= 0", name="ck_costs_sum_non_negative"),
    )


class Report(Base, TimestampMixin):
    __tablename__ = "reports"
    __table_args__ = (
        UniqueConstraint("userid", "year", "month", name="uq_report_user_month"),
        CheckConstraint("year > 0", name="ck_reports_year_positive"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_reports_month_range"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    userid: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(Integer, nullable=False)
    costs: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)

    def as_dict(self) -> dict[str, Any]:
        return {
            "userid": self.userid,
            "year": self.year,
            "month": self.month,
            "costs": self.costs,
        }


class Log(Base):
    __tablename__ = "logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    time: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, nullable=False)
    method: Mapped[str] = mapped_column(String(10), nullable=False)
    port: Mapped[Optional[int]] = mapped_column(Integer)
    path: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[Optional[int]] = mapped_column(Integer)
    duration_ms: Mapped[Optional[int]] = mapped_column(Integer)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (Index("ix_logs_time", "time"),)
