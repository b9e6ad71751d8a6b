from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from categories import CATEGORIES
from models import MAX_STORED_INT, Cost, Log, Report, User
from periods import in_month, is_past_month, local_today
from schemas import CostIn, UserIn
from validation import ReportParams


logger = logging.getLogger(__name__)


class UserNotFound(LookupError):
    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} does not exist.")
        self.user_id = user_id


class UserAlreadyExists(ValueError):
    def __init__(self, user_id: int) -> None:
        super().__init__(f"User {user_id} already exists.")
        self.user_id = user_id


def group_by_category(
    costs: Iterable[Cost],
    year: int,
    month: int,
    categories: tuple[str, ...] = CATEGORIES,
) -> list[dict[str, list[dict[str, Any]]]]:
    """Break a user's costs for one calendar month down by category.

    The result has one single-key mapping per registered category, in
    registry order, whether or not any cost falls into it. Entries keep the
    order in which ``costs`` yields them. Costs outside the month, or filed
    under a category the registry does not know, are left out.
    """
    grouped: dict[str, list[dict[str, Any]]] = {name: [] for name in categories}
    for cost in costs:
        if not in_month(cost.date, year, month):
            continue
        bucket = grouped.get(cost.category)
        if bucket is None:
            continue
        bucket.append(
            {"sum": cost.sum, "description": cost.description, "day": cost.date.day}
        )
    return [{name: grouped[name]} for name in categories]


class UserService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def exists(self, user_id: int) -> bool:
        if user_id > MAX_STORED_INT:
            return False
        stmt = select(func.count(User.pk)).where(User.id == user_id)
        return (self.session.execute(stmt).scalar_one() or 0) > 0

    def get(self, user_id: int) -> User:
        if user_id > MAX_STORED_INT:
            raise UserNotFound(user_id)
        user = self.session.scalar(select(User).where(User.id == user_id))
        if user is None:
            raise UserNotFound(user_id)
        return user

    def list_all(self) -> list[User]:
        return self.session.scalars(select(User).order_by(User.pk)).all()

    def create(self, data: UserIn) -> User:
        if self.exists(data.id):
            raise UserAlreadyExists(data.id)
        user = User(
            id=data.id,
            first_name=data.first_name,
            last_name=data.last_name,
            birthday=data.birthday,
        )
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        logger.info("user_created: id=%s", user.id)
        return user

    def total_costs(self, user_id: int) -> float:
        stmt = select(func.coalesce(func.sum(Cost.sum), 0)).where(
            Cost.userid == user_id
        )
        return float(self.session.execute(stmt).scalar_one() or 0)

    def summary(self, user_id: int) -> dict[str, Any]:
        user = self.get(user_id)
        return {
            "first_name": user.first_name,
            "last_name": user.last_name,
            "id": user.id,
            "total": self.total_costs(user.id),
        }


class CostService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, data: CostIn) -> Cost:
        if not UserService(self.session).exists(data.userid):
            raise UserNotFound(data.userid)
        cost = Cost(
            description=data.description,
            category=data.category,
            userid=data.userid,
            sum=data.sum,
            date=data.date,
        )
        self.session.add(cost)
        self.session.commit()
        self.session.refresh(cost)
        logger.info(
            "cost_created: id=%s userid=%s category=%s", cost.id, cost.userid, cost.category
        )
        return cost

    def for_user(self, user_id: int) -> list[Cost]:
        stmt = select(Cost).where(Cost.userid == user_id).order_by(Cost.id)
        return self.session.scalars(stmt).all()


class ReportService:
    """Monthly cost reports with a write-once cache for past months.

    Reports for months that ended before the current one are computed at
    most once per (user, year, month) and served from the ``reports`` table
    from then on. Current and future months are always computed from the
    cost records and never stored. Cached entries are never refreshed, so a
    cost that lands in an already cached month is not reflected.
    """

    def __init__(
        self,
        session: Session,
        clock: Callable[[], date] = local_today,
        categories: tuple[str, ...] = CATEGORIES,
    ) -> None:
        self.session = session
        self.clock = clock
        self.categories = categories

    def monthly_report(self, params: ReportParams) -> dict[str, Any]:
        if not UserService(self.session).exists(params.user_id):
            raise UserNotFound(params.user_id)
        return self.resolve(params.user_id, params.year, params.month)

    def resolve(self, user_id: int, year: int, month: int) -> dict[str, Any]:
        past = is_past_month(year, month, today=self.clock())
        if past:
            cached = self.find_cached(user_id, year, month)
            if cached is not None:
                logger.info(
                    "report_cache_hit: userid=%s year=%s month=%s", user_id, year, month
                )
                return cached.as_dict()

        costs = CostService(self.session).for_user(user_id)
        report = {
            "userid": user_id,
            "year": year,
            "month": month,
            "costs": group_by_category(costs, year, month, self.categories),
        }

        if past:
            report = self.store(report)
        return report

    def find_cached(self, user_id: int, year: int, month: int) -> Optional[Report]:
        return self.session.scalar(
            select(Report).where(
                Report.userid == user_id,
                Report.year == year,
                Report.month == month,
            )
        )

    def store(self, report: dict[str, Any]) -> dict[str, Any]:
        entry = Report(
            userid=report["userid"],
            year=report["year"],
            month=report["month"],
            costs=report["costs"],
        )
        self.session.add(entry)
        try:
            self.session.commit()
        except IntegrityError:
            # Another request cached this month between our read and write.
            self.session.rollback()
            existing = self.find_cached(report["userid"], report["year"], report["month"])
            if existing is None:
                raise
            logger.info(
                "report_cache_race: userid=%s year=%s month=%s",
                report["userid"],
                report["year"],
                report["month"],
            )
            return existing.as_dict()
        logger.info(
            "report_cached: userid=%s year=%s month=%s",
            report["userid"],
            report["year"],
            report["month"],
        )
        return report

    def cached_count(self, user_id: int, year: int, month: int) -> int:
        stmt = select(func.count(Report.id)).where(
            Report.userid == user_id,
            Report.year == year,
            Report.month == month,
        )
        return int(self.session.execute(stmt).scalar_one() or 0)


class LogService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def record(
        self,
        *,
        method: str,
        path: str,
        message: str,
        port: Optional[int] = None,
        status: Optional[int] = None,
        duration_ms: Optional[int] = None,
    ) -> Log:
        entry = Log(
            method=method,
            port=port,
            path=path,
            status=status,
            duration_ms=duration_ms,
            message=message,
        )
        self.session.add(entry)
        self.session.commit()
        return entry

    def list_all(self) -> list[Log]:
        return self.session.scalars(
            select(Log).order_by(Log.time.desc(), Log.id.desc())
        ).all()
