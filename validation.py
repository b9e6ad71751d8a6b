import math
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from categories import CATEGORIES, is_known_category, normalize_category
from models import MAX_STORED_INT
from periods import local_now, start_of_today, to_local_naive
from schemas import CostIn, UserIn


MISSING_FIELDS = "Missing required fields."
REPORT_PARAMS_NOT_POSITIVE = "User ID, year and month must be positive integers."
MONTH_OUT_OF_RANGE = "Month number must be between 1 and 12."
USER_ID_NOT_POSITIVE = "User ID must be a positive integer."
SUM_INVALID = "Sum must be a non-negative finite number."
DATE_INVALID = "Invalid date format."
DATE_IN_PAST = "Date cannot be in the past."
BIRTHDAY_INVALID = "Invalid birthday format."
BIRTHDAY_IN_FUTURE = "Birthday cannot be in the future."
USER_ID_TOO_LARGE = "User ID is too large."

MAX_EXPONENT = 308


class InvalidInput(ValueError):
    pass


@dataclass(frozen=True)
class ReportParams:
    user_id: int
    year: int
    month: int


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def as_positive_int(value: Any) -> Optional[int]:
    """Return value as an int if it denotes a whole number greater than zero."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            return None
        return int(value) if value > 0 else None
    if not isinstance(value, str):
        return None
    try:
        number = Decimal(value.strip())
    except InvalidOperation:
        return None
    # Past double range the value is not a usable integer; also caps int() cost.
    if not number.is_finite() or number.adjusted() > MAX_EXPONENT:
        return None
    if number != number.to_integral_value():
        return None
    if number <= 0:
        return None
    return int(number)


def parse_report_params(user_id: Any, year: Any, month: Any) -> ReportParams:
    raw = (user_id, year, month)
    if any(_is_missing(value) for value in raw):
        raise InvalidInput(MISSING_FIELDS)
    numbers = [as_positive_int(value) for value in raw]
    if any(number is None for number in numbers):
        raise InvalidInput(REPORT_PARAMS_NOT_POSITIVE)
    user_id_int, year_int, month_int = numbers
    if month_int > 12:
        raise InvalidInput(MONTH_OUT_OF_RANGE)
    return ReportParams(user_id=user_id_int, year=year_int, month=month_int)


def parse_user_id(value: Any) -> int:
    user_id = as_positive_int(value)
    if user_id is None:
        raise InvalidInput(USER_ID_NOT_POSITIVE)
    return user_id


def _parse_datetime(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _parse_sum(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return number


def parse_user_payload(
    payload: dict[str, Any], *, now: Optional[datetime] = None
) -> UserIn:
    first_name = str(payload.get("first_name") or "").strip()
    last_name = str(payload.get("last_name") or "").strip()
    if (
        payload.get("id") is None
        or not first_name
        or not last_name
        or payload.get("birthday") is None
    ):
        raise InvalidInput(MISSING_FIELDS)

    user_id = parse_user_id(payload["id"])
    if user_id > MAX_STORED_INT:
        raise InvalidInput(USER_ID_TOO_LARGE)

    birthday = _parse_datetime(payload["birthday"])
    if birthday is None:
        raise InvalidInput(BIRTHDAY_INVALID)
    birthday = to_local_naive(birthday)
    if birthday > start_of_today(now):
        raise InvalidInput(BIRTHDAY_IN_FUTURE)

    return UserIn(
        id=user_id,
        first_name=first_name,
        last_name=last_name,
        birthday=birthday.date(),
    )


def parse_cost_payload(
    payload: dict[str, Any],
    *,
    now: Optional[datetime] = None,
    categories: tuple[str, ...] = CATEGORIES,
) -> CostIn:
    description = str(payload.get("description") or "").strip()
    category = normalize_category(
        payload.get("category") if isinstance(payload.get("category"), str) else None
    )
    if (
        not description
        or not category
        or "userid" not in payload
        or "sum" not in payload
    ):
        raise InvalidInput(MISSING_FIELDS)

    if not is_known_category(category, categories):
        raise InvalidInput(
            f"Category '{category}' is not in the list of accepted categories. "
            f"The accepted categories are: {', '.join(categories)}."
        )

    user_id = parse_user_id(payload["userid"])

    amount = _parse_sum(payload["sum"])
    if amount is None:
        raise InvalidInput(SUM_INVALID)

    now = now or local_now()
    raw_date = payload.get("date")
    if raw_date:
        cost_date = _parse_datetime(raw_date)
        if cost_date is None:
            raise InvalidInput(DATE_INVALID)
        cost_date = to_local_naive(cost_date)
    else:
        cost_date = now
    if cost_date < start_of_today(now):
        raise InvalidInput(DATE_IN_PAST)

    return CostIn(
        description=description,
        category=category,
        userid=user_id,
        sum=amount,
        date=cost_date,
    )
