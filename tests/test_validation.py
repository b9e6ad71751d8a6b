from datetime import date, datetime

import pytest

from validation import (
    InvalidInput,
    ReportParams,
    as_positive_int,
    parse_cost_payload,
    parse_report_params,
    parse_user_payload,
)


NOW = datetime(2026, 10, 17, 12, 0)


@pytest.mark.parametrize(
    "args",
    [
        (None, None, None),
        ("1", None, "1"),
        ("1", "2024", ""),
        ("", "2024", "1"),
        ("  ", "2024", "1"),
    ],
)
def test_missing_report_params(args) -> None:
    with pytest.raises(InvalidInput, match="Missing required fields."):
        parse_report_params(*args)


@pytest.mark.parametrize(
    "args",
    [
        ("-5", "2024", "1"),
        ("0", "2024", "1"),
        ("1.5", "2024", "1"),
        ("abc", "2024", "1"),
        ("1", "-2024", "1"),
        ("1", "2024", "0"),
        ("1", "2024", "NaN"),
        ("1", "2024", "Infinity"),
    ],
)
def test_report_params_must_be_positive_integers(args) -> None:
    with pytest.raises(
        InvalidInput, match="User ID, year and month must be positive integers."
    ):
        parse_report_params(*args)


def test_month_above_twelve_is_out_of_range() -> None:
    with pytest.raises(InvalidInput, match="Month number must be between 1 and 12."):
        parse_report_params("1", "2024", "13")


def test_shape_is_checked_before_range() -> None:
    # A malformed user id wins over an out-of-range month.
    with pytest.raises(InvalidInput, match="positive integers"):
        parse_report_params("-5", "2024", "13")


def test_presence_is_checked_before_shape() -> None:
    with pytest.raises(InvalidInput, match="Missing required fields."):
        parse_report_params("-5", None, "13")


def test_valid_report_params() -> None:
    assert parse_report_params(" 123123 ", "2024", "1.0") == ReportParams(
        user_id=123123, year=2024, month=1
    )


def test_year_has_no_upper_bound() -> None:
    assert parse_report_params("1", "987654321", "12").year == 987654321


def test_huge_exponents_are_rejected_as_shape_errors() -> None:
    assert as_positive_int("1e400") is None
    assert as_positive_int("1e2000000") is None
    assert as_positive_int("1e300") == 10**300
    with pytest.raises(InvalidInput, match="User ID, year and month must be positive integers."):
        parse_report_params("1", "1e2000000", "1")


def test_as_positive_int_rejects_booleans() -> None:
    assert as_positive_int(True) is None
    assert as_positive_int(7) == 7
    assert as_positive_int(7.0) == 7
    assert as_positive_int(7.2) is None


def _cost(**overrides):
    payload = {
        "description": "Pizza",
        "category": "food",
        "userid": 1,
        "sum": 12.5,
    }
    payload.update(overrides)
    return payload


def test_cost_payload_normalises_category_and_defaults_date() -> None:
    data = parse_cost_payload(
        _cost(category="  FOOD ", description="  Pizza "), now=NOW
    )
    assert data.category == "food"
    assert data.description == "Pizza"
    assert data.date == NOW


@pytest.mark.parametrize(
    "payload",
    [
        {},
        _cost(description="   "),
        _cost(category=""),
        {"description": "Pizza", "category": "food", "sum": 1},
        {"description": "Pizza", "category": "food", "userid": 1},
    ],
)
def test_cost_payload_missing_fields(payload) -> None:
    with pytest.raises(InvalidInput, match="Missing required fields."):
        parse_cost_payload(payload, now=NOW)


def test_cost_payload_unknown_category_lists_accepted_ones() -> None:
    with pytest.raises(InvalidInput) as exc_info:
        parse_cost_payload(_cost(category="Travel"), now=NOW)
    assert str(exc_info.value) == (
        "Category 'travel' is not in the list of accepted categories. "
        "The accepted categories are: food, health, housing, sports, education."
    )


@pytest.mark.parametrize("userid", [0, -1, "x", 1.5, None])
def test_cost_payload_rejects_bad_user_id(userid) -> None:
    with pytest.raises(InvalidInput, match="User ID must be a positive integer."):
        parse_cost_payload(_cost(userid=userid), now=NOW)


@pytest.mark.parametrize("amount", [None, -0.01, "abc", float("inf"), ""])
def test_cost_payload_rejects_bad_sum(amount) -> None:
    with pytest.raises(InvalidInput, match="Sum must be a non-negative finite number."):
        parse_cost_payload(_cost(sum=amount), now=NOW)


def test_cost_payload_accepts_zero_and_numeric_strings() -> None:
    assert parse_cost_payload(_cost(sum=0), now=NOW).sum == 0
    assert parse_cost_payload(_cost(sum="85.5"), now=NOW).sum == 85.5


def test_cost_payload_rejects_unparsable_date() -> None:
    with pytest.raises(InvalidInput, match="Invalid date format."):
        parse_cost_payload(_cost(date="next tuesday"), now=NOW)


def test_cost_payload_rejects_dates_before_today() -> None:
    with pytest.raises(InvalidInput, match="Date cannot be in the past."):
        parse_cost_payload(_cost(date="2026-10-16T23:59:59"), now=NOW)


def test_cost_payload_accepts_earlier_today_and_future() -> None:
    assert parse_cost_payload(_cost(date="2026-10-17T00:00:00"), now=NOW).date == (
        datetime(2026, 10, 17)
    )
    assert parse_cost_payload(_cost(date="2027-01-02"), now=NOW).date == datetime(
        2027, 1, 2
    )


def _user(**overrides):
    payload = {
        "id": 123123,
        "first_name": "mosh",
        "last_name": "israeli",
        "birthday": "2000-01-01",
    }
    payload.update(overrides)
    return payload


def test_user_payload_trims_names() -> None:
    data = parse_user_payload(_user(first_name=" mosh "), now=NOW)
    assert data.first_name == "mosh"
    assert data.birthday == date(2000, 1, 1)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {k: v for k, v in _user().items() if k != "id"},
        _user(first_name="  "),
        _user(last_name=""),
        {k: v for k, v in _user().items() if k != "birthday"},
    ],
)
def test_user_payload_missing_fields(payload) -> None:
    with pytest.raises(InvalidInput, match="Missing required fields."):
        parse_user_payload(payload, now=NOW)


def test_user_payload_rejects_bad_id() -> None:
    with pytest.raises(InvalidInput, match="User ID must be a positive integer."):
        parse_user_payload(_user(id=-3), now=NOW)


def test_user_payload_rejects_id_beyond_integer_column() -> None:
    with pytest.raises(InvalidInput, match="User ID is too large."):
        parse_user_payload(_user(id=2**63), now=NOW)
    assert parse_user_payload(_user(id=2**63 - 1), now=NOW).id == 2**63 - 1


def test_user_payload_rejects_bad_birthday() -> None:
    with pytest.raises(InvalidInput, match="Invalid birthday format."):
        parse_user_payload(_user(birthday="yesterday"), now=NOW)
    with pytest.raises(InvalidInput, match="Birthday cannot be in the future."):
        parse_user_payload(_user(birthday="2026-10-18"), now=NOW)


def test_user_payload_accepts_birthday_today() -> None:
    assert parse_user_payload(_user(birthday="2026-10-17"), now=NOW).birthday == (
        date(2026, 10, 17)
    )
