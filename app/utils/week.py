"""
ISO week arithmetic for timesheets.

Weeks start on Monday and run 7 days inclusive (Mon-Sun). All values are
plain calendar dates serialized as YYYY-MM-DD; no time of day or timezone
is ever involved, so the same input always lands in the same week.
"""
from datetime import date, datetime, timedelta
from typing import List, NamedTuple, Union
from app.errors import InvalidDate

DATE_FORMAT = "%Y-%m-%d"

DateLike = Union[date, datetime, str]


class WeekBounds(NamedTuple):
    week_start: str
    week_end: str


def parse_date(value: DateLike) -> date:
    """Parse a date, datetime or YYYY-MM-DD string into a date."""
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        text = value.strip()
        try:
            return datetime.strptime(text, DATE_FORMAT).date()
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
    raise InvalidDate(value)


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def iso_week_number(value: DateLike) -> int:
    return parse_date(value).isocalendar()[1]


def week_bounds(value: DateLike) -> WeekBounds:
    """
    Return the Monday-to-Sunday week containing the given date.

    Raises:
        InvalidDate: If the value cannot be parsed as a calendar date
    """
    day = parse_date(value)
    start = day - timedelta(days=day.isoweekday() - 1)
    end = start + timedelta(days=6)
    return WeekBounds(format_date(start), format_date(end))


def weeks_in_range(start: DateLike, end: DateLike) -> List[WeekBounds]:
    """
    Every week touching [start, end], ascending.

    The first week is the one containing start and the last is the one
    containing end. An inverted range (start > end) yields no weeks.
    """
    first_day = parse_date(start)
    last_day = parse_date(end)
    if first_day > last_day:
        return []

    current = parse_date(week_bounds(first_day).week_start)
    stop = parse_date(week_bounds(last_day).week_end)

    weeks = []
    while current <= stop:
        weeks.append(WeekBounds(format_date(current), format_date(current + timedelta(days=6))))
        current += timedelta(days=7)
    return weeks
