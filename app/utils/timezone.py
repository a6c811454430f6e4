from datetime import date, datetime
from typing import Tuple
from zoneinfo import ZoneInfo

def get_local_today(tz_name: str = "UTC") -> date:
    """Get today's date in the given timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()

def current_year_range(tz_name: str = "UTC") -> Tuple[date, date]:
    """First and last day of the current year in the given timezone."""
    year = get_local_today(tz_name).year
    return date(year, 1, 1), date(year, 12, 31)
