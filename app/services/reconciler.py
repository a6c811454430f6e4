"""
Reconciles persisted weekly timesheets against the full calendar of weeks.

Every calendar week in the requested range produces exactly one slot: the
stored timesheet when there is one, otherwise a synthetic MISSING placeholder.
The merged listing is sorted by week start and then paginated; the total in
the pagination block always counts the whole calendar.
"""
from dataclasses import dataclass, field
from math import ceil
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
import logging

from app.errors import ValidationError
from app.models.timesheet import SheetStatus
from app.utils.week import WeekBounds, iso_week_number

logger = logging.getLogger(__name__)

# (range_start, range_end, locale) -> persisted timesheets whose week_start is in range
FetchFn = Callable[[str, str, Optional[str]], Sequence[Any]]


@dataclass
class WeekSlot:
    id: Any
    user_id: str
    week: int
    week_start: str
    week_end: str
    total_hours: float
    status: str
    locale: Optional[str] = None
    entries: List[Any] = field(default_factory=list)
    persisted: bool = False

    @classmethod
    def from_timesheet(cls, timesheet: Any) -> "WeekSlot":
        return cls(
            id=timesheet.id,
            user_id=timesheet.user_id,
            week=iso_week_number(timesheet.week_start),
            week_start=timesheet.week_start,
            week_end=timesheet.week_end,
            total_hours=timesheet.total_hours,
            status=timesheet.status,
            locale=getattr(timesheet, "locale", None),
            entries=list(getattr(timesheet, "entries", None) or []),
            persisted=True,
        )

    @classmethod
    def missing(cls, user_id: str, bounds: WeekBounds) -> "WeekSlot":
        return cls(
            id=f"missing-{bounds.week_start}",
            user_id=user_id,
            week=iso_week_number(bounds.week_start),
            week_start=bounds.week_start,
            week_end=bounds.week_end,
            total_hours=0.0,
            status=SheetStatus.MISSING.value,
        )


@dataclass
class Pagination:
    page: int
    page_size: int
    page_count: int
    total: int


def locale_chain(locale: Optional[str], fallback_locales: Sequence[str]) -> List[Optional[str]]:
    """
    Ordered locales to try. [None] means "no locale constraint".
    """
    if not locale:
        return [None]
    chain = []
    for candidate in [locale, *fallback_locales]:
        if candidate and candidate not in chain:
            chain.append(candidate)
    return chain


def fetch_with_fallback(
    fetch: FetchFn,
    range_start: str,
    range_end: str,
    locale: Optional[str],
    fallback_locales: Sequence[str],
) -> Tuple[Sequence[Any], Optional[str]]:
    """Try each locale in turn; the first non-empty result wins."""
    records: Sequence[Any] = []
    used = None
    for candidate in locale_chain(locale, fallback_locales):
        records = fetch(range_start, range_end, candidate)
        used = candidate
        if records:
            break
        logger.debug(f"No timesheets for locale={candidate} in {range_start}..{range_end}")

    if locale and used != locale and records:
        logger.info(f"Locale fallback: requested={locale}, using={used}")
    return records, used


def paginate(slots: Sequence[WeekSlot], page: int, page_size: int) -> Tuple[List[WeekSlot], Pagination]:
    if page < 1:
        raise ValidationError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValidationError(f"pageSize must be >= 1, got {page_size}")

    total = len(slots)
    start_idx = (page - 1) * page_size
    paged = list(slots[start_idx:start_idx + page_size])
    return paged, Pagination(
        page=page,
        page_size=page_size,
        page_count=ceil(total / page_size),
        total=total,
    )


def reconcile(
    user_id: str,
    calendar: Sequence[WeekBounds],
    fetch: FetchFn,
    locale: Optional[str] = None,
    fallback_locales: Sequence[str] = ("en",),
    page: int = 1,
    page_size: int = 10,
) -> Tuple[List[WeekSlot], Pagination]:
    """
    Merge persisted timesheets with the calendar and paginate the result.

    Args:
        user_id: Owner of the listing; placeholders carry it too
        calendar: Output of weeks_in_range for the requested range
        fetch: Storage lookup, called once per locale tried. Any status
            filter belongs inside it, so it never removes MISSING placeholders.
        locale: Preferred locale, or None for no locale constraint
        fallback_locales: Locales tried in order when the preferred one is empty
        page: 1-based page number
        page_size: Slots per page

    Returns:
        (slots for the requested page, pagination over the whole calendar)
    """
    records: Sequence[Any] = []
    if calendar:
        range_start = calendar[0].week_start
        range_end = calendar[-1].week_end
        records, _ = fetch_with_fallback(fetch, range_start, range_end, locale, fallback_locales)

    by_week: Dict[str, Any] = {}
    for record in records:
        if record.week_start in by_week:
            logger.warning(
                f"Duplicate timesheet for user={user_id} week={record.week_start} "
                f"(ids {by_week[record.week_start].id}, {record.id}); keeping the first"
            )
            continue
        by_week[record.week_start] = record

    slots = []
    for bounds in calendar:
        existing = by_week.get(bounds.week_start)
        if existing is not None:
            slots.append(WeekSlot.from_timesheet(existing))
        else:
            slots.append(WeekSlot.missing(user_id, bounds))

    slots.sort(key=lambda slot: slot.week_start)

    logger.debug(
        f"Reconciled user={user_id}: {len(slots)} weeks, "
        f"{sum(1 for slot in slots if not slot.persisted)} missing"
    )
    return paginate(slots, page, page_size)
