from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from app.models.timesheet import Timesheet, TimeEntry, SheetStatus
from app.services.aggregator import recompute
from app.services.reconciler import WeekSlot, Pagination, reconcile
from app.errors import ValidationError, NotFoundError, StorageError
from app.utils.week import DateLike, WeekBounds, week_bounds, weeks_in_range, parse_date, format_date
from app.utils.timezone import current_year_range
from app.utils.locks import week_locks
from app.config import get_settings
from dataclasses import dataclass
from typing import List, Optional, Any
import math
import logging

logger = logging.getLogger(__name__)
settings = get_settings()

EDITABLE_ENTRY_FIELDS = ("project", "type_of_work", "description", "hours")


@dataclass
class WeekListing:
    slots: List[WeekSlot]
    pagination: Pagination


def validate_hours(hours: Any) -> float:
    """Reject anything that is not a finite, non-negative number."""
    # bool is an int subclass; True hours is a caller bug, not 1.0
    if isinstance(hours, bool) or not isinstance(hours, (int, float)):
        if isinstance(hours, str):
            try:
                hours = float(hours.strip())
            except ValueError:
                raise ValidationError(f"hours must be a number, got {hours!r}")
        else:
            raise ValidationError(f"hours must be a number, got {hours!r}")
    hours = float(hours)
    if math.isnan(hours) or math.isinf(hours):
        raise ValidationError(f"hours must be finite, got {hours!r}")
    if hours < 0:
        raise ValidationError(f"hours must not be negative, got {hours!r}")
    return hours


class TimesheetService:
    @staticmethod
    def _find_or_create_timesheet(
        db: Session,
        user_id: str,
        bounds: WeekBounds,
        locale: Optional[str] = None
    ) -> Timesheet:
        """
        Fetch the (user, week) timesheet, creating an empty one if needed.

        The unique constraint on (user_id, week_start) decides races between
        processes: if our insert loses, the winner's row is loaded instead.
        Must be called at the start of the unit of work, since a lost race
        rolls the session back.
        """
        timesheet = db.query(Timesheet).filter(
            Timesheet.user_id == user_id,
            Timesheet.week_start == bounds.week_start
        ).first()
        if timesheet:
            return timesheet

        timesheet = Timesheet(
            user_id=user_id,
            week_start=bounds.week_start,
            week_end=bounds.week_end,
            total_hours=0.0,
            status=SheetStatus.MISSING.value,
            locale=locale
        )
        db.add(timesheet)
        try:
            db.flush()
            logger.info(f"🆕 Created timesheet for user {user_id}, week {bounds.week_start}")
        except IntegrityError:
            db.rollback()
            logger.warning(f"⚠️ Timesheet for user {user_id}, week {bounds.week_start} created concurrently; reusing it")
            timesheet = db.query(Timesheet).filter(
                Timesheet.user_id == user_id,
                Timesheet.week_start == bounds.week_start
            ).one()
        return timesheet

    @staticmethod
    def _recompute_totals(db: Session, timesheet: Timesheet) -> Timesheet:
        entries = db.query(TimeEntry).filter(TimeEntry.timesheet_id == timesheet.id).all()
        total_hours, status = recompute(entries, settings.completed_hours_threshold)
        timesheet.total_hours = total_hours
        timesheet.status = status.value
        logger.debug(
            f"Recomputed timesheet {timesheet.id} (user {timesheet.user_id}, week {timesheet.week_start}): "
            f"{len(entries)} entries, {total_hours}h, {status.value}"
        )
        return timesheet

    @staticmethod
    def submit_entry(
        db: Session,
        user_id: str,
        project: Optional[str],
        type_of_work: Optional[str],
        description: Optional[str],
        hours: Any,
        assigned_date: Optional[DateLike],
        locale: Optional[str] = None
    ) -> Timesheet:
        """
        Record a time entry and refresh its week's timesheet.

        Find-or-create, entry insert and recompute run under a per-(user, week)
        lock and are committed together.

        Raises:
            ValidationError: Missing user_id/assigned_date or invalid hours
            InvalidDate: assigned_date cannot be parsed
            StorageError: The database rejected the write
        """
        if not user_id or not assigned_date:
            logger.error(f"❌ submit_entry rejected: user_id={user_id!r}, assigned_date={assigned_date!r}")
            raise ValidationError("Missing required fields: userId or assignedDate")

        try:
            hours = validate_hours(hours)
            day = parse_date(assigned_date)
        except ValidationError as e:
            logger.error(f"❌ submit_entry rejected for user {user_id}, date {assigned_date!r}: {e}")
            raise
        bounds = week_bounds(day)

        with week_locks.hold((user_id, bounds.week_start)):
            try:
                timesheet = TimesheetService._find_or_create_timesheet(db, user_id, bounds, locale)

                entry = TimeEntry(
                    timesheet_id=timesheet.id,
                    project=project,
                    type_of_work=type_of_work,
                    description=description,
                    hours=hours,
                    assigned_date=format_date(day),
                    week_start=bounds.week_start,
                    week_end=bounds.week_end
                )
                db.add(entry)
                db.flush()

                TimesheetService._recompute_totals(db, timesheet)
                db.commit()
                db.refresh(timesheet)
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"❌ submit_entry failed for user {user_id}, week {bounds.week_start}: {str(e)}")
                raise StorageError("submit_entry", e) from e

        logger.info(
            f"✅ Entry of {hours}h on {format_date(day)} recorded for user {user_id}; "
            f"week {bounds.week_start} now {timesheet.total_hours}h ({timesheet.status})"
        )
        return timesheet

    @staticmethod
    def _get_owned_entry(db: Session, entry_id: int, user_id: str) -> TimeEntry:
        entry = db.query(TimeEntry).join(Timesheet).filter(
            TimeEntry.id == entry_id,
            Timesheet.user_id == user_id  # Ensure user owns this entry
        ).first()
        if not entry:
            logger.error(f"❌ Entry {entry_id} not found for user {user_id}")
            raise NotFoundError(f"Entry {entry_id} not found for user {user_id}")
        return entry

    @staticmethod
    def update_entry(
        db: Session,
        entry_id: int,
        user_id: str,
        **changes: Any
    ) -> Timesheet:
        """
        Edit project, type_of_work, description or hours of an entry.

        The assigned date, and therefore the week, cannot change.
        """
        unknown = set(changes) - set(EDITABLE_ENTRY_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot edit field(s): {', '.join(sorted(unknown))}")
        if "hours" in changes:
            changes["hours"] = validate_hours(changes["hours"])

        try:
            entry = TimesheetService._get_owned_entry(db, entry_id, user_id)
            week_start = entry.week_start
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ update_entry lookup failed for entry {entry_id}, user {user_id}: {str(e)}")
            raise StorageError("update_entry", e) from e

        with week_locks.hold((user_id, week_start)):
            try:
                for field_name, value in changes.items():
                    setattr(entry, field_name, value)
                db.flush()
                timesheet = TimesheetService._recompute_totals(db, entry.timesheet)
                db.commit()
                db.refresh(timesheet)
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"❌ update_entry failed for entry {entry_id}, user {user_id}, week {week_start}: {str(e)}")
                raise StorageError("update_entry", e) from e

        logger.info(f"✅ Updated entry {entry_id} for user {user_id}, week {week_start}")
        return timesheet

    @staticmethod
    def delete_entry(db: Session, entry_id: int, user_id: str) -> Timesheet:
        """Delete an entry. The week's timesheet stays, recomputed."""
        try:
            entry = TimesheetService._get_owned_entry(db, entry_id, user_id)
            week_start = entry.week_start
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ delete_entry lookup failed for entry {entry_id}, user {user_id}: {str(e)}")
            raise StorageError("delete_entry", e) from e

        with week_locks.hold((user_id, week_start)):
            try:
                timesheet = entry.timesheet
                db.delete(entry)
                db.flush()
                TimesheetService._recompute_totals(db, timesheet)
                db.commit()
                db.refresh(timesheet)
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"❌ delete_entry failed for entry {entry_id}, user {user_id}, week {week_start}: {str(e)}")
                raise StorageError("delete_entry", e) from e

        logger.info(f"🗑️ Deleted entry {entry_id} for user {user_id}, week {week_start}")
        return timesheet

    @staticmethod
    def get_timesheet(db: Session, user_id: str, week_of: DateLike) -> Optional[Timesheet]:
        """The stored timesheet of the week containing week_of, if any."""
        if not user_id:
            raise ValidationError("Missing required field: userId")
        bounds = week_bounds(week_of)
        try:
            return db.query(Timesheet).options(selectinload(Timesheet.entries)).filter(
                Timesheet.user_id == user_id,
                Timesheet.week_start == bounds.week_start
            ).first()
        except SQLAlchemyError as e:
            logger.error(f"❌ get_timesheet failed for user {user_id}, week {bounds.week_start}: {str(e)}")
            raise StorageError("get_timesheet", e) from e

    @staticmethod
    def list_weeks(
        db: Session,
        user_id: str,
        date_from: Optional[DateLike] = None,
        date_to: Optional[DateLike] = None,
        locale: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None
    ) -> WeekListing:
        """
        Every week between date_from and date_to for a user, gaps included.

        Missing bounds default to the current year. A status filter narrows the
        stored timesheets only; weeks without a stored timesheet still come back
        as MISSING placeholders so the weekly ledger stays complete.
        """
        if not user_id:
            raise ValidationError("Missing required field: userId")
        if status and status not in SheetStatus.__members__:
            raise ValidationError(
                f"Unknown status {status!r}; expected one of {', '.join(SheetStatus.__members__)}"
            )
        if page_size is None:
            page_size = settings.default_page_size
        if page_size > settings.max_page_size:
            logger.info(f"pageSize {page_size} capped to {settings.max_page_size}")
            page_size = settings.max_page_size

        year_start, year_end = current_year_range(settings.timezone)
        start = parse_date(date_from) if date_from else year_start
        end = parse_date(date_to) if date_to else year_end
        calendar = weeks_in_range(start, end)

        def fetch(range_start: str, range_end: str, fetch_locale: Optional[str]) -> List[Timesheet]:
            query = db.query(Timesheet).options(selectinload(Timesheet.entries)).filter(
                Timesheet.user_id == user_id,
                Timesheet.week_start >= range_start,
                Timesheet.week_start <= range_end
            )
            if status:
                query = query.filter(Timesheet.status == status)
            if fetch_locale:
                query = query.filter(Timesheet.locale == fetch_locale)
            return query.order_by(Timesheet.week_start.asc(), Timesheet.id.asc()).all()

        try:
            slots, pagination = reconcile(
                user_id,
                calendar,
                fetch,
                locale=locale,
                fallback_locales=settings.fallback_locale_list,
                page=page,
                page_size=page_size
            )
        except SQLAlchemyError as e:
            logger.error(
                f"❌ list_weeks failed for user {user_id}, range {format_date(start)}..{format_date(end)}: {str(e)}"
            )
            raise StorageError("list_weeks", e) from e

        logger.info(
            f"📅 Listed weeks for user {user_id} {format_date(start)}..{format_date(end)}: "
            f"page {pagination.page}/{pagination.page_count}, total {pagination.total}"
        )
        return WeekListing(slots=slots, pagination=pagination)
