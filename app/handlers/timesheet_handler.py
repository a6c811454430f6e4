from sqlalchemy.orm import Session
from app.services.timesheet_service import TimesheetService, WeekListing
from app.models.timesheet import Timesheet
from app.schemas.timesheet import (
    EntrySubmission,
    EntryUpdate,
    TimesheetOut,
    WeekSlotOut,
    PaginationOut,
    WeekListingOut,
    ListingMeta,
)
from app.errors import NotFoundError
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


class TimesheetHandler:
    """Turns HTTP payloads into service calls and service results into JSON-ready dicts."""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _timesheet_payload(timesheet: Timesheet) -> Dict[str, Any]:
        return TimesheetOut.model_validate(timesheet).model_dump(by_alias=True)

    @staticmethod
    def _listing_payload(listing: WeekListing) -> Dict[str, Any]:
        body = WeekListingOut(
            data=[WeekSlotOut.model_validate(slot) for slot in listing.slots],
            meta=ListingMeta(pagination=PaginationOut.model_validate(listing.pagination)),
        )
        return body.model_dump(by_alias=True)

    def handle_submit(self, submission: EntrySubmission) -> Dict[str, Any]:
        logger.info(f"📍 Entry submission - user: {submission.user_id}, date: {submission.assigned_date}")
        timesheet = TimesheetService.submit_entry(
            self.db,
            user_id=submission.user_id,
            project=submission.project,
            type_of_work=submission.type_of_work,
            description=submission.description,
            hours=submission.hours,
            assigned_date=submission.assigned_date,
            locale=submission.locale,
        )
        return {
            "message": "Timesheet updated",
            "timesheet": self._timesheet_payload(timesheet)
        }

    def handle_list_weeks(
        self,
        user_id: Optional[str],
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        locale: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None
    ) -> Dict[str, Any]:
        listing = TimesheetService.list_weeks(
            self.db,
            user_id=user_id,
            date_from=date_from,
            date_to=date_to,
            locale=locale,
            status=status,
            page=page,
            page_size=page_size,
        )
        return self._listing_payload(listing)

    def handle_update_entry(self, entry_id: int, update: EntryUpdate) -> Dict[str, Any]:
        timesheet = TimesheetService.update_entry(self.db, entry_id, update.user_id, **update.changes())
        return {
            "message": "Entry updated",
            "timesheet": self._timesheet_payload(timesheet)
        }

    def handle_delete_entry(self, entry_id: int, user_id: str) -> Dict[str, Any]:
        timesheet = TimesheetService.delete_entry(self.db, entry_id, user_id)
        return {
            "message": "Entry deleted",
            "timesheet": self._timesheet_payload(timesheet)
        }

    def handle_get_week(self, user_id: str, week_of: str) -> Dict[str, Any]:
        timesheet = TimesheetService.get_timesheet(self.db, user_id, week_of)
        if timesheet is None:
            raise NotFoundError(f"No timesheet for user {user_id} in the week of {week_of}")
        return {"timesheet": self._timesheet_payload(timesheet)}
