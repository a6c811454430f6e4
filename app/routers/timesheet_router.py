from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from app.database import get_db
from app.handlers.timesheet_handler import TimesheetHandler
from app.schemas.timesheet import EntrySubmissionRequest, EntryUpdate
from typing import Optional
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/timesheets", tags=["timesheets"])

# Endpoints are plain `def`: the write path blocks on per-week locks, so it
# runs in FastAPI's threadpool rather than on the event loop.


def _first_given(*values):
    """First value that was actually sent; 0 counts as sent."""
    for value in values:
        if value is not None:
            return value
    return None


@router.post("")
def submit_entry(body: EntrySubmissionRequest, db: Session = Depends(get_db)):
    handler = TimesheetHandler(db)
    response = handler.handle_submit(body.data)
    return JSONResponse(content=response)


@router.get("/with-missing")
@router.get("/full")
def list_weeks(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Query(None, alias="userId"),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    week_start_gte: Optional[str] = Query(None, alias="filters[weekStart][$gte]"),
    week_end_lte: Optional[str] = Query(None, alias="filters[weekEnd][$lte]"),
    locale: Optional[str] = None,
    status: Optional[str] = None,
    page: Optional[int] = None,
    page_size: Optional[int] = Query(None, alias="pageSize"),
    pagination_page: Optional[int] = Query(None, alias="pagination[page]"),
    pagination_page_size: Optional[int] = Query(None, alias="pagination[pageSize]"),
):
    """All weeks in the range for a user, with MISSING placeholders for gaps."""
    handler = TimesheetHandler(db)
    response = handler.handle_list_weeks(
        user_id=user_id,
        date_from=date_from or week_start_gte,
        date_to=date_to or week_end_lte,
        locale=locale,
        status=status,
        page=_first_given(page, pagination_page, 1),
        page_size=_first_given(page_size, pagination_page_size),
    )
    return JSONResponse(content=response)


@router.get("/week")
def get_week(
    user_id: str = Query(..., alias="userId"),
    week_of: str = Query(..., alias="date"),
    db: Session = Depends(get_db),
):
    handler = TimesheetHandler(db)
    return JSONResponse(content=handler.handle_get_week(user_id, week_of))


@router.patch("/entries/{entry_id}")
def update_entry(entry_id: int, body: EntryUpdate, db: Session = Depends(get_db)):
    handler = TimesheetHandler(db)
    return JSONResponse(content=handler.handle_update_entry(entry_id, body))


@router.delete("/entries/{entry_id}")
def delete_entry(
    entry_id: int,
    user_id: str = Query(..., alias="userId"),
    db: Session = Depends(get_db),
):
    logger.info(f"Delete requested for entry {entry_id} by user {user_id}")
    handler = TimesheetHandler(db)
    return JSONResponse(content=handler.handle_delete_entry(entry_id, user_id))
