from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional, Union


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class EntrySubmission(CamelModel):
    user_id: Optional[str] = Field(default=None, alias="userId")
    project: Optional[str] = None
    type_of_work: Optional[str] = Field(default=None, alias="typeOfWork")
    description: Optional[str] = None
    # Validated by the service so negative/non-numeric values get one error path
    hours: Any = None
    assigned_date: Optional[str] = Field(default=None, alias="assignedDate")
    locale: Optional[str] = None


class EntrySubmissionRequest(BaseModel):
    data: EntrySubmission


class EntryUpdate(CamelModel):
    user_id: str = Field(alias="userId")
    project: Optional[str] = None
    type_of_work: Optional[str] = Field(default=None, alias="typeOfWork")
    description: Optional[str] = None
    hours: Any = None

    def changes(self) -> dict:
        """Only the editable fields the caller actually sent."""
        return self.model_dump(exclude_unset=True, exclude={"user_id"})


class TimeEntryOut(CamelModel):
    id: int
    project: Optional[str] = None
    type_of_work: Optional[str] = Field(default=None, alias="typeOfWork")
    description: Optional[str] = None
    hours: float
    assigned_date: str = Field(alias="assignedDate")
    week_start: str = Field(alias="weekStart")
    week_end: str = Field(alias="weekEnd")


class TimesheetOut(CamelModel):
    id: int
    user_id: str = Field(alias="userId")
    week_start: str = Field(alias="weekStart")
    week_end: str = Field(alias="weekEnd")
    total_hours: float = Field(alias="totalHours")
    status: str
    locale: Optional[str] = None
    entries: List[TimeEntryOut] = []


class WeekSlotOut(CamelModel):
    id: Union[int, str]
    week: int
    user_id: str = Field(alias="userId")
    week_start: str = Field(alias="weekStart")
    week_end: str = Field(alias="weekEnd")
    total_hours: float = Field(alias="totalHours")
    status: str
    locale: Optional[str] = None
    entries: List[TimeEntryOut] = []


class PaginationOut(CamelModel):
    page: int
    page_size: int = Field(alias="pageSize")
    page_count: int = Field(alias="pageCount")
    total: int


class ListingMeta(BaseModel):
    pagination: PaginationOut


class WeekListingOut(BaseModel):
    data: List[WeekSlotOut]
    meta: ListingMeta
