from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from enum import Enum
from app.database import Base


class SheetStatus(str, Enum):
    MISSING = "MISSING"
    INCOMPLETE = "INCOMPLETE"
    COMPLETED = "COMPLETED"


class Timesheet(Base):
    __tablename__ = "timesheets"
    __table_args__ = (
        UniqueConstraint("user_id", "week_start", name="uq_timesheet_user_week"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(50), nullable=False, index=True)
    # Calendar dates stored as YYYY-MM-DD so week bucketing never depends on a timezone
    week_start = Column(String(10), nullable=False, index=True)
    week_end = Column(String(10), nullable=False)
    total_hours = Column(Float, nullable=False, default=0.0)
    status = Column(String(20), nullable=False, default=SheetStatus.MISSING.value, index=True)
    locale = Column(String(10), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    entries = relationship(
        "TimeEntry",
        back_populates="timesheet",
        cascade="all, delete-orphan",
        order_by="TimeEntry.id",
    )

    def __repr__(self):
        return f"<Timesheet(user={self.user_id}, week={self.week_start}, hours={self.total_hours}, status={self.status})>"


class TimeEntry(Base):
    __tablename__ = "timesheet_entries"

    id = Column(Integer, primary_key=True, index=True)
    timesheet_id = Column(Integer, ForeignKey("timesheets.id", ondelete="CASCADE"), nullable=False, index=True)
    project = Column(String(200), nullable=True)
    type_of_work = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    hours = Column(Float, nullable=False)
    assigned_date = Column(String(10), nullable=False)
    # Fixed from assigned_date when the entry is created
    week_start = Column(String(10), nullable=False)
    week_end = Column(String(10), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    timesheet = relationship("Timesheet", back_populates="entries")

    def __repr__(self):
        return f"<TimeEntry(project={self.project}, date={self.assigned_date}, hours={self.hours})>"
