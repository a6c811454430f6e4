"""
Recomputes a timesheet's total hours and status from its entries.

Always called with the full current entry set of the timesheet, never with a
delta, so totals cannot drift after partial updates.
"""
from typing import Any, Iterable, Mapping, Optional, Tuple
from app.models.timesheet import SheetStatus

COMPLETED_HOURS_THRESHOLD = 40.0


def _hours_of(entry: Any) -> float:
    if isinstance(entry, Mapping):
        return entry["hours"]
    if isinstance(entry, (int, float)):
        return entry
    return entry.hours


def status_for(total_hours: float, threshold: Optional[float] = None) -> SheetStatus:
    if threshold is None:
        threshold = COMPLETED_HOURS_THRESHOLD
    if total_hours >= threshold:
        return SheetStatus.COMPLETED
    if total_hours > 0:
        return SheetStatus.INCOMPLETE
    return SheetStatus.MISSING


def recompute(entries: Iterable[Any], threshold: Optional[float] = None) -> Tuple[float, SheetStatus]:
    """
    Sum entry hours and derive the sheet status.

    Entries may be TimeEntry rows, mappings with an "hours" key, or bare numbers.
    Hours are assumed to be validated already (non-negative numbers).
    """
    total_hours = float(sum(_hours_of(entry) for entry in entries))
    return total_hours, status_for(total_hours, threshold)
