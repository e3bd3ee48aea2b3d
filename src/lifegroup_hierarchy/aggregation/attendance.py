"""
Attendance statistics and check-in history.

Check-in history is the one view that keeps inactive identities: pass it a
closure resolved in ClosureMode.HISTORICAL.
"""

from datetime import date, tzinfo
from typing import Iterable, List, Optional

from pydantic import BaseModel

from lifegroup_hierarchy.models.database import Attendance, AttendanceStatus, Event, Identity
from lifegroup_hierarchy.models.results import ClosureResult
from lifegroup_hierarchy.utils.reporting_window import as_aware


class AttendanceStats(BaseModel):
    total_check_ins: int = 0
    attendance_rate: int = 0  # percent of records marked present
    today_check_ins: int = 0


class CheckInEntry(BaseModel):
    """A check-in joined with its event and attendee (when known)."""
    attendance: Attendance
    event: Optional[Event] = None
    attendee: Optional[Identity] = None


def attendance_stats(records: Iterable[Attendance], today: Optional[date] = None) -> AttendanceStats:
    records = list(records)
    today = today or date.today()

    present = [r for r in records if r.status == AttendanceStatus.PRESENT]
    today_count = sum(
        1 for r in present
        if r.checked_in_at is not None and r.checked_in_at.date() == today
    )
    rate = (2 * 100 * len(present) + len(records)) // (2 * len(records)) if records else 0

    return AttendanceStats(
        total_check_ins=len(present),
        attendance_rate=rate,
        today_check_ins=today_count,
    )


def check_in_history(
    principal: Identity,
    closure: ClosureResult,
    records: Iterable[Attendance],
    events: Iterable[Event] = (),
    identities: Iterable[Identity] = (),
    tz: Optional[tzinfo] = None,
) -> List[CheckInEntry]:
    """
    Check-ins of the principal and everyone in its closure, newest first.

    Naive check-in times are read in ``tz`` (local time when None) so they
    sort together with timezone-aware ones.
    """
    scope = closure.including_principal()
    events_by_id = {event.id: event for event in events}
    people = {identity.id: identity for identity in identities}
    people.setdefault(principal.id, principal)

    entries = [
        CheckInEntry(
            attendance=record,
            event=events_by_id.get(record.event_id),
            attendee=people.get(record.user_id),
        )
        for record in records
        if record.checked_in_at is not None and record.user_id in scope
    ]
    entries.sort(key=lambda e: as_aware(e.attendance.checked_in_at, tz), reverse=True)
    return entries
