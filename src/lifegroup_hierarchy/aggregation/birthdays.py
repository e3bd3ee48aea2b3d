"""Upcoming birthdays, grouped under the leader who should be told."""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from lifegroup_hierarchy.models.database import Identity


class UpcomingBirthday(BaseModel):
    identity: Identity
    birthday: date
    days_until: int


def next_birthday(birth_date: date, today: date) -> date:
    """Next occurrence on or after ``today``; Feb 29 falls back to Feb 28."""
    def _in_year(year: int) -> date:
        try:
            return birth_date.replace(year=year)
        except ValueError:
            return date(year, 2, 28)

    candidate = _in_year(today.year)
    if candidate < today:
        candidate = _in_year(today.year + 1)
    return candidate


def upcoming_birthdays(
    identities: Iterable[Identity],
    today: Optional[date] = None,
    window_days: int = 7,
) -> List[UpcomingBirthday]:
    """Active identities whose birthday falls within ``window_days`` of today."""
    today = today or date.today()
    horizon = today + timedelta(days=window_days)

    upcoming = []
    for identity in identities:
        if identity.birth_date is None or not identity.is_active:
            continue
        birthday = next_birthday(identity.birth_date, today)
        if birthday <= horizon:
            upcoming.append(UpcomingBirthday(
                identity=identity,
                birthday=birthday,
                days_until=(birthday - today).days,
            ))

    upcoming.sort(key=lambda b: (b.days_until, b.identity.id))
    return upcoming


def birthdays_by_leader(
    upcoming: Iterable[UpcomingBirthday],
    identities: Iterable[Identity],
) -> Dict[str, List[UpcomingBirthday]]:
    """Group upcoming birthdays by the identity's active direct superior."""
    active_ids = {identity.id for identity in identities if identity.is_active}

    grouped: Dict[str, List[UpcomingBirthday]] = {}
    for entry in upcoming:
        superior_id = entry.identity.superior_id
        if superior_id is None or superior_id not in active_ids:
            continue
        grouped.setdefault(superior_id, []).append(entry)
    return grouped
