"""
Weekly report aggregation.

Every active group leader owes one report per reporting week. Pending
leaders are found by scanning all leaders (not the closure); seniors then
see them through the closure like any other record.
"""

import logging
from datetime import date, datetime, tzinfo
from typing import Dict, Iterable, List, Optional, Set, Tuple

from pydantic import BaseModel

from lifegroup_hierarchy.models.database import Identity, WeeklyReport
from lifegroup_hierarchy.models.results import ClosureResult, DataIntegrityWarning, IntegrityIssue
from lifegroup_hierarchy.models.roles import Role
from lifegroup_hierarchy.utils.reporting_window import (
    DEFAULT_DEADLINE_HOUR,
    as_aware,
    current_week_end,
    current_week_start,
    is_deadline_passed,
    report_deadline,
)


logger = logging.getLogger(__name__)


class PendingReport(BaseModel):
    """A leader who has not reported for the week yet."""
    leader: Identity
    week_start: date
    week_end: date


class ReceivedReport(BaseModel):
    report: WeeklyReport
    leader: Identity


class WeeklySummary(BaseModel):
    """Report status of the current week as seen by one principal."""
    week_start: date
    week_end: date
    deadline: datetime
    deadline_passed: bool
    pending: List[PendingReport] = []
    received: List[ReceivedReport] = []
    fixed_members_present: int = 0
    guests_present: int = 0
    children_present: int = 0

    @property
    def pending_count(self) -> int:
        return len(self.pending)

    @property
    def received_count(self) -> int:
        return len(self.received)

    @property
    def total_present(self) -> int:
        return self.fixed_members_present + self.guests_present + self.children_present


def reported_leader_ids(reports: Iterable[WeeklyReport], week_start: date) -> Set[str]:
    """Leaders holding a report for exactly ``week_start``; no fuzzy dates."""
    return {r.leader_id for r in reports if r.week_start_date == week_start}


def has_report_for_week(reports: Iterable[WeeklyReport], leader_id: str, week_start: date) -> bool:
    return leader_id in reported_leader_ids(reports, week_start)


def find_duplicate_reports(reports: Iterable[WeeklyReport]) -> List[DataIntegrityWarning]:
    """One warning per (leader, week) pair holding more than one report."""
    seen: Dict[Tuple[str, date], List[str]] = {}
    for report in reports:
        seen.setdefault((report.leader_id, report.week_start_date), []).append(report.id)

    warnings = []
    for (leader_id, week_start), report_ids in seen.items():
        if len(report_ids) > 1:
            warning = DataIntegrityWarning(
                issue=IntegrityIssue.DUPLICATE_REPORT,
                identity_id=leader_id,
                related_ids=report_ids,
                message=f"Leader {leader_id} has {len(report_ids)} reports for week {week_start.isoformat()}",
            )
            warning.log(logger)
            warnings.append(warning)
    return warnings


def leaders_who_should_report(identities: Iterable[Identity]) -> List[Identity]:
    return [i for i in identities if i.role == Role.GROUP_LEADER and i.is_active]


def get_pending_reports(
    identities: Iterable[Identity],
    reports: Iterable[WeeklyReport],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> List[PendingReport]:
    """Active group leaders without a report for the current week."""
    week_start = current_week_start(now, tz)
    week_end = current_week_end(now, tz)
    submitted = reported_leader_ids(reports, week_start)

    return [
        PendingReport(leader=leader, week_start=week_start, week_end=week_end)
        for leader in leaders_who_should_report(identities)
        if leader.id not in submitted
    ]


def get_received_reports(
    identities: Iterable[Identity],
    reports: Iterable[WeeklyReport],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> List[ReceivedReport]:
    """Current-week reports paired with their leader, newest submission first."""
    week_start = current_week_start(now, tz)
    by_id = {identity.id: identity for identity in identities}

    received = []
    for report in reports:
        if report.week_start_date != week_start:
            continue
        leader = by_id.get(report.leader_id)
        if leader is None:
            logger.debug(f"Skipping report {report.id}: leader {report.leader_id} unknown")
            continue
        received.append(ReceivedReport(report=report, leader=leader))

    received.sort(key=lambda r: as_aware(r.report.submitted_at, tz), reverse=True)
    return received


def reports_for_hierarchy(
    principal: Identity,
    closure: ClosureResult,
    reports: Iterable[WeeklyReport],
) -> List[WeeklyReport]:
    """Reports written by leaders in the principal's closure, newest week first."""
    if principal.role == Role.SUPERADMIN:
        visible = list(reports)
    else:
        visible = [r for r in reports if r.leader_id in closure]
    return sorted(visible, key=lambda r: r.week_start_date, reverse=True)


def summarize_week(
    principal: Identity,
    closure: ClosureResult,
    identities: Iterable[Identity],
    reports: Iterable[WeeklyReport],
    now: Optional[datetime] = None,
    deadline_hour: int = DEFAULT_DEADLINE_HOUR,
    tz: Optional[tzinfo] = None,
) -> WeeklySummary:
    """
    Pending and received reports of the current week visible to ``principal``.

    The top admin sees every leader; everyone else sees leaders in their
    closure (their own report included).
    """
    if now is None:
        now = datetime.now(tz) if tz is not None else datetime.now()

    identities = list(identities)
    reports = list(reports)
    pending = get_pending_reports(identities, reports, now)
    received = get_received_reports(identities, reports, now, tz)

    if principal.role != Role.SUPERADMIN:
        scope = closure.including_principal()
        pending = [p for p in pending if p.leader.id in scope]
        received = [r for r in received if r.leader.id in scope]

    return WeeklySummary(
        week_start=current_week_start(now),
        week_end=current_week_end(now),
        deadline=report_deadline(now, deadline_hour),
        deadline_passed=is_deadline_passed(now, deadline_hour),
        pending=pending,
        received=received,
        fixed_members_present=sum(r.report.fixed_members_present for r in received),
        guests_present=sum(r.report.guests_present for r in received),
        children_present=sum(r.report.children_present for r in received),
    )
