"""
Hierarchical orchestrator for one authorization request.

Runs the synchronous single-pass pipeline a host invokes per request or
data refresh: validate the principal → build the org graph → resolve the
closure → filter every supplied collection → aggregate progress and the
weekly report status over what the principal can see.
"""

import logging
import time
from datetime import date, datetime, tzinfo
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, Field, validator

from lifegroup_hierarchy.aggregation.attendance import AttendanceStats, CheckInEntry, attendance_stats, check_in_history
from lifegroup_hierarchy.aggregation.birthdays import UpcomingBirthday, upcoming_birthdays
from lifegroup_hierarchy.aggregation.progress import CohortStats, MemberProgress, cohort_stats_from_progress, member_progress
from lifegroup_hierarchy.aggregation.reports import WeeklySummary, find_duplicate_reports, summarize_week
from lifegroup_hierarchy.hierarchy.closure import ClosureMode, ClosureResolver
from lifegroup_hierarchy.hierarchy.graph import OrgGraph
from lifegroup_hierarchy.hierarchy.visibility import VisibilityFilter
from lifegroup_hierarchy.models import (
    Attendance,
    Event,
    Group,
    HierarchyValidationError,
    Identity,
    Notification,
    ProgressTrack,
    Role,
    WeeklyReport,
)
from lifegroup_hierarchy.models.permissions import PrincipalScope
from lifegroup_hierarchy.models.results import DataIntegrityWarning, merge_warnings
from lifegroup_hierarchy.models.utils import parse_identity, parse_records
from lifegroup_hierarchy.utils.reporting_window import resolve_timezone


logger = logging.getLogger(__name__)


class OrchestrationConfig(BaseModel):
    """Configuration for one pipeline run."""

    report_deadline_hour: int = 12
    include_inactive_in_checkins: bool = True
    birthday_window_days: int = 7
    timezone: Optional[str] = None

    @validator("report_deadline_hour")
    def validate_deadline_hour(cls, v):
        if v < 0 or v > 23:
            raise ValueError("report_deadline_hour must be between 0 and 23")
        return v

    @validator("timezone")
    def validate_timezone(cls, v):
        return v if resolve_timezone(v) is not None else None

    @classmethod
    def from_settings(cls, settings: Any) -> "OrchestrationConfig":
        return cls(
            report_deadline_hour=settings.report_deadline_hour,
            include_inactive_in_checkins=settings.include_inactive_in_checkins,
            birthday_window_days=settings.birthday_window_days,
            timezone=settings.timezone,
        )


class OrchestrationResult(BaseModel):
    """Everything one principal may see, plus roll-ups and warnings."""

    # Execution metadata
    success: bool
    principal_id: Optional[str] = None
    principal_role: Optional[Role] = None
    execution_time_ms: float = 0.0

    # Validation failure, so the host can degrade to "no data"
    error: Optional[str] = None
    error_field: Optional[str] = None

    # Authorization
    closure_ids: List[str] = []
    scope: Optional[PrincipalScope] = None

    # Filtered collections
    identities: List[Identity] = []
    groups: List[Group] = []
    events: List[Event] = []
    notifications: List[Notification] = []
    reports: List[WeeklyReport] = []

    # Aggregates
    member_progress: List[MemberProgress] = []
    cohort: CohortStats = Field(default_factory=CohortStats)
    weekly: Optional[WeeklySummary] = None
    check_ins: List[CheckInEntry] = []
    attendance: AttendanceStats = Field(default_factory=AttendanceStats)
    birthdays: List[UpcomingBirthday] = []

    warnings: List[DataIntegrityWarning] = []


Records = Optional[Sequence[Union[BaseModel, Mapping[str, Any]]]]


class HierarchyOrchestrator:
    """
    Runs the closure/visibility/aggregation pipeline for one principal.

    Stateless between calls: every run receives the principal and the
    collections as arguments, so concurrent runs never share data.
    """

    def __init__(
        self,
        config: Optional[OrchestrationConfig] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        self.config = config or OrchestrationConfig()
        self.logger = logger_instance or logger

    def run(
        self,
        principal: Union[Identity, Mapping[str, Any]],
        identities: Records,
        groups: Records = None,
        events: Records = None,
        notifications: Records = None,
        reports: Records = None,
        tracks: Records = None,
        attendance: Records = None,
        now: Optional[datetime] = None,
    ) -> OrchestrationResult:
        """
        Execute the pipeline.

        Validation errors in the principal or any record produce a result
        with ``success=False`` and the offending field; integrity problems
        in the hierarchy come back as warnings next to a normal result.
        """
        start_time = time.time()

        try:
            principal = parse_identity(principal)
            all_identities = parse_records(Identity, identities or [], "identities")
            group_rows = parse_records(Group, groups or [], "groups")
            event_rows = parse_records(Event, events or [], "events")
            notification_rows = parse_records(Notification, notifications or [], "notifications")
            report_rows = parse_records(WeeklyReport, reports or [], "reports")
            track_rows = parse_records(ProgressTrack, tracks or [], "tracks")
            attendance_rows = parse_records(Attendance, attendance or [], "attendance")
        except HierarchyValidationError as e:
            self.logger.error(f"Rejected request: {e}", extra={"field": e.field})
            return OrchestrationResult(
                success=False,
                error=e.message,
                error_field=e.field,
                execution_time_ms=(time.time() - start_time) * 1000,
            )

        tz = self._tzinfo()
        if now is None:
            now = datetime.now(tz) if tz is not None else datetime.now()

        graph = OrgGraph.build(all_identities)
        closure = ClosureResolver(graph).resolve(principal)
        superior_ids, ancestor_warnings = graph.ancestors(principal)
        visibility = VisibilityFilter(principal, closure, superior_ids)

        self.logger.info(
            f"Resolved closure for {principal.id} ({principal.role.value}): "
            f"{closure.size} identities"
        )

        visible_identities = visibility.identities(all_identities)
        members = [i for i in visible_identities if self._is_tracked_member(principal, i)]
        progress_rows, track_warnings = member_progress(members, track_rows)

        weekly = summarize_week(
            principal,
            closure,
            all_identities,
            report_rows,
            now=now,
            deadline_hour=self.config.report_deadline_hour,
            tz=tz,
        )

        history_mode = (
            ClosureMode.HISTORICAL if self.config.include_inactive_in_checkins else ClosureMode.ACTIVE
        )
        history_closure = ClosureResolver(graph, history_mode).resolve(principal)
        check_ins = check_in_history(
            principal, history_closure, attendance_rows, event_rows, all_identities, tz=tz
        )
        visible_attendance = VisibilityFilter(principal, history_closure).attendance(attendance_rows)

        warnings = merge_warnings(
            closure.warnings,
            ancestor_warnings,
            track_warnings,
            find_duplicate_reports(report_rows),
        )

        return OrchestrationResult(
            success=True,
            principal_id=principal.id,
            principal_role=principal.role,
            execution_time_ms=(time.time() - start_time) * 1000,
            closure_ids=closure.sorted_ids(),
            scope=PrincipalScope.for_principal(principal),
            identities=visible_identities,
            groups=visibility.groups(group_rows),
            events=visibility.events(event_rows),
            notifications=visibility.notifications(notification_rows),
            reports=visibility.reports(report_rows),
            member_progress=progress_rows,
            cohort=cohort_stats_from_progress([row.progress for row in progress_rows]),
            weekly=weekly,
            check_ins=check_ins,
            attendance=attendance_stats(visible_attendance, today=self._today(now)),
            birthdays=upcoming_birthdays(
                visible_identities,
                today=self._today(now),
                window_days=self.config.birthday_window_days,
            ),
            warnings=warnings,
        )

    @staticmethod
    def _is_tracked_member(principal: Identity, identity: Identity) -> bool:
        """Progress screens list active members only; a member sees itself."""
        if identity.role != Role.MEMBER:
            return False
        return identity.is_active or identity.id == principal.id

    @staticmethod
    def _today(now: datetime) -> date:
        return now.date()

    def _tzinfo(self) -> Optional[tzinfo]:
        return resolve_timezone(self.config.timezone)

    def summary(self, result: OrchestrationResult) -> Dict[str, Any]:
        """Compact numbers for logs and terminal output."""
        if not result.success:
            return {"success": False, "error_field": result.error_field, "error": result.error}
        return {
            "success": True,
            "principal_id": result.principal_id,
            "visible_identities": len(result.closure_ids),
            "members_tracked": result.cohort.total_members,
            "average_progress": result.cohort.average_percent,
            "pending_reports": result.weekly.pending_count if result.weekly else 0,
            "received_reports": result.weekly.received_count if result.weekly else 0,
            "warnings": len(result.warnings),
        }
