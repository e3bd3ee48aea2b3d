"""Roll-up statistics over a principal's visible identities."""

from .progress import (
    CohortStats,
    MemberProgress,
    ProgressBucket,
    TrackProgress,
    compute_cohort_stats,
    compute_progress,
    filter_by_progress,
    member_progress,
    step_breakdown,
)
from .reports import (
    PendingReport,
    ReceivedReport,
    WeeklySummary,
    get_pending_reports,
    get_received_reports,
    has_report_for_week,
    reported_leader_ids,
    reports_for_hierarchy,
    summarize_week,
)
from .attendance import AttendanceStats, CheckInEntry, attendance_stats, check_in_history
from .birthdays import UpcomingBirthday, birthdays_by_leader, upcoming_birthdays

__all__ = [
    "CohortStats",
    "MemberProgress",
    "ProgressBucket",
    "TrackProgress",
    "compute_cohort_stats",
    "compute_progress",
    "filter_by_progress",
    "member_progress",
    "step_breakdown",
    "PendingReport",
    "ReceivedReport",
    "WeeklySummary",
    "get_pending_reports",
    "get_received_reports",
    "has_report_for_week",
    "reported_leader_ids",
    "reports_for_hierarchy",
    "summarize_week",
    "AttendanceStats",
    "CheckInEntry",
    "attendance_stats",
    "check_in_history",
    "UpcomingBirthday",
    "birthdays_by_leader",
    "upcoming_birthdays",
]
