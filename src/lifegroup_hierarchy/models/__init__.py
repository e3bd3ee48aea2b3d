"""
Core data models for the hierarchy engine.

This package contains:
- The role ladder
- Record models for identities, groups, events, reports, tracks
- Capability predicates
- Result and warning schemas
"""

from .roles import (
    Role,
    ROLE_RANKS,
    ROLE_LABELS,
    DESCENDANT_ROLES,
    LEADERSHIP_ROLES,
    EVENT_TARGET_ROLES,
    EVENT_TYPE_CREATOR_ROLES,
    parse_role,
    rank,
    outranks,
    roles_below,
)
from .errors import HierarchyValidationError
from .database import (
    Identity,
    Group,
    GroupType,
    Event,
    EventType,
    Notification,
    NotificationType,
    WeeklyReport,
    ProgressTrack,
    StepState,
    TRACK_STEPS,
    Attendance,
    AttendanceStatus,
    MemberStatus,
)
from .results import ClosureResult, DataIntegrityWarning, IntegrityIssue
from .permissions import PrincipalScope
from . import permissions
from . import utils

__all__ = [
    # Role ladder
    "Role",
    "ROLE_RANKS",
    "ROLE_LABELS",
    "DESCENDANT_ROLES",
    "LEADERSHIP_ROLES",
    "EVENT_TARGET_ROLES",
    "EVENT_TYPE_CREATOR_ROLES",
    "parse_role",
    "rank",
    "outranks",
    "roles_below",

    # Records
    "Identity",
    "Group",
    "GroupType",
    "Event",
    "EventType",
    "Notification",
    "NotificationType",
    "WeeklyReport",
    "ProgressTrack",
    "StepState",
    "TRACK_STEPS",
    "Attendance",
    "AttendanceStatus",
    "MemberStatus",

    # Results and errors
    "ClosureResult",
    "DataIntegrityWarning",
    "IntegrityIssue",
    "HierarchyValidationError",

    # Permissions
    "PrincipalScope",
    "permissions",

    # Utilities
    "utils",
]
