"""
Visibility filtering of entity collections through a principal's closure.

Each filter returns a strict subset of its input in input order.
The per-kind filters are independent of one another, so a host may run
them in any order or in parallel.
"""

from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, TypeVar

from lifegroup_hierarchy.models.database import Attendance, Event, Group, Identity, Notification, WeeklyReport
from lifegroup_hierarchy.models.results import ClosureResult
from lifegroup_hierarchy.models.roles import Role


T = TypeVar("T")


class EntityKind(str, Enum):
    """Collections the visibility filter understands."""
    IDENTITY = "identity"
    GROUP = "group"
    EVENT = "event"
    NOTIFICATION = "notification"
    WEEKLY_REPORT = "weekly_report"
    ATTENDANCE = "attendance"


_KIND_BY_TYPE: Dict[type, EntityKind] = {
    Identity: EntityKind.IDENTITY,
    Group: EntityKind.GROUP,
    Event: EntityKind.EVENT,
    Notification: EntityKind.NOTIFICATION,
    WeeklyReport: EntityKind.WEEKLY_REPORT,
    Attendance: EntityKind.ATTENDANCE,
}


def infer_kind(entities: Sequence[Any]) -> Optional[EntityKind]:
    """Entity kind of a homogeneous collection, or None when empty."""
    if not entities:
        return None
    return _KIND_BY_TYPE.get(type(entities[0]))


class VisibilityFilter:
    """
    Filters collections on behalf of one principal.

    Args:
        principal: The identity the decision is made for.
        closure: The principal's closure (see hierarchy.closure).
        superior_ids: The principal's superior chain; lets a group leader
            see events created higher up in the hierarchy.
    """

    def __init__(
        self,
        principal: Identity,
        closure: ClosureResult,
        superior_ids: Optional[Iterable[str]] = None,
    ):
        self.principal = principal
        self.closure = closure
        self.scope: FrozenSet[str] = closure.identity_ids | {principal.id}
        self.superior_ids: FrozenSet[str] = frozenset(superior_ids or ())

    @property
    def is_top_admin(self) -> bool:
        return self.principal.role == Role.SUPERADMIN

    def _keep(self, entities: Iterable[T], predicate: Callable[[T], bool]) -> List[T]:
        return [entity for entity in entities if predicate(entity)]

    def can_see_identity(self, identity: Identity) -> bool:
        return identity.id in self.scope

    def can_see_group(self, group: Group) -> bool:
        return self.is_top_admin or group.leader_id in self.scope

    def can_see_event(self, event: Event) -> bool:
        if self.is_top_admin:
            return True
        if event.created_by in self.scope or self.principal.role in event.target_roles:
            return True
        # Group leaders also see what their superiors scheduled
        return self.principal.role == Role.GROUP_LEADER and event.created_by in self.superior_ids

    def can_see_notification(self, notification: Notification) -> bool:
        if self.is_top_admin or notification.is_broadcast:
            return True
        if self.principal.id in notification.target_users:
            return True
        if self.principal.role in notification.target_roles:
            return True
        return notification.created_by is not None and notification.created_by in self.scope

    def can_see_report(self, report: WeeklyReport) -> bool:
        return self.is_top_admin or report.leader_id in self.scope

    def can_see_attendance(self, record: Attendance) -> bool:
        return record.user_id in self.scope

    def identities(self, identities: Iterable[Identity]) -> List[Identity]:
        return self._keep(identities, self.can_see_identity)

    def groups(self, groups: Iterable[Group]) -> List[Group]:
        return self._keep(groups, self.can_see_group)

    def events(self, events: Iterable[Event]) -> List[Event]:
        return self._keep(events, self.can_see_event)

    def notifications(self, notifications: Iterable[Notification]) -> List[Notification]:
        return self._keep(notifications, self.can_see_notification)

    def reports(self, reports: Iterable[WeeklyReport]) -> List[WeeklyReport]:
        return self._keep(reports, self.can_see_report)

    def attendance(self, records: Iterable[Attendance]) -> List[Attendance]:
        return self._keep(records, self.can_see_attendance)

    def filter(self, entities: Sequence[Any], kind: Optional[EntityKind] = None) -> List[Any]:
        """Dispatch on ``kind`` (inferred from the first entity when omitted)."""
        kind = kind or infer_kind(entities)
        if kind is None:
            return []
        handlers = {
            EntityKind.IDENTITY: self.identities,
            EntityKind.GROUP: self.groups,
            EntityKind.EVENT: self.events,
            EntityKind.NOTIFICATION: self.notifications,
            EntityKind.WEEKLY_REPORT: self.reports,
            EntityKind.ATTENDANCE: self.attendance,
        }
        return handlers[EntityKind(kind)](entities)


def filter_visible(
    principal: Identity,
    closure: ClosureResult,
    entities: Sequence[Any],
    entity_kind: Optional[EntityKind] = None,
    superior_ids: Optional[Iterable[str]] = None,
) -> List[Any]:
    """Filter one collection through ``principal``'s closure."""
    return VisibilityFilter(principal, closure, superior_ids).filter(entities, entity_kind)
