"""
Role-based capability predicates.

Each predicate is a pure function of the principal and its target, so the
same answer comes back whether the caller is an API handler, a batch job
or a UI data loader. PrincipalScope bundles the per-role flags a screen
needs in one object.
"""

from typing import List, Optional

from pydantic import BaseModel

from .database import Event, EventType, Group, Identity
from .roles import (
    EVENT_TARGET_ROLES,
    EVENT_TYPE_CREATOR_ROLES,
    LEADERSHIP_ROLES,
    ROLE_RANKS,
    Role,
    rank,
)


def is_top_admin(principal: Identity) -> bool:
    return principal.role == Role.SUPERADMIN


def can_manage(principal: Identity, target: Identity) -> bool:
    """Whether ``principal`` may manage (edit, delete) ``target``."""
    if is_top_admin(principal):
        return True

    # Group leaders own the members they registered
    if (
        principal.role == Role.GROUP_LEADER
        and target.role == Role.MEMBER
        and target.superior_id == principal.id
    ):
        return True

    if principal.id == target.id:
        return False

    return rank(principal.role) < rank(target.role)


def can_edit(principal: Identity, target: Identity) -> bool:
    return can_manage(principal, target)


def can_delete(principal: Identity, target: Identity) -> bool:
    return can_manage(principal, target)


def can_assign_role(principal: Identity, candidate_role: Role) -> bool:
    """Leader-creation path: only leadership roles strictly below the principal."""
    if candidate_role not in LEADERSHIP_ROLES:
        return False
    return rank(candidate_role) > rank(principal.role)


def assignable_roles(principal: Identity) -> List[Role]:
    return [role for role in LEADERSHIP_ROLES if can_assign_role(principal, role)]


def can_create_event_type(principal: Identity) -> bool:
    return principal.role in EVENT_TYPE_CREATOR_ROLES


def can_target_event_role(principal: Identity, role: Role) -> bool:
    """A principal may address its own tier and any less senior tier."""
    if role not in EVENT_TARGET_ROLES:
        return False
    return rank(role) >= rank(principal.role)


def event_target_roles(principal: Identity) -> List[Role]:
    """Audience roles offered when building an event or notification."""
    return [role for role in EVENT_TARGET_ROLES if can_target_event_role(principal, role)]


def event_type_target_roles(principal: Identity) -> List[Role]:
    """Audience roles offered for event types: strictly lower tiers."""
    if is_top_admin(principal):
        return list(EVENT_TARGET_ROLES)
    return [role for role in EVENT_TARGET_ROLES if rank(role) > rank(principal.role)]


def can_create_event(principal: Identity) -> bool:
    return rank(principal.role) <= ROLE_RANKS[Role.GROUP_LEADER]


def can_manage_event(principal: Identity, event: Event) -> bool:
    return is_top_admin(principal) or event.created_by == principal.id


def can_manage_event_type(principal: Identity, event_type: EventType) -> bool:
    return is_top_admin(principal) or event_type.created_by == principal.id


def can_create_leaders(principal: Identity) -> bool:
    return rank(principal.role) <= ROLE_RANKS[Role.SECTOR_LEADER]


def can_add_members(principal: Identity) -> bool:
    """Members are registered through the group-leader path only."""
    return principal.role == Role.GROUP_LEADER


def can_manage_group(principal: Identity, group: Group, leader: Optional[Identity] = None) -> bool:
    """Top admin, the group's own leader, or anyone who can manage that leader."""
    if is_top_admin(principal):
        return True
    if group.leader_id == principal.id:
        return True
    if leader is None or leader.id != group.leader_id:
        return False
    return can_manage(principal, leader)


class PrincipalScope(BaseModel):
    """Capability flags for one principal, precomputed for data loaders."""

    principal_id: str
    role: Role
    sees_everyone: bool = False
    can_create_event: bool = False
    can_create_event_type: bool = False
    can_create_leaders: bool = False
    can_add_members: bool = False
    assignable_roles: List[Role] = []
    event_target_roles: List[Role] = []
    event_type_target_roles: List[Role] = []

    @classmethod
    def for_principal(cls, principal: Identity) -> "PrincipalScope":
        """Build the scope for ``principal`` from its role alone."""
        return cls(
            principal_id=principal.id,
            role=principal.role,
            sees_everyone=is_top_admin(principal),
            can_create_event=can_create_event(principal),
            can_create_event_type=can_create_event_type(principal),
            can_create_leaders=can_create_leaders(principal),
            can_add_members=can_add_members(principal),
            assignable_roles=assignable_roles(principal),
            event_target_roles=event_target_roles(principal),
            event_type_target_roles=event_type_target_roles(principal),
        )
