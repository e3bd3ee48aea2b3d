"""
Role ladder for the volunteer organization.

Single source of truth for role ordering. Rank 0 is the highest authority;
larger ranks are more subordinate. The table is static and never changes
at runtime.
"""

from enum import Enum
from typing import Any, Dict, FrozenSet, List

from .errors import HierarchyValidationError


class Role(str, Enum):
    """Standard roles, using the values stored in the record store."""
    SUPERADMIN = "superadmin"
    NETWORK_PASTOR = "pastor_rede"
    AREA_LEADER = "lider_area"
    SECTOR_LEADER = "lider_setor"
    GROUP_LEADER = "lider_life"
    MEMBER = "membro_life"


ROLE_RANKS: Dict[Role, int] = {
    Role.SUPERADMIN: 0,
    Role.NETWORK_PASTOR: 1,
    Role.AREA_LEADER: 2,
    Role.SECTOR_LEADER: 3,
    Role.GROUP_LEADER: 4,
    Role.MEMBER: 5,
}

ROLE_LABELS: Dict[Role, str] = {
    Role.SUPERADMIN: "Super Admin",
    Role.NETWORK_PASTOR: "Network Pastor",
    Role.AREA_LEADER: "Area Leader",
    Role.SECTOR_LEADER: "Sector Leader",
    Role.GROUP_LEADER: "Group Leader",
    Role.MEMBER: "Group Member",
}

# Roles a principal may reach when walking down from an identity of the key role.
# SUPERADMIN is absent on purpose: it bypasses traversal entirely.
DESCENDANT_ROLES: Dict[Role, FrozenSet[Role]] = {
    Role.NETWORK_PASTOR: frozenset({
        Role.AREA_LEADER, Role.SECTOR_LEADER, Role.GROUP_LEADER, Role.MEMBER
    }),
    Role.AREA_LEADER: frozenset({Role.SECTOR_LEADER, Role.GROUP_LEADER, Role.MEMBER}),
    Role.SECTOR_LEADER: frozenset({Role.GROUP_LEADER, Role.MEMBER}),
    Role.GROUP_LEADER: frozenset({Role.MEMBER}),
    Role.MEMBER: frozenset(),
}

# Assignable through the leader-creation path
LEADERSHIP_ROLES: List[Role] = [
    Role.NETWORK_PASTOR,
    Role.AREA_LEADER,
    Role.SECTOR_LEADER,
    Role.GROUP_LEADER,
]

# Audience roles for events and notifications (never the top admin)
EVENT_TARGET_ROLES: List[Role] = [
    Role.NETWORK_PASTOR,
    Role.AREA_LEADER,
    Role.SECTOR_LEADER,
    Role.GROUP_LEADER,
    Role.MEMBER,
]

EVENT_TYPE_CREATOR_ROLES: FrozenSet[Role] = frozenset({
    Role.SUPERADMIN,
    Role.NETWORK_PASTOR,
    Role.AREA_LEADER,
    Role.SECTOR_LEADER,
})


def parse_role(value: Any, field: str = "role") -> Role:
    """Parse a stored role value, failing fast on anything unknown."""
    if isinstance(value, Role):
        return value
    if value is None or value == "":
        raise HierarchyValidationError(field, "role is required")
    try:
        return Role(value)
    except ValueError:
        raise HierarchyValidationError(field, f"unknown role {value!r}") from None


def rank(role: Role) -> int:
    """Return the numeric rank of a role (0 = most senior)."""
    return ROLE_RANKS[parse_role(role)]


def outranks(role: Role, other: Role) -> bool:
    """True when ``role`` is strictly more senior than ``other``."""
    return rank(role) < rank(other)


def roles_below(role: Role) -> List[Role]:
    """All roles strictly less senior than ``role``, most senior first."""
    threshold = rank(role)
    return [r for r in Role if ROLE_RANKS[r] > threshold]
