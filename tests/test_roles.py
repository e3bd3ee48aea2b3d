"""Tests for the role ladder."""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lifegroup_hierarchy.models.errors import HierarchyValidationError
from lifegroup_hierarchy.models.roles import (
    DESCENDANT_ROLES,
    EVENT_TARGET_ROLES,
    LEADERSHIP_ROLES,
    ROLE_RANKS,
    Role,
    outranks,
    parse_role,
    rank,
    roles_below,
)


def test_ranks_are_strictly_ordered():
    """Ranks run 0..5 from the top admin down to members."""
    assert [rank(r) for r in Role] == [0, 1, 2, 3, 4, 5]
    assert ROLE_RANKS[Role.SUPERADMIN] == 0
    assert ROLE_RANKS[Role.MEMBER] == 5


def test_role_values_match_store():
    assert Role("pastor_rede") == Role.NETWORK_PASTOR
    assert Role("lider_life") == Role.GROUP_LEADER
    assert Role("membro_life") == Role.MEMBER


def test_descendant_roles_are_strictly_below():
    """Every permitted descendant is less senior than the role it hangs from."""
    for role, allowed in DESCENDANT_ROLES.items():
        for child in allowed:
            assert rank(child) > rank(role)


def test_descendant_roles_table():
    assert DESCENDANT_ROLES[Role.SECTOR_LEADER] == frozenset({Role.GROUP_LEADER, Role.MEMBER})
    assert DESCENDANT_ROLES[Role.GROUP_LEADER] == frozenset({Role.MEMBER})
    assert DESCENDANT_ROLES[Role.MEMBER] == frozenset()
    assert Role.SUPERADMIN not in DESCENDANT_ROLES


def test_audience_and_leadership_lists():
    assert Role.SUPERADMIN not in EVENT_TARGET_ROLES
    assert Role.SUPERADMIN not in LEADERSHIP_ROLES
    assert Role.MEMBER not in LEADERSHIP_ROLES


def test_outranks():
    assert outranks(Role.SUPERADMIN, Role.NETWORK_PASTOR)
    assert outranks(Role.SECTOR_LEADER, Role.MEMBER)
    assert not outranks(Role.MEMBER, Role.GROUP_LEADER)
    assert not outranks(Role.AREA_LEADER, Role.AREA_LEADER)


def test_roles_below():
    assert roles_below(Role.SECTOR_LEADER) == [Role.GROUP_LEADER, Role.MEMBER]
    assert roles_below(Role.MEMBER) == []


def test_parse_role_accepts_stored_values():
    assert parse_role("lider_setor") == Role.SECTOR_LEADER
    assert parse_role(Role.AREA_LEADER) == Role.AREA_LEADER


@pytest.mark.parametrize("value", [None, "", "pastor", "ADMIN"])
def test_parse_role_rejects_unknown(value):
    """Unknown or missing roles fail fast, naming the field."""
    with pytest.raises(HierarchyValidationError) as exc_info:
        parse_role(value, field="principal.role")
    assert exc_info.value.field == "principal.role"
    assert str(exc_info.value).startswith("principal.role: ")
