"""Tests for role-based capability predicates."""

import sys
from datetime import date
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lifegroup_hierarchy.models import Event, EventType, Group, Identity, Role
from lifegroup_hierarchy.models.permissions import (
    PrincipalScope,
    assignable_roles,
    can_add_members,
    can_assign_role,
    can_create_event,
    can_create_event_type,
    can_create_leaders,
    can_delete,
    can_edit,
    can_manage,
    can_manage_event,
    can_manage_event_type,
    can_manage_group,
    can_target_event_role,
    event_target_roles,
    event_type_target_roles,
)
from lifegroup_hierarchy.models.roles import rank


def ident(identity_id, role, superior=None):
    return Identity(id=identity_id, role=role, superior_id=superior)


class TestCanManage:

    @pytest.mark.parametrize("principal_role", list(Role))
    @pytest.mark.parametrize("target_role", list(Role))
    def test_rank_rule(self, principal_role, target_role):
        """Outside the admin and own-member overrides, manage iff strictly more senior."""
        principal = ident("p", principal_role)
        target = ident("t", target_role)
        expected = principal_role == Role.SUPERADMIN or rank(principal_role) < rank(target_role)
        assert can_manage(principal, target) is expected

    def test_self_is_not_manageable(self):
        leader = ident("s", Role.SECTOR_LEADER)
        assert can_manage(leader, leader) is False

    def test_admin_manages_self(self):
        admin = ident("admin", Role.SUPERADMIN)
        assert can_manage(admin, admin) is True

    def test_group_leader_manages_own_members(self):
        leader = ident("g", Role.GROUP_LEADER)
        assert can_manage(leader, ident("m", Role.MEMBER, "g"))
        assert can_edit(leader, ident("m", Role.MEMBER, "g"))
        assert can_delete(leader, ident("m", Role.MEMBER, "other"))

    def test_member_manages_nobody(self):
        member = ident("m", Role.MEMBER)
        assert not can_manage(member, ident("m2", Role.MEMBER))


class TestRoleAssignment:

    def test_sector_leader_assigns_group_leader_only(self):
        assert assignable_roles(ident("s", Role.SECTOR_LEADER)) == [Role.GROUP_LEADER]

    def test_admin_assigns_all_leadership_roles(self):
        assert assignable_roles(ident("admin", Role.SUPERADMIN)) == [
            Role.NETWORK_PASTOR, Role.AREA_LEADER, Role.SECTOR_LEADER, Role.GROUP_LEADER
        ]

    def test_member_role_not_assignable_through_leader_path(self):
        assert not can_assign_role(ident("admin", Role.SUPERADMIN), Role.MEMBER)
        assert not can_assign_role(ident("p", Role.NETWORK_PASTOR), Role.SUPERADMIN)

    def test_group_leader_assigns_nothing(self):
        assert assignable_roles(ident("g", Role.GROUP_LEADER)) == []


class TestEvents:

    def test_event_targets_own_tier_and_below(self):
        assert event_target_roles(ident("s", Role.SECTOR_LEADER)) == [
            Role.SECTOR_LEADER, Role.GROUP_LEADER, Role.MEMBER
        ]
        assert not can_target_event_role(ident("s", Role.SECTOR_LEADER), Role.AREA_LEADER)
        assert not can_target_event_role(ident("admin", Role.SUPERADMIN), Role.SUPERADMIN)

    def test_event_type_targets(self):
        assert event_type_target_roles(ident("a", Role.AREA_LEADER)) == [
            Role.SECTOR_LEADER, Role.GROUP_LEADER, Role.MEMBER
        ]
        assert Role.NETWORK_PASTOR in event_type_target_roles(ident("admin", Role.SUPERADMIN))

    def test_event_type_creation(self):
        assert can_create_event_type(ident("s", Role.SECTOR_LEADER))
        assert not can_create_event_type(ident("g", Role.GROUP_LEADER))

    def test_event_creation(self):
        assert can_create_event(ident("g", Role.GROUP_LEADER))
        assert not can_create_event(ident("m", Role.MEMBER))

    def test_manage_own_event(self):
        event = Event(id="e1", title="Culto", event_date=date(2024, 6, 9), created_by="s")
        assert can_manage_event(ident("s", Role.SECTOR_LEADER), event)
        assert not can_manage_event(ident("a", Role.AREA_LEADER), event)
        assert can_manage_event(ident("admin", Role.SUPERADMIN), event)

    def test_manage_own_event_type(self):
        event_type = EventType(id="t1", name="Culto", created_by="a")
        assert can_manage_event_type(ident("a", Role.AREA_LEADER), event_type)
        assert not can_manage_event_type(ident("s", Role.SECTOR_LEADER), event_type)


class TestLeaderAndMemberCreation:

    def test_leader_creation(self):
        assert can_create_leaders(ident("s", Role.SECTOR_LEADER))
        assert not can_create_leaders(ident("g", Role.GROUP_LEADER))

    def test_member_registration(self):
        assert can_add_members(ident("g", Role.GROUP_LEADER))
        assert not can_add_members(ident("s", Role.SECTOR_LEADER))


class TestGroups:

    def test_group_management(self):
        group = Group(id="lg1", name="Life", type="lifegroup", leader_id="g")
        leader = ident("g", Role.GROUP_LEADER, "s")

        assert can_manage_group(leader, group)
        assert can_manage_group(ident("s", Role.SECTOR_LEADER), group, leader)
        assert not can_manage_group(ident("s", Role.SECTOR_LEADER), group)
        assert not can_manage_group(ident("m", Role.MEMBER), group, leader)
        assert can_manage_group(ident("admin", Role.SUPERADMIN), group)


def test_principal_scope():
    scope = PrincipalScope.for_principal(ident("s", Role.SECTOR_LEADER))
    assert scope.sees_everyone is False
    assert scope.can_create_leaders is True
    assert scope.can_add_members is False
    assert scope.assignable_roles == [Role.GROUP_LEADER]

    admin_scope = PrincipalScope.for_principal(ident("admin", Role.SUPERADMIN))
    assert admin_scope.sees_everyone is True
