"""Tests for record models and input parsing."""

import sys
from datetime import date, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lifegroup_hierarchy.models import (
    Identity,
    Notification,
    ProgressTrack,
    Role,
    StepState,
    TRACK_STEPS,
    WeeklyReport,
)
from lifegroup_hierarchy.models.database import coerce_step_state
from lifegroup_hierarchy.models.errors import HierarchyValidationError
from lifegroup_hierarchy.models.results import DataIntegrityWarning, IntegrityIssue, ClosureResult, merge_warnings
from lifegroup_hierarchy.models.utils import parse_identity, parse_record, parse_records


class TestIdentity:
    """Identity record validation."""

    def test_minimal_identity(self):
        identity = Identity(id="u1", role="lider_life")
        assert identity.role == Role.GROUP_LEADER
        assert identity.is_active is True
        assert identity.superior_id is None

    def test_blank_superior_is_none(self):
        identity = Identity(id="u1", role="membro_life", superior_id="  ", group_id="")
        assert identity.superior_id is None
        assert identity.group_id is None

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            Identity(id=" ", role="membro_life")

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            Identity(id="u1", role="bispo")

    def test_display_name(self):
        assert Identity(id="u1", role="membro_life", name="Ana", last_name="Silva").display_name == "Ana Silva"
        assert Identity(id="u1", role="membro_life").display_name == "u1"


class TestProgressTrack:
    """Tri-state step parsing."""

    @pytest.mark.parametrize("value,expected", [
        (True, StepState.DONE),
        (False, StepState.NOT_STARTED),
        (None, StepState.NOT_STARTED),
        ("progress", StepState.IN_PROGRESS),
        ("done", StepState.DONE),
        ("in_progress", StepState.IN_PROGRESS),
        ("", StepState.NOT_STARTED),
    ])
    def test_coerce_step_state(self, value, expected):
        assert coerce_step_state(value) == expected

    def test_invalid_step_value(self):
        with pytest.raises(ValueError):
            coerce_step_state("maybe")

    def test_track_from_store_row(self):
        track = ProgressTrack(user_id="m1", discipulado=True, is_discipulador="progress", batizado=False)
        steps = track.steps()
        assert len(steps) == len(TRACK_STEPS) == 11
        assert steps[0] == StepState.DONE
        assert steps[2] == StepState.IN_PROGRESS
        assert steps.count(StepState.NOT_STARTED) == 9


class TestWeeklyReport:

    def test_total_present(self):
        report = WeeklyReport(
            id="r1", leader_id="g1", week_start_date=date(2024, 6, 3),
            fixed_members_present=8, guests_present=2, children_present=3,
            submitted_at=datetime(2024, 6, 5, 20, 0),
        )
        assert report.total_present == 13

    def test_week_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            WeeklyReport(
                id="r1", leader_id="g1",
                week_start_date=date(2024, 6, 3), week_end_date=date(2024, 6, 2),
                submitted_at=datetime(2024, 6, 5, 20, 0),
            )

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            WeeklyReport(
                id="r1", leader_id="g1", week_start_date=date(2024, 6, 3),
                guests_present=-1, submitted_at=datetime(2024, 6, 5, 20, 0),
            )


def test_notification_broadcast():
    assert Notification(id="n1", title="Hi").is_broadcast
    assert not Notification(id="n1", title="Hi", target_roles=["lider_life"]).is_broadcast
    assert not Notification(id="n1", title="Hi", target_users=["u1"]).is_broadcast


class TestParsing:
    """Host data -> validated records."""

    def test_parse_identity_from_mapping(self):
        identity = parse_identity({"id": "u1", "role": "lider_area"})
        assert identity.role == Role.AREA_LEADER

    def test_parse_identity_from_object(self):
        row = SimpleNamespace(id="u1", role="lider_area", superior_id=None, is_active=False)
        identity = parse_identity(row)
        assert identity.is_active is False

    def test_parse_identity_names_field(self):
        with pytest.raises(HierarchyValidationError) as exc_info:
            parse_identity({"id": "u1", "role": "bogus"})
        assert exc_info.value.field == "principal.role"

    def test_parse_identity_missing(self):
        with pytest.raises(HierarchyValidationError) as exc_info:
            parse_identity(None)
        assert exc_info.value.field == "principal"

    def test_parse_records_includes_index(self):
        rows = [{"id": "u1", "role": "membro_life"}, {"id": "u2"}]
        with pytest.raises(HierarchyValidationError) as exc_info:
            parse_records(Identity, rows, "identities")
        assert exc_info.value.field == "identities[1].role"

    def test_parse_record_passes_models_through(self):
        identity = Identity(id="u1", role="membro_life")
        assert parse_record(Identity, identity) is identity


class TestResults:

    def test_closure_result_membership(self):
        result = ClosureResult(principal_id="p", identity_ids=frozenset({"b", "a"}))
        assert "a" in result
        assert "p" not in result
        assert result.size == 2
        assert result.sorted_ids() == ["a", "b"]
        assert result.including_principal() == frozenset({"a", "b", "p"})
        assert not result.has_warnings

    def test_merge_warnings_drops_duplicates(self):
        w1 = DataIntegrityWarning(issue=IntegrityIssue.CYCLE, identity_id="a", message="loop")
        w2 = DataIntegrityWarning(issue=IntegrityIssue.SELF_REFERENCE, identity_id="b", message="self")
        merged = merge_warnings([w1, w2], [w1.model_copy()])
        assert merged == [w1, w2]
