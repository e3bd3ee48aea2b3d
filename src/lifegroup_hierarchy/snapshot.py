"""
Snapshot files: one consistent dump of the record store for offline runs.

A snapshot is a YAML or JSON document with optional top-level lists:
``identities``, ``groups``, ``events``, ``notifications``,
``weekly_reports``, ``tracks`` and ``attendance``.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml
from pydantic import BaseModel

from lifegroup_hierarchy.models import Attendance, Event, Group, Identity, Notification, ProgressTrack, WeeklyReport
from lifegroup_hierarchy.models.errors import HierarchyValidationError
from lifegroup_hierarchy.models.utils import parse_records


class Snapshot(BaseModel):
    """Validated collections from a snapshot file."""
    identities: List[Identity] = []
    groups: List[Group] = []
    events: List[Event] = []
    notifications: List[Notification] = []
    weekly_reports: List[WeeklyReport] = []
    tracks: List[ProgressTrack] = []
    attendance: List[Attendance] = []

    def find_identity(self, identity_id: str) -> Identity:
        for identity in self.identities:
            if identity.id == identity_id:
                return identity
        raise HierarchyValidationError("principal", f"identity {identity_id!r} not found in snapshot")


_COLLECTIONS = {
    "identities": Identity,
    "groups": Group,
    "events": Event,
    "notifications": Notification,
    "weekly_reports": WeeklyReport,
    "tracks": ProgressTrack,
    "attendance": Attendance,
}


def parse_snapshot(data: Dict[str, Any]) -> Snapshot:
    """Validate a raw snapshot mapping, naming the first bad field."""
    if not isinstance(data, dict):
        raise HierarchyValidationError("snapshot", "top level must be a mapping")
    parsed = {
        key: parse_records(model, data.get(key) or [], key)
        for key, model in _COLLECTIONS.items()
    }
    return Snapshot(**parsed)


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """Load a snapshot from a ``.yaml``/``.yml`` or ``.json`` file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()

    if path.suffix == ".json":
        data = json.loads(content)
    else:
        data = yaml.safe_load(content)

    return parse_snapshot(data or {})
