"""
Record models for the entities the hierarchy engine reads.

These Pydantic models mirror the record store's tables:
- users (identities)
- groups
- events / event_types
- notifications
- weekly_reports
- member_tracks
- attendance

Persistence itself belongs to the host; the engine only receives
already-fetched collections of these records.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, Field, validator

from .roles import Role


class GroupType(str, Enum):
    """Organizational unit kinds."""
    NETWORK = "rede"
    AREA = "area"
    SECTOR = "setor"
    SMALL_GROUP = "lifegroup"


class MemberStatus(str, Enum):
    ACTIVE = "ativo"
    CONSOLIDATION = "consolidacao"


class NotificationType(str, Enum):
    EVENT = "event"
    MESSAGE = "message"
    SYSTEM = "system"
    BIRTHDAY = "birthday"
    REPORT_PENDING = "report_pending"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    JUSTIFIED = "justified"


class StepState(str, Enum):
    """State of a single discipleship step."""
    DONE = "done"
    IN_PROGRESS = "in_progress"
    NOT_STARTED = "not_started"


# Fixed order of the eleven discipleship steps
TRACK_STEPS: Tuple[str, ...] = (
    "discipulado",
    "equipe_lideranca",
    "is_discipulador",
    "batizado",
    "pizza_com_pastor",
    "estacao_dna",
    "nova_criatura",
    "acompanhamento_inicial",
    "expresso_1",
    "expresso_2",
    "voluntario",
)


def coerce_step_state(value: Any) -> StepState:
    """Map stored step values (``true``/``false``/``"progress"``) onto StepState."""
    if isinstance(value, StepState):
        return value
    if value is True:
        return StepState.DONE
    if value is False or value is None:
        return StepState.NOT_STARTED
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("true", "done"):
            return StepState.DONE
        if normalized in ("progress", "in_progress"):
            return StepState.IN_PROGRESS
        if normalized in ("false", "not_started", ""):
            return StepState.NOT_STARTED
    raise ValueError(f"invalid step state {value!r}")


class Identity(BaseModel):
    """Maps to the users table."""
    id: str
    role: Role
    superior_id: Optional[str] = None  # direct report-to link
    is_active: bool = True
    group_id: Optional[str] = None

    # Profile fields the engine passes through untouched
    name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    birth_date: Optional[date] = None
    member_status: MemberStatus = MemberStatus.ACTIVE
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @validator("id")
    def validate_id(cls, v):
        if not v or not v.strip():
            raise ValueError("id must not be empty")
        return v

    @validator("superior_id", "group_id", pre=True)
    def blank_reference_is_none(cls, v):
        """Empty strings from the store mean "no reference"."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def display_name(self) -> str:
        parts = [p for p in (self.name, self.last_name) if p]
        return " ".join(parts) if parts else self.id


class Group(BaseModel):
    """Maps to the groups table. Visible through its leader."""
    id: str
    name: str
    type: GroupType
    leader_id: str
    description: Optional[str] = None
    meeting_day: Optional[int] = Field(None, ge=0, le=6)  # 0 = Sunday
    meeting_time: Optional[str] = None
    address: Optional[str] = None
    is_active: bool = True

    class Config:
        from_attributes = True


class Event(BaseModel):
    """Maps to the events table."""
    id: str
    title: str
    description: Optional[str] = None
    event_date: date
    event_time: Optional[str] = None
    is_recurring: bool = False
    target_roles: List[Role] = []
    created_by: str

    class Config:
        from_attributes = True


class EventType(BaseModel):
    """Maps to the event_types table."""
    id: str
    name: str
    description: Optional[str] = None
    default_time: Optional[str] = None
    default_day: Optional[int] = Field(None, ge=0, le=6)
    is_recurring: bool = False
    target_roles: List[Role] = []
    created_by: str

    class Config:
        from_attributes = True


class Notification(BaseModel):
    """Maps to the notifications table."""
    id: str
    title: str
    message: str = ""
    target_roles: List[Role] = []
    target_users: List[str] = []
    created_by: Optional[str] = None
    is_read: bool = False
    type: NotificationType = NotificationType.MESSAGE
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_broadcast(self) -> bool:
        """
        No explicit audience means everyone.

        A notification addressed only to users (no roles) is not a broadcast;
        it reaches those users and its creator's hierarchy.
        """
        return not self.target_roles and not self.target_users


class WeeklyReport(BaseModel):
    """Maps to the weekly_reports table; one per (leader, week)."""
    id: str
    leader_id: str
    week_start_date: date  # Monday
    week_end_date: Optional[date] = None  # Sunday
    fixed_members_present: int = Field(0, ge=0)
    guests_present: int = Field(0, ge=0)
    children_present: int = Field(0, ge=0)
    observations: Optional[str] = None
    submitted_at: datetime

    class Config:
        from_attributes = True

    @validator("week_end_date")
    def validate_week_end(cls, v, values):
        start = values.get("week_start_date")
        if v is not None and start is not None and v < start:
            raise ValueError("week_end_date must not precede week_start_date")
        return v

    @property
    def total_present(self) -> int:
        return self.fixed_members_present + self.guests_present + self.children_present


class ProgressTrack(BaseModel):
    """Maps to the member_tracks table; at most one per member."""
    id: Optional[str] = None
    user_id: str
    discipulado_por: Optional[str] = None  # who disciples this member

    discipulado: StepState = StepState.NOT_STARTED
    equipe_lideranca: StepState = StepState.NOT_STARTED
    is_discipulador: StepState = StepState.NOT_STARTED
    batizado: StepState = StepState.NOT_STARTED
    pizza_com_pastor: StepState = StepState.NOT_STARTED
    estacao_dna: StepState = StepState.NOT_STARTED
    nova_criatura: StepState = StepState.NOT_STARTED
    acompanhamento_inicial: StepState = StepState.NOT_STARTED
    expresso_1: StepState = StepState.NOT_STARTED
    expresso_2: StepState = StepState.NOT_STARTED
    voluntario: StepState = StepState.NOT_STARTED

    class Config:
        from_attributes = True

    @validator(*TRACK_STEPS, pre=True)
    def parse_step_state(cls, v):
        return coerce_step_state(v)

    def steps(self) -> List[StepState]:
        """Step states in the fixed TRACK_STEPS order."""
        return [getattr(self, name) for name in TRACK_STEPS]


class Attendance(BaseModel):
    """Maps to the attendance table (check-ins)."""
    id: str
    user_id: str
    event_id: str
    status: AttendanceStatus
    justification: Optional[str] = None
    checked_in_at: Optional[datetime] = None

    class Config:
        from_attributes = True
