"""
Discipleship progress aggregation.

Each of the eleven steps scores 1 when done, 0.5 when in progress and 0
when not started; ``percent = round(100 * sum / 11)``. Half credit for
in-progress steps is deliberate, and "completed" means percent == 100,
which only happens when every step is done.

Arithmetic runs on integer half-steps with round-half-up, so results match
the badges users already see to the unit.
"""

import logging
from collections import Counter
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel

from lifegroup_hierarchy.models.database import TRACK_STEPS, Identity, ProgressTrack, StepState
from lifegroup_hierarchy.models.results import DataIntegrityWarning, IntegrityIssue


logger = logging.getLogger(__name__)

TOTAL_STEPS = len(TRACK_STEPS)

_HALF_STEPS = {
    StepState.DONE: 2,
    StepState.IN_PROGRESS: 1,
    StepState.NOT_STARTED: 0,
}


class ProgressBucket(str, Enum):
    """Progress filter buckets."""
    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    NOT_STARTED = "not_started"


class TrackProgress(BaseModel):
    """Completion metrics for one member."""
    user_id: Optional[str] = None
    percent: int = 0
    completed_count: int = 0
    in_progress_count: int = 0
    total_steps: int = TOTAL_STEPS

    @property
    def not_started_count(self) -> int:
        return self.total_steps - self.completed_count - self.in_progress_count

    @property
    def is_completed(self) -> bool:
        return self.percent == 100

    @property
    def bucket(self) -> ProgressBucket:
        if self.percent == 100:
            return ProgressBucket.COMPLETED
        if self.percent > 0:
            return ProgressBucket.IN_PROGRESS
        return ProgressBucket.NOT_STARTED


class CohortStats(BaseModel):
    """Roll-up over a set of members; every figure is surfaced separately."""
    total_members: int = 0
    completed_count: int = 0
    in_progress_count: int = 0
    not_started_count: int = 0
    average_percent: int = 0
    total_in_progress_steps: int = 0


class MemberProgress(BaseModel):
    """A member joined with their track (if any) and its metrics."""
    member: Identity
    track: Optional[ProgressTrack] = None
    progress: TrackProgress


def _round_ratio(numerator: int, denominator: int) -> int:
    """Round numerator/denominator half up, for non-negative integers."""
    return (2 * numerator + denominator) // (2 * denominator)


def compute_progress(track: Optional[ProgressTrack]) -> TrackProgress:
    """Metrics for one track; a missing track counts as all steps not started."""
    if track is None:
        return TrackProgress()

    states = track.steps()
    half_steps = sum(_HALF_STEPS[state] for state in states)
    return TrackProgress(
        user_id=track.user_id,
        percent=_round_ratio(100 * half_steps, 2 * TOTAL_STEPS),
        completed_count=sum(1 for state in states if state == StepState.DONE),
        in_progress_count=sum(1 for state in states if state == StepState.IN_PROGRESS),
    )


def compute_cohort_stats(tracks: Iterable[Optional[ProgressTrack]]) -> CohortStats:
    """Aggregate a cohort. ``None`` entries are members without a track."""
    results = [compute_progress(track) for track in tracks]
    return cohort_stats_from_progress(results)


def cohort_stats_from_progress(results: List[TrackProgress]) -> CohortStats:
    if not results:
        return CohortStats()

    return CohortStats(
        total_members=len(results),
        completed_count=sum(1 for r in results if r.percent == 100),
        in_progress_count=sum(1 for r in results if 0 < r.percent < 100),
        not_started_count=sum(1 for r in results if r.percent == 0),
        average_percent=_round_ratio(sum(r.percent for r in results), len(results)),
        total_in_progress_steps=sum(r.in_progress_count for r in results),
    )


def index_tracks(tracks: Iterable[ProgressTrack]) -> Tuple[Dict[str, ProgressTrack], List[DataIntegrityWarning]]:
    """Map user id -> track, keeping the first track when a member has several."""
    index: Dict[str, ProgressTrack] = {}
    warnings: List[DataIntegrityWarning] = []
    for track in tracks:
        if track.user_id in index:
            warning = DataIntegrityWarning(
                issue=IntegrityIssue.DUPLICATE_TRACK,
                identity_id=track.user_id,
                message=f"Member {track.user_id} has more than one progress track; using the first",
            )
            warning.log(logger)
            warnings.append(warning)
            continue
        index[track.user_id] = track
    return index, warnings


def member_progress(
    members: Iterable[Identity],
    tracks: Iterable[ProgressTrack],
) -> Tuple[List[MemberProgress], List[DataIntegrityWarning]]:
    """Join members with their tracks, preserving member order."""
    by_user, warnings = index_tracks(tracks)
    rows = []
    for member in members:
        track = by_user.get(member.id)
        progress = compute_progress(track)
        progress.user_id = member.id
        rows.append(MemberProgress(member=member, track=track, progress=progress))
    return rows, warnings


def filter_by_progress(rows: Iterable[MemberProgress], bucket: ProgressBucket) -> List[MemberProgress]:
    return [row for row in rows if row.progress.bucket == bucket]


def step_breakdown(tracks: Iterable[Optional[ProgressTrack]]) -> Dict[str, Dict[StepState, int]]:
    """Per-step counts of each state across a cohort."""
    counters: Dict[str, Counter] = {step: Counter() for step in TRACK_STEPS}
    for track in tracks:
        for step in TRACK_STEPS:
            state = getattr(track, step) if track is not None else StepState.NOT_STARTED
            counters[step][state] += 1
    return {
        step: {state: counter.get(state, 0) for state in StepState}
        for step, counter in counters.items()
    }
