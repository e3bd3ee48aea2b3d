"""
Result schemas shared by the hierarchy engine components.

Data-integrity problems never raise: they travel alongside the result
as DataIntegrityWarning entries so the host can log or alert.
"""

import logging
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional

from pydantic import BaseModel


class IntegrityIssue(str, Enum):
    """Kinds of corrupted hierarchy data the engine tolerates."""
    CYCLE = "cycle"
    DANGLING_SUPERIOR = "dangling_superior"
    RANK_INVERSION = "rank_inversion"
    SELF_REFERENCE = "self_reference"
    DUPLICATE_ID = "duplicate_id"
    DUPLICATE_TRACK = "duplicate_track"
    DUPLICATE_REPORT = "duplicate_report"


class DataIntegrityWarning(BaseModel):
    """A non-fatal problem found in the supplied snapshot."""
    issue: IntegrityIssue
    identity_id: Optional[str] = None
    related_ids: List[str] = []
    message: str

    def log(self, logger: logging.Logger) -> None:
        logger.warning(f"Data integrity: {self.message}", extra={
            "issue": self.issue.value,
            "identity_id": self.identity_id,
        })


class ClosureResult(BaseModel):
    """Identities visible to a principal, plus any warnings found on the way."""
    principal_id: str
    identity_ids: FrozenSet[str] = frozenset()
    warnings: List[DataIntegrityWarning] = []

    def __contains__(self, identity_id: object) -> bool:
        return identity_id in self.identity_ids

    @property
    def size(self) -> int:
        return len(self.identity_ids)

    def sorted_ids(self) -> List[str]:
        return sorted(self.identity_ids)

    def including_principal(self) -> FrozenSet[str]:
        """The closure together with the principal's own id."""
        return self.identity_ids | {self.principal_id}

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


def merge_warnings(*groups: Iterable[DataIntegrityWarning]) -> List[DataIntegrityWarning]:
    """Concatenate warning lists, dropping exact duplicates but keeping order."""
    merged: List[DataIntegrityWarning] = []
    for group in groups:
        for warning in group:
            if warning not in merged:
                merged.append(warning)
    return merged
