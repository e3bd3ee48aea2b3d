"""
Closure resolver: which identities a principal may see.

Starting at the principal, walk the org graph downward. A subordinate is
reached only when its role is in the permitted-descendant list of the
identity it reports to, and (in the default mode) only while it is active.
The top admin bypasses traversal and sees everyone.

Every call recomputes the closure from the supplied snapshot; nothing is
cached between requests.
"""

import logging
from collections import deque
from enum import Enum
from typing import Deque, Iterable, List, Set, Tuple, Union

from lifegroup_hierarchy.models.database import Identity
from lifegroup_hierarchy.models.results import ClosureResult, DataIntegrityWarning, IntegrityIssue, merge_warnings
from lifegroup_hierarchy.models.roles import DESCENDANT_ROLES, Role, parse_role

from .graph import OrgGraph


logger = logging.getLogger(__name__)


class ClosureMode(str, Enum):
    """Traversal variants."""
    ACTIVE = "active"
    # Check-in history: inactive identities stay in the closure and their
    # subordinates are still reached, so past attendance remains visible.
    HISTORICAL = "historical"


def _as_graph(identities: Union[OrgGraph, Iterable[Identity]]) -> OrgGraph:
    if isinstance(identities, OrgGraph):
        return identities
    return OrgGraph.build(identities)


class ClosureResolver:
    """Resolves closures against one org graph."""

    def __init__(self, graph: OrgGraph, mode: ClosureMode = ClosureMode.ACTIVE):
        self.graph = graph
        self.mode = mode

    def _admits(self, identity: Identity) -> bool:
        return identity.is_active or self.mode == ClosureMode.HISTORICAL

    def resolve(self, principal: Identity) -> ClosureResult:
        """Closure of a single principal. The principal itself is never included."""
        role = parse_role(principal.role, field="principal.role")

        if role == Role.SUPERADMIN:
            ids = {
                identity.id
                for identity in self.graph.identities
                if identity.id != principal.id and self._admits(identity)
            }
            return ClosureResult(
                principal_id=principal.id,
                identity_ids=frozenset(ids),
                warnings=list(self.graph.warnings),
            )

        reached, walk_warnings = self._walk([(principal.id, role)], {principal.id})
        return ClosureResult(
            principal_id=principal.id,
            identity_ids=frozenset(reached),
            warnings=merge_warnings(self.graph.warnings, walk_warnings),
        )

    def resolve_many(self, principal: Identity, extra_roots: Iterable[Identity]) -> ClosureResult:
        """
        Union closure over the principal and additional seed identities.

        Seeds are walked with a shared visited set, so an identity reachable
        from more than one seed is counted once. Seeds themselves are part
        of the result, the principal is not.
        """
        base = self.resolve(principal)
        if parse_role(principal.role, field="principal.role") == Role.SUPERADMIN:
            return base

        seeds: List[Tuple[str, Role]] = []
        visited: Set[str] = set(base.identity_ids) | {principal.id}
        reached: Set[str] = set(base.identity_ids)
        for root in extra_roots:
            if root.id in visited:
                continue
            visited.add(root.id)
            reached.add(root.id)
            seeds.append((root.id, parse_role(root.role)))

        more, walk_warnings = self._walk(seeds, visited)
        return ClosureResult(
            principal_id=principal.id,
            identity_ids=frozenset(reached | more),
            warnings=merge_warnings(base.warnings, walk_warnings),
        )

    def _walk(self, seeds: List[Tuple[str, Role]], visited: Set[str]) -> Tuple[Set[str], List[DataIntegrityWarning]]:
        """Breadth-first descent from ``seeds``; ``visited`` is updated in place."""
        reached: Set[str] = set()
        warnings: List[DataIntegrityWarning] = []
        frontier: Deque[Tuple[str, Role]] = deque(seeds)

        while frontier:
            current_id, current_role = frontier.popleft()
            allowed = DESCENDANT_ROLES.get(current_role, frozenset())
            if not allowed:
                continue

            for child in self.graph.direct_subordinates(current_id):
                if child.role not in allowed or not self._admits(child):
                    continue
                if child.id in visited:
                    warning = DataIntegrityWarning(
                        issue=IntegrityIssue.CYCLE,
                        identity_id=child.id,
                        related_ids=[current_id],
                        message=f"Identity {child.id} reached again from {current_id}; traversal stopped there",
                    )
                    warning.log(logger)
                    warnings.append(warning)
                    continue
                visited.add(child.id)
                reached.add(child.id)
                frontier.append((child.id, child.role))

        return reached, warnings


def resolve_closure(
    principal: Identity,
    identities: Union[OrgGraph, Iterable[Identity]],
    mode: ClosureMode = ClosureMode.ACTIVE,
) -> ClosureResult:
    """
    Compute the set of identity ids visible to ``principal``.

    Args:
        principal: The identity the decision is made for. Its role is
            trusted as given; it need not be present in ``identities``.
        identities: The flat, unfiltered identity list (or a prebuilt graph).
        mode: ACTIVE for every screen except check-in history.

    Returns:
        ClosureResult with the visible ids and any integrity warnings.
    """
    return ClosureResolver(_as_graph(identities), mode).resolve(principal)
