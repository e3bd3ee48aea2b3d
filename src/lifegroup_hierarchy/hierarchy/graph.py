"""
Org graph builder.

Materializes a forest from the flat identity list using each identity's
``superior_id`` back-reference. Corrupted links (dangling superiors, self
references, rank inversions, cycles) are reported as warnings and never
raise.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from lifegroup_hierarchy.models.database import Identity
from lifegroup_hierarchy.models.results import DataIntegrityWarning, IntegrityIssue
from lifegroup_hierarchy.models.roles import rank


logger = logging.getLogger(__name__)


@dataclass
class OrgNode:
    """One identity in a nested hierarchy view."""
    identity: Identity
    depth: int = 0
    children: List["OrgNode"] = field(default_factory=list)

    @property
    def direct_reports(self) -> int:
        return len(self.children)

    @property
    def total_descendants(self) -> int:
        return sum(1 + child.total_descendants for child in self.children)

    def walk(self) -> Iterable["OrgNode"]:
        """Pre-order traversal of this node and everything beneath it."""
        yield self
        for child in self.children:
            yield from child.walk()


class OrgGraph:
    """Indexed identity forest with superior -> subordinate adjacency."""

    def __init__(
        self,
        identities: Dict[str, Identity],
        children: Dict[str, List[str]],
        roots: List[str],
        warnings: List[DataIntegrityWarning],
    ):
        self._identities = identities
        self._children = children
        self.roots = roots
        self.warnings = warnings

    @classmethod
    def build(cls, identities: Iterable[Identity]) -> "OrgGraph":
        """Index identities and link every one of them to its superior."""
        index: Dict[str, Identity] = {}
        warnings: List[DataIntegrityWarning] = []

        for identity in identities:
            if identity.id in index:
                warnings.append(DataIntegrityWarning(
                    issue=IntegrityIssue.DUPLICATE_ID,
                    identity_id=identity.id,
                    message=f"Identity {identity.id} appears more than once; keeping the first record",
                ))
                continue
            index[identity.id] = identity

        children: Dict[str, List[str]] = defaultdict(list)
        roots: List[str] = []

        for identity in index.values():
            superior_id = identity.superior_id
            if superior_id is None:
                roots.append(identity.id)
                continue

            if superior_id == identity.id:
                warnings.append(DataIntegrityWarning(
                    issue=IntegrityIssue.SELF_REFERENCE,
                    identity_id=identity.id,
                    message=f"Identity {identity.id} reports to itself; treated as having no superior",
                ))
                roots.append(identity.id)
                continue

            superior = index.get(superior_id)
            if superior is None:
                warnings.append(DataIntegrityWarning(
                    issue=IntegrityIssue.DANGLING_SUPERIOR,
                    identity_id=identity.id,
                    related_ids=[superior_id],
                    message=f"Identity {identity.id} reports to unknown identity {superior_id}; treated as having no superior",
                ))
                roots.append(identity.id)
                # Still reachable by a forward scan from a principal carrying that id
                children[superior_id].append(identity.id)
                continue

            if rank(superior.role) >= rank(identity.role):
                warnings.append(DataIntegrityWarning(
                    issue=IntegrityIssue.RANK_INVERSION,
                    identity_id=identity.id,
                    related_ids=[superior_id],
                    message=(
                        f"Identity {identity.id} ({identity.role.value}) reports to "
                        f"{superior_id} ({superior.role.value}), who is not more senior"
                    ),
                ))

            children[superior_id].append(identity.id)

        graph = cls(index, dict(children), roots, warnings)
        graph.warnings.extend(graph._find_cycles())

        for warning in graph.warnings:
            warning.log(logger)

        return graph

    def _find_cycles(self) -> List[DataIntegrityWarning]:
        """Report every superior chain that loops back on itself, once per loop."""
        warnings: List[DataIntegrityWarning] = []
        settled: Set[str] = set()

        for start in self._identities:
            if start in settled:
                continue

            path: List[str] = []
            on_path: Set[str] = set()
            current: Optional[str] = start
            while current is not None and current not in settled and current not in on_path:
                path.append(current)
                on_path.add(current)
                current = self._superior_in_graph(current)

            if current is not None and current in on_path:
                loop = path[path.index(current):]
                warnings.append(DataIntegrityWarning(
                    issue=IntegrityIssue.CYCLE,
                    identity_id=current,
                    related_ids=sorted(loop),
                    message=f"Superior chain loops through {' -> '.join(loop + [current])}",
                ))

            settled.update(path)

        return warnings

    def _superior_in_graph(self, identity_id: str) -> Optional[str]:
        identity = self._identities[identity_id]
        superior_id = identity.superior_id
        if superior_id is None or superior_id == identity_id or superior_id not in self._identities:
            return None
        return superior_id

    def __contains__(self, identity_id: object) -> bool:
        return identity_id in self._identities

    def __len__(self) -> int:
        return len(self._identities)

    @property
    def identities(self) -> List[Identity]:
        return list(self._identities.values())

    def get(self, identity_id: Optional[str]) -> Optional[Identity]:
        if identity_id is None:
            return None
        return self._identities.get(identity_id)

    def direct_subordinates(self, identity_id: str, active_only: bool = False) -> List[Identity]:
        subordinates = [self._identities[i] for i in self._children.get(identity_id, [])]
        if active_only:
            subordinates = [s for s in subordinates if s.is_active]
        return subordinates

    def ancestors(self, identity: Union[str, Identity]) -> Tuple[List[str], List[DataIntegrityWarning]]:
        """
        Walk upward from ``identity`` collecting superior ids, nearest first.

        An Identity object is trusted as given, so a principal missing from
        the snapshot still resolves through its own ``superior_id``.

        A dangling link counts as "no superior" and ends the walk, as does
        the first revisited id.
        """
        if isinstance(identity, Identity):
            identity_id = identity.id
            current: Optional[Identity] = identity
        else:
            identity_id = identity
            current = self._identities.get(identity)

        chain: List[str] = []
        warnings: List[DataIntegrityWarning] = []
        visited: Set[str] = {identity_id}

        while current is not None and current.superior_id:
            superior_id = current.superior_id
            if superior_id in visited:
                warnings.append(DataIntegrityWarning(
                    issue=IntegrityIssue.CYCLE,
                    identity_id=identity_id,
                    related_ids=[superior_id],
                    message=f"Superior chain of {identity_id} revisits {superior_id}; stopping",
                ))
                break
            if superior_id not in self._identities:
                break
            chain.append(superior_id)
            visited.add(superior_id)
            current = self._identities.get(superior_id)

        return chain, warnings

    def subtree(self, identity_id: str, active_only: bool = True) -> Optional[OrgNode]:
        """Nested hierarchy view rooted at ``identity_id`` (cycle-guarded)."""
        root = self._identities.get(identity_id)
        if root is None:
            return None

        visited: Set[str] = {identity_id}

        def _build(identity: Identity, depth: int) -> OrgNode:
            node = OrgNode(identity=identity, depth=depth)
            for child in self.direct_subordinates(identity.id, active_only=active_only):
                if child.id in visited:
                    continue
                visited.add(child.id)
                node.children.append(_build(child, depth + 1))
            return node

        return _build(root, 0)
