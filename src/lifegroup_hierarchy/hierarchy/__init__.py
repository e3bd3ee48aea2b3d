"""
Hierarchy package: org graph, closure resolution and visibility filtering.

This package provides:
- OrgGraph for materializing the identity forest
- ClosureResolver / resolve_closure for the visible-identity set
- VisibilityFilter / filter_visible for entity collections
"""

from .graph import OrgGraph, OrgNode
from .closure import ClosureMode, ClosureResolver, resolve_closure
from .visibility import EntityKind, VisibilityFilter, filter_visible

__all__ = [
    "OrgGraph",
    "OrgNode",
    "ClosureMode",
    "ClosureResolver",
    "resolve_closure",
    "EntityKind",
    "VisibilityFilter",
    "filter_visible",
]
