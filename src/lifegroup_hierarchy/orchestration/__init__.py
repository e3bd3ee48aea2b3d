"""
Orchestration package for running one authorization request.

This package provides:
- HierarchyOrchestrator for the closure → visibility → aggregation pipeline
- Structured results that carry validation failures and integrity warnings
"""

from .hierarchical import HierarchyOrchestrator, OrchestrationConfig, OrchestrationResult

__all__ = [
    "HierarchyOrchestrator",
    "OrchestrationConfig",
    "OrchestrationResult"
]
