"""Suite hierarchy: structural tree lookups and open/close reconciliation."""

from scenario_reporter.hierarchy.nodes import SourceIndex, find_path, suite_name
from scenario_reporter.hierarchy.reconciler import HierarchyReconciler, ReconcilerState

__all__ = [
    "HierarchyReconciler",
    "ReconcilerState",
    "SourceIndex",
    "find_path",
    "suite_name",
]
