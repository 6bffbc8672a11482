"""
Managers for the decomposer package.

This package contains focused manager classes for the draft hierarchy:
- NodeFinder: Recursive search and traversal helpers
- HierarchyStateManager: Canonical forest, root type, path context, count
- TypeManager: Type rules and type repair after moves
- FlagManager: Promote/demote eligibility flags
- OperationsManager: Add, remove, promote, demote
- HierarchyManager: Facade composing the above
- TextHierarchyParser: "Type: Title" text to nodes
- TextHierarchyCreationManager: Merge parsed text into a HierarchyManager
"""

from decomposer.managers.node_finder import NodeFinder
from decomposer.managers.state_manager import HierarchyStateManager
from decomposer.managers.type_manager import TypeManager
from decomposer.managers.flag_manager import FlagManager
from decomposer.managers.operations_manager import OperationsManager
from decomposer.managers.hierarchy_manager import HierarchyManager
from decomposer.managers.text_parser import TextHierarchyParser
from decomposer.managers.text_creation_manager import TextHierarchyCreationManager
from decomposer.managers.batch_planner import (
    BatchConfig,
    calculate_optimal_batch_config,
    calculate_total_work_items,
    create_batches,
)

__all__ = [
    "NodeFinder",
    "HierarchyStateManager",
    "TypeManager",
    "FlagManager",
    "OperationsManager",
    "HierarchyManager",
    "TextHierarchyParser",
    "TextHierarchyCreationManager",
    "BatchConfig",
    "calculate_optimal_batch_config",
    "calculate_total_work_items",
    "create_batches",
]
