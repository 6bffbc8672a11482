"""
HierarchyManager facade for the draft work item hierarchy.

Composes the state, type, flag and operations managers into the single API
consumed by callers. Everything returned is a copy; mutation only happens
through the operations below.
"""

from typing import Any, List, Mapping, Optional, Sequence, Union

from decomposer.managers.flag_manager import FlagManager
from decomposer.managers.operations_manager import OperationsManager
from decomposer.managers.state_manager import (
    ErrorHandler,
    HierarchyStateManager,
    NodeInput,
)
from decomposer.managers.type_manager import TypeManager, TypeMap
from decomposer.models.config import PathContext, WorkItemConfigurations
from decomposer.models.node import WorkItemNode

ConfigurationsInput = Union[WorkItemConfigurations, Mapping[str, Any]]


class HierarchyManager:
    """
    Main facade for work item hierarchy management.

    Usage:
        manager = HierarchyManager(
            {"Epic": ["Feature"], "Feature": ["User Story"], "User Story": ["Task"]},
            parent_work_item_type="Epic",
        )
        forest = manager.add_item("Feature")
        forest = manager.add_item("User Story", parent_id=forest[0].id)
    """

    def __init__(
        self,
        configurations: ConfigurationsInput,
        initial_hierarchy: Optional[Sequence[NodeInput]] = None,
        parent_work_item_type: Optional[str] = None,
        error_handler: Optional[ErrorHandler] = None,
        path_context: Optional[PathContext] = None,
        fallback_child_type: Optional[str] = None,
    ) -> None:
        """
        Initialize HierarchyManager.

        Args:
            configurations: Type configuration, as WorkItemConfigurations or a
                plain mapping accepted by WorkItemConfigurations.from_mapping().
            initial_hierarchy: Optional starting forest.
            parent_work_item_type: Type of the work item being decomposed.
            error_handler: Callback receiving recoverable error messages.
            path_context: Area/iteration path inherited by new nodes.
            fallback_child_type: Type offered where no rule exists.
        """
        if not isinstance(configurations, WorkItemConfigurations):
            configurations = WorkItemConfigurations.from_mapping(configurations)

        self.configurations = configurations
        self.state_manager = HierarchyStateManager(
            initial_hierarchy,
            parent_work_item_type,
            error_handler,
            path_context,
        )
        self.type_manager = TypeManager(configurations, self.state_manager, fallback_child_type)
        self.flag_manager = FlagManager(self.state_manager, self.type_manager)
        self.operations_manager = OperationsManager(
            self.state_manager,
            self.type_manager,
            self.flag_manager,
        )

        self.flag_manager.update_all_promote_demote_flags()

    # =========================================================================
    # State
    # =========================================================================

    def get_parent_work_item_type(self) -> Optional[str]:
        return self.state_manager.get_parent_work_item_type()

    def set_parent_work_item_type(self, work_item_type: Optional[str]) -> None:
        self.state_manager.set_parent_work_item_type(work_item_type)
        self.flag_manager.update_all_promote_demote_flags()

    def get_path_context(self) -> PathContext:
        return self.state_manager.get_path_context()

    def set_path_context(self, path_context: Optional[PathContext]) -> None:
        self.state_manager.set_path_context(path_context)

    def get_hierarchy(self) -> List[WorkItemNode]:
        return self.state_manager.get_hierarchy()

    def get_hierarchy_count(self) -> int:
        return self.state_manager.get_hierarchy_count()

    def set_initial_hierarchy(
        self,
        nodes: Sequence[NodeInput],
        parent_work_item_type: Optional[str] = None,
    ) -> None:
        self.state_manager.set_initial_hierarchy(nodes, parent_work_item_type)
        self.flag_manager.update_all_promote_demote_flags()

    def clear_hierarchy(self) -> None:
        self.state_manager.clear_hierarchy()
        self.flag_manager.update_all_promote_demote_flags()

    def find_node_by_id(self, node_id: str) -> Optional[WorkItemNode]:
        """Find a node by id. Returns a copy, or None."""
        node = self.state_manager.find_node_by_id(node_id)
        return node.model_copy(deep=True) if node is not None else None

    # =========================================================================
    # Types
    # =========================================================================

    def get_possible_child_types(self, parent_id: Optional[str] = None) -> List[str]:
        return self.type_manager.get_possible_child_types(parent_id)

    def get_possible_promote_types(self, item_id: str) -> List[str]:
        return self.type_manager.get_possible_promote_types(item_id)

    def get_possible_demote_types(self, item_id: str, is_cascading: bool = False) -> List[str]:
        return self.type_manager.get_possible_demote_types(item_id, is_cascading)

    def can_type_be_child_of_type(self, child_type: str, parent_type: str) -> bool:
        return self.type_manager.can_type_be_child_of_type(child_type, parent_type)

    def get_allowed_child_types(self, parent_type: str) -> List[str]:
        return self.type_manager.get_allowed_child_types(parent_type)

    def update_configurations(self, configurations: ConfigurationsInput) -> None:
        """Swap the type configuration and recompute flags."""
        if not isinstance(configurations, WorkItemConfigurations):
            configurations = WorkItemConfigurations.from_mapping(configurations)
        self.configurations = configurations
        self.type_manager.update_configurations(configurations)
        self.flag_manager.update_all_promote_demote_flags()

    # =========================================================================
    # Operations
    # =========================================================================

    def create_work_item(
        self,
        work_item_type: str,
        parent_id: Optional[str] = None,
        title: Optional[str] = None,
    ) -> WorkItemNode:
        return self.operations_manager.create_work_item(work_item_type, parent_id, title)

    def add_item(
        self,
        work_item_type: str,
        parent_id: Optional[str] = None,
        title: Optional[str] = None,
    ) -> List[WorkItemNode]:
        return self.operations_manager.add_item(work_item_type, parent_id, title)

    def add_item_after(self, new_item: WorkItemNode, after_node_id: str) -> List[WorkItemNode]:
        return self.operations_manager.add_item_after(new_item, after_node_id)

    def update_item_title(self, item_id: str, new_title: str) -> List[WorkItemNode]:
        return self.state_manager.update_item_title(item_id, new_title)

    def remove_item(self, item_id: str) -> List[WorkItemNode]:
        return self.operations_manager.remove_item(item_id)

    def promote_item(self, item_id: str, type_map: Optional[TypeMap] = None) -> List[WorkItemNode]:
        return self.operations_manager.promote_item(item_id, type_map)

    def demote_item(self, item_id: str, type_map: Optional[TypeMap] = None) -> List[WorkItemNode]:
        return self.operations_manager.demote_item(item_id, type_map)
