"""
FlagManager recomputing promote/demote eligibility.
"""

from typing import List, Optional

from decomposer.managers.node_finder import NodeFinder
from decomposer.managers.state_manager import HierarchyStateManager
from decomposer.managers.type_manager import TypeManager
from decomposer.models.node import WorkItemNode


class FlagManager:
    """
    Recomputes can_promote / can_demote for every node after a structural change.

    Rules:
    - can_promote: the node has a parent
    - can_demote: the node has a preceding sibling that is not one of its
      descendants and that allows at least one child type
    """

    def __init__(self, state_manager: HierarchyStateManager, type_manager: TypeManager) -> None:
        self.state_manager = state_manager
        self.type_manager = type_manager

    def _can_demote(self, node: WorkItemNode, index: int, siblings: List[WorkItemNode]) -> bool:
        if index <= 0:
            return False
        preceding = siblings[index - 1]
        if NodeFinder.is_descendant(node, preceding.id):
            return False
        return len(self.type_manager.get_possible_child_types(preceding.id)) > 0

    def update_node_flags_recursive(
        self,
        node: WorkItemNode,
        parent_node: Optional[WorkItemNode],
        index: int,
        siblings: List[WorkItemNode],
    ) -> None:
        """Update flags for a node and its whole subtree.

        Args:
            node: Node to update.
            parent_node: Its parent, or None for roots.
            index: Position of node within siblings.
            siblings: The list holding node (parent's children or the roots).
        """
        node.can_promote = parent_node is not None
        node.can_demote = self._can_demote(node, index, siblings)

        for child_index, child in enumerate(node.children):
            self.update_node_flags_recursive(child, node, child_index, node.children)

    def update_all_promote_demote_flags(self) -> None:
        """Update flags for every node in the forest."""
        roots = self.state_manager.get_hierarchy_ref()
        for index, root in enumerate(roots):
            self.update_node_flags_recursive(root, None, index, roots)
