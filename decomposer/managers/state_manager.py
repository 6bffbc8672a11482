"""
HierarchyStateManager holding the canonical work item forest.

Owns the forest, the root work item type, the inherited path context and the
running node count. Public accessors return deep copies; only the sibling
managers use the live reference.
"""

import logging
from typing import Callable, List, Optional, Sequence, Union

from decomposer.exceptions import ValidationError
from decomposer.managers.node_finder import NodeFinder
from decomposer.models.config import PathContext
from decomposer.models.node import WorkItemNode

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[str], None]
NodeInput = Union[WorkItemNode, dict]


def copy_forest(nodes: Sequence[WorkItemNode]) -> List[WorkItemNode]:
    """Deep copy a forest."""
    return [node.model_copy(deep=True) for node in nodes]


def relink_parent_ids(nodes: List[WorkItemNode], parent_id: Optional[str]) -> None:
    """Set parent_id on every node from the children edges."""
    for node in nodes:
        node.parent_id = parent_id
        relink_parent_ids(node.children, node.id)


class HierarchyStateManager:
    """
    Single source of truth for the draft hierarchy.

    Handles:
    - Forest storage with copy-on-read
    - Root (decomposed) work item type
    - Path context inherited by new nodes
    - Incremental node count
    - Routing recoverable errors to an injected handler
    """

    def __init__(
        self,
        initial_hierarchy: Optional[Sequence[NodeInput]] = None,
        parent_work_item_type: Optional[str] = None,
        error_handler: Optional[ErrorHandler] = None,
        path_context: Optional[PathContext] = None,
    ) -> None:
        """
        Initialize HierarchyStateManager.

        Args:
            initial_hierarchy: Optional starting forest (copied).
            parent_work_item_type: Type of the work item being decomposed.
            error_handler: Callback receiving recoverable error messages.
            path_context: Area/iteration path inherited by new nodes.
        """
        self._hierarchy: List[WorkItemNode] = []
        self._hierarchy_count = 0
        self._parent_work_item_type: Optional[str] = parent_work_item_type or None
        self._error_handler = error_handler
        self._path_context = path_context or PathContext()
        if initial_hierarchy:
            self._load(initial_hierarchy)

    # =========================================================================
    # Error routing
    # =========================================================================

    def raise_error(self, message: str) -> None:
        """Report a recoverable error through the handler, or log it.

        Never raises.
        """
        if self._error_handler is not None:
            self._error_handler(message)
        else:
            logger.error(message)

    def set_error_handler(self, error_handler: Optional[ErrorHandler]) -> None:
        self._error_handler = error_handler

    # =========================================================================
    # Context
    # =========================================================================

    def set_parent_work_item_type(self, work_item_type: Optional[str]) -> None:
        """Set the type of the work item being decomposed."""
        self._parent_work_item_type = work_item_type or None

    def get_parent_work_item_type(self) -> Optional[str]:
        """Get the type of the work item being decomposed, or None if unset."""
        return self._parent_work_item_type

    def set_path_context(self, path_context: Optional[PathContext]) -> None:
        self._path_context = path_context or PathContext()

    def get_path_context(self) -> PathContext:
        return self._path_context.model_copy()

    # =========================================================================
    # Forest access
    # =========================================================================

    def get_hierarchy(self) -> List[WorkItemNode]:
        """Return a deep copy of the forest."""
        return copy_forest(self._hierarchy)

    def get_hierarchy_ref(self) -> List[WorkItemNode]:
        """Return the live forest.

        Only the operations and flag managers should mutate this.
        """
        return self._hierarchy

    def get_hierarchy_count(self) -> int:
        """Return the number of nodes in the forest."""
        return self._hierarchy_count

    def update_hierarchy_count(self, change: int) -> None:
        """Adjust the node count (positive for adds, negative for removals)."""
        self._hierarchy_count += change

    def set_initial_hierarchy(
        self,
        nodes: Sequence[NodeInput],
        parent_work_item_type: Optional[str] = None,
    ) -> None:
        """Replace the forest wholesale.

        Args:
            nodes: New forest; WorkItemNode instances or plain dicts. Copied.
            parent_work_item_type: New root type. Keeps the current one when
                omitted.

        Raises:
            ValidationError: If the forest contains duplicate node ids.
        """
        self._load(nodes)
        if parent_work_item_type:
            self._parent_work_item_type = parent_work_item_type

    def clear_hierarchy(self) -> None:
        """Remove every node."""
        self._hierarchy = []
        self._hierarchy_count = 0

    def find_node_by_id(self, node_id: Optional[str]) -> Optional[WorkItemNode]:
        """Find a live node by id."""
        if not node_id:
            return None
        return NodeFinder.find_node(self._hierarchy, node_id)

    def update_item_title(self, item_id: str, new_title: str) -> List[WorkItemNode]:
        """Set a node's title.

        Returns:
            Fresh snapshot of the forest.
        """
        node = self.find_node_by_id(item_id)
        if node is not None:
            node.title = new_title
        else:
            logger.warning("Item %s not found when updating title.", item_id)
        return self.get_hierarchy()

    # =========================================================================
    # Internals
    # =========================================================================

    def _load(self, nodes: Sequence[NodeInput]) -> None:
        forest = [
            node.model_copy(deep=True) if isinstance(node, WorkItemNode)
            else WorkItemNode.model_validate(node)
            for node in nodes
        ]

        seen = set()
        for node, _ in NodeFinder.iter_nodes(forest):
            if node.id in seen:
                raise ValidationError(f"Duplicate work item id '{node.id}' in hierarchy.")
            seen.add(node.id)

        relink_parent_ids(forest, None)
        self._hierarchy = forest
        self._hierarchy_count = NodeFinder.count_nodes(forest)
