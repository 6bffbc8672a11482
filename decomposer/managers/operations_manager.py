"""
OperationsManager for structural edits on the work item hierarchy.

Handles creating, adding, removing, promoting and demoting items. Every
mutating operation finishes by recomputing promote/demote flags and returns
a fresh copy of the forest.

Policy problems (missing parent, illegal move) never raise: the forest is
returned unchanged or degraded gracefully and the problem is logged or sent
to the error handler. Only add_item_after raises, because it has no sensible
fallback position.
"""

import logging
from typing import List, Optional

from decomposer.exceptions import InvalidOperationError, NotFoundError
from decomposer.managers.flag_manager import FlagManager
from decomposer.managers.node_finder import NodeFinder
from decomposer.managers.state_manager import HierarchyStateManager, relink_parent_ids
from decomposer.managers.type_manager import TypeManager, TypeMap
from decomposer.models.node import WorkItemNode
from decomposer.utils import default_title

logger = logging.getLogger(__name__)


class OperationsManager:
    """
    Manages structural operations on the hierarchy.

    Handles:
    - Node creation (create_work_item) and insertion (add_item, add_item_after)
    - Subtree removal with exact count bookkeeping
    - Promotion (node becomes its parent's next sibling, absorbing its
      following siblings as children)
    - Demotion (node becomes last child of its preceding sibling)
    - Type repair of moved subtrees via TypeManager
    """

    def __init__(
        self,
        state_manager: HierarchyStateManager,
        type_manager: TypeManager,
        flag_manager: FlagManager,
    ) -> None:
        """
        Initialize OperationsManager.

        Args:
            state_manager: Owner of the forest.
            type_manager: Type rules resolver.
            flag_manager: Flag recalculator run after every change.
        """
        self.state_manager = state_manager
        self.type_manager = type_manager
        self.flag_manager = flag_manager

    def _finish(self) -> List[WorkItemNode]:
        self.flag_manager.update_all_promote_demote_flags()
        return self.state_manager.get_hierarchy()

    # =========================================================================
    # Creation
    # =========================================================================

    def create_work_item(
        self,
        work_item_type: str,
        parent_id: Optional[str] = None,
        title: Optional[str] = None,
    ) -> WorkItemNode:
        """Build a new node without inserting it.

        Args:
            work_item_type: Type of the new node.
            parent_id: Parent id to record on the node.
            title: Title; defaults to "New <type>".

        Returns:
            The new, detached node.
        """
        path_context = self.state_manager.get_path_context()
        return WorkItemNode(
            title=title or default_title(work_item_type),
            type=work_item_type,
            parent_id=parent_id,
            area_path=path_context.area_path,
            iteration_path=path_context.iteration_path,
        )

    def add_item(
        self,
        work_item_type: str,
        parent_id: Optional[str] = None,
        title: Optional[str] = None,
    ) -> List[WorkItemNode]:
        """Create a node and append it as the last child of parent_id.

        If parent_id does not resolve, the error is reported and the node is
        added at the root instead.

        Args:
            work_item_type: Type of the new node.
            parent_id: Parent id, or None to add a root node.
            title: Title; defaults to "New <type>".

        Returns:
            Fresh snapshot of the forest.
        """
        hierarchy = self.state_manager.get_hierarchy_ref()
        new_item = self.create_work_item(work_item_type, parent_id, title)

        if parent_id:
            parent_node = self.state_manager.find_node_by_id(parent_id)
            if parent_node is not None:
                parent_node.children.append(new_item)
            else:
                self.state_manager.raise_error(
                    f"Parent with id {parent_id} not found. Adding item to root."
                )
                new_item.parent_id = None
                hierarchy.append(new_item)
        else:
            hierarchy.append(new_item)

        self.state_manager.update_hierarchy_count(1)
        logger.debug("Added %s %s under %s", work_item_type, new_item.id, new_item.parent_id or "root")
        return self._finish()

    def add_item_after(self, new_item: WorkItemNode, after_node_id: str) -> List[WorkItemNode]:
        """Insert a node as the next sibling of another node.

        Args:
            new_item: Node to insert, typically from create_work_item(). It may
                carry a subtree. A copy is inserted; parent ids are relinked.
            after_node_id: Id of the anchor node.

        Returns:
            Fresh snapshot of the forest.

        Raises:
            NotFoundError: If the anchor node does not exist.
            InvalidOperationError: If the anchor's parent context is broken or
                the new node's id is already in the hierarchy.
        """
        anchor = self.state_manager.find_node_by_id(after_node_id)
        if anchor is None:
            raise NotFoundError(f"Node with id {after_node_id} not found.")

        hierarchy = self.state_manager.get_hierarchy_ref()
        siblings, index = NodeFinder.find_sibling_list(hierarchy, anchor)
        if siblings is None:
            raise InvalidOperationError(
                f"Parent of node {after_node_id} ({anchor.parent_id}) not found or does not "
                f"contain it. Cannot insert a sibling."
            )

        for node_id in NodeFinder.collect_ids([new_item]):
            if self.state_manager.find_node_by_id(node_id) is not None:
                raise InvalidOperationError(
                    f"Node with id {node_id} is already in the hierarchy."
                )

        # The caller keeps its object; the forest holds a relinked copy
        inserted = new_item.model_copy(deep=True)
        relink_parent_ids([inserted], anchor.parent_id)
        siblings.insert(index + 1, inserted)

        self.state_manager.update_hierarchy_count(NodeFinder.count_nodes([inserted]))
        return self._finish()

    # =========================================================================
    # Removal
    # =========================================================================

    def remove_item(self, item_id: str) -> List[WorkItemNode]:
        """Remove a node and its whole subtree.

        Returns:
            Fresh snapshot of the forest.
        """
        node = self.state_manager.find_node_by_id(item_id)
        if node is None:
            logger.warning("Item %s not found. Nothing removed.", item_id)
            return self.state_manager.get_hierarchy()

        siblings, index = NodeFinder.find_sibling_list(self.state_manager.get_hierarchy_ref(), node)
        if siblings is None:
            self.state_manager.raise_error(
                f"Item {item_id} is not held by its parent {node.parent_id}. Removal failed."
            )
            return self.state_manager.get_hierarchy()

        removed = siblings.pop(index)
        self.state_manager.update_hierarchy_count(-NodeFinder.count_nodes([removed]))
        return self._finish()

    # =========================================================================
    # Promotion
    # =========================================================================

    def promote_item(self, item_id: str, type_map: Optional[TypeMap] = None) -> List[WorkItemNode]:
        """Promote a node one level up.

        The node is removed from its parent, takes every following sibling
        as its own children (appended, order kept) and is inserted right
        after its former parent. The moved subtree is then retyped.

        Args:
            item_id: Id of the node to promote.
            type_map: Explicit type choices, node id -> type.

        Returns:
            Fresh snapshot of the forest (unchanged if promotion is not possible).
        """
        hierarchy = self.state_manager.get_hierarchy_ref()
        node = self.state_manager.find_node_by_id(item_id)
        if node is None:
            logger.warning("Item %s not found. Nothing promoted.", item_id)
            return self.state_manager.get_hierarchy()
        if not node.parent_id:
            logger.warning(
                'Item %s (%s: "%s") is a root item and cannot be promoted.',
                item_id,
                node.type,
                node.title,
            )
            return self.state_manager.get_hierarchy()

        parent = self.state_manager.find_node_by_id(node.parent_id)
        if parent is None:
            self.state_manager.raise_error(
                f"Parent node {node.parent_id} not found for item {item_id}. Promotion failed."
            )
            return self.state_manager.get_hierarchy()

        index = next((i for i, child in enumerate(parent.children) if child.id == item_id), -1)
        if index == -1:
            self.state_manager.raise_error(
                f"Item {item_id} not found in parent {parent.id}'s children. Promotion failed."
            )
            return self.state_manager.get_hierarchy()

        if type_map:
            self.type_manager.apply_type_map_to_affected_nodes(type_map)

        del parent.children[index]
        followers = parent.children[index:]
        del parent.children[index:]
        for follower in followers:
            follower.parent_id = node.id
            node.children.append(follower)

        new_parent: Optional[WorkItemNode] = None
        if parent.parent_id:
            grandparent = self.state_manager.find_node_by_id(parent.parent_id)
            if grandparent is not None:
                self._insert_after(grandparent.children, parent.id, node)
                node.parent_id = grandparent.id
                new_parent = grandparent
            else:
                logger.warning(
                    "Grandparent node %s not found. Promoting %s to root.",
                    parent.parent_id,
                    item_id,
                )
                self._insert_after(hierarchy, parent.id, node)
                node.parent_id = None
        else:
            self._insert_after(hierarchy, parent.id, node)
            node.parent_id = None

        self.type_manager.recursively_update_type_and_children(node, new_parent, type_map)
        return self._finish()

    @staticmethod
    def _insert_after(nodes: List[WorkItemNode], anchor_id: str, node: WorkItemNode) -> None:
        # Right after the anchor; at the end if the anchor is not in the list
        anchor_index = next((i for i, n in enumerate(nodes) if n.id == anchor_id), -1)
        insert_index = anchor_index + 1 if anchor_index != -1 else len(nodes)
        nodes.insert(insert_index, node)

    # =========================================================================
    # Demotion
    # =========================================================================

    def demote_item(self, item_id: str, type_map: Optional[TypeMap] = None) -> List[WorkItemNode]:
        """Demote a node one level down.

        The node becomes the last child of its immediately preceding sibling
        (in its parent's children or in the root list). Rejected with a
        warning when there is no preceding sibling, when the sibling is a
        descendant of the node, or when the sibling allows no child types.

        Args:
            item_id: Id of the node to demote.
            type_map: Explicit type choices, node id -> type.

        Returns:
            Fresh snapshot of the forest (unchanged if demotion is not possible).
        """
        node = self.state_manager.find_node_by_id(item_id)
        if node is None:
            logger.warning("Item %s not found. Nothing demoted.", item_id)
            return self.state_manager.get_hierarchy()

        siblings, index = NodeFinder.find_sibling_list(self.state_manager.get_hierarchy_ref(), node)
        if siblings is None:
            self.state_manager.raise_error(
                f"Item {item_id} not found in its parent's children list. Demotion failed."
            )
            return self.state_manager.get_hierarchy()

        if index == 0:
            position = "first child" if node.parent_id else "first root item"
            logger.warning(
                'Item %s (%s: "%s") is the %s and cannot be demoted under a preceding sibling.',
                item_id,
                node.type,
                node.title,
                position,
            )
            return self.state_manager.get_hierarchy()

        new_parent = siblings[index - 1]
        if NodeFinder.is_descendant(node, new_parent.id):
            logger.warning(
                "Cannot demote item %s under its own descendant %s.", item_id, new_parent.id
            )
            return self.state_manager.get_hierarchy()

        if not self.type_manager.get_possible_child_types(new_parent.id):
            logger.warning(
                "Cannot demote item %s (%s) under %s (type: %s) because the potential new "
                "parent is configured to have no children.",
                item_id,
                node.type,
                new_parent.id,
                new_parent.type,
            )
            return self.state_manager.get_hierarchy()

        if type_map:
            self.type_manager.apply_type_map_to_affected_nodes(type_map)

        del siblings[index]
        new_parent.children.append(node)
        node.parent_id = new_parent.id

        self.type_manager.recursively_update_type_and_children(node, new_parent, type_map)
        return self._finish()
