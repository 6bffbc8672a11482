"""
TypeManager answering work item type legality questions.

Wraps the externally supplied type configuration (type -> allowed child
types) and applies it to nodes in the hierarchy: which types can be added
under a node, which types a node can take when promoted or demoted, and how
types are repaired after a structural move.
"""

import logging
from typing import Dict, List, Optional, Tuple

from decomposer.constants import get_fallback_child_type
from decomposer.managers.node_finder import NodeFinder
from decomposer.managers.state_manager import HierarchyStateManager
from decomposer.models.config import WorkItemConfigurations
from decomposer.models.node import WorkItemNode
from decomposer.utils import default_title

logger = logging.getLogger(__name__)

TypeMap = Dict[str, str]


class TypeManager:
    """
    Manages work item type rules.

    Rule resolution for a parent type:
    - Non-empty rule: that list
    - Rule configured as empty: [] (no children allowed)
    - No rule at all: [fallback child type]
    """

    def __init__(
        self,
        configurations: WorkItemConfigurations,
        state_manager: HierarchyStateManager,
        fallback_child_type: Optional[str] = None,
    ) -> None:
        """
        Initialize TypeManager.

        Args:
            configurations: Type configuration map.
            state_manager: State manager owning the forest.
            fallback_child_type: Type offered where no rule exists. Defaults
                to the configured fallback ("Task").
        """
        self.configurations = configurations
        self.state_manager = state_manager
        self.fallback_child_type = fallback_child_type or get_fallback_child_type()

    def update_configurations(self, configurations: WorkItemConfigurations) -> None:
        self.configurations = configurations

    # =========================================================================
    # Pure lookups
    # =========================================================================

    def get_allowed_child_types(self, parent_type: Optional[str]) -> List[str]:
        """Get the child types allowed under a parent type.

        Args:
            parent_type: Parent work item type.

        Returns:
            Allowed child types; [] if configured as childless; the fallback
            type if no rule is configured.
        """
        rule = self.configurations.rule_for(parent_type)
        if rule is None:
            return [self.fallback_child_type]
        return rule

    def can_type_be_child_of_type(self, child_type: str, parent_type: str) -> bool:
        """Check if child_type may be placed directly under parent_type."""
        return child_type in self.get_allowed_child_types(parent_type)

    def _configured_children(self, work_item_type: Optional[str]) -> List[str]:
        # Only a non-empty configured rule counts here; no fallback
        return self.configurations.rule_for(work_item_type) or []

    # =========================================================================
    # Node-based queries
    # =========================================================================

    def get_possible_child_types(self, parent_id: Optional[str] = None) -> List[str]:
        """Get the types that can be added under a node.

        Args:
            parent_id: Id of the parent node. None means the root level, which
                resolves through the decomposed work item's type.

        Returns:
            List of possible child type names.
        """
        if parent_id:
            parent_node = self.state_manager.find_node_by_id(parent_id)
            if parent_node is None:
                logger.warning(
                    "Parent node with ID %s not found when getting possible child types. "
                    "Defaulting to ['%s'].",
                    parent_id,
                    self.fallback_child_type,
                )
                return [self.fallback_child_type]
            return self.get_allowed_child_types(parent_node.type)

        root_type = self.state_manager.get_parent_work_item_type()
        if root_type is None:
            return [self.fallback_child_type]
        return self.get_allowed_child_types(root_type)

    def get_possible_promote_types(self, item_id: str) -> List[str]:
        """Get the types a node can take if promoted.

        A promoted node becomes a sibling of its current parent, so the
        candidates are whatever the grandparent (or the root type, when the
        parent is a root) allows.

        Returns:
            Candidate types; [node.type] when no context resolves; [] if the
            node does not exist.
        """
        node = self.state_manager.find_node_by_id(item_id)
        if node is None:
            return []

        new_parent_type: Optional[str] = None
        if node.parent_id:
            parent = self.state_manager.find_node_by_id(node.parent_id)
            if parent is not None:
                if parent.parent_id:
                    grandparent = self.state_manager.find_node_by_id(parent.parent_id)
                    if grandparent is not None:
                        new_parent_type = grandparent.type
                else:
                    new_parent_type = self.state_manager.get_parent_work_item_type()

        candidates = self._configured_children(new_parent_type)
        if candidates:
            return candidates
        return [node.type]

    def get_possible_demote_types(self, item_id: str, is_cascading: bool = False) -> List[str]:
        """Get the types a node can take if demoted.

        Args:
            item_id: Id of the node.
            is_cascading: False for the node the user demotes directly (it
                becomes a child of its preceding sibling); True for a
                descendant moved along with it (its own type's children).

        Returns:
            Candidate types; [node.type] when no context resolves; [] if the
            node does not exist.
        """
        node = self.state_manager.find_node_by_id(item_id)
        if node is None:
            return []

        if is_cascading:
            candidates = self._configured_children(node.type)
            return candidates or [node.type]

        siblings, index = self._locate(node)
        if siblings is not None and index > 0:
            candidates = self._configured_children(siblings[index - 1].type)
            if candidates:
                return candidates
        return [node.type]

    def _locate(self, node: WorkItemNode) -> Tuple[Optional[List[WorkItemNode]], int]:
        return NodeFinder.find_sibling_list(self.state_manager.get_hierarchy_ref(), node)

    # =========================================================================
    # Type repair
    # =========================================================================

    def apply_type_map_to_affected_nodes(self, type_map: TypeMap) -> None:
        """Apply explicit type choices to nodes.

        A node whose title is still the default for its old type gets the
        default title for the new type; custom titles are kept.

        Args:
            type_map: Node id -> chosen type.
        """
        for node_id, new_type in type_map.items():
            node = self.state_manager.find_node_by_id(node_id)
            if node is None:
                logger.warning("Node with ID %s from type map not found in hierarchy.", node_id)
                continue
            if node.type != new_type:
                node.reset_title_for_type(new_type)

    def recursively_update_type_and_children(
        self,
        node: WorkItemNode,
        new_parent_node: Optional[WorkItemNode],
        type_map: Optional[TypeMap] = None,
    ) -> None:
        """Make a moved subtree legal under its new parent, top-down.

        For each node:
        - explicit choice in type_map: kept if legal under the new parent,
          otherwise replaced by the first legal type (warning), or left as
          is with an error when nothing is legal
        - no explicit choice: set to the first legal type, or left as is
          with an error when nothing is legal

        Default titles follow the type; custom titles are never touched.

        Args:
            node: Root of the moved subtree (live reference).
            new_parent_node: Its new parent, or None if it is now a root.
            type_map: Explicit user choices, node id -> type.
        """
        new_parent_id = new_parent_node.id if new_parent_node is not None else None
        parent_info = (
            f"parent {new_parent_node.id} (type: {new_parent_node.type})"
            if new_parent_node is not None
            else "root"
        )
        allowed = self.get_possible_child_types(new_parent_id)

        current_type = node.type
        title_was_default = node.has_default_title()
        final_type = current_type

        if type_map and node.id in type_map:
            if current_type not in allowed:
                if allowed:
                    final_type = allowed[0]
                    logger.warning(
                        "Selected type %s for node %s is not valid as child of %s. "
                        "Changed to %s. Allowed: %s",
                        current_type,
                        node.id,
                        parent_info,
                        final_type,
                        ", ".join(allowed),
                    )
                else:
                    self.state_manager.raise_error(
                        f"Selected type {current_type} for node {node.id} is not valid as "
                        f"child of {parent_info}, and no other child types are allowed."
                    )
        elif allowed:
            final_type = allowed[0]
        else:
            self.state_manager.raise_error(
                f"Node {node.id} (type {current_type}) cannot be a child of {parent_info} "
                f"as it allows no configured child types. Type not changed by hierarchy rule."
            )

        node.type = final_type
        if title_was_default:
            node.title = default_title(final_type)

        for child in node.children:
            self.recursively_update_type_and_children(child, node, type_map)
