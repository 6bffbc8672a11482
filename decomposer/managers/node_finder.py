"""
NodeFinder for searching and traversing the work item forest.

Stateless helpers shared by every other manager.
"""

from typing import Iterator, List, Optional, Tuple

from decomposer.models.node import WorkItemNode


class NodeFinder:
    """
    Recursive search and traversal utilities over a forest of WorkItemNodes.

    All methods work on live references; callers that hand results to the
    outside world are responsible for copying.
    """

    @staticmethod
    def find_node(nodes: List[WorkItemNode], node_id: str) -> Optional[WorkItemNode]:
        """Find a node by id, depth-first.

        Args:
            nodes: Forest (or child list) to search.
            node_id: Id of the node to find.

        Returns:
            The matching node or None if not found.
        """
        for node in nodes:
            if node.id == node_id:
                return node
            if node.children:
                found = NodeFinder.find_node(node.children, node_id)
                if found is not None:
                    return found
        return None

    @staticmethod
    def count_nodes(nodes: List[WorkItemNode]) -> int:
        """Count every node in the forest, descendants included."""
        return sum(1 + NodeFinder.count_nodes(node.children) for node in nodes)

    @staticmethod
    def is_descendant(node: WorkItemNode, target_id: str) -> bool:
        """Check if target_id is somewhere below node (node itself excluded)."""
        for child in node.children:
            if child.id == target_id or NodeFinder.is_descendant(child, target_id):
                return True
        return False

    @staticmethod
    def iter_nodes(
        nodes: List[WorkItemNode], depth: int = 0
    ) -> Iterator[Tuple[WorkItemNode, int]]:
        """Yield (node, depth) pairs in depth-first display order."""
        for node in nodes:
            yield node, depth
            yield from NodeFinder.iter_nodes(node.children, depth + 1)

    @staticmethod
    def find_sibling_list(
        forest: List[WorkItemNode], node: WorkItemNode
    ) -> Tuple[Optional[List[WorkItemNode]], int]:
        """Find the list that owns a node and the node's index in it.

        Uses parent_id to pick the parent's children, or the root list for
        root nodes.

        Returns:
            (siblings, index), or (None, -1) when the parent cannot be found
            or does not actually hold the node.
        """
        if node.parent_id:
            parent = NodeFinder.find_node(forest, node.parent_id)
            if parent is None:
                return None, -1
            siblings = parent.children
        else:
            siblings = forest

        for index, sibling in enumerate(siblings):
            if sibling.id == node.id:
                return siblings, index
        return None, -1

    @staticmethod
    def collect_ids(nodes: List[WorkItemNode]) -> List[str]:
        """Collect every node id in depth-first order."""
        return [node.id for node, _ in NodeFinder.iter_nodes(nodes)]
