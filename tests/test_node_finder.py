"""
Tests for NodeFinder.

Tests cover:
- Depth-first lookup by id
- Subtree counting
- Descendant checks (cycle guard)
- Sibling list resolution
"""

from decomposer.managers.node_finder import NodeFinder


class TestFindNode:
    """Test find_node method."""

    def test_find_root(self, builder):
        """Find a root node."""
        forest = builder.feature_tree()
        assert NodeFinder.find_node(forest, "f2") is forest[1]

    def test_find_nested(self, builder):
        """Find a node two levels deep."""
        forest = builder.feature_tree()
        node = NodeFinder.find_node(forest, "t1")
        assert node is forest[0].children[0].children[0]

    def test_find_missing(self, builder):
        """Missing id returns None."""
        assert NodeFinder.find_node(builder.feature_tree(), "nope") is None

    def test_find_in_empty_forest(self):
        """Empty forest returns None."""
        assert NodeFinder.find_node([], "f1") is None


class TestCountNodes:
    """Test count_nodes method."""

    def test_count_forest(self, builder):
        """Counts every node including descendants."""
        assert NodeFinder.count_nodes(builder.feature_tree()) == 6

    def test_count_empty(self):
        """Empty forest has zero nodes."""
        assert NodeFinder.count_nodes([]) == 0


class TestIsDescendant:
    """Test is_descendant method."""

    def test_grandchild_is_descendant(self, builder):
        """A grandchild is a descendant."""
        forest = builder.feature_tree()
        assert NodeFinder.is_descendant(forest[0], "t1") is True

    def test_node_is_not_own_descendant(self, builder):
        """A node is not its own descendant."""
        forest = builder.feature_tree()
        assert NodeFinder.is_descendant(forest[0], "f1") is False

    def test_sibling_is_not_descendant(self, builder):
        """Siblings are unrelated."""
        forest = builder.feature_tree()
        assert NodeFinder.is_descendant(forest[0], "f2") is False


class TestFindSiblingList:
    """Test find_sibling_list and iteration helpers."""

    def test_root_siblings(self, builder):
        """Root nodes resolve to the forest itself."""
        forest = builder.feature_tree()
        siblings, index = NodeFinder.find_sibling_list(forest, forest[1])
        assert siblings is forest
        assert index == 1

    def test_child_siblings(self, builder):
        """Child nodes resolve to their parent's children."""
        forest = builder.feature_tree()
        for child in forest[0].children:
            child.parent_id = "f1"
        siblings, index = NodeFinder.find_sibling_list(forest, forest[0].children[2])
        assert siblings is forest[0].children
        assert index == 2

    def test_broken_parent_reference(self, builder):
        """A parent_id that does not resolve yields (None, -1)."""
        forest = builder.feature_tree()
        orphan = builder.node("x")
        orphan.parent_id = "ghost"
        assert NodeFinder.find_sibling_list(forest, orphan) == (None, -1)

    def test_iter_nodes_depths(self, builder):
        """iter_nodes yields display order with depths."""
        pairs = [(n.id, d) for n, d in NodeFinder.iter_nodes(builder.feature_tree())]
        assert pairs == [("f1", 0), ("s1", 1), ("t1", 2), ("s2", 1), ("s3", 1), ("f2", 0)]

    def test_collect_ids(self, builder):
        """collect_ids returns ids depth-first."""
        assert NodeFinder.collect_ids(builder.feature_tree()) == ["f1", "s1", "t1", "s2", "s3", "f2"]
