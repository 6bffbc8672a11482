"""
Tests for FlagManager.

Tests cover:
- can_promote for roots and children
- can_demote: preceding sibling, childless sibling, cycle guard
"""

import pytest

from decomposer.managers.flag_manager import FlagManager
from decomposer.managers.state_manager import HierarchyStateManager
from decomposer.managers.type_manager import TypeManager


def flags_for(configurations, forest, root_type="Epic"):
    state = HierarchyStateManager(forest, parent_work_item_type=root_type)
    types = TypeManager(configurations, state)
    FlagManager(state, types).update_all_promote_demote_flags()
    return {node_id: (node.can_promote, node.can_demote)
            for node_id, node in _walk(state.get_hierarchy())}


def _walk(nodes):
    for node in nodes:
        yield node.id, node
        yield from _walk(node.children)


class TestPromoteFlags:
    """Test can_promote."""

    def test_roots_cannot_promote(self, configurations, builder):
        """Roots never promote."""
        flags = flags_for(configurations, builder.feature_tree())
        assert flags["f1"][0] is False
        assert flags["f2"][0] is False

    def test_children_can_promote(self, configurations, builder):
        """Every node with a parent can promote."""
        flags = flags_for(configurations, builder.feature_tree())
        assert all(flags[node_id][0] for node_id in ("s1", "s2", "s3", "t1"))


class TestDemoteFlags:
    """Test can_demote."""

    def test_first_siblings_cannot_demote(self, configurations, builder):
        """First root and first children have no preceding sibling."""
        flags = flags_for(configurations, builder.feature_tree())
        assert flags["f1"][1] is False
        assert flags["s1"][1] is False
        assert flags["t1"][1] is False

    def test_later_siblings_can_demote(self, configurations, builder):
        """Later siblings whose predecessor allows children can demote."""
        flags = flags_for(configurations, builder.feature_tree())
        assert flags["f2"][1] is True
        assert flags["s2"][1] is True
        assert flags["s3"][1] is True

    def test_childless_predecessor_blocks_demote(self, configurations, builder):
        """A predecessor whose type allows no children blocks demotion."""
        forest = [builder.node("s", "User Story", children=[
            builder.node("a", "Task"),
            builder.node("b", "Bug"),
        ])]
        flags = flags_for(configurations, forest, root_type="Feature")
        assert flags["b"][1] is False

    def test_unconfigured_predecessor_allows_demote(self, configurations, builder):
        """A predecessor without rules falls back and allows demotion."""
        forest = [builder.node("a", "Issue"), builder.node("b", "Issue")]
        flags = flags_for(configurations, forest)
        assert flags["b"][1] is True

    @pytest.mark.parametrize("root_type", ["Epic", None])
    def test_flags_independent_of_root_type(self, configurations, builder, root_type):
        """Root demote flags depend on the predecessor, not the root type."""
        flags = flags_for(configurations, builder.feature_tree(), root_type=root_type)
        assert flags["f2"] == (False, True)
