"""
Tests for TextHierarchyCreationManager.

Tests cover:
- Input rejection (empty, no separators, parse errors, no nodes)
- Appending parsed roots after existing roots
- Path context inheritance
- Count and flag updates after import
"""

import pytest

from decomposer.managers.hierarchy_manager import HierarchyManager
from decomposer.managers.text_creation_manager import TextHierarchyCreationManager
from decomposer.models.config import PathContext


@pytest.fixture
def creator(manager, configurations):
    """Creation manager on an empty Epic decomposition."""
    return TextHierarchyCreationManager(manager, configurations)


class TestRejectedInput:
    """Test inputs that create nothing."""

    @pytest.mark.parametrize("text", ["", "   \n  "])
    def test_empty_text(self, creator, text):
        """Empty input is rejected."""
        result = creator.create_work_item_hierarchy_from_text(text)
        assert result.success is False
        assert result.errors == ["Input text is empty."]

    def test_no_separator(self, creator):
        """Input without any colon is rejected before parsing."""
        result = creator.create_work_item_hierarchy_from_text("just a sentence")
        assert result.success is False
        assert "No colon (:) separators found" in result.errors[0]

    def test_parse_error_merges_nothing(self, creator, manager):
        """Any hard error leaves the hierarchy untouched."""
        result = creator.create_work_item_hierarchy_from_text("Feature: A\n--Task: B")
        assert result.success is False
        assert result.errors[0].startswith("Line 2:")
        assert result.updated_hierarchy is None
        assert manager.get_hierarchy() == []
        assert manager.get_hierarchy_count() == 0


class TestImport:
    """Test successful imports."""

    def test_import_into_empty(self, creator, manager):
        """Parsed nodes become the forest."""
        result = creator.create_work_item_hierarchy_from_text(
            "Feature: A\n- User Story: B\n-- Task: C\nFeature: D"
        )
        assert result.success is True
        assert result.created_items_count == 4
        assert [n.title for n in result.updated_hierarchy] == ["A", "D"]
        assert manager.get_hierarchy_count() == 4

    def test_appends_after_existing(self, creator, manager):
        """Existing roots are kept in front."""
        manager.add_item("Feature", title="Existing")
        result = creator.create_work_item_hierarchy_from_text("Feature: Imported")
        assert [n.title for n in result.updated_hierarchy] == ["Existing", "Imported"]
        assert manager.get_hierarchy_count() == 2

    def test_flags_computed(self, creator):
        """Imported nodes get promote/demote flags."""
        result = creator.create_work_item_hierarchy_from_text(
            "Feature: A\n- User Story: B\n- User Story: C"
        )
        second = result.updated_hierarchy[0].children[1]
        assert second.can_promote is True
        assert second.can_demote is True

    def test_warnings_returned(self, creator):
        """Rule warnings do not block the import."""
        result = creator.create_work_item_hierarchy_from_text("Task: Loose task")
        assert result.success is True
        assert result.warnings == [
            'Line 1: Work item type "Task" may not be a valid child of "Epic" '
            "according to your project's hierarchy rules."
        ]

    def test_root_type_kept(self, creator, manager):
        """The decomposed item's type survives the import."""
        creator.create_work_item_hierarchy_from_text("Feature: A")
        assert manager.get_parent_work_item_type() == "Epic"


class TestPathContext:
    """Test path context inheritance."""

    def test_inherits_from_manager(self, configurations):
        """Without existing nodes the manager's context is used."""
        manager = HierarchyManager(
            configurations,
            parent_work_item_type="Epic",
            path_context=PathContext(area_path="Team", iteration_path="Sprint 1"),
        )
        creator = TextHierarchyCreationManager(manager, configurations)
        result = creator.create_work_item_hierarchy_from_text("Feature: A\n- User Story: B")
        story = result.updated_hierarchy[0].children[0]
        assert (story.area_path, story.iteration_path) == ("Team", "Sprint 1")

    def test_inherits_from_first_root(self, configurations, builder):
        """The first existing root wins over the manager's context."""
        existing = builder.node("f", "Feature")
        existing.area_path = "Root Area"
        manager = HierarchyManager(
            configurations,
            [existing],
            parent_work_item_type="Epic",
            path_context=PathContext(area_path="Manager Area"),
        )
        creator = TextHierarchyCreationManager(manager, configurations)
        result = creator.create_work_item_hierarchy_from_text("Feature: New")
        assert result.updated_hierarchy[1].area_path == "Root Area"
