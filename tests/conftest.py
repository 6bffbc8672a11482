"""
Test fixtures for the decomposer test suite.

Provides:
- An Agile-like work item type configuration
- Mock node builders for creating test hierarchies
- Pre-populated HierarchyManager fixtures
- Config isolation (never reads the project's .decomposer/)
"""

import json
import shutil
import tempfile
from pathlib import Path
from typing import Generator, List, Optional

import pytest

from decomposer.constants import ConfigManager, reset_config_manager, set_config_manager
from decomposer.managers.hierarchy_manager import HierarchyManager
from decomposer.models.config import WorkItemConfigurations
from decomposer.models.node import WorkItemNode

AGILE_TYPES = {
    "Epic": {"allowedChildTypes": ["Feature"], "displayColor": "#FF7B00"},
    "Feature": {"allowedChildTypes": ["User Story"], "displayColor": "#773B93"},
    "User Story": {"allowedChildTypes": ["Task", "Bug"], "displayColor": "#009CCC"},
    "Task": {"allowedChildTypes": [], "displayColor": "#F2CB1D"},
    "Bug": {"allowedChildTypes": [], "displayColor": "#CC293D"},
}


# =============================================================================
# Temporary Directory / Config Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test isolation."""
    temp_path = Path(tempfile.mkdtemp(prefix="decomposer_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def isolated_config(temp_dir: Path) -> Generator[ConfigManager, None, None]:
    """Point the ConfigManager singleton at an empty temp directory."""
    config = ConfigManager(config_dir=temp_dir / ".decomposer")
    set_config_manager(config)
    yield config
    reset_config_manager()


@pytest.fixture
def types_file(temp_dir: Path) -> Path:
    """Write the Agile type configuration to a JSON file."""
    path = temp_dir / "types.json"
    path.write_text(json.dumps(AGILE_TYPES))
    return path


# =============================================================================
# Mock Data Builders
# =============================================================================


class MockDataBuilder:
    """Helper class for building mock work item nodes for testing."""

    @staticmethod
    def node(
        node_id: str,
        work_item_type: str = "Task",
        title: Optional[str] = None,
        children: Optional[List[WorkItemNode]] = None,
    ) -> WorkItemNode:
        """Create a node with a fixed id."""
        return WorkItemNode(
            id=node_id,
            type=work_item_type,
            title=title or f"{work_item_type} {node_id}",
            children=children or [],
        )

    @staticmethod
    def feature_tree() -> List[WorkItemNode]:
        """Create a forest of two Features.

        f1 (Feature)
          s1 (User Story)
            t1 (Task)
          s2 (User Story)
          s3 (User Story)
        f2 (Feature)
        """
        node = MockDataBuilder.node
        return [
            node("f1", "Feature", children=[
                node("s1", "User Story", children=[node("t1", "Task")]),
                node("s2", "User Story"),
                node("s3", "User Story"),
            ]),
            node("f2", "Feature"),
        ]


@pytest.fixture
def builder() -> type:
    """Provide the MockDataBuilder class."""
    return MockDataBuilder


@pytest.fixture
def configurations() -> WorkItemConfigurations:
    """Agile-like type configuration."""
    return WorkItemConfigurations.from_mapping(AGILE_TYPES)


@pytest.fixture
def errors() -> List[str]:
    """Collects messages sent to the error handler."""
    return []


@pytest.fixture
def manager(configurations, errors) -> HierarchyManager:
    """Empty HierarchyManager decomposing an Epic."""
    return HierarchyManager(
        configurations,
        parent_work_item_type="Epic",
        error_handler=errors.append,
    )


@pytest.fixture
def populated_manager(configurations, errors) -> HierarchyManager:
    """HierarchyManager holding MockDataBuilder.feature_tree() under an Epic."""
    return HierarchyManager(
        configurations,
        initial_hierarchy=MockDataBuilder.feature_tree(),
        parent_work_item_type="Epic",
        error_handler=errors.append,
    )


def find(nodes: List[WorkItemNode], node_id: str) -> Optional[WorkItemNode]:
    """Find a node in a snapshot."""
    for node in nodes:
        if node.id == node_id:
            return node
        found = find(node.children, node_id)
        if found is not None:
            return found
    return None


def ids(nodes: List[WorkItemNode]) -> List[str]:
    """Ids of one level of a snapshot."""
    return [node.id for node in nodes]
