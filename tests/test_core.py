"""
Tests for DecomposerCore.

Tests cover:
- Loading type configuration from --types files and config.json
- Parsing and importing text through the wired managers
- Batch planning on the imported hierarchy
"""

import json

import pytest

from decomposer.constants import ConfigManager
from decomposer.core import DecomposerCore, load_configurations
from decomposer.exceptions import ConfigurationError
from decomposer.models.config import PathContext


class TestLoadConfigurations:
    """Test load_configurations."""

    def test_types_file_wins(self, types_file, temp_dir):
        """A types file takes precedence over the config."""
        config_path = temp_dir / "config.json"
        config_path.write_text(json.dumps({"work_item_types": {"Other": ["Thing"]}}))
        configurations = load_configurations(types_file, ConfigManager(config_path=config_path))
        assert "Other" not in configurations.type_names()
        assert configurations.rule_for("Epic") == ["Feature"]

    def test_from_config(self, temp_dir):
        """work_item_types in config.json is used otherwise."""
        config_path = temp_dir / "config.json"
        config_path.write_text(json.dumps({"work_item_types": {"Epic": ["Feature"]}}))
        configurations = load_configurations(config=ConfigManager(config_path=config_path))
        assert configurations.type_names() == ["Epic"]

    def test_empty_default(self):
        """No types anywhere yields an empty configuration."""
        assert load_configurations().type_names() == []

    def test_malformed(self, temp_dir):
        """Malformed type maps raise ConfigurationError."""
        config_path = temp_dir / "config.json"
        config_path.write_text(json.dumps({"work_item_types": {"Epic": 5}}))
        with pytest.raises(ConfigurationError):
            load_configurations(config=ConfigManager(config_path=config_path))


class TestDecomposerCore:
    """Test DecomposerCore wiring."""

    def test_parse_uses_context(self, configurations):
        """Parsing uses the root type and path context."""
        core = DecomposerCore(
            configurations,
            parent_work_item_type="Epic",
            path_context=PathContext(area_path="Area"),
        )
        result = core.parse_text("Task: Loose")
        assert result.nodes[0].area_path == "Area"
        assert len(result.warnings) == 1
        assert core.hierarchy_manager.get_hierarchy() == []

    def test_import_updates_hierarchy(self, configurations):
        """Importing fills the hierarchy manager."""
        core = DecomposerCore(configurations, parent_work_item_type="Epic")
        result = core.import_text("Feature: A\n- User Story: B")
        assert result.success is True
        assert core.hierarchy_manager.get_hierarchy_count() == 2

    def test_errors_collected(self, configurations):
        """Recoverable errors are collected on the core by default."""
        core = DecomposerCore(configurations, parent_work_item_type="Epic")
        core.hierarchy_manager.add_item("Feature", "ghost")
        assert len(core.errors) == 1

    def test_plan_batches(self, configurations):
        """Batches are planned from the current hierarchy."""
        core = DecomposerCore(configurations, parent_work_item_type="Epic")
        core.import_text("".join(f"Feature: F{i}\n" for i in range(25)))
        batch_config, batches = core.plan_batches()
        assert batch_config.batch_size == 5
        assert len(batches) == 5

    def test_plan_batches_empty(self, configurations):
        """An empty hierarchy has no batches."""
        batch_config, batches = DecomposerCore(configurations).plan_batches()
        assert batch_config.batch_size == 0
        assert batches == []
