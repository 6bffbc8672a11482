"""
DecomposerCore - wiring for the decomposer command line.

Loads the type configuration and builds the hierarchy manager, the text
parser and the text creation manager around it.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from decomposer.constants import DEFAULT_FALLBACK_CHILD_TYPE, ConfigManager, get_config_manager
from decomposer.managers import (
    BatchConfig,
    HierarchyManager,
    TextHierarchyCreationManager,
    TextHierarchyParser,
    calculate_optimal_batch_config,
    calculate_total_work_items,
    create_batches,
)
from decomposer.managers.state_manager import ErrorHandler
from decomposer.models.config import PathContext, WorkItemConfigurations
from decomposer.models.node import WorkItemNode
from decomposer.models.parse import HierarchyCreationResult, ParseResult

logger = logging.getLogger(__name__)


def load_configurations(
    types_path: Optional[Path] = None,
    config: Optional[ConfigManager] = None,
) -> WorkItemConfigurations:
    """Load the type configuration.

    Args:
        types_path: Standalone JSON type map. Takes precedence.
        config: ConfigManager whose "work_item_types" key is used otherwise.

    Returns:
        WorkItemConfigurations (possibly empty).

    Raises:
        ConfigurationError: If the configuration is malformed.
    """
    if types_path is not None:
        configurations = WorkItemConfigurations.from_json_file(types_path)
    else:
        config = config or get_config_manager()
        configurations = WorkItemConfigurations.from_mapping(config.get_dict("work_item_types", {}))
    logger.debug("Loaded %d work item types", len(configurations.type_names()))
    return configurations


class DecomposerCore:
    """
    Orchestrates the managers for one decomposition session.

    - HierarchyManager: The draft forest and its operations
    - TextHierarchyParser: Text parsing and format help
    - TextHierarchyCreationManager: Text import into the forest
    """

    def __init__(
        self,
        configurations: Optional[WorkItemConfigurations] = None,
        types_path: Optional[Path] = None,
        parent_work_item_type: Optional[str] = None,
        path_context: Optional[PathContext] = None,
        error_handler: Optional[ErrorHandler] = None,
        config: Optional[ConfigManager] = None,
    ) -> None:
        """
        Initialize DecomposerCore.

        Args:
            configurations: Type configuration; loaded from types_path or the
                config file when omitted.
            types_path: Standalone JSON type map.
            parent_work_item_type: Type of the work item being decomposed.
            path_context: Area/iteration path inherited by new nodes.
            error_handler: Receives recoverable error messages.
            config: ConfigManager; defaults to the singleton.
        """
        self.config = config or get_config_manager()
        if configurations is None:
            configurations = load_configurations(types_path, self.config)
        self.configurations = configurations
        self.errors: List[str] = []

        self.hierarchy_manager = HierarchyManager(
            self.configurations,
            parent_work_item_type=parent_work_item_type,
            error_handler=error_handler or self.errors.append,
            path_context=path_context,
            fallback_child_type=self.config.get_str("fallback_child_type", DEFAULT_FALLBACK_CHILD_TYPE),
        )
        self.parser = TextHierarchyParser(self.configurations)
        self.text_creation_manager = TextHierarchyCreationManager(
            self.hierarchy_manager, self.configurations
        )

    def parse_text(self, text: str) -> ParseResult:
        """Parse text without touching the hierarchy."""
        return self.parser.parse_work_item_text(
            text,
            self.hierarchy_manager.get_path_context(),
            self.hierarchy_manager.get_parent_work_item_type(),
        )

    def import_text(self, text: str) -> HierarchyCreationResult:
        """Parse text and append the nodes to the hierarchy."""
        return self.text_creation_manager.create_work_item_hierarchy_from_text(text)

    def plan_batches(self) -> Tuple[BatchConfig, List[List[WorkItemNode]]]:
        """Plan submission batches for the current hierarchy.

        Returns:
            (BatchConfig, batches)
        """
        hierarchy: List[WorkItemNode] = self.hierarchy_manager.get_hierarchy()
        total = calculate_total_work_items(hierarchy)
        batch_config: BatchConfig = calculate_optimal_batch_config(total)
        if total == 0:
            return batch_config, []
        return batch_config, create_batches(hierarchy, batch_config.batch_size)
