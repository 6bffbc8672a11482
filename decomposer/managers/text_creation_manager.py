"""
TextHierarchyCreationManager merging parsed text into the hierarchy.
"""

import logging
from typing import List

from decomposer.constants import TYPE_TITLE_SEPARATOR
from decomposer.managers.hierarchy_manager import HierarchyManager
from decomposer.managers.node_finder import NodeFinder
from decomposer.managers.text_parser import TextHierarchyParser
from decomposer.models.config import PathContext, WorkItemConfigurations
from decomposer.models.node import WorkItemNode
from decomposer.models.parse import HierarchyCreationResult

logger = logging.getLogger(__name__)


class TextHierarchyCreationManager:
    """
    Creates hierarchy nodes from text and appends them to a HierarchyManager.

    Parsed roots are placed after the existing roots. Nothing is merged when
    the text has any hard error.
    """

    def __init__(
        self,
        hierarchy_manager: HierarchyManager,
        configurations: WorkItemConfigurations,
    ) -> None:
        self.hierarchy_manager = hierarchy_manager
        self.parser = TextHierarchyParser(configurations)

    def update_configurations(self, configurations: WorkItemConfigurations) -> None:
        self.parser.update_configurations(configurations)

    def _inherited_path_context(self, current: List[WorkItemNode]) -> PathContext:
        # First existing root wins; otherwise the manager's own context
        if current:
            return PathContext(
                area_path=current[0].area_path,
                iteration_path=current[0].iteration_path,
            )
        return self.hierarchy_manager.get_path_context()

    def create_work_item_hierarchy_from_text(self, text: str) -> HierarchyCreationResult:
        """Parse text and append the resulting nodes to the hierarchy.

        Args:
            text: Hierarchy text.

        Returns:
            HierarchyCreationResult. Errors and warnings are "Line N: ..."
            strings.
        """
        if not text or not text.strip():
            return HierarchyCreationResult(success=False, errors=["Input text is empty."])

        trimmed = text.strip()
        if TYPE_TITLE_SEPARATOR not in trimmed:
            return HierarchyCreationResult(
                success=False,
                errors=[
                    'Text must contain work items in the format "Type: Title". '
                    "No colon (:) separators found."
                ],
            )

        current = self.hierarchy_manager.get_hierarchy()
        parse_result = self.parser.parse_work_item_text(
            trimmed,
            self._inherited_path_context(current),
            self.hierarchy_manager.get_parent_work_item_type(),
        )

        if not parse_result.success:
            return HierarchyCreationResult(
                success=False,
                errors=parse_result.error_messages(),
                warnings=parse_result.warning_messages(),
            )

        if not parse_result.nodes:
            return HierarchyCreationResult(
                success=False,
                errors=["No valid work items found in the input text."],
            )

        self.hierarchy_manager.set_initial_hierarchy(
            current + parse_result.nodes,
            self.hierarchy_manager.get_parent_work_item_type(),
        )
        created = NodeFinder.count_nodes(parse_result.nodes)
        logger.debug(
            "Created %d work items from text (%d warnings)", created, len(parse_result.warnings)
        )

        return HierarchyCreationResult(
            success=True,
            updated_hierarchy=self.hierarchy_manager.get_hierarchy(),
            warnings=parse_result.warning_messages(),
            created_items_count=created,
        )
