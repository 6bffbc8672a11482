"""
TextHierarchyParser turning indented "Type: Title" text into work item nodes.

Format, one item per line:

    Epic: Checkout revamp
    - Feature: Payment options
    -- User Story: Pay with card
    - Feature: Order summary

Dash count is the depth. Hard errors (bad format, unknown type, skipped
depth) drop the line; hierarchy rule mismatches are only warnings.
"""

import logging
import re
from typing import List, NamedTuple, Optional, Tuple

from decomposer.constants import (
    PARSE_EMPTY_TITLE,
    PARSE_EMPTY_TYPE,
    PARSE_FIRST_LINE_DEPTH,
    PARSE_MISSING_SEPARATOR,
    TYPE_TITLE_SEPARATOR,
)
from decomposer.models.config import PathContext, WorkItemConfigurations
from decomposer.models.node import WorkItemNode
from decomposer.models.parse import (
    CreatableTypes,
    DecompositionExample,
    FormatTemplate,
    ParseIssue,
    ParseResult,
)

logger = logging.getLogger(__name__)

_DEPTH_PATTERN = re.compile(r"^(-*)\s*")


class ParsedLine(NamedTuple):
    """A syntactically valid line."""

    depth: int
    type: str
    title: str


class TextHierarchyParser:
    """
    Parses and validates text-based hierarchy input.

    Handles:
    - Line syntax (dashes, type, colon, title)
    - Depth progression (one level at a time)
    - Case-insensitive type matching against the configuration
    - Parent/child rule warnings
    - Format help and examples generated from the configuration
    """

    def __init__(self, configurations: WorkItemConfigurations) -> None:
        """
        Initialize TextHierarchyParser.

        Args:
            configurations: Type configuration used to validate type names.
        """
        self.configurations = configurations

    def update_configurations(self, configurations: WorkItemConfigurations) -> None:
        self.configurations = configurations

    # =========================================================================
    # Parsing
    # =========================================================================

    def parse_work_item_text(
        self,
        text: str,
        path_context: Optional[PathContext] = None,
        parent_work_item_type: Optional[str] = None,
    ) -> ParseResult:
        """Parse hierarchy text into work item nodes.

        Args:
            text: Input text. Blank lines are ignored; lines are trimmed.
            path_context: Area/iteration path copied onto every node.
            parent_work_item_type: Type of the decomposed item; root lines are
                checked against it (warning only) when it is configured.

        Returns:
            ParseResult with the root nodes built so far, line-numbered
            errors and warnings. Line numbers count non-blank lines, from 1.
        """
        lines = [line.strip() for line in text.splitlines()]
        lines = [line for line in lines if line]
        path_context = path_context or PathContext()

        errors: List[ParseIssue] = []
        warnings: List[ParseIssue] = []
        nodes: List[WorkItemNode] = []
        stack: List[Tuple[WorkItemNode, int]] = []

        logger.debug("Starting text parse with %d lines", len(lines))

        for line_number, line in enumerate(lines, start=1):
            try:
                parsed, error = self.parse_line(line)
                if error is not None:
                    errors.append(ParseIssue(line_number=line_number, line=line, error=error))
                    continue

                depth_error = self._check_depth(parsed.depth, stack)
                if depth_error is not None:
                    errors.append(ParseIssue(line_number=line_number, line=line, error=depth_error))
                    continue

                type_name = self.configurations.find_type_name(parsed.type)
                if type_name is None:
                    errors.append(
                        ParseIssue(
                            line_number=line_number,
                            line=line,
                            error=(
                                f'Unknown work item type: "{parsed.type}". Available types that '
                                f"can be created in decomposer: "
                                f"{', '.join(self._creatable_in_decomposition())}"
                            ),
                        )
                    )
                    continue

                node = WorkItemNode(
                    title=parsed.title,
                    type=type_name,
                    area_path=path_context.area_path,
                    iteration_path=path_context.iteration_path,
                )

                while stack and stack[-1][1] >= parsed.depth:
                    stack.pop()

                if stack:
                    parent = stack[-1][0]
                    node.parent_id = parent.id
                    parent.children.append(node)
                    if not self.can_be_child_of_parent(type_name, parent.type):
                        warnings.append(self._rule_warning(line_number, line, type_name, parent.type))
                else:
                    nodes.append(node)
                    if (
                        parent_work_item_type
                        and self.configurations.has(parent_work_item_type)
                        and not self.can_be_child_of_parent(type_name, parent_work_item_type)
                    ):
                        warnings.append(
                            self._rule_warning(line_number, line, type_name, parent_work_item_type)
                        )

                stack.append((node, parsed.depth))
            except ValueError as e:
                logger.exception("Error parsing line %d", line_number)
                errors.append(
                    ParseIssue(line_number=line_number, line=line, error=f"Unexpected error: {e}")
                )

        result = ParseResult(
            success=not errors,
            nodes=nodes,
            errors=errors,
            warnings=warnings,
        )
        logger.debug(
            "Parse completed: success=%s nodes=%d errors=%d warnings=%d",
            result.success,
            len(nodes),
            len(errors),
            len(warnings),
        )
        return result

    @staticmethod
    def parse_line(line: str) -> Tuple[Optional[ParsedLine], Optional[str]]:
        """Parse the syntax of one trimmed line.

        Returns:
            (ParsedLine, None) on success, (None, error message) otherwise.
        """
        match = _DEPTH_PATTERN.match(line)
        depth = len(match.group(1))
        remaining = line[match.end():]

        separator_index = remaining.find(TYPE_TITLE_SEPARATOR)
        if separator_index == -1:
            return None, PARSE_MISSING_SEPARATOR

        work_item_type = remaining[:separator_index].strip()
        title = remaining[separator_index + 1:].strip()

        if not work_item_type:
            return None, PARSE_EMPTY_TYPE
        if not title:
            return None, PARSE_EMPTY_TITLE

        return ParsedLine(depth, work_item_type, title), None

    @staticmethod
    def _check_depth(depth: int, stack: List[Tuple[WorkItemNode, int]]) -> Optional[str]:
        if stack:
            last_depth = stack[-1][1]
            if depth > last_depth + 1:
                return (
                    f"Invalid depth progression. Cannot go from depth {last_depth} to {depth}. "
                    f"Maximum allowed is {last_depth + 1}."
                )
        elif depth > 0:
            return PARSE_FIRST_LINE_DEPTH
        return None

    @staticmethod
    def _rule_warning(line_number: int, line: str, child_type: str, parent_type: str) -> ParseIssue:
        return ParseIssue(
            line_number=line_number,
            line=line,
            error=(
                f'Work item type "{child_type}" may not be a valid child of "{parent_type}" '
                f"according to your project's hierarchy rules."
            ),
        )

    def can_be_child_of_parent(self, child_type: str, parent_type: str) -> bool:
        """Check a parent/child pair, ignoring case.

        A parent without configured rules accepts anything.
        """
        rules = self.configurations.rule_for(parent_type)
        if rules is None:
            return True
        normalized = child_type.lower()
        return any(rule.lower() == normalized for rule in rules)

    # =========================================================================
    # Type overview
    # =========================================================================

    def get_creatable_work_item_types(self) -> CreatableTypes:
        """Get the types that take part in configured hierarchy rules.

        Returns:
            CreatableTypes with:
            - all: types that have children or are someone's child
            - child: types that appear as someone's child
            - root: types in all that are nobody's child
        """
        all_types: List[str] = []
        child_types: List[str] = []

        for type_name in self.configurations.type_names():
            rules = self.configurations.rule_for(type_name)
            if not rules:
                continue
            if type_name not in all_types:
                all_types.append(type_name)
            for child in rules:
                if child not in all_types:
                    all_types.append(child)
                if child not in child_types:
                    child_types.append(child)

        root_types = [t for t in all_types if t not in child_types]
        return CreatableTypes(root=root_types, child=child_types, all=all_types)

    def _creatable_in_decomposition(self) -> List[str]:
        creatable = self.get_creatable_work_item_types()
        return [t for t in creatable.all if t in creatable.child]

    # =========================================================================
    # Help text
    # =========================================================================

    def generate_work_item_format_template(
        self, parent_work_item_type: Optional[str] = None
    ) -> FormatTemplate:
        """Build format help based on the current configuration.

        Args:
            parent_work_item_type: When given and configured, the example is
                built from the types allowed directly under it.

        Returns:
            FormatTemplate with pattern, description and example.
        """
        all_creatable = self._creatable_in_decomposition()
        creatable = valid_root_types = all_creatable

        if parent_work_item_type and self.configurations.has(parent_work_item_type):
            allowed = self.configurations.rule_for(parent_work_item_type) or []
            if allowed:
                lowered = {a.lower() for a in allowed}
                valid_root_types = [t for t in creatable if t.lower() in lowered]
                if valid_root_types:
                    creatable = valid_root_types

        type_lines = "\n".join(f"- {t}" for t in creatable)
        pattern = (
            "Hierarchy Format:\n"
            "- Use dashes (-) to indicate depth level\n"
            "- Follow with a space, then work item type name, then colon (:), then title\n"
            "- Type names are case-insensitive but must match exactly\n"
            "- No skipping depth levels (e.g., no -- directly after root)\n"
            "\n"
            "Format: [dashes] [Type]: [Title]\n"
            "\n"
            "Depth levels:\n"
            "- Root level: No dashes\n"
            "- Level 1: Single dash (-)\n"
            "- Level 2: Double dash (--)\n"
            "- Level 3: Triple dash (---)\n"
            "- And so on...\n"
            "\n"
            "Creatable Work Item Types (can be created in decompositions):\n"
            f"{type_lines}"
        ).strip()

        description = (
            "Text format for creating work item hierarchies. Each line represents one work item.\n"
            "Use dashes to indicate parent-child relationships. Only shows types that can be "
            "created through decomposition."
        )

        return FormatTemplate(
            pattern=pattern,
            description=description,
            example=self._build_example(valid_root_types, all_creatable).strip(),
        )

    def _build_example(self, valid_root_types: List[str], creatable: List[str]) -> str:
        if valid_root_types:
            root_type = valid_root_types[0]
            root_children = [c for c in self.configurations.rule_for(root_type) or [] if c in creatable]
            if not root_children:
                return f"{root_type}: Main task\n{root_type}: Additional task"

            primary = root_children[0]
            secondary = root_children[1] if len(root_children) > 1 else primary
            grandchildren = [g for g in self.configurations.rule_for(primary) or [] if g in creatable]
            if grandchildren:
                return (
                    f"{root_type}: Implement user authentication system\n"
                    f"- {primary}: Design authentication flow\n"
                    f"- {primary}: Create user login functionality\n"
                    f"-- {grandchildren[0]}: Build login form UI\n"
                    f"-- {grandchildren[0]}: Implement password validation\n"
                    f"- {primary}: Add user registration\n"
                    f"{root_type}: User profile management features"
                )
            return (
                f"{root_type}: Implement user authentication system\n"
                f"- {primary}: Design authentication flow\n"
                f"- {primary}: Create user login functionality\n"
                f"- {secondary}: Additional implementation work\n"
                f"{root_type}: User profile management features"
            )

        if creatable:
            first = creatable[0]
            second = creatable[1] if len(creatable) > 1 else first
            return (
                f"{first}: Main feature implementation\n"
                f"- {second}: Core functionality\n"
                f"-- {second}: Implementation details\n"
                f"- {second}: Additional requirements\n"
                f"{first}: Secondary feature enhancement"
            )

        return (
            "User Story: Main feature implementation\n"
            "- Task: Core functionality\n"
            "-- Task: Implementation details\n"
            "- Task: Additional requirements\n"
            "User Story: Secondary feature enhancement"
        )

    def generate_decomposition_examples(self) -> List[DecompositionExample]:
        """Build one example text per type that can be decomposed."""
        examples: List[DecompositionExample] = []

        for parent_type in self.configurations.type_names():
            direct_children = self.configurations.rule_for(parent_type)
            if not direct_children:
                continue

            primary = direct_children[0]
            lines = [f"{primary}: Main {primary.lower()}"]

            grandchildren = self.configurations.rule_for(primary) or []
            if grandchildren:
                primary_grandchild = grandchildren[0]
                lines.append(f"- {primary_grandchild}: Sub-{primary_grandchild.lower()}")

                great_grandchildren = self.configurations.rule_for(primary_grandchild) or []
                if great_grandchildren:
                    great_grandchild = great_grandchildren[0]
                    lines.append(f"-- {great_grandchild}: Nested {great_grandchild.lower()}")

                    fourth_level = self.configurations.rule_for(great_grandchild) or []
                    if fourth_level:
                        lines.append(f"--- {fourth_level[0]}: Deep nested {fourth_level[0].lower()}")

                if len(grandchildren) > 1:
                    lines.append(f"- {grandchildren[1]}: Another {grandchildren[1].lower()}")

            lines.append(f"{primary}: Second {primary.lower()}")

            if len(direct_children) > 1:
                secondary = direct_children[1]
                lines.append(f"{secondary}: Related {secondary.lower()}")
                secondary_children = self.configurations.rule_for(secondary) or []
                if secondary_children:
                    lines.append(
                        f"- {secondary_children[0]}: Sub-item for {secondary.lower()}"
                    )

            if len(direct_children) > 2:
                lines.append(f"{direct_children[2]}: Additional {direct_children[2].lower()}")

            examples.append(DecompositionExample(parent_type=parent_type, example="\n".join(lines)))

        return examples

    @staticmethod
    def get_format_reference() -> List[Tuple[str, str]]:
        """Short (code, description) reference of the depth markers."""
        return [
            ("Type: Title", "root level item"),
            ("- Type: Title", "1st level child"),
            ("-- Type: Title", "2nd level child"),
            ("--- Type: Title", "3rd level child"),
        ]
