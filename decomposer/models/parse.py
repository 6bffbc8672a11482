"""
Result models for text hierarchy parsing and creation.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .node import WorkItemNode


class ParseIssue(BaseModel):
    """A line-level error or warning produced by the text parser."""

    line_number: int
    line: str
    error: str

    def format(self) -> str:
        """Render as "Line N: message"."""
        return f"Line {self.line_number}: {self.error}"


class ParseResult(BaseModel):
    """Outcome of parsing hierarchy text.

    success is True iff there were no errors. nodes always holds whatever
    could be built, even on failure.
    """

    success: bool
    nodes: List[WorkItemNode] = Field(default_factory=list)
    errors: List[ParseIssue] = Field(default_factory=list)
    warnings: List[ParseIssue] = Field(default_factory=list)

    def error_messages(self) -> List[str]:
        return [issue.format() for issue in self.errors]

    def warning_messages(self) -> List[str]:
        return [issue.format() for issue in self.warnings]


class FormatTemplate(BaseModel):
    """Help text describing the hierarchy text format."""

    pattern: str
    description: str
    example: str


class DecompositionExample(BaseModel):
    """Example hierarchy text for decomposing one parent type."""

    parent_type: str
    example: str


class CreatableTypes(BaseModel):
    """Types that take part in the configured hierarchy rules."""

    root: List[str] = Field(default_factory=list)
    child: List[str] = Field(default_factory=list)
    all: List[str] = Field(default_factory=list)


class HierarchyCreationResult(BaseModel):
    """Outcome of merging parsed text into the hierarchy."""

    success: bool
    updated_hierarchy: Optional[List[WorkItemNode]] = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    created_items_count: int = 0
