"""
Data models for the decomposer package.

Import models explicitly from their modules:
    from decomposer.models.node import WorkItemNode
    from decomposer.models.config import WorkItemConfigurations, PathContext
    from decomposer.models.parse import ParseResult, ParseIssue
"""

from .config import PathContext, WorkItemConfigurations, WorkItemTypeConfiguration
from .node import WorkItemNode

__all__ = [
    "PathContext",
    "WorkItemConfigurations",
    "WorkItemTypeConfiguration",
    "WorkItemNode",
]
