"""
Shared helpers for decomposer commands.
"""
from pathlib import Path
from typing import List, Optional

import click

from decomposer.core import DecomposerCore
from decomposer.exceptions import DecomposerError
from decomposer.models.config import PathContext
from decomposer.models.node import WorkItemNode


def types_option(func):
    """--types option shared by every command."""
    return click.option(
        "-t", "--types", "types_path",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="JSON file mapping type names to allowed child types "
             "(default: work_item_types in config.json).",
    )(func)


def root_type_option(func):
    """--root-type option for commands that need the decomposed item's type."""
    return click.option(
        "-r", "--root-type",
        help="Type of the work item being decomposed (e.g. Epic).",
    )(func)


def build_core(
    types_path: Optional[Path],
    root_type: Optional[str] = None,
    area_path: Optional[str] = None,
    iteration_path: Optional[str] = None,
) -> DecomposerCore:
    """Build a DecomposerCore, turning configuration errors into click errors."""
    try:
        return DecomposerCore(
            types_path=types_path,
            parent_work_item_type=root_type,
            path_context=PathContext(area_path=area_path, iteration_path=iteration_path),
        )
    except DecomposerError as e:
        raise click.ClickException(str(e))


def display_tree(nodes: List[WorkItemNode], show_flags: bool = False, depth: int = 0) -> None:
    """Print a forest as an indented tree."""
    for node in nodes:
        flags = ""
        if show_flags:
            marks = [name for name, on in (("promote", node.can_promote), ("demote", node.can_demote)) if on]
            flags = f"  [{', '.join(marks)}]" if marks else ""
        click.echo(f"{'  ' * depth}- {node.type}: {node.title}{flags}")
        display_tree(node.children, show_flags, depth + 1)


def display_issues(label: str, messages: List[str], err: bool = True) -> None:
    if not messages:
        return
    click.echo(f"{label}:", err=err)
    for message in messages:
        click.echo(f"  {message}", err=err)
