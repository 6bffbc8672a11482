"""
Type commands: inspect the work item type rules.
"""
import json
from pathlib import Path
from typing import Optional

import click

from decomposer.commands.common import build_core, types_option


@click.group(name="types")
def types_group():
    """Inspect work item type rules."""
    pass


@types_group.command(name="show")
@types_option
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
def show(types_path: Optional[Path], json_output: bool):
    """List configured types and their allowed child types."""
    core = build_core(types_path)
    configurations = core.configurations

    if json_output:
        click.echo(json.dumps(configurations.to_dict(), indent=2))
        return

    if not configurations.type_names():
        click.echo("No work item types configured.")
        return

    for type_name in configurations.type_names():
        rule = configurations.rule_for(type_name)
        if rule is None:
            children = "(no rule)"
        elif not rule:
            children = "(none)"
        else:
            children = ", ".join(rule)
        click.echo(f"{type_name}: {children}")


@types_group.command(name="children")
@click.argument("parent_type")
@types_option
def children(parent_type: str, types_path: Optional[Path]):
    """List the types allowed directly under PARENT_TYPE."""
    core = build_core(types_path)
    allowed = core.hierarchy_manager.get_allowed_child_types(parent_type)
    if not allowed:
        click.echo(f"{parent_type} cannot have children.")
        return
    for child_type in allowed:
        click.echo(child_type)
