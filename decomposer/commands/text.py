"""
Text commands: parse, import and describe the "Type: Title" hierarchy format.
"""
import json
from pathlib import Path
from typing import Optional

import click

from decomposer.commands.common import (
    build_core,
    display_issues,
    display_tree,
    root_type_option,
    types_option,
)
from decomposer.utils import format_hierarchy_text


@click.group()
def text():
    """Work with hierarchy text ("- Type: Title" lines)."""
    pass


@text.command(name="parse")
@click.argument("file", type=click.File("r"))
@types_option
@root_type_option
@click.option("--area-path", help="Area path copied onto every item.")
@click.option("--iteration-path", help="Iteration path copied onto every item.")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def parse(ctx, file, types_path: Optional[Path], root_type: Optional[str],
          area_path: Optional[str], iteration_path: Optional[str], json_output: bool):
    """Parse FILE and report the tree, errors and warnings.

    Use - to read from stdin. Exits with status 1 if any line has an error.
    """
    core = build_core(types_path, root_type, area_path, iteration_path)
    result = core.parse_text(file.read())

    if json_output:
        click.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        display_tree(result.nodes)
        display_issues("Errors", result.error_messages())
        display_issues("Warnings", result.warning_messages())

    if not result.success:
        ctx.exit(1)


@text.command(name="import")
@click.argument("file", type=click.File("r"))
@types_option
@root_type_option
@click.option("--area-path", help="Area path copied onto every item.")
@click.option("--iteration-path", help="Iteration path copied onto every item.")
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def import_text(ctx, file, types_path: Optional[Path], root_type: Optional[str],
                area_path: Optional[str], iteration_path: Optional[str], json_output: bool):
    """Import FILE into a fresh draft hierarchy and show the result.

    Unlike parse, the items go through the hierarchy manager, so the output
    shows promote/demote eligibility. Nothing is imported if any line has an
    error.
    """
    core = build_core(types_path, root_type, area_path, iteration_path)
    result = core.import_text(file.read())

    if json_output:
        click.echo(json.dumps(result.model_dump(mode="json", by_alias=False), indent=2))
    elif result.success:
        display_tree(result.updated_hierarchy or [], show_flags=True)
        click.echo(f"\nCreated {result.created_items_count} work item(s).")

    if not json_output:
        display_issues("Errors", result.errors)
        display_issues("Warnings", result.warnings)

    if not result.success:
        ctx.exit(1)


@text.command(name="normalize")
@click.argument("file", type=click.File("r"))
@types_option
@click.pass_context
def normalize(ctx, file, types_path: Optional[Path]):
    """Re-emit FILE in canonical form (configured type casing, one space after dashes)."""
    core = build_core(types_path)
    result = core.parse_text(file.read())
    if not result.success:
        display_issues("Errors", result.error_messages())
        ctx.exit(1)
    click.echo(format_hierarchy_text(result.nodes))


@text.command(name="template")
@types_option
@root_type_option
def template(types_path: Optional[Path], root_type: Optional[str]):
    """Show the text format and an example for the configured types."""
    core = build_core(types_path)
    tmpl = core.parser.generate_work_item_format_template(root_type)
    click.echo(tmpl.description)
    click.echo()
    click.echo(tmpl.pattern)
    click.echo()
    click.echo("Example:")
    click.echo(tmpl.example)


@text.command(name="examples")
@types_option
def examples(types_path: Optional[Path]):
    """Show an example decomposition for every type that has children."""
    core = build_core(types_path)
    generated = core.parser.generate_decomposition_examples()
    if not generated:
        click.echo("No configured type allows children.")
        return
    for example in generated:
        click.echo(f"# {example.parent_type}")
        click.echo(example.example)
        click.echo()
