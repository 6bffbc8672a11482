"""
Batch commands: plan the bulk submission of a hierarchy.
"""
import json
from pathlib import Path
from typing import Optional

import click

from decomposer.commands.common import build_core, display_issues, root_type_option, types_option
from decomposer.managers.node_finder import NodeFinder


@click.group()
def batch():
    """Plan bulk submission."""
    pass


@batch.command(name="plan")
@click.argument("file", type=click.File("r"))
@types_option
@root_type_option
@click.option("-j", "--json", "json_output", is_flag=True, help="Output in JSON format.")
@click.pass_context
def plan(ctx, file, types_path: Optional[Path], root_type: Optional[str], json_output: bool):
    """Import FILE and show how it would be split into submission batches."""
    core = build_core(types_path, root_type)
    result = core.import_text(file.read())
    if not result.success:
        display_issues("Errors", result.errors)
        ctx.exit(1)

    batch_config, batches = core.plan_batches()

    if json_output:
        click.echo(json.dumps({
            "total": core.hierarchy_manager.get_hierarchy_count(),
            "batch_size": batch_config.batch_size,
            "max_concurrent_batches": batch_config.max_concurrent_batches,
            "child_concurrency": batch_config.child_concurrency,
            "batches": [[node.title for node in b] for b in batches],
        }, indent=2))
        return

    click.echo(f"Total work items: {core.hierarchy_manager.get_hierarchy_count()}")
    click.echo(
        f"Batch size: {batch_config.batch_size}, "
        f"concurrent batches: {batch_config.max_concurrent_batches}, "
        f"child concurrency: {batch_config.child_concurrency}"
    )
    for index, roots in enumerate(batches, 1):
        click.echo(f"Batch {index}: {len(roots)} root(s), {NodeFinder.count_nodes(roots)} item(s)")
        for node in roots:
            click.echo(f"  - {node.type}: {node.title}")
