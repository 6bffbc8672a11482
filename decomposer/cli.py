"""
Command-line interface for decomposer.
"""
from pathlib import Path
from typing import Optional

import click

from decomposer.commands.batch import batch
from decomposer.commands.text import text
from decomposer.commands.types import types_group
from decomposer.constants import ConfigManager, get_log_level, set_config_manager
from decomposer.logging import setup_logging


@click.group()
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to config.json (default: .decomposer/config.json).")
@click.option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR).")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path),
              help="Also write logs to this file.")
def cli(config_path: Optional[Path], log_level: Optional[str], log_file: Optional[Path]):
    """Decompose a work item into a hierarchy of typed child work items."""
    if config_path is not None:
        set_config_manager(ConfigManager(config_path=config_path))
    setup_logging(log_level or get_log_level(), log_file)


cli.add_command(text)
cli.add_command(types_group)
cli.add_command(batch)


if __name__ == '__main__':
    cli()
