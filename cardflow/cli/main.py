"""
Main CLI entry point for Cardflow.

This module defines the main Click CLI group and imports all subcommands.
"""

import logging

import click
from rich.console import Console
from rich.table import Table

from cardflow import __version__
from cardflow.core import get_config, get_logger, setup_logging
from cardflow.cli.layout import layout
from cardflow.cli.run import run
from cardflow.cli.validate import validate
from cardflow.data.storage import JSONWorkflowStore

console = Console()
logger = get_logger(__name__)


@click.command("list")
def list_workflows():
    """
    List workflows saved in the configured store.
    """
    config = get_config()
    records = JSONWorkflowStore(config.workflows_path).list()

    if not records:
        console.print(f"[yellow]No saved workflows in {config.workflows_path}[/yellow]")
        return

    table = Table(title="Saved Workflows")
    table.add_column("ID", no_wrap=True)
    table.add_column("Name")
    table.add_column("Nodes", justify="right")
    table.add_column("Symbols")
    table.add_column("Updated")

    for record in records:
        table.add_row(
            record.id,
            record.name,
            str(len(record.nodes)),
            ", ".join(record.symbols),
            record.updated_at.strftime("%Y-%m-%d %H:%M"),
        )

    console.print(table)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--log-to-file", is_flag=True, help="Also write logs to a timestamped file in log_dir")
def cli(verbose: bool, log_to_file: bool):
    """
    Cardflow - visual analysis workflow engine

    Validate, lay out and run card-based analysis workflows saved as JSON.

    Examples:

      # Check a workflow before running it
      cardflow validate workflow.json -s TCS

      # Run it against two symbols
      cardflow run workflow.json -s TCS -s INFY --yes

      # List saved workflows
      cardflow list
    """
    config = get_config()
    setup_logging(
        level=logging.DEBUG if verbose else getattr(logging, config.log_level),
        log_to_file=log_to_file,
        log_dir=config.log_dir,
    )
    if verbose:
        logger.debug("Verbose logging enabled")
    logger.debug(f"Loaded configuration from {config.data_dir}")


# Register commands
cli.add_command(validate)
cli.add_command(layout)
cli.add_command(run)
cli.add_command(list_workflows)


if __name__ == "__main__":
    cli()
