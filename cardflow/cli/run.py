"""
Run command for executing a saved workflow from the command line.

Results come from the built-in EchoResultProvider, which describes each
(card, symbol) step instead of analyzing data. Useful for checking a
workflow's run plan, keys and validation gate without a data source.
"""

import sys
from pathlib import Path
from typing import Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cardflow.cli.utils import build_session, read_workflow_file
from cardflow.cli.validate import print_issues
from cardflow.core import get_config, get_logger
from cardflow.core.exceptions import ConfirmationRequired, RunBlockedError
from cardflow.data.storage import JSONWorkflowStore
from cardflow.workflows.engine import RunReport

console = Console()
logger = get_logger(__name__)


def print_report(report: RunReport) -> None:
    """Render per-step results and errors, then the summary line."""
    table = Table(title="Run Results")
    table.add_column("Key", no_wrap=True)
    table.add_column("Status")
    table.add_column("Detail")

    for key, value in report.results.items():
        detail = value.get("summary", "") if isinstance(value, dict) else str(value)
        table.add_row(key, "[green]success[/green]", detail)
    for key, message in report.errors.items():
        table.add_row(key, "[red]error[/red]", message)

    console.print(table)

    style = {"completed": "green", "error": "red", "cancelled": "yellow"}.get(report.status, "white")
    console.print(f"[{style}]Status: {report.status}[/{style}]  {report.summary()}")


@click.command()
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--symbol", "-s", "symbols", multiple=True, help="Symbol to analyze (repeatable)")
@click.option("--yes", "-y", is_flag=True, help="Run without confirming warnings")
@click.option("--save", is_flag=True, help="Save the workflow to the configured store after the run")
def run(workflow_file: Path, symbols: Tuple[str, ...], yes: bool, save: bool):
    """
    Validate and run a workflow.

    Blocking issues stop the run. Warnings ask for confirmation unless
    --yes is given.

    Examples:

      # Run against the symbols saved in the file
      cardflow run workflow.json

      # Run against two symbols without prompting
      cardflow run workflow.json -s TCS -s INFY --yes
    """
    record = read_workflow_file(workflow_file)
    session = build_session(record, symbols, with_provider=True)

    console.print(Panel.fit(
        f"[bold cyan]Running Workflow[/bold cyan]\n"
        f"Name: {session.name}\n"
        f"Cards: {len(session.graph.card_nodes)}\n"
        f"Symbols: {', '.join(session.symbols) or '-'}",
        title="Cardflow Run"
    ))

    try:
        report = session.request_run(confirm=yes)
    except RunBlockedError as e:
        print_issues(e.validation)
        console.print(f"[bold red]{e}[/bold red]")
        sys.exit(1)
    except ConfirmationRequired as e:
        print_issues(e.validation)
        if not click.confirm("Run anyway?", default=True):
            console.print("[yellow]Run cancelled.[/yellow]")
            return
        report = session.request_run(confirm=True)

    print_report(report)

    if save:
        config = get_config()
        stored = session.save(JSONWorkflowStore(config.workflows_path))
        console.print(f"[green]Saved workflow {stored.id} to {config.workflows_path}[/green]")
