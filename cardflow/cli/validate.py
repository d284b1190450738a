"""
Validate command for checking a saved workflow before it runs.
"""

import sys
from pathlib import Path
from typing import Tuple

import click
from rich.console import Console
from rich.table import Table

from cardflow.cli.utils import build_session, read_workflow_file
from cardflow.core import get_logger
from cardflow.graph.validator import ValidationResult, run_gate

console = Console()
logger = get_logger(__name__)

SEVERITY_STYLES = {
    "error": "bold red",
    "warning": "yellow",
    "info": "cyan",
}


def print_issues(validation: ValidationResult) -> None:
    """Render validation issues as a table followed by the counts."""
    if not validation.issues:
        console.print("[green]No issues found.[/green]")
        return

    table = Table(title="Validation Issues")
    table.add_column("Severity", no_wrap=True)
    table.add_column("Code", no_wrap=True)
    table.add_column("Title")
    table.add_column("Message")

    for issue in validation.issues:
        style = SEVERITY_STYLES.get(issue.severity, "")
        table.add_row(
            f"[{style}]{issue.severity}[/{style}]",
            issue.code,
            issue.title,
            issue.message,
        )

    console.print(table)
    stats = validation.stats
    console.print(
        f"Errors: {stats['errors']}  Warnings: {stats['warnings']}  Info: {stats['info']}"
    )


@click.command()
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--symbol", "-s", "symbols", multiple=True, help="Symbol to analyze (repeatable)")
def validate(workflow_file: Path, symbols: Tuple[str, ...]):
    """
    Check a workflow for structural problems.

    Exits with status 1 when an error-severity issue would block a run.

    Examples:

      # Validate with the symbols saved in the file
      cardflow validate workflow.json

      # Validate against two symbols
      cardflow validate workflow.json -s TCS -s INFY
    """
    record = read_workflow_file(workflow_file)
    session = build_session(record, symbols)
    validation = session.validate()

    print_issues(validation)

    decision = run_gate(validation)
    if decision == "block":
        console.print("[bold red]Workflow cannot run.[/bold red]")
        sys.exit(1)
    if decision == "confirm":
        console.print("[yellow]Workflow can run after confirmation.[/yellow]")
    else:
        console.print("[green]Workflow is ready to run.[/green]")
