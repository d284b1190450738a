"""
Layout command for re-positioning a saved workflow's nodes by level.
"""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from cardflow.cli.utils import build_session, read_workflow_file, write_workflow_file
from cardflow.core import get_config, get_logger

console = Console()
logger = get_logger(__name__)


@click.command()
@click.argument("workflow_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--direction", "-d",
    type=click.Choice(["TB", "LR"], case_sensitive=False),
    help="Layout direction (default: configured layout_direction)"
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the laid-out workflow here instead of overwriting the input"
)
def layout(workflow_file: Path, direction: Optional[str], output: Optional[Path]):
    """
    Auto-layout a workflow file.

    Nodes are grouped into levels by longest path from the sources and
    centred within each level.

    Examples:

      # Lay out top-to-bottom in place
      cardflow layout workflow.json

      # Lay out left-to-right into a new file
      cardflow layout workflow.json --direction LR -o laid_out.json
    """
    config = get_config()
    options = config.layout_options()
    if direction:
        options = options.model_copy(update={"direction": direction.upper()})

    record = read_workflow_file(workflow_file)
    session = build_session(record)
    if not session.auto_layout(options):
        console.print("[yellow]Workflow has no nodes; nothing to lay out.[/yellow]")
        return

    target = output or workflow_file
    laid_out = session.to_record().model_copy(update={"created_at": record.created_at})
    write_workflow_file(laid_out, target)
    console.print(
        f"[green]Laid out {len(laid_out.nodes)} node(s) ({options.direction}) -> {target}[/green]"
    )
