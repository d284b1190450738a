"""
CLI utility functions shared across commands.

Provides workflow file reading/writing, session construction and the
built-in result provider used by ``cardflow run``.
"""

import json
from pathlib import Path
from typing import Any, Dict, Sequence

import click
from pydantic import ValidationError as PydanticValidationError

from cardflow.core import get_logger
from cardflow.workflows import WorkflowRecord, WorkflowSession

logger = get_logger(__name__)


class EchoResultProvider:
    """
    Result provider that describes the step instead of analyzing anything.

    Lets a workflow be dry-run from the command line without a data source.
    """

    def resolve(self, card_id: str, symbol: str) -> Dict[str, Any]:
        return {
            "card_id": card_id,
            "symbol": symbol,
            "summary": f"{card_id} for {symbol}",
        }


def read_workflow_file(path: Path) -> WorkflowRecord:
    """
    Read a saved workflow record from a JSON file.

    Args:
        path: Path to the workflow JSON file

    Returns:
        Parsed WorkflowRecord

    Raises:
        click.ClickException: If the file cannot be read or parsed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        record = WorkflowRecord.model_validate(raw)
    except (OSError, ValueError, PydanticValidationError) as e:
        raise click.ClickException(f"Cannot read workflow file {path}: {e}")

    logger.debug(f"Read workflow {record.id} ({len(record.nodes)} nodes) from {path}")
    return record


def write_workflow_file(record: WorkflowRecord, path: Path) -> None:
    """Write a workflow record as pretty-printed JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(record.model_dump(mode="json"), f, indent=2, ensure_ascii=False)


def build_session(
    record: WorkflowRecord,
    symbols: Sequence[str] = (),
    with_provider: bool = False
) -> WorkflowSession:
    """
    Open a record in a fresh session.

    Args:
        record: Workflow to load
        symbols: Symbols replacing the record's own (same cleaning and limit
            rules as the editor)
        with_provider: Attach the EchoResultProvider so the session can run
    """
    session = WorkflowSession(result_provider=EchoResultProvider() if with_provider else None)
    session.load_record(record)
    if symbols:
        session.symbols = []
        for symbol in symbols:
            if not session.add_symbol(symbol):
                logger.warning(f"Ignored symbol '{symbol}'")
    return session
