#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
RunReport - progress, results and errors of one workflow run.

Reports are values: every transition below returns a new RunReport and
leaves its input untouched, so a UI thread can hold on to any report it
has been handed.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, Literal, Optional

from cardflow.core.result import Result


RunStatus = Literal["idle", "running", "completed", "error", "cancelled"]


def result_key(node_id: str, symbol: str, multi_symbol: bool) -> str:
    """
    Key of a (node, symbol) pair in RunReport.results / errors.

    Single-symbol runs key by node id alone; multi-symbol runs use
    "<node_id>-<symbol>".
    """
    return f"{node_id}-{symbol}" if multi_symbol else node_id


@dataclass(frozen=True)
class RunReport:
    """
    Aggregate record of one execution.

    Attributes:
        run_id: Identifier of the run ("" while idle)
        status: idle -> running -> completed | error | cancelled
        progress: 0-100, rounded share of steps started
        total_steps: card nodes x symbols
        completed_steps: steps started so far
        results: result_key -> analysis result
        errors: result_key -> error message
        current_node_id: node of the step in flight
        current_symbol: symbol of the step in flight
    """

    run_id: str = ""
    status: RunStatus = "idle"
    progress: int = 0
    total_steps: int = 0
    completed_steps: int = 0
    results: Dict[str, Any] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    current_node_id: Optional[str] = None
    current_symbol: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @property
    def succeeded(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def is_running(self) -> bool:
        return self.status == "running"

    @property
    def is_finished(self) -> bool:
        return self.status in ("completed", "error", "cancelled")

    def summary(self) -> str:
        """Short human-readable outcome, e.g. '3 succeeded, 1 failed'."""
        text = f"{self.succeeded} succeeded, {self.failed} failed"
        if self.status == "cancelled":
            text += f" (cancelled after {self.completed_steps}/{self.total_steps} steps)"
        return text

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view for run report consumers."""
        return {
            'run_id': self.run_id,
            'status': self.status,
            'progress': self.progress,
            'total_steps': self.total_steps,
            'completed_steps': self.completed_steps,
            'results': dict(self.results),
            'errors': dict(self.errors),
            'current_node_id': self.current_node_id,
            'current_symbol': self.current_symbol,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'succeeded': self.succeeded,
            'failed': self.failed,
        }

    def __repr__(self) -> str:
        return (
            f"RunReport(run_id={self.run_id[:8]}, status={self.status}, "
            f"progress={self.progress}, step={self.completed_steps}/{self.total_steps})"
        )


def start_run(run_id: str, total_steps: int) -> RunReport:
    """Fresh report in the running state."""
    return RunReport(
        run_id=run_id,
        status="running",
        total_steps=total_steps,
        started_at=datetime.now(),
    )


def begin_step(report: RunReport, node_id: str, symbol: str) -> RunReport:
    """Count a step as started and recompute progress."""
    completed = report.completed_steps + 1
    progress = round(completed / report.total_steps * 100) if report.total_steps else 100
    return replace(
        report,
        completed_steps=completed,
        progress=progress,
        current_node_id=node_id,
        current_symbol=symbol,
    )


def apply_step(
    report: RunReport,
    node_id: str,
    symbol: str,
    outcome: Result,
    multi_symbol: bool
) -> RunReport:
    """
    Record the outcome of one (node, symbol) step.

    Args:
        report: Report before the step finished
        node_id: Card node that ran
        symbol: Symbol it ran against
        outcome: Result.ok(value) or Result.fail(message)
        multi_symbol: Whether the run has more than one symbol

    Returns:
        New report with the result or error stored under result_key()
    """
    key = result_key(node_id, symbol, multi_symbol)
    if outcome.success:
        results = dict(report.results)
        results[key] = outcome.value
        return replace(report, results=results)
    errors = dict(report.errors)
    errors[key] = outcome.error
    return replace(report, errors=errors)


def finish_run(report: RunReport) -> RunReport:
    """Final state once every step has run."""
    return replace(
        report,
        status="error" if report.errors else "completed",
        progress=100,
        current_node_id=None,
        current_symbol=None,
        completed_at=datetime.now(),
    )


def cancel_run(report: RunReport) -> RunReport:
    """Final state of a run stopped before its last step; partial maps kept."""
    return replace(
        report,
        status="cancelled",
        current_node_id=None,
        current_symbol=None,
        completed_at=datetime.now(),
    )


def abort_run(report: RunReport) -> RunReport:
    """Final state of a run interrupted by an unexpected engine error."""
    return replace(
        report,
        status="error",
        current_node_id=None,
        current_symbol=None,
        completed_at=datetime.now(),
    )
