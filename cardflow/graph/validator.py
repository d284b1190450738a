#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Pre-run structural validation.

validate_workflow() never raises: every finding is returned as a
ValidationIssue so the caller can show it and decide whether to run.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Sequence

from .models import Edge, Node


Severity = Literal["error", "warning", "info"]

LARGE_WORKFLOW_THRESHOLD = 10


@dataclass(frozen=True)
class ValidationIssue:
    """One finding of the validator."""

    code: str
    severity: Severity
    title: str
    message: str
    can_proceed: bool
    node_ids: List[str] = field(default_factory=list)
    symbols: List[str] = field(default_factory=list)


@dataclass
class ValidationResult:
    """
    Outcome of validate_workflow().

    is_valid is True only when there are no issues at all. can_proceed is
    False as soon as one issue blocks the run.
    """

    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def can_proceed(self) -> bool:
        return all(issue.can_proceed for issue in self.issues)

    @property
    def stats(self) -> Dict[str, int]:
        """Issue counts per severity."""
        counts = {"errors": 0, "warnings": 0, "info": 0}
        for issue in self.issues:
            if issue.severity == "error":
                counts["errors"] += 1
            elif issue.severity == "warning":
                counts["warnings"] += 1
            else:
                counts["info"] += 1
        return counts

    @property
    def blocking_issues(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if not issue.can_proceed]

    def codes(self) -> List[str]:
        return [issue.code for issue in self.issues]

    def get(self, code: str) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.code == code]


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def validate_workflow(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    symbols: Sequence[str]
) -> ValidationResult:
    """
    Check a workflow before running it.

    Checks run in a fixed order: empty graph, no symbols, disconnected
    nodes, no connections, orphan logic nodes, large workflow, multiple
    symbols.

    Args:
        nodes: Graph nodes
        edges: Graph edges
        symbols: Symbols the run would use

    Returns:
        ValidationResult with issues in check order
    """
    issues: List[ValidationIssue] = []

    if len(nodes) == 0:
        issues.append(ValidationIssue(
            code="no-nodes",
            severity="error",
            title="Empty Workflow",
            message="Add at least one card to your workflow before running.",
            can_proceed=False,
        ))

    if len(symbols) == 0:
        issues.append(ValidationIssue(
            code="no-symbols",
            severity="error",
            title="No Symbol Selected",
            message="Enter at least one stock symbol to analyze.",
            can_proceed=False,
        ))

    if len(nodes) > 1:
        connected = set()
        for edge in edges:
            connected.add(edge.source)
            connected.add(edge.target)

        disconnected = [node.id for node in nodes if node.id not in connected]

        # Only a strict subset counts; "nothing connected" is no-connections
        if 0 < len(disconnected) < len(nodes):
            issues.append(ValidationIssue(
                code="disconnected-nodes",
                severity="warning",
                title=_plural(len(disconnected), "Disconnected Card"),
                message=(
                    "Some cards aren't connected to the workflow. They'll still "
                    "run, but won't receive data from other cards."
                ),
                can_proceed=True,
                node_ids=disconnected,
            ))

    if len(nodes) > 1 and len(edges) == 0:
        issues.append(ValidationIssue(
            code="no-connections",
            severity="warning",
            title="No Connections",
            message="Your cards aren't connected. Each card will run independently without data flow.",
            can_proceed=True,
        ))

    targets = {edge.target for edge in edges}
    sources = {edge.source for edge in edges}
    for node in nodes:
        if not node.is_logic:
            continue
        if node.id in targets and node.id in sources:
            continue
        kind_title = "Condition" if node.kind == "condition" else "Merge"
        issues.append(ValidationIssue(
            code="orphan-logic-node",
            severity="warning",
            title=f"{kind_title} Node Not Connected",
            message=(
                f"The {node.label} node needs both input and output "
                f"connections to function."
            ),
            can_proceed=True,
            node_ids=[node.id],
        ))

    if len(nodes) > LARGE_WORKFLOW_THRESHOLD:
        issues.append(ValidationIssue(
            code="large-workflow",
            severity="info",
            title="Large Workflow",
            message=(
                f"Running {len(nodes)} cards across "
                f"{_plural(len(symbols), 'symbol')} may take a moment."
            ),
            can_proceed=True,
        ))

    if len(symbols) > 1:
        issues.append(ValidationIssue(
            code="multi-symbol",
            severity="info",
            title="Multi-Symbol Analysis",
            message=f"Will analyze {len(symbols)} symbols: {', '.join(symbols)}",
            can_proceed=True,
            symbols=list(symbols),
        ))

    return ValidationResult(issues=issues)


RunDecision = Literal["run", "confirm", "block"]


def run_gate(result: ValidationResult) -> RunDecision:
    """
    Decide what a run request should do given a validation result.

    "run" when there are no issues, "confirm" when issues exist but none
    block, "block" otherwise.
    """
    if result.is_valid:
        return "run"
    if result.can_proceed:
        return "confirm"
    return "block"
