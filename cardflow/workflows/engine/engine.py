#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
ExecutionEngine - sequential evaluation of card nodes across symbols.
"""

import time
import uuid
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .cancellation import CancellationToken
from .state import (
    RunReport,
    abort_run,
    apply_step,
    begin_step,
    cancel_run,
    finish_run,
    start_run,
)
from cardflow.core import get_logger
from cardflow.core.exceptions import ExecutionInProgressError
from cardflow.core.interfaces import IResultProvider
from cardflow.core.result import Result
from cardflow.graph.graph import WorkflowGraph
from cardflow.graph.models import Node


StepListener = Callable[[RunReport], None]


class ExecutionEngine:
    """
    Runs every card node of a graph against every symbol, one step at a time.

    Responsibilities:
    - Walk (symbol, card node) pairs symbol-major, node-minor
    - Mark the live node running/success/error as each step progresses
    - Record each outcome in the run report under its result key
    - Keep going after a failed step (partial failure)
    - Stop between steps when the cancellation token is set

    Condition and merge nodes are not executed; card nodes run
    unconditionally in graph order.
    """

    def __init__(
        self,
        result_provider: IResultProvider,
        step_delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep
    ):
        """
        Initialize execution engine.

        Args:
            result_provider: Collaborator producing one card result per symbol
            step_delay: Seconds to pause before each step (simulated latency)
            sleep: Sleep function, replaceable in tests
        """
        self.result_provider = result_provider
        self.step_delay = step_delay
        self._sleep = sleep
        self.report = RunReport()
        self.logger = get_logger(__name__)

    @property
    def is_running(self) -> bool:
        return self.report.is_running

    def run(
        self,
        graph: Union[WorkflowGraph, Sequence[Node]],
        symbols: Sequence[str],
        cancel_token: Optional[CancellationToken] = None,
        on_step: Optional[StepListener] = None
    ) -> RunReport:
        """
        Execute the workflow.

        Args:
            graph: Live graph (node statuses are updated on it) or a node list
            symbols: Symbols to analyze, in order
            cancel_token: Optional cooperative cancellation token
            on_step: Called with every new report (status and progress changes)

        Returns:
            Final RunReport

        Raises:
            ExecutionInProgressError: If a run is already active
        """
        if self.is_running:
            raise ExecutionInProgressError(
                f"Run {self.report.run_id} is still in progress"
            )

        if not isinstance(graph, WorkflowGraph):
            graph = WorkflowGraph(nodes=list(graph))

        symbols = list(symbols)
        steps: List[Tuple[str, str]] = [(n.id, n.data.card_id) for n in graph.card_nodes]
        multi_symbol = len(symbols) > 1
        run_id = str(uuid.uuid4())

        self.logger.info(
            f"Starting run {run_id}: {len(steps)} card(s) x {len(symbols)} symbol(s) "
            f"= {len(steps) * len(symbols)} step(s)"
        )

        # Listener failures on the opening report must still release the engine
        try:
            self._publish(start_run(run_id, len(steps) * len(symbols)), on_step)
            cancelled = self._run_steps(graph, symbols, steps, multi_symbol, cancel_token, on_step)
        except Exception:
            self.report = abort_run(self.report)
            self.logger.error(f"Run {run_id} aborted", exc_info=True)
            raise

        if cancelled:
            self._publish(cancel_run(self.report), on_step)
            self.logger.info(
                f"Run {run_id} cancelled after {self.report.completed_steps}/"
                f"{self.report.total_steps} step(s)"
            )
            return self.report

        self._publish(finish_run(self.report), on_step)
        self.logger.info(
            f"Run {run_id} finished with status {self.report.status}: "
            f"{self.report.summary()}"
        )
        return self.report

    def _run_steps(
        self,
        graph: WorkflowGraph,
        symbols: List[str],
        steps: List[Tuple[str, str]],
        multi_symbol: bool,
        cancel_token: Optional[CancellationToken],
        on_step: Optional[StepListener]
    ) -> bool:
        """
        Execute every (symbol, card) step in order.

        Returns:
            True if the run was cancelled before its last step
        """
        for symbol in symbols:
            for node_id, card_id in steps:
                if cancel_token is not None and cancel_token.is_cancelled():
                    return True

                graph.set_card_status(node_id, "running", symbol=symbol)
                self._publish(begin_step(self.report, node_id, symbol), on_step)

                if self.step_delay > 0:
                    self._sleep(self.step_delay)

                outcome = Result.capture(self.result_provider.resolve, card_id, symbol)

                if outcome.success:
                    graph.set_card_status(node_id, "success", result=outcome.value)
                    self.logger.debug(f"Step {node_id} ({card_id}) for {symbol} succeeded")
                else:
                    graph.set_card_status(node_id, "error", error=outcome.error)
                    self.logger.warning(
                        f"Step {node_id} ({card_id}) for {symbol} failed: {outcome.error}"
                    )

                self._publish(
                    apply_step(self.report, node_id, symbol, outcome, multi_symbol),
                    on_step,
                )
        return False

    def reset(self, graph: Optional[WorkflowGraph] = None) -> RunReport:
        """
        Return to idle.

        Clears the report and, when a graph is given, every card node's
        status, result and error.

        Raises:
            ExecutionInProgressError: If a run is active
        """
        if self.is_running:
            raise ExecutionInProgressError("Cannot reset while a run is in progress")
        if graph is not None:
            graph.reset_statuses()
        self.report = RunReport()
        return self.report

    def _publish(self, report: RunReport, on_step: Optional[StepListener]) -> None:
        self.report = report
        if on_step is not None:
            on_step(report)
