#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
HistoryManager - snapshot-based undo/redo for an editor session.

Callers save the graph *before* each undoable edit. Undo hands back the
most recent snapshot and parks the current state on the redo stack; a
brand-new save clears the redo stack.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, List, Optional, Sequence, Tuple

from .models import Edge, GraphState, Node, clone_edges, clone_nodes
from cardflow.core import get_logger


DEFAULT_CAPACITY = 50

ApplyState = Callable[[GraphState], None]


@dataclass(frozen=True)
class HistorySnapshot:
    """Immutable deep copy of the graph at one point in time."""

    nodes: Tuple[Node, ...] = field(default_factory=tuple)
    edges: Tuple[Edge, ...] = field(default_factory=tuple)

    @classmethod
    def capture(cls, nodes: Sequence[Node], edges: Sequence[Edge]) -> "HistorySnapshot":
        return cls(nodes=tuple(clone_nodes(nodes)), edges=tuple(clone_edges(edges)))

    def to_state(self) -> GraphState:
        """Fresh mutable copies, safe to hand to a live graph."""
        return GraphState(nodes=clone_nodes(self.nodes), edges=clone_edges(self.edges))

    def matches(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> bool:
        return list(self.nodes) == list(nodes) and list(self.edges) == list(edges)


class HistoryManager:
    """
    Bounded past/future stacks of HistorySnapshot.

    The one-shot guard is armed by undo/redo. A save_state call that just
    echoes the restored snapshot back (an editor that saves whenever the
    graph changes) is skipped, so the undo does not record itself as a new
    action. When undo/redo is given an ``apply`` callback the guard only
    lives while the callback runs; otherwise it is consumed by the next
    save_state call, and a save of any other state is recorded normally.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._past: Deque[HistorySnapshot] = deque(maxlen=capacity)
        self._future: List[HistorySnapshot] = []
        self._restored: Optional[HistorySnapshot] = None
        self.logger = get_logger(__name__)

    @property
    def can_undo(self) -> bool:
        return len(self._past) > 0

    @property
    def can_redo(self) -> bool:
        return len(self._future) > 0

    @property
    def past_length(self) -> int:
        return len(self._past)

    @property
    def future_length(self) -> int:
        return len(self._future)

    def save_state(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> bool:
        """
        Record the graph before an undoable edit.

        Returns:
            True if a snapshot was pushed, False if the call was skipped as
            the echo of an undo/redo
        """
        restored, self._restored = self._restored, None
        if restored is not None and restored.matches(nodes, edges):
            self.logger.debug("Skipped history save echoing an undo/redo")
            return False

        # deque(maxlen) drops the oldest snapshot once full
        self._past.append(HistorySnapshot.capture(nodes, edges))
        self._future.clear()
        self.logger.debug(f"Saved history snapshot ({len(self._past)}/{self.capacity})")
        return True

    def undo(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        apply: Optional[ApplyState] = None
    ) -> Optional[HistorySnapshot]:
        """
        Step back one snapshot.

        Args:
            nodes: Current (pre-undo) nodes
            edges: Current (pre-undo) edges
            apply: Optional setter that installs the restored state

        Returns:
            The restored snapshot, or None if there is nothing to undo
        """
        if not self._past:
            return None
        previous = self._past.pop()
        self._future.append(HistorySnapshot.capture(nodes, edges))
        self._restore(previous, apply)
        self.logger.debug(f"Undo ({len(self._past)} left, {len(self._future)} redoable)")
        return previous

    def redo(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        apply: Optional[ApplyState] = None
    ) -> Optional[HistorySnapshot]:
        """
        Re-apply the most recently undone snapshot.

        Returns:
            The restored snapshot, or None if there is nothing to redo
        """
        if not self._future:
            return None
        following = self._future.pop()
        self._past.append(HistorySnapshot.capture(nodes, edges))
        self._restore(following, apply)
        self.logger.debug(f"Redo ({len(self._past)} undoable, {len(self._future)} left)")
        return following

    def _restore(self, snapshot: HistorySnapshot, apply: Optional[ApplyState]) -> None:
        self._restored = snapshot
        if apply is None:
            return
        try:
            apply(snapshot.to_state())
        finally:
            self._restored = None

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()
        self._restored = None

    def __repr__(self) -> str:
        return f"HistoryManager(past={len(self._past)}, future={len(self._future)}, capacity={self.capacity})"
