#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Unit tests for HistoryManager undo/redo.
"""

import pytest

from cardflow.graph.graph import WorkflowGraph
from cardflow.graph.history import HistoryManager, HistorySnapshot
from cardflow.graph.models import Edge, card_node


def make_state(count: int):
    """Chain of ``count`` card nodes."""
    nodes = [card_node(f"n{i}", "x") for i in range(count)]
    edges = [Edge(id=f"e{i}", source=f"n{i}", target=f"n{i + 1}") for i in range(count - 1)]
    return nodes, edges


class TestUndoRedo:
    """Test the past/future stacks."""

    @pytest.mark.unit
    def test_round_trip(self):
        """undo restores the saved state, redo returns to the edited one."""
        history = HistoryManager()
        s0 = make_state(1)
        s1 = make_state(2)

        history.save_state(*s0)
        undone = history.undo(*s1)
        assert undone.matches(*s0)

        redone = history.redo(*s0)
        assert redone.matches(*s1)

    @pytest.mark.unit
    def test_empty_stacks_are_noops(self):
        history = HistoryManager()
        assert history.undo(*make_state(1)) is None
        assert history.redo(*make_state(1)) is None
        assert not history.can_undo
        assert not history.can_redo

    @pytest.mark.unit
    def test_new_save_clears_future(self):
        history = HistoryManager()
        history.save_state(*make_state(1))
        history.undo(*make_state(2))
        assert history.can_redo

        assert history.save_state(*make_state(3)) is True
        assert not history.can_redo
        assert history.redo(*make_state(3)) is None

    @pytest.mark.unit
    def test_capacity_drops_oldest(self):
        """60 saves into capacity 50 keep the 50 most recent."""
        history = HistoryManager(capacity=50)
        for count in range(1, 61):
            history.save_state(*make_state(count))
        assert history.past_length == 50

        restored = []
        current = make_state(61)
        while history.can_undo:
            snapshot = history.undo(*current)
            restored.append(len(snapshot.nodes))
            current = (snapshot.nodes, snapshot.edges)
        assert restored == list(range(60, 10, -1))

    @pytest.mark.unit
    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            HistoryManager(capacity=0)

    @pytest.mark.unit
    def test_clear(self):
        history = HistoryManager()
        history.save_state(*make_state(1))
        history.undo(*make_state(2))
        history.clear()
        assert history.past_length == 0
        assert history.future_length == 0


class TestRestoreGuard:
    """Test the one-shot guard around undo/redo."""

    @pytest.mark.unit
    def test_echo_of_restored_state_is_skipped(self):
        """An editor saving on every change does not record the undo itself."""
        history = HistoryManager()
        s0, s1 = make_state(1), make_state(2)
        history.save_state(*s0)
        history.undo(*s1)

        assert history.save_state(*s0) is False
        assert history.can_redo
        assert history.past_length == 0

    @pytest.mark.unit
    def test_guard_is_one_shot(self):
        history = HistoryManager()
        s0, s1 = make_state(1), make_state(2)
        history.save_state(*s0)
        history.undo(*s1)
        history.save_state(*s0)

        assert history.save_state(*s0) is True

    @pytest.mark.unit
    def test_apply_callback_scopes_guard(self):
        """With an apply callback the guard only covers the callback."""
        graph = WorkflowGraph(*make_state(2))
        history = HistoryManager()
        history.save_state(*make_state(1))

        echoes = []

        def apply(state):
            graph.replace(state.nodes, state.edges)
            echoes.append(history.save_state(graph.nodes, graph.edges))

        history.undo(graph.nodes, graph.edges, apply=apply)

        assert echoes == [False]
        assert len(graph) == 1
        # A real edit after the undo is recorded and clears redo
        assert history.save_state(graph.nodes, graph.edges) is True
        assert not history.can_redo


class TestSnapshots:
    """Test snapshot isolation."""

    @pytest.mark.unit
    def test_snapshot_is_deep_copy(self):
        nodes, edges = make_state(2)
        snapshot = HistorySnapshot.capture(nodes, edges)
        nodes[0].data.label = "mutated"
        assert snapshot.nodes[0].data.label == ""

    @pytest.mark.unit
    def test_to_state_returns_fresh_copies(self):
        snapshot = HistorySnapshot.capture(*make_state(2))
        state = snapshot.to_state()
        state.nodes[0].data.label = "mutated"
        assert snapshot.nodes[0].data.label == ""
