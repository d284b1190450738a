#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Integration tests for WorkflowSession: edits, history, clipboard, symbols
and runs working together.
"""

from unittest.mock import MagicMock

import pytest

from cardflow.core.exceptions import (
    CardflowException,
    ConfirmationRequired,
    ExecutionError,
    GraphLockedError,
    InvalidReferenceError,
    RunBlockedError,
)
from cardflow.data.storage import JSONWorkflowStore
from cardflow.graph.models import CardDescriptor, Position
from cardflow.workflows import TemplateEdge, TemplateNode, WorkflowSession, WorkflowTemplate
from cardflow.workflows.engine import CancellationToken


@pytest.fixture
def session(config, mock_provider, sequential_ids) -> WorkflowSession:
    return WorkflowSession(result_provider=mock_provider, config=config, id_factory=sequential_ids)


@pytest.fixture
def template() -> WorkflowTemplate:
    return WorkflowTemplate(
        id="quick-check",
        name="Quick Check",
        description="Valuation then quality",
        nodes=[
            TemplateNode(data={"type": "card", "card_id": "valuation-summary"}),
            TemplateNode(data={"type": "card", "card_id": "quality-score"}),
            TemplateNode(data={"type": "merge"}),
        ],
        edges=[
            TemplateEdge(source="0", target="2"),
            TemplateEdge(source="1", target="2"),
        ],
    )


class TestEditing:
    """Test graph edits through the session."""

    @pytest.mark.integration
    def test_add_card_uses_catalog_and_first_symbol(self, config, sequential_ids):
        catalog = MagicMock()
        catalog.get_card.return_value = CardDescriptor(
            id="valuation-summary", label="Valuation Summary", category="value"
        )
        session = WorkflowSession(card_catalog=catalog, config=config, id_factory=sequential_ids)
        node = session.add_card("valuation-summary", Position(x=5, y=5))
        assert node.id == "id-1"
        assert node.data.label == "Valuation Summary"
        assert node.data.category == "value"
        assert node.data.symbol == "TCS"

    @pytest.mark.integration
    def test_add_card_without_catalog(self, session):
        node = session.add_card("quality-score")
        assert node.data.label == "quality-score"

    @pytest.mark.integration
    def test_each_edit_is_undoable(self, session):
        a = session.add_card("valuation-summary")
        b = session.add_logic_node("condition", condition="score > 50")
        session.connect(a.id, b.id, source_handle="true")
        session.move_node(a.id, 100, 200)
        session.update_node_data(b.id, condition="score > 80")
        assert session.history.past_length == 5

        session.undo()
        assert session.graph.get_node(b.id).data.condition == "score > 50"
        session.undo()
        assert session.graph.get_node(a.id).position == Position()
        session.undo()
        assert session.edges == []
        session.undo()
        session.undo()
        assert session.nodes == []
        assert session.undo() is False

        session.redo()
        assert [n.id for n in session.nodes] == [a.id]

    @pytest.mark.integration
    def test_rejected_edit_leaves_no_history(self, session):
        a = session.add_card("valuation-summary")
        with pytest.raises(InvalidReferenceError):
            session.connect(a.id, "ghost")
        assert session.history.past_length == 1

    @pytest.mark.integration
    def test_edit_after_undo_clears_redo(self, session):
        session.add_card("valuation-summary")
        session.add_card("quality-score")
        session.undo()
        assert session.history.can_redo

        session.add_card("growth-summary")
        assert not session.history.can_redo
        assert session.redo() is False
        assert len(session.nodes) == 2

    @pytest.mark.integration
    def test_remove_node_undo_restores_edges(self, session):
        a = session.add_card("valuation-summary")
        b = session.add_card("quality-score")
        session.connect(a.id, b.id)
        session.remove_node(a.id)
        assert session.edges == []
        session.undo()
        assert len(session.edges) == 1

    @pytest.mark.integration
    def test_remove_missing_edge_is_noop(self, session):
        session.add_card("valuation-summary")
        assert session.remove_edge("nope") is None
        assert session.history.past_length == 1

    @pytest.mark.integration
    def test_auto_layout(self, session):
        assert session.auto_layout() is False
        a = session.add_card("valuation-summary")
        b = session.add_card("quality-score")
        session.connect(a.id, b.id)
        assert session.auto_layout() is True
        assert session.graph.get_node(b.id).position.y > session.graph.get_node(a.id).position.y
        session.undo()
        assert session.graph.get_node(b.id).position == Position()


class TestClipboardFlow:
    """Test copy/paste/duplicate/delete through the session."""

    @pytest.mark.integration
    def test_copy_paste_undo(self, session):
        a = session.add_card("valuation-summary")
        b = session.add_card("quality-score")
        session.connect(a.id, b.id)
        session.select_all()
        assert session.copy() == 2

        assert session.paste() is True
        assert len(session.nodes) == 4
        assert len(session.edges) == 2
        assert len(session.graph.selected_nodes) == 2

        session.undo()
        assert len(session.nodes) == 2

    @pytest.mark.integration
    def test_paste_empty_clipboard(self, session):
        session.add_card("valuation-summary")
        past = session.history.past_length
        assert session.paste() is False
        assert session.history.past_length == past

    @pytest.mark.integration
    def test_duplicate_and_delete_selected(self, session):
        a = session.add_card("valuation-summary")
        session.select([a.id])
        assert session.duplicate() is True
        assert len(session.nodes) == 2
        assert not session.clipboard.has_content

        # The duplicate is now the selection
        assert session.delete_selected() == 1
        assert [n.id for n in session.nodes] == [a.id]
        session.clear_selection()
        assert session.delete_selected() == 0


class TestSymbols:
    """Test symbol list management."""

    @pytest.mark.integration
    def test_add_symbol_cleans_and_dedupes(self, session):
        assert session.add_symbol("  infy ") is True
        assert session.add_symbol("INFY") is False
        assert session.add_symbol("   ") is False
        assert session.symbols == ["TCS", "INFY"]

    @pytest.mark.integration
    def test_symbol_limit(self, session):
        for symbol in ("INFY", "WIPRO", "HCL"):
            session.add_symbol(symbol)
        assert session.add_symbol("TECHM") is False
        assert len(session.symbols) == 4

    @pytest.mark.integration
    def test_last_symbol_kept(self, session):
        assert session.remove_symbol("TCS") is False
        session.add_symbol("INFY")
        assert session.remove_symbol("tcs") is True
        assert session.symbols == ["INFY"]


class TestRunning:
    """Test the run gate and execution through the session."""

    @pytest.mark.integration
    def test_empty_workflow_blocked(self, session):
        with pytest.raises(RunBlockedError) as exc_info:
            session.request_run()
        assert exc_info.value.validation.codes() == ["no-nodes"]
        assert session.report.status == "idle"

    @pytest.mark.integration
    def test_warnings_need_confirmation(self, session, mock_provider):
        session.add_card("valuation-summary")
        session.add_symbol("INFY")
        with pytest.raises(ConfirmationRequired):
            session.request_run()
        mock_provider.resolve.assert_not_called()

        report = session.request_run(confirm=True)
        assert report.status == "completed"
        node_id = session.nodes[0].id
        assert set(report.results) == {f"{node_id}-TCS", f"{node_id}-INFY"}

    @pytest.mark.integration
    def test_clean_workflow_runs_without_confirmation(self, session):
        session.add_card("valuation-summary")
        report = session.request_run()
        assert report.status == "completed"
        assert session.nodes[0].data.status == "success"

    @pytest.mark.integration
    def test_structural_edits_locked_while_running(self, session):
        a = session.add_card("valuation-summary")
        attempts = []

        def on_step(report):
            if report.is_running and not attempts:
                for action in (
                    lambda: session.add_card("quality-score"),
                    lambda: session.remove_node(a.id),
                    lambda: session.undo(),
                    lambda: session.paste(),
                    lambda: session.new_workflow(),
                ):
                    try:
                        action()
                    except GraphLockedError as e:
                        attempts.append(e)

        session.run(on_step=on_step)
        assert len(attempts) == 5
        assert len(session.nodes) == 1

    @pytest.mark.integration
    def test_cancel_through_session(self, session):
        session.add_card("valuation-summary")
        session.add_card("quality-score")
        token = CancellationToken()
        token.cancel()
        report = session.run(cancel_token=token)
        assert report.status == "cancelled"
        assert report.results == {}

    @pytest.mark.integration
    def test_reset_run(self, session):
        session.add_card("valuation-summary")
        session.run()
        report = session.reset_run()
        assert report.status == "idle"
        assert session.nodes[0].data.status == "idle"

    @pytest.mark.integration
    def test_run_without_provider(self, config):
        session = WorkflowSession(config=config)
        session.add_card("valuation-summary")
        with pytest.raises(ExecutionError):
            session.run()


class TestDocuments:
    """Test templates, records and new workflows."""

    @pytest.mark.integration
    def test_load_template(self, session, template):
        session.add_card("growth-summary")
        session.load_template(template)

        assert [n.id for n in session.nodes] == ["0", "1", "2"]
        assert [e.id for e in session.edges] == ["e0", "e1"]
        assert session.nodes[0].data.symbol == "TCS"
        assert session.name == "Quick Check"
        assert not session.history.can_undo
        # Laid out: the merge node sits one level below the cards
        assert session.nodes[2].position.y > session.nodes[0].position.y

    @pytest.mark.integration
    def test_open_template_from_catalog(self, config, template):
        catalog = MagicMock()
        catalog.get_template.side_effect = lambda tid: template if tid == "quick-check" else None
        session = WorkflowSession(template_catalog=catalog, config=config)
        session.open_template("quick-check")
        assert len(session.nodes) == 3
        with pytest.raises(CardflowException):
            session.open_template("missing")

    @pytest.mark.integration
    def test_record_round_trip(self, session, workflows_path):
        a = session.add_card("valuation-summary")
        session.add_symbol("INFY")
        session.name = "Mine"
        session.run()

        store = JSONWorkflowStore(workflows_path)
        stored = session.save(store)
        assert session.active_workflow_id == stored.id
        # Execution fields are not persisted
        assert stored.nodes[0].data.status == "idle"

        other = WorkflowSession(config=session.config)
        other.load_record(store.get(stored.id))
        assert other.name == "Mine"
        assert other.symbols == ["TCS", "INFY"]
        assert [n.id for n in other.nodes] == [a.id]
        assert other.active_workflow_id == stored.id

    @pytest.mark.integration
    def test_save_twice_updates_same_record(self, session, workflows_path):
        store = JSONWorkflowStore(workflows_path)
        session.add_card("valuation-summary")
        first = session.save(store)
        session.add_card("quality-score")
        second = session.save(store)
        assert first.id == second.id
        assert second.created_at == first.created_at
        assert len(store.list()) == 1
        assert len(store.get(first.id).nodes) == 2

    @pytest.mark.integration
    def test_new_workflow(self, session):
        session.add_card("valuation-summary")
        session.add_symbol("INFY")
        session.select_all()
        session.copy()
        session.new_workflow()
        assert session.nodes == []
        assert session.symbols == ["TCS"]
        assert session.active_workflow_id is None
        assert not session.history.can_undo
        assert not session.clipboard.has_content
