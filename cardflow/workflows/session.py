#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
WorkflowSession - one editor session over a single workflow graph.

Ties together the graph, undo history, clipboard, execution engine and the
symbol list, and enforces the editor control flow:
- every undoable edit snapshots the graph first
- structural edits are refused while a run is in progress
- runs go through the validation gate (block / confirm / run)
"""

from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

from .records import OutputMode, WorkflowRecord, WorkflowTemplate
from .engine import CancellationToken, ExecutionEngine, RunReport
from .engine.engine import StepListener
from cardflow.core import get_config, get_logger
from cardflow.core.config import CardflowConfig
from cardflow.core.exceptions import (
    CardflowException,
    ConfirmationRequired,
    ExecutionError,
    GraphLockedError,
    RunBlockedError,
)
from cardflow.core.interfaces import (
    ICardCatalog,
    IResultProvider,
    ITemplateCatalog,
    IWorkflowStore,
)
from cardflow.graph.clipboard import Clipboard, IdFactory
from cardflow.graph.graph import WorkflowGraph
from cardflow.graph.history import HistoryManager
from cardflow.graph.layout import LayoutOptions, auto_layout
from cardflow.graph.models import (
    CardNodeData,
    Edge,
    GraphState,
    Node,
    Position,
    clone_edges,
    clone_nodes,
    generate_id,
    logic_node,
)
from cardflow.graph.validator import ValidationResult, run_gate, validate_workflow


T = TypeVar("T")

DEFAULT_WORKFLOW_NAME = "Untitled Workflow"


class WorkflowSession:
    """
    Editor session state and operations.

    Example:
        session = WorkflowSession(result_provider=provider)
        a = session.add_card("valuation-summary")
        b = session.add_card("quality-score")
        session.connect(a.id, b.id)
        session.add_symbol("infy")
        report = session.request_run(confirm=True)
    """

    def __init__(
        self,
        result_provider: Optional[IResultProvider] = None,
        card_catalog: Optional[ICardCatalog] = None,
        template_catalog: Optional[ITemplateCatalog] = None,
        config: Optional[CardflowConfig] = None,
        id_factory: Optional[IdFactory] = None
    ):
        """
        Initialize an empty session.

        Args:
            result_provider: Produces card results; required only for run()
            card_catalog: Supplies display fields for add_card()
            template_catalog: Source of templates for open_template()
            config: Settings (default: global config)
            id_factory: Id generator for new nodes, edges and pasted copies
        """
        self.config = config or get_config()
        self.card_catalog = card_catalog
        self.template_catalog = template_catalog
        self._id_factory = id_factory or generate_id

        self.graph = WorkflowGraph()
        self.history = HistoryManager(capacity=self.config.history_capacity)
        self.clipboard = Clipboard(id_factory=self._id_factory)
        self.engine = (
            ExecutionEngine(result_provider, step_delay=self.config.step_delay)
            if result_provider is not None else None
        )

        self.symbols: List[str] = [self.config.default_symbol.strip().upper()]
        self.name = DEFAULT_WORKFLOW_NAME
        self.description: Optional[str] = None
        self.output_mode: OutputMode = "cards"
        self.active_workflow_id: Optional[str] = None
        self._created_at: Optional[datetime] = None
        self.logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self.engine is not None and self.engine.is_running

    @property
    def report(self) -> RunReport:
        return self.engine.report if self.engine is not None else RunReport()

    @property
    def nodes(self) -> List[Node]:
        return self.graph.nodes

    @property
    def edges(self) -> List[Edge]:
        return self.graph.edges

    @property
    def paste_offset(self) -> Tuple[float, float]:
        return (self.config.paste_offset_x, self.config.paste_offset_y)

    def _ensure_editable(self, action: str) -> None:
        if self.is_running:
            raise GraphLockedError(f"Cannot {action} while a run is in progress")

    def _edit(self, action: str, mutate: Callable[[], T]) -> T:
        """
        Run one undoable edit.

        The pre-edit graph is pushed onto the history only once the edit
        succeeds, so a rejected edit leaves no undo entry behind.
        """
        self._ensure_editable(action)
        before = self.graph.snapshot()
        outcome = mutate()
        self.history.save_state(before.nodes, before.edges)
        return outcome

    def _apply(self, state: GraphState) -> None:
        self.graph.replace(state.nodes, state.edges)

    def _new_id(self) -> str:
        taken = {n.id for n in self.graph.nodes} | {e.id for e in self.graph.edges}
        return self._id_factory(taken)

    # ------------------------------------------------------------------
    # Graph edits
    # ------------------------------------------------------------------

    def add_node(self, node: Node) -> Node:
        return self._edit("add a node", lambda: self.graph.add_node(node))

    def add_card(
        self,
        card_id: str,
        position: Optional[Position] = None,
        label: Optional[str] = None
    ) -> Node:
        """
        Drop a new card node onto the canvas.

        Display fields come from the card catalog when one is configured;
        the node's symbol is the session's first symbol.
        """
        descriptor = self.card_catalog.get_card(card_id) if self.card_catalog else None
        data = CardNodeData(
            card_id=card_id,
            label=label or (descriptor.label if descriptor else card_id),
            category=descriptor.category if descriptor else "",
            description=descriptor.description if descriptor else "",
            symbol=self.symbols[0] if self.symbols else "",
        )
        node = Node(id=self._new_id(), position=position or Position(), data=data)
        return self.add_node(node)

    def add_logic_node(self, kind: str, position: Optional[Position] = None, **data: Any) -> Node:
        """Drop a new condition or merge node."""
        position = position or Position()
        return self.add_node(logic_node(self._new_id(), kind, position.x, position.y, **data))

    def connect(self, source: str, target: str, source_handle: Optional[str] = None) -> Edge:
        edge = Edge(id=self._new_id(), source=source, target=target, source_handle=source_handle)
        return self._edit("connect nodes", lambda: self.graph.add_edge(edge))

    def remove_node(self, node_id: str) -> Node:
        return self._edit("remove a node", lambda: self.graph.remove_node(node_id))

    def remove_edge(self, edge_id: str) -> Optional[Edge]:
        self._ensure_editable("remove an edge")
        if self.graph.get_edge(edge_id) is None:
            return None
        return self._edit("remove an edge", lambda: self.graph.remove_edge(edge_id))

    def update_node_data(self, node_id: str, **changes: Any) -> Node:
        return self._edit(
            "edit a node",
            lambda: self.graph.update_node_data(node_id, **changes),
        )

    def move_node(self, node_id: str, x: float, y: float) -> Node:
        return self._edit(
            "move a node",
            lambda: self.graph.move_node(node_id, Position(x=x, y=y)),
        )

    def auto_layout(self, options: Optional[LayoutOptions] = None) -> bool:
        """
        Re-position every node by level.

        Returns:
            False (and no history entry) when the graph is empty
        """
        if not self.graph.nodes:
            return False
        opts = options or self.config.layout_options()
        self._edit(
            "lay out the graph",
            lambda: self.graph.replace(
                auto_layout(self.graph.nodes, self.graph.edges, opts),
                self.graph.edges,
            ),
        )
        self.logger.debug(f"Auto-layout ({opts.direction}) over {len(self.graph)} node(s)")
        return True

    # ------------------------------------------------------------------
    # Selection and clipboard
    # ------------------------------------------------------------------

    def select(self, node_ids: Iterable[str]) -> None:
        self.graph.select(node_ids)

    def select_all(self) -> None:
        self.graph.select_all()

    def clear_selection(self) -> None:
        self.graph.clear_selection()

    def copy(self) -> int:
        """Copy the selection; returns the number of nodes copied (0 is a no-op)."""
        return self.clipboard.copy(self.graph.selected_nodes, self.graph.edges)

    def paste(self) -> bool:
        self._ensure_editable("paste")
        pasted = self.clipboard.paste(self.graph.nodes, self.graph.edges, self.paste_offset)
        if pasted is None:
            return False
        self._edit("paste", lambda: self._apply(pasted))
        return True

    def duplicate(self) -> bool:
        self._ensure_editable("duplicate")
        duplicated = self.clipboard.duplicate(
            self.graph.selected_nodes, self.graph.nodes, self.graph.edges, self.paste_offset
        )
        if duplicated is None:
            return False
        self._edit("duplicate", lambda: self._apply(duplicated))
        return True

    def delete_selected(self) -> int:
        """
        Delete the selected nodes and their edges.

        Returns:
            Number of nodes removed (0 means nothing was selected)
        """
        self._ensure_editable("delete")
        selected = self.graph.selected_nodes
        if not selected:
            return 0
        remaining = self.clipboard.delete_selected(selected, self.graph.nodes, self.graph.edges)
        self._edit("delete", lambda: self._apply(remaining))
        return len(selected)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        self._ensure_editable("undo")
        restored = self.history.undo(self.graph.nodes, self.graph.edges, apply=self._apply)
        return restored is not None

    def redo(self) -> bool:
        self._ensure_editable("redo")
        restored = self.history.redo(self.graph.nodes, self.graph.edges, apply=self._apply)
        return restored is not None

    # ------------------------------------------------------------------
    # Symbols
    # ------------------------------------------------------------------

    def add_symbol(self, symbol: str) -> bool:
        """
        Add a symbol to analyze.

        Input is stripped and upper-cased. Blank input, duplicates and
        additions past max_symbols are ignored.

        Returns:
            True if the symbol was added
        """
        cleaned = symbol.strip().upper()
        if not cleaned or cleaned in self.symbols:
            return False
        if len(self.symbols) >= self.config.max_symbols:
            self.logger.debug(f"Symbol limit ({self.config.max_symbols}) reached, ignored {cleaned}")
            return False
        self.symbols.append(cleaned)
        return True

    def remove_symbol(self, symbol: str) -> bool:
        """Remove a symbol; the last remaining symbol is kept."""
        cleaned = symbol.strip().upper()
        if cleaned not in self.symbols or len(self.symbols) <= 1:
            return False
        self.symbols.remove(cleaned)
        return True

    # ------------------------------------------------------------------
    # Validation and execution
    # ------------------------------------------------------------------

    def validate(self) -> ValidationResult:
        return validate_workflow(self.graph.nodes, self.graph.edges, self.symbols)

    def request_run(
        self,
        confirm: bool = False,
        cancel_token: Optional[CancellationToken] = None,
        on_step: Optional[StepListener] = None
    ) -> RunReport:
        """
        Validate, then run if the gate allows it.

        Args:
            confirm: The user has acknowledged the warnings
            cancel_token: Optional cooperative cancellation token
            on_step: Receives every intermediate report

        Raises:
            RunBlockedError: If an error-severity issue blocks the run
            ConfirmationRequired: If warnings need confirming and confirm is False
        """
        validation = self.validate()
        decision = run_gate(validation)
        if decision == "block":
            raise RunBlockedError(validation)
        if decision == "confirm" and not confirm:
            raise ConfirmationRequired(validation)
        return self.run(cancel_token=cancel_token, on_step=on_step)

    def run(
        self,
        cancel_token: Optional[CancellationToken] = None,
        on_step: Optional[StepListener] = None
    ) -> RunReport:
        """Run every card node against every symbol, without the validation gate."""
        if self.engine is None:
            raise ExecutionError("No result provider configured for this session")
        return self.engine.run(self.graph, self.symbols, cancel_token=cancel_token, on_step=on_step)

    def reset_run(self) -> RunReport:
        """Clear the run report and every node's status, result and error."""
        if self.engine is None:
            self.graph.reset_statuses()
            return RunReport()
        return self.engine.reset(self.graph)

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    def _load_document(self, nodes: List[Node], edges: List[Edge]) -> None:
        self._ensure_editable("load a workflow")
        self.graph.replace(nodes, edges)
        self.reset_run()
        self.clipboard.clear()
        self.history.clear()

    def load_template(self, template: WorkflowTemplate) -> None:
        """
        Replace the graph with a template's nodes and edges, then lay it out.

        The loaded workflow is unsaved and starts with an empty history.
        """
        symbol = self.symbols[0] if self.symbols else ""
        nodes, edges = template.instantiate(symbol=symbol)
        self._load_document(nodes, edges)
        if nodes:
            self.graph.replace(
                auto_layout(nodes, edges, self.config.layout_options()),
                self.graph.edges,
            )
        self.name = template.name
        self.description = template.description or None
        self.active_workflow_id = None
        self._created_at = None
        self.logger.info(f"Loaded template '{template.id}' ({len(nodes)} node(s))")

    def open_template(self, template_id: str) -> WorkflowTemplate:
        """
        Look a template up in the catalog and load it.

        Raises:
            CardflowException: If no catalog is configured or the id is unknown
        """
        template = self.template_catalog.get_template(template_id) if self.template_catalog else None
        if template is None:
            raise CardflowException(f"Unknown workflow template: {template_id}")
        self.load_template(template)
        return template

    def load_record(self, record: WorkflowRecord) -> None:
        """Open a saved workflow; transient node fields are reset."""
        nodes = [n.reset_transient() for n in clone_nodes(record.nodes)]
        self._load_document(nodes, clone_edges(record.edges))
        if record.symbols:
            self.symbols = list(record.symbols)
        self.name = record.name
        self.description = record.description
        self.output_mode = record.output_mode
        self.active_workflow_id = record.id
        self._created_at = record.created_at
        self.logger.info(f"Opened workflow {record.id}: {record.name}")

    def new_workflow(self) -> None:
        """Start over with an empty, unsaved workflow."""
        self._load_document([], [])
        self.symbols = [self.config.default_symbol.strip().upper()]
        self.name = DEFAULT_WORKFLOW_NAME
        self.description = None
        self.output_mode = "cards"
        self.active_workflow_id = None
        self._created_at = None

    def to_record(self) -> WorkflowRecord:
        """Snapshot the session as a WorkflowRecord (transient node fields cleared)."""
        record_id = self.active_workflow_id or generate_id()
        now = datetime.now()
        return WorkflowRecord(
            id=record_id,
            name=self.name,
            description=self.description,
            nodes=[n.reset_transient().model_copy(update={"selected": False}) for n in self.graph.nodes],
            edges=self.graph.snapshot().edges,
            output_mode=self.output_mode,
            symbols=list(self.symbols),
            created_at=self._created_at or now,
            updated_at=now,
        )

    def save(self, store: IWorkflowStore) -> WorkflowRecord:
        """Persist the session and remember the stored record's id."""
        stored = store.save(self.to_record())
        self.active_workflow_id = stored.id
        self._created_at = stored.created_at
        self.logger.info(f"Saved workflow {stored.id}: {stored.name}")
        return stored

    def __repr__(self) -> str:
        return (
            f"WorkflowSession(name={self.name!r}, nodes={len(self.graph)}, "
            f"symbols={self.symbols}, status={self.report.status})"
        )
