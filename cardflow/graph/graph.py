#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
WorkflowGraph - the node/edge container owned by an editor session.

Every mutation either leaves the graph satisfying its invariants or raises
and leaves it unchanged:

1. every edge's source and target refer to existing node ids;
2. node ids are unique, edge ids are unique;
3. every node has a defined position.

Cycles and disconnected components are allowed.
"""

from typing import Any, Dict, Iterable, List, Optional

from .models import (
    CardNodeData,
    Edge,
    GraphState,
    Node,
    NodeStatus,
    Position,
    clone_edges,
    clone_nodes,
    generate_id,
)
from cardflow.core import get_logger
from cardflow.core.exceptions import (
    DuplicateIdError,
    GraphError,
    InvalidReferenceError,
    NodeNotFoundError,
)


class WorkflowGraph:
    """
    Ordered collection of nodes and edges with invariant checks.

    Node order is significant: the execution engine walks card nodes in
    this order and auto-layout breaks ties with it.
    """

    def __init__(self, nodes: Optional[Iterable[Node]] = None, edges: Optional[Iterable[Edge]] = None):
        self.logger = get_logger(__name__)
        self._nodes: List[Node] = []
        self._edges: List[Edge] = []
        if nodes is not None or edges is not None:
            self.replace(list(nodes or []), list(edges or []))

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> List[Node]:
        """Nodes in insertion order (a shallow list copy)."""
        return list(self._nodes)

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges)

    @property
    def card_nodes(self) -> List[Node]:
        return [n for n in self._nodes if n.is_card]

    @property
    def selected_nodes(self) -> List[Node]:
        return [n for n in self._nodes if n.selected]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: str) -> bool:
        return self.has_node(node_id)

    def has_node(self, node_id: str) -> bool:
        return any(n.id == node_id for n in self._nodes)

    def get_node(self, node_id: str) -> Node:
        """
        Get a node by id.

        Raises:
            NodeNotFoundError: If no node has this id
        """
        for node in self._nodes:
            if node.id == node_id:
                return node
        raise NodeNotFoundError(f"Node not found: {node_id}")

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        for edge in self._edges:
            if edge.id == edge_id:
                return edge
        return None

    def incoming(self, node_id: str) -> List[Edge]:
        return [e for e in self._edges if e.target == node_id]

    def outgoing(self, node_id: str) -> List[Edge]:
        return [e for e in self._edges if e.source == node_id]

    def snapshot(self) -> GraphState:
        """Deep copy of the current (nodes, edges)."""
        return GraphState(nodes=clone_nodes(self._nodes), edges=clone_edges(self._edges))

    # ------------------------------------------------------------------
    # Structural mutations
    # ------------------------------------------------------------------

    def add_node(self, node: Node) -> Node:
        """
        Append a node.

        Raises:
            DuplicateIdError: If the id is already used
        """
        if self.has_node(node.id):
            raise DuplicateIdError(f"Node id already exists: {node.id}")
        self._nodes.append(node)
        self.logger.debug(f"Added {node.kind} node {node.id}")
        return node

    def remove_node(self, node_id: str) -> Node:
        """
        Remove a node and every edge touching it.

        Raises:
            NodeNotFoundError: If the node does not exist
        """
        node = self.get_node(node_id)
        self._nodes = [n for n in self._nodes if n.id != node_id]
        before = len(self._edges)
        self._edges = [e for e in self._edges if e.source != node_id and e.target != node_id]
        self.logger.debug(
            f"Removed node {node_id} and {before - len(self._edges)} incident edge(s)"
        )
        return node

    def add_edge(self, edge: Edge) -> Edge:
        """
        Append an edge.

        Raises:
            InvalidReferenceError: If source or target is not a node
            DuplicateIdError: If the edge id is already used
        """
        for endpoint in (edge.source, edge.target):
            if not self.has_node(endpoint):
                raise InvalidReferenceError(edge.id, endpoint)
        if self.get_edge(edge.id) is not None:
            raise DuplicateIdError(f"Edge id already exists: {edge.id}")
        self._edges.append(edge)
        self.logger.debug(f"Connected {edge.source} -> {edge.target} ({edge.variant})")
        return edge

    def connect(self, source: str, target: str, source_handle: Optional[str] = None) -> Edge:
        """Create an edge with a generated id."""
        edge_id = generate_id(e.id for e in self._edges)
        return self.add_edge(
            Edge(id=edge_id, source=source, target=target, source_handle=source_handle)
        )

    def remove_edge(self, edge_id: str) -> Optional[Edge]:
        edge = self.get_edge(edge_id)
        if edge is not None:
            self._edges = [e for e in self._edges if e.id != edge_id]
        return edge

    def replace(self, nodes: List[Node], edges: List[Edge]) -> None:
        """
        Swap in a whole new (nodes, edges) pair.

        Used for template loads, undo/redo and clipboard results. The pair is
        checked in full before anything is replaced.

        Raises:
            DuplicateIdError: On repeated node or edge ids
            InvalidReferenceError: On an edge with a dangling endpoint
        """
        node_ids = set()
        for node in nodes:
            if node.id in node_ids:
                raise DuplicateIdError(f"Node id already exists: {node.id}")
            node_ids.add(node.id)

        edge_ids = set()
        for edge in edges:
            if edge.id in edge_ids:
                raise DuplicateIdError(f"Edge id already exists: {edge.id}")
            edge_ids.add(edge.id)
            for endpoint in (edge.source, edge.target):
                if endpoint not in node_ids:
                    raise InvalidReferenceError(edge.id, endpoint)

        self._nodes = list(nodes)
        self._edges = list(edges)

    def clear(self) -> None:
        self._nodes = []
        self._edges = []

    # ------------------------------------------------------------------
    # Node edits
    # ------------------------------------------------------------------

    def _swap(self, updated: Node) -> Node:
        self._nodes = [updated if n.id == updated.id else n for n in self._nodes]
        return updated

    def update_node_data(self, node_id: str, **changes: Any) -> Node:
        """
        Merge changes into a node's data payload.

        Raises:
            NodeNotFoundError: If the node does not exist
            GraphError: If the change would alter the node kind
        """
        node = self.get_node(node_id)
        if "type" in changes and changes["type"] != node.kind:
            raise GraphError(f"Cannot change kind of node {node_id} to {changes['type']}")
        payload = node.data.model_dump()
        payload.update(changes)
        data = type(node.data).model_validate(payload)
        return self._swap(node.model_copy(update={"data": data}))

    def move_node(self, node_id: str, position: Position) -> Node:
        node = self.get_node(node_id)
        return self._swap(node.model_copy(update={"position": position}))

    def select(self, node_ids: Iterable[str]) -> None:
        """Select exactly the given nodes."""
        wanted = set(node_ids)
        self._nodes = [n.model_copy(update={"selected": n.id in wanted}) for n in self._nodes]

    def select_all(self) -> None:
        self._nodes = [n.model_copy(update={"selected": True}) for n in self._nodes]

    def clear_selection(self) -> None:
        self._nodes = [n.model_copy(update={"selected": False}) for n in self._nodes]

    # ------------------------------------------------------------------
    # Transient execution fields
    # ------------------------------------------------------------------

    def set_card_status(
        self,
        node_id: str,
        status: NodeStatus,
        symbol: Optional[str] = None,
        result: Any = None,
        error: Optional[str] = None
    ) -> Node:
        """Update a card node's status, result and error in place."""
        node = self.get_node(node_id)
        if not isinstance(node.data, CardNodeData):
            raise GraphError(f"Node {node_id} is a {node.kind} node, not a card")
        update: Dict[str, Any] = {"status": status}
        if symbol is not None:
            update["symbol"] = symbol
        if status == "success":
            update["result"] = result
            update["error"] = None
        elif status == "error":
            update["error"] = error
        data = node.data.model_copy(update=update)
        return self._swap(node.model_copy(update={"data": data}))

    def reset_statuses(self) -> None:
        """Put every card node back to idle with result and error cleared."""
        self._nodes = [n.reset_transient() for n in self._nodes]

    def __repr__(self) -> str:
        return f"WorkflowGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"
